"""Shared fixtures for council tests."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping

import pytest

from council.config import CouncilConfig


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class FakeGateway:
    """Gateway double: canned replies or failures per model, records calls."""

    def __init__(
        self,
        replies: Mapping[str, str] | None = None,
        failures: Mapping[str, Exception] | None = None,
        delays: Mapping[str, float] | None = None,
    ) -> None:
        self.replies = dict(replies or {})
        self.failures = dict(failures or {})
        self.delays = dict(delays or {})
        self.calls: list[tuple[str, str, str]] = []

    async def invoke(self, model: str, system_prompt: str, user_message: str) -> str:
        self.calls.append((model, system_prompt, user_message))
        await asyncio.sleep(self.delays.get(model, 0))
        if model in self.failures:
            raise self.failures[model]
        return self.replies.get(model, f"review from {model}")


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def config() -> CouncilConfig:
    return CouncilConfig(
        api_key="sk-or-v1-test",
        code_models=("m1", "m2"),
        frontend_models=("fe1",),
        backend_models=("be1", "be2"),
        plan_models=("pl1", "pl2", "pl3"),
    )
