"""Tests for the parallel fan-out executor."""

from __future__ import annotations

import asyncio

import pytest

from council.engine.parallel import UNKNOWN_ERROR, ModelResult, execute_all
from council.errors import GatewayError

pytestmark = pytest.mark.anyio


async def test_all_succeed_in_input_order() -> None:
    async def op(model: str) -> str:
        return f"ok:{model}"

    results = await execute_all(["m1", "m2"], op)

    assert results == [
        ModelResult(model="m1", content="ok:m1"),
        ModelResult(model="m2", content="ok:m2"),
    ]
    assert all(r.error is None for r in results)


async def test_failure_is_isolated_to_its_slot() -> None:
    async def op(model: str) -> str:
        if model == "m2":
            raise RuntimeError("boom")
        return "fine"

    results = await execute_all(["m1", "m2"], op)

    assert results[0] == ModelResult(model="m1", content="fine")
    assert results[1].model == "m2"
    assert results[1].content == ""
    assert results[1].error == "boom"


async def test_subset_failures_leave_others_untouched() -> None:
    failing = {"b", "d"}

    async def op(model: str) -> str:
        if model in failing:
            raise ValueError(f"{model} failed")
        return model.upper()

    models = ["a", "b", "c", "d", "e"]
    results = await execute_all(models, op)

    assert [r.model for r in results] == models
    for r in results:
        if r.model in failing:
            assert r.error == f"{r.model} failed"
            assert r.content == ""
        else:
            assert r.error is None
            assert r.content == r.model.upper()


async def test_empty_message_uses_fallback() -> None:
    async def op(model: str) -> str:
        raise RuntimeError()

    results = await execute_all(["weird-fail"], op)

    assert results[0].error == UNKNOWN_ERROR
    assert results[0].content == ""


async def test_non_text_payload_uses_fallback() -> None:
    async def op(model: str) -> str:
        if model == "payload":
            raise RuntimeError({"status": 500, "internal": "<diag object>"})
        raise ValueError("plain message")

    results = await execute_all(["payload", "text"], op)

    assert results[0].error == UNKNOWN_ERROR
    assert "status" not in results[0].error
    assert results[1].error == "plain message"


async def test_empty_model_list_never_invokes() -> None:
    calls: list[str] = []

    async def op(model: str) -> str:
        calls.append(model)
        return "x"

    assert await execute_all([], op) == []
    assert calls == []


async def test_completion_order_does_not_leak() -> None:
    async def op(model: str) -> str:
        # A finishes after B
        await asyncio.sleep(0.05 if model == "A" else 0)
        return model

    results = await execute_all(["A", "B"], op)

    assert [r.model for r in results] == ["A", "B"]
    assert [r.content for r in results] == ["A", "B"]


async def test_invocations_start_concurrently() -> None:
    events: list[str] = []

    async def op(model: str) -> str:
        events.append(f"start-{model}")
        await asyncio.sleep(0.01)
        events.append(f"end-{model}")
        return model

    await execute_all(["model1", "model2"], op)

    assert events[:2] == ["start-model1", "start-model2"]


async def test_failure_does_not_cancel_siblings() -> None:
    finished: list[str] = []

    async def op(model: str) -> str:
        if model == "fast-fail":
            raise RuntimeError("nope")
        await asyncio.sleep(0.02)
        finished.append(model)
        return "done"

    results = await execute_all(["slow", "fast-fail", "slower"], op)

    assert sorted(finished) == ["slow", "slower"]
    assert [r.ok for r in results] == [True, False, True]


async def test_repeated_runs_are_structurally_identical() -> None:
    async def op(model: str) -> str:
        if model.endswith("x"):
            raise RuntimeError("bad")
        return model * 2

    models = ["a", "bx", "c"]
    first = await execute_all(models, op)
    second = await execute_all(models, op)

    assert first == second


async def test_duplicate_models_each_get_a_slot() -> None:
    async def op(model: str) -> str:
        return model

    results = await execute_all(["m", "m"], op)

    assert len(results) == 2


async def test_gateway_retryable_flag_is_kept() -> None:
    async def op(model: str) -> str:
        raise GatewayError("429 rate limit", status_code=429, retryable=True)

    results = await execute_all(["m1"], op)

    assert results[0].error == "429 rate limit"
    assert results[0].retryable is True


async def test_max_concurrency_bounds_in_flight_calls() -> None:
    in_flight = 0
    peak = 0

    async def op(model: str) -> str:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return model

    models = [f"m{i}" for i in range(6)]
    results = await execute_all(models, op, max_concurrency=2)

    assert peak == 2
    assert [r.model for r in results] == models


async def test_max_concurrency_must_be_positive() -> None:
    async def op(model: str) -> str:
        return model

    with pytest.raises(ValueError):
        await execute_all(["m"], op, max_concurrency=0)


class TestModelResult:
    def test_success_has_no_error(self) -> None:
        result = ModelResult.success("m", "text")
        assert result.ok
        assert result.to_dict() == {"model": "m", "content": "text"}

    def test_failure_has_empty_content(self) -> None:
        result = ModelResult.failure("m", "bad", retryable=True)
        assert not result.ok
        assert result.to_dict() == {
            "model": "m",
            "content": "",
            "error": "bad",
            "retryable": True,
        }
