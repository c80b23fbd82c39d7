"""Parallel Executor - Fans one operation out across many models.

Every model gets its own invocation of the operation, all started at once on
the running event loop. A failing invocation becomes an error result for that
model only; the returned list always has one entry per input model, in input
order.

Usage:
    from council.engine.parallel import execute_all

    results = await execute_all(["m1", "m2"], lambda m: gateway.invoke(m, sys, msg))
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from council.errors import CouncilError, GatewayError

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"

Operation = Callable[[str], Awaitable[str]]


@dataclass(frozen=True)
class ModelResult:
    """Outcome of invoking one model: content on success, error on failure."""

    model: str
    content: str = ""
    error: str | None = None
    retryable: bool = False

    @classmethod
    def success(cls, model: str, content: str) -> ModelResult:
        return cls(model=model, content=content)

    @classmethod
    def failure(cls, model: str, error: str, retryable: bool = False) -> ModelResult:
        return cls(model=model, content="", error=error, retryable=retryable)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"model": self.model, "content": self.content}
        if self.error is not None:
            data["error"] = self.error
            data["retryable"] = self.retryable
        return data


def _error_text(exc: BaseException) -> str:
    # Only a textual message is surfaced; payload objects and empty messages are not
    if isinstance(exc, CouncilError):
        return exc.message or UNKNOWN_ERROR
    if len(exc.args) == 1 and isinstance(exc.args[0], str) and exc.args[0]:
        return exc.args[0]
    return UNKNOWN_ERROR


async def _run_one(model: str, operation: Operation) -> ModelResult:
    try:
        content = await operation(model)
    except Exception as exc:
        logger.warning("Model invocation failed", extra={"model": model, "error": str(exc)})
        retryable = exc.retryable if isinstance(exc, GatewayError) else False
        return ModelResult.failure(model, _error_text(exc), retryable)
    return ModelResult.success(model, content)


async def execute_all(
    models: Sequence[str],
    operation: Operation,
    *,
    max_concurrency: int | None = None,
) -> list[ModelResult]:
    """
    Invoke ``operation`` once per model concurrently and collect the results.

    Args:
        models: Model identifiers; order is preserved in the result
        operation: Async callable producing a model's response text
        max_concurrency: Optional cap on in-flight invocations (None = unbounded)

    Returns:
        One ModelResult per input model, in input order
    """
    if not models:
        return []

    if max_concurrency is not None and max_concurrency < 1:
        raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")

    if max_concurrency is None:
        tasks = [_run_one(model, operation) for model in models]
    else:
        semaphore = asyncio.Semaphore(max_concurrency)

        async def bounded(model: str) -> ModelResult:
            async with semaphore:
                return await _run_one(model, operation)

        tasks = [bounded(model) for model in models]

    return list(await asyncio.gather(*tasks))
