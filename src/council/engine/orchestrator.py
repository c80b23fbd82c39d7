"""Review Orchestrator - Runs one review request across its task's models."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

from council.config import CouncilConfig
from council.engine.parallel import ModelResult, execute_all
from council.errors import ValidationError
from council.git_diff import GitDiffSource
from council.reviews import REVIEWS, BaseReview, ReviewRequest

logger = logging.getLogger(__name__)


class Gateway(Protocol):
    def invoke(self, model: str, system_prompt: str, user_message: str) -> Awaitable[str]: ...


@dataclass
class ReviewReport:
    """Combined outcome of one review across all of its models."""

    task: str
    models: list[str]
    results: list[ModelResult]
    focus: str | None = None
    errors: list[str] = field(init=False)

    def __post_init__(self) -> None:
        self.errors = [f"{r.model}: {r.error}" for r in self.results if r.error is not None]

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def error_count(self) -> int:
        return len(self.results) - self.success_count


class ReviewOrchestrator:
    """
    Coordinates reviews per task type.

    Workflow:
    1. Pick the task's review template and configured models
    2. Build the prompt once
    3. Fan out to every model through the gateway
    4. Return the ordered results as a ReviewReport
    """

    def __init__(
        self,
        config: CouncilConfig,
        gateway: Gateway,
        git: GitDiffSource | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        self.config = config
        self.gateway = gateway
        self.git = git or GitDiffSource()
        self.max_concurrency = max_concurrency
        self.reviews: dict[str, BaseReview] = {name: cls() for name, cls in REVIEWS.items()}

    async def run(self, task: str, request: ReviewRequest) -> ReviewReport:
        """
        Run a review for a task type.

        Args:
            task: "code", "frontend", "backend", or "plan"
            request: Subject, focus, and metadata

        Returns:
            ReviewReport with one result per configured model
        """
        review = self.reviews.get(task)
        if review is None:
            raise ValidationError(f"unknown review task '{task}'", "task")

        try:
            focus = review.resolve_focus(request.focus)
        except ValueError:
            valid = ", ".join(f.value for f in review.focus_type or ())
            raise ValidationError(f"must be one of: {valid}", "review_type") from None

        models = self.config.models_for(task)
        logger.info(
            "Running review",
            extra={"task": task, "model_count": len(models), "models": models, "focus": focus},
        )

        user_message = review.build_prompt(request.subject, focus, request.metadata)
        results = await execute_all(
            models,
            self._operation(review.system_prompt, user_message),
            max_concurrency=self.max_concurrency,
        )
        return ReviewReport(task=task, models=models, results=results, focus=focus)

    async def review_code(self, request: ReviewRequest) -> ReviewReport:
        return await self.run("code", request)

    async def review_frontend(self, request: ReviewRequest) -> ReviewReport:
        return await self.run("frontend", request)

    async def review_backend(self, request: ReviewRequest) -> ReviewReport:
        return await self.run("backend", request)

    async def review_plan(self, request: ReviewRequest) -> ReviewReport:
        return await self.run("plan", request)

    async def review_git(
        self,
        kind: str = "staged",
        commit_hash: str | None = None,
        context: str | None = None,
    ) -> ReviewReport:
        """Review git changes with the code template and code-review models.

        Raises:
            GitError: If the diff cannot be fetched; no model is called then.
        """
        models = self.config.models_for("git")
        logger.info(
            "Running git review",
            extra={"review_type": kind, "commit_hash": commit_hash, "model_count": len(models)},
        )

        diff = await asyncio.to_thread(self.git.get_diff, kind, commit_hash)
        metadata = {"context": context} if context else {}

        review = self.reviews["code"]
        user_message = review.build_prompt(diff, None, metadata)
        results = await execute_all(
            models,
            self._operation(review.system_prompt, user_message),
            max_concurrency=self.max_concurrency,
        )
        return ReviewReport(task="git", models=models, results=results, focus=kind)

    def _operation(self, system_prompt: str, user_message: str) -> Callable[[str], Awaitable[str]]:
        def call(model: str) -> Awaitable[str]:
            return self.gateway.invoke(model, system_prompt, user_message)

        return call
