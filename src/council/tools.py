"""Review tools shared by every host (CLI, HTTP API, MCP server).

Each tool validates its input, runs the orchestrator, and renders a report.
Request-level failures (bad input, git errors, configuration) come back as
an error ``ToolResponse`` instead of an exception, so hosts only need to
look at ``is_error``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Optional

import pydantic
from pydantic import BaseModel, Field

from council.config import MODEL_ENV_VARS, CouncilConfig, InputLimits
from council.engine.formatter import format_report
from council.engine.orchestrator import ReviewOrchestrator, ReviewReport
from council.errors import ValidationError, format_error_message
from council.reviews import ReviewRequest

logger = logging.getLogger(__name__)

_LIMITS = InputLimits()


class CodeReviewInput(BaseModel):
    code: str = Field(min_length=1, max_length=_LIMITS.max_code_length, description="The code to review")
    language: Optional[str] = Field(
        None, max_length=_LIMITS.max_language_length, description="Programming language of the code"
    )
    context: Optional[str] = Field(
        None, max_length=_LIMITS.max_context_length, description="Additional context about the code"
    )


class FrontendReviewInput(BaseModel):
    code: str = Field(min_length=1, max_length=_LIMITS.max_code_length, description="The frontend code to review")
    framework: Optional[str] = Field(
        None, max_length=_LIMITS.max_language_length, description="Frontend framework (e.g., react, vue, svelte)"
    )
    review_type: Optional[Literal["accessibility", "performance", "ux", "full"]] = Field(
        None, description="Type of review to perform (default: full)"
    )
    context: Optional[str] = Field(None, max_length=_LIMITS.max_context_length, description="Additional context")


class BackendReviewInput(BaseModel):
    code: str = Field(min_length=1, max_length=_LIMITS.max_code_length, description="The backend code to review")
    language: Optional[str] = Field(
        None, max_length=_LIMITS.max_language_length, description="Language/framework (e.g., node, python, go)"
    )
    review_type: Optional[Literal["security", "performance", "architecture", "full"]] = Field(
        None, description="Type of review to perform (default: full)"
    )
    context: Optional[str] = Field(None, max_length=_LIMITS.max_context_length, description="Additional context")


class PlanReviewInput(BaseModel):
    plan: str = Field(min_length=1, max_length=_LIMITS.max_plan_length, description="The implementation plan to review")
    review_type: Optional[Literal["feasibility", "completeness", "risks", "timeline", "full"]] = Field(
        None, description="Type of review to perform (default: full)"
    )
    context: Optional[str] = Field(
        None, max_length=_LIMITS.max_context_length, description="Additional context (project constraints, timeline, team size)"
    )


class GitReviewInput(BaseModel):
    review_type: Optional[Literal["staged", "unstaged", "diff", "commit"]] = Field(
        None,
        description=(
            "Type of changes to review: 'staged' (git diff --cached), 'unstaged' (git diff), "
            "'diff' (git diff main..HEAD), 'commit' (specific commit). Default: staged"
        ),
    )
    commit_hash: Optional[str] = Field(
        None, description="Commit hash to review (only used when review_type is 'commit')"
    )
    context: Optional[str] = Field(
        None, max_length=_LIMITS.max_context_length, description="Additional context about the changes"
    )


@dataclass(frozen=True)
class ToolResponse:
    """Text payload plus a success/error flag, as every host expects."""

    text: str
    is_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "is_error": self.is_error}


Handler = Callable[[ReviewOrchestrator, Any], Awaitable[ReviewReport]]


@dataclass(frozen=True)
class ReviewTool:
    """A registered review tool."""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: Handler


def _metadata(**fields: Optional[str]) -> dict[str, str]:
    return {key: value for key, value in fields.items() if value}


async def _code(orch: ReviewOrchestrator, data: CodeReviewInput) -> ReviewReport:
    request = ReviewRequest(data.code, metadata=_metadata(language=data.language, context=data.context))
    return await orch.review_code(request)


async def _frontend(orch: ReviewOrchestrator, data: FrontendReviewInput) -> ReviewReport:
    request = ReviewRequest(
        data.code, data.review_type, _metadata(framework=data.framework, context=data.context)
    )
    return await orch.review_frontend(request)


async def _backend(orch: ReviewOrchestrator, data: BackendReviewInput) -> ReviewReport:
    request = ReviewRequest(
        data.code, data.review_type, _metadata(language=data.language, context=data.context)
    )
    return await orch.review_backend(request)


async def _plan(orch: ReviewOrchestrator, data: PlanReviewInput) -> ReviewReport:
    request = ReviewRequest(data.plan, data.review_type, _metadata(context=data.context))
    return await orch.review_plan(request)


async def _git(orch: ReviewOrchestrator, data: GitReviewInput) -> ReviewReport:
    return await orch.review_git(data.review_type or "staged", data.commit_hash, data.context)


REVIEW_TOOLS: dict[str, ReviewTool] = {
    tool.name: tool
    for tool in (
        ReviewTool(
            "review_code",
            "Review code for quality, bugs, performance, and security issues using multiple AI models in parallel",
            CodeReviewInput,
            _code,
        ),
        ReviewTool(
            "review_frontend",
            "Review frontend code for accessibility, performance, UX, and best practices using multiple AI models in parallel",
            FrontendReviewInput,
            _frontend,
        ),
        ReviewTool(
            "review_backend",
            "Review backend code for security, performance, architecture, and best practices using multiple AI models in parallel",
            BackendReviewInput,
            _backend,
        ),
        ReviewTool(
            "review_plan",
            "Review implementation plans BEFORE coding to catch issues early using multiple AI models in parallel",
            PlanReviewInput,
            _plan,
        ),
        ReviewTool(
            "review_git_changes",
            "Review git changes (staged, unstaged, diff, or specific commit) using multiple AI models in parallel",
            GitReviewInput,
            _git,
        ),
    )
}


def error_response(error: object) -> ToolResponse:
    return ToolResponse(text=f"Error: {format_error_message(error)}", is_error=True)


def _validation_error(exc: pydantic.ValidationError) -> ValidationError:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "input"
    return ValidationError(str(first.get("msg", "invalid value")), location)


async def run_tool(
    name: str, payload: Mapping[str, Any], orchestrator: ReviewOrchestrator
) -> ToolResponse:
    """
    Run a review tool by name.

    Args:
        name: Tool name (e.g., "review_code")
        payload: Raw tool input
        orchestrator: Orchestrator to run the review with

    Returns:
        ToolResponse with the rendered report, or an error response
    """
    tool = REVIEW_TOOLS.get(name)
    if tool is None:
        return error_response(ValidationError(f"unknown tool '{name}'", "tool"))

    try:
        logger.debug(f"Starting {name}", extra={"input_keys": sorted(payload)})
        try:
            data = tool.input_model.model_validate(dict(payload))
        except pydantic.ValidationError as exc:
            raise _validation_error(exc) from exc

        report = await tool.handler(orchestrator, data)

        logger.info(
            f"Completed {name}",
            extra={
                "model_count": len(report.models),
                "success_count": report.success_count,
                "error_count": report.error_count,
            },
        )
        return ToolResponse(text=format_report(name, report))
    except Exception as exc:
        logger.error(f"Error in {name}", exc_info=True)
        return error_response(exc)


def list_review_config(config: CouncilConfig) -> ToolResponse:
    """Describe the configured model lists."""
    sections = [
        ("Code Review Models", config.code_models),
        ("Frontend Review Models", config.frontend_models),
        ("Backend Review Models", config.backend_models),
        ("Plan Review Models", config.plan_models),
    ]
    lines = ["## Current Configuration", ""]
    for title, models in sections:
        lines.append(f"**{title}:**")
        lines.extend(f"- `{m}`" for m in models)
        lines.append("")
    lines.append("To customize models, set environment variables in your MCP config:")
    lines.extend(f"- {var}" for var in MODEL_ENV_VARS.values())
    return ToolResponse(text="\n".join(lines))
