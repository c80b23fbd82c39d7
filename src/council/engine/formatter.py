"""Render review results as a markdown report."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from council.engine.parallel import ModelResult
from council.errors import sanitize_message

if TYPE_CHECKING:
    from council.engine.orchestrator import ReviewReport

SECTION_SEPARATOR = "\n\n---\n\n"


def format_result(result: ModelResult) -> str:
    """Render one model's section."""
    header = f"## Review from `{result.model}`"
    if result.error is not None:
        return f"{header}\n\n**Error:** {sanitize_message(result.error)}"
    return f"{header}\n\n{result.content}"


def format_results(results: Sequence[ModelResult]) -> str:
    """Render every result, in order, one section each."""
    return SECTION_SEPARATOR.join(format_result(r) for r in results)


def report_title(tool_name: str, report: ReviewReport) -> str:
    """Title line, e.g. ``# backend Review - security (2 models)``."""
    label = tool_name.replace("review_", "", 1).replace("_", " ")
    count = len(report.models)
    if report.focus:
        return f"# {label} Review - {report.focus} ({count} models)"
    return f"# {label} Review Results ({count} models)"


def format_report(tool_name: str, report: ReviewReport) -> str:
    """Render a full report: title followed by the per-model sections."""
    return f"{report_title(tool_name, report)}\n\n{format_results(report.results)}"
