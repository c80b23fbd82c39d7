"""General code review: quality, bugs, performance, security."""

from __future__ import annotations

from typing import Mapping

from council.reviews.base import BaseReview


class CodeReview(BaseReview):
    """General-purpose code review with no focus narrowing.

    Also used for git diffs, which are reviewed as plain code.
    """

    name = "code"
    description = "Review code for quality, bugs, performance, and security issues"
    system_prompt = """You are an expert code reviewer. Analyze the code for:
- Code quality and best practices
- Potential bugs and edge cases
- Performance issues
- Security vulnerabilities
- Maintainability concerns

Provide specific, actionable feedback."""

    def build_prompt(
        self,
        subject: str,
        focus: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        context = self._context(metadata or {})
        if context:
            return f"{context}\n\n{self._wrap_subject(subject)}"
        return self._wrap_subject(subject)

    @staticmethod
    def _context(metadata: Mapping[str, str]) -> str | None:
        language = metadata.get("language")
        context = metadata.get("context")
        if language:
            return f"Language: {language}" + (f"\n{context}" if context else "")
        return context or None
