"""Backend review: security, performance, architecture."""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from council.reviews.base import BaseReview


class BackendFocus(str, Enum):
    SECURITY = "security"
    PERFORMANCE = "performance"
    ARCHITECTURE = "architecture"
    FULL = "full"


class BackendReview(BaseReview):
    """Backend code review with an optional security/performance/architecture focus."""

    name = "backend"
    description = "Review backend code for security, performance, architecture, and best practices"
    system_prompt = (
        "You are an expert backend developer and security specialist. "
        "Review backend code for security, performance, and architecture."
    )
    focus_type = BackendFocus

    FOCUS_AREAS = {
        BackendFocus.SECURITY: "Focus specifically on security (authentication, authorization, input validation, SQL injection, XSS, CSRF, secrets management).",
        BackendFocus.PERFORMANCE: "Focus specifically on backend performance (database queries, caching, async operations, resource usage, scalability).",
        BackendFocus.ARCHITECTURE: "Focus specifically on architecture (design patterns, separation of concerns, modularity, maintainability, scalability).",
    }
    DEFAULT_FOCUS_AREA = "Provide a comprehensive backend review covering security, performance, and architecture."

    def build_prompt(
        self,
        subject: str,
        focus: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        meta = metadata or {}
        focus_area = self.FOCUS_AREAS.get(BackendFocus(self.resolve_focus(focus)), self.DEFAULT_FOCUS_AREA)
        language = f"Language/Framework: {meta['language']}\n" if meta.get("language") else ""
        context = f"{meta['context']}\n" if meta.get("context") else ""
        return f"{language}{context}{focus_area}\n\n{self._wrap_subject(subject)}"
