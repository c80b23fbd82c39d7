"""Frontend review: accessibility, performance, UX."""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from council.reviews.base import BaseReview


class FrontendFocus(str, Enum):
    ACCESSIBILITY = "accessibility"
    PERFORMANCE = "performance"
    UX = "ux"
    FULL = "full"


class FrontendReview(BaseReview):
    """Frontend code review with an optional accessibility/performance/UX focus."""

    name = "frontend"
    description = "Review frontend code for accessibility, performance, UX, and best practices"
    system_prompt = (
        "You are an expert frontend developer and UX specialist. "
        "Review frontend code for best practices."
    )
    focus_type = FrontendFocus

    FOCUS_AREAS = {
        FrontendFocus.ACCESSIBILITY: "Focus specifically on accessibility (WCAG compliance, ARIA labels, keyboard navigation, screen reader support).",
        FrontendFocus.PERFORMANCE: "Focus specifically on frontend performance (bundle size, render optimization, lazy loading, Core Web Vitals).",
        FrontendFocus.UX: "Focus specifically on user experience (intuitive design, error handling, loading states, responsive design).",
    }
    DEFAULT_FOCUS_AREA = "Provide a comprehensive frontend review covering accessibility, performance, and user experience."

    def build_prompt(
        self,
        subject: str,
        focus: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        meta = metadata or {}
        focus_area = self.FOCUS_AREAS.get(FrontendFocus(self.resolve_focus(focus)), self.DEFAULT_FOCUS_AREA)
        framework = f"Framework: {meta['framework']}\n" if meta.get("framework") else ""
        context = f"{meta['context']}\n" if meta.get("context") else ""
        return f"{framework}{context}{focus_area}\n\n{self._wrap_subject(subject)}"
