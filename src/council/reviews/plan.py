"""Plan review: catch issues in an implementation plan before coding."""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from council.reviews.base import BaseReview


class PlanFocus(str, Enum):
    FEASIBILITY = "feasibility"
    COMPLETENESS = "completeness"
    RISKS = "risks"
    TIMELINE = "timeline"
    FULL = "full"


class PlanReview(BaseReview):
    """Implementation plan review, run before any code is written."""

    name = "plan"
    description = "Review implementation plans BEFORE coding to catch issues early"
    system_prompt = (
        "You are an expert software architect and project planner. "
        "Review implementation plans before code is written to catch issues early."
    )
    focus_type = PlanFocus
    subject_label = "Implementation plan to review:"

    FOCUS_AREAS = {
        PlanFocus.FEASIBILITY: "Focus specifically on feasibility (technical complexity, resource requirements, potential blockers, dependencies).",
        PlanFocus.COMPLETENESS: "Focus specifically on completeness (missing requirements, edge cases, error handling, testing strategy).",
        PlanFocus.RISKS: "Focus specifically on risks (technical risks, security concerns, scalability issues, maintenance burden).",
        PlanFocus.TIMELINE: "Focus specifically on timeline (realistic estimates, task breakdown, critical path, potential delays).",
    }
    DEFAULT_FOCUS_AREA = "Provide a comprehensive plan review covering feasibility, completeness, risks, and timeline."

    def build_prompt(
        self,
        subject: str,
        focus: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        meta = metadata or {}
        focus_area = self.FOCUS_AREAS.get(PlanFocus(self.resolve_focus(focus)), self.DEFAULT_FOCUS_AREA)
        context = f"{meta['context']}\n" if meta.get("context") else ""
        return f"{context}{focus_area}\n\n{self._wrap_subject(subject)}"
