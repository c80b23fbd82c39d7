"""Base review class and request types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import ClassVar, Mapping


@dataclass(frozen=True)
class ReviewRequest:
    """One review to run: the subject text plus optional focus and metadata."""

    subject: str
    focus: str | None = None
    metadata: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        # Freeze metadata so a request cannot change after construction
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))


class BaseReview(ABC):
    """Base class for review templates, one subclass per task type."""

    name: ClassVar[str]
    description: ClassVar[str]
    system_prompt: ClassVar[str]
    focus_type: ClassVar[type[Enum] | None] = None
    subject_label: ClassVar[str] = "Code to review:"

    def resolve_focus(self, focus: str | None) -> str | None:
        """Normalize a focus tag, defaulting to "full" for focus-aware reviews.

        Raises:
            ValueError: If the tag is not one of this review's focus values.
        """
        if self.focus_type is None:
            return None
        if focus is None:
            return "full"
        return self.focus_type(focus).value

    @abstractmethod
    def build_prompt(
        self,
        subject: str,
        focus: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        """Build the user message for a review.

        Args:
            subject: The code, plan, or diff under review
            focus: Optional focus tag from this review's focus enum
            metadata: Optional free-text fields (language, framework, context)

        Returns:
            The complete user message

        """
        ...

    def _wrap_subject(self, subject: str) -> str:
        return f"{self.subject_label}\n```\n{subject}\n```"
