"""Error types and user-facing error messages."""

from __future__ import annotations

import re

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

_API_KEY_PATTERN = re.compile(r"sk-or-v1-[a-zA-Z0-9]+")
_BEARER_PATTERN = re.compile(r"Bearer [a-zA-Z0-9\-_]+")

# (markers, friendly message), checked in order against the sanitized text
_FRIENDLY_MESSAGES: list[tuple[tuple[str, ...], str]] = [
    (
        ("401", "Unauthorized"),
        "API authentication failed. Please check your OPENROUTER_API_KEY environment variable.",
    ),
    (("429", "rate limit"), "Rate limit exceeded. Please wait a moment and try again."),
    (
        ("timeout", "ETIMEDOUT"),
        "Request timed out. The AI service may be slow. Please try again.",
    ),
]


class CouncilError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str, code: str, user_message: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.user_message = user_message


class GatewayError(CouncilError):
    """A single model call failed."""

    def __init__(
        self, message: str, status_code: int | None = None, retryable: bool = False
    ) -> None:
        super().__init__(
            message,
            "OPENROUTER_ERROR",
            "The AI service is temporarily unavailable. Please try again in a moment."
            if retryable
            else "Unable to complete the review. Please check your API key and try again.",
        )
        self.status_code = status_code
        self.retryable = retryable


class ConfigurationError(CouncilError):
    """Configuration is missing or malformed."""

    def __init__(self, message: str, field: str) -> None:
        super().__init__(message, "CONFIGURATION_ERROR", f"Configuration error: {message}")
        self.field = field


class ValidationError(CouncilError):
    """Tool input failed validation."""

    def __init__(self, message: str, field: str) -> None:
        super().__init__(message, "VALIDATION_ERROR", f"Invalid input for {field}: {message}")
        self.field = field


class GitError(CouncilError):
    """A git command failed or produced nothing to review."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "GIT_ERROR", message)


def is_rate_limited(message: str) -> bool:
    """Whether a failure message looks like provider-side rate limiting."""
    return "429" in message or "rate limit" in message


def sanitize_message(message: str) -> str:
    """Strip credential-shaped substrings from a message."""
    sanitized = _API_KEY_PATTERN.sub("[REDACTED]", message)
    return _BEARER_PATTERN.sub("Bearer [REDACTED]", sanitized)


def format_error_message(error: object) -> str:
    """Render any error as a message safe to show to users."""
    if isinstance(error, CouncilError):
        return sanitize_message(error.user_message or error.message)

    if isinstance(error, Exception):
        sanitized = sanitize_message(str(error))
        for markers, friendly in _FRIENDLY_MESSAGES:
            if any(marker in sanitized for marker in markers):
                return friendly
        return sanitized or UNEXPECTED_ERROR_MESSAGE

    return UNEXPECTED_ERROR_MESSAGE
