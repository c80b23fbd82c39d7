"""Configuration for the Code Council.

Models are configured per review task through environment variables holding
JSON arrays of OpenRouter model identifiers, e.g.::

    CODE_REVIEW_MODELS='["anthropic/claude-3.5-sonnet", "openai/gpt-4-turbo"]'

Unset variables fall back to ``DEFAULT_MODELS``. The configuration is built
once at process start with ``CouncilConfig.from_env()`` and passed to the
orchestrator; nothing below reads the environment after that.
"""

from __future__ import annotations

import json
import math
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from council.errors import ConfigurationError

DEFAULT_MODELS: tuple[str, ...] = ("minimax/minimax-m2.1", "x-ai/grok-code-fast-1")

DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 16384
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_REQUEST_TIMEOUT = 120.0

_N = TypeVar("_N", int, float)

# task name -> environment variable holding its model list
MODEL_ENV_VARS: dict[str, str] = {
    "code": "CODE_REVIEW_MODELS",
    "frontend": "FRONTEND_REVIEW_MODELS",
    "backend": "BACKEND_REVIEW_MODELS",
    "plan": "PLAN_REVIEW_MODELS",
}


@dataclass(frozen=True)
class InputLimits:
    """Maximum input sizes, to keep requests and API costs bounded."""

    max_code_length: int = 100_000
    max_plan_length: int = 50_000
    max_context_length: int = 5_000
    max_language_length: int = 50
    max_models: int = 10


@dataclass(frozen=True)
class LLMSettings:
    """Settings shared by every gateway call."""

    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_REQUEST_TIMEOUT


@dataclass(frozen=True)
class CouncilConfig:
    """Process-wide configuration, immutable once built."""

    api_key: str | None = None
    code_models: tuple[str, ...] = DEFAULT_MODELS
    frontend_models: tuple[str, ...] = DEFAULT_MODELS
    backend_models: tuple[str, ...] = DEFAULT_MODELS
    plan_models: tuple[str, ...] = DEFAULT_MODELS
    llm: LLMSettings = field(default_factory=LLMSettings)
    limits: InputLimits = field(default_factory=InputLimits)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CouncilConfig:
        """Build configuration from environment variables.

        Raises:
            ConfigurationError: If a model list is malformed or too long.
        """
        env = os.environ if environ is None else environ
        limits = InputLimits()

        models: dict[str, tuple[str, ...]] = {}
        for task, var in MODEL_ENV_VARS.items():
            parsed = parse_models(env.get(var), DEFAULT_MODELS, field_name=var)
            if len(parsed) > limits.max_models:
                raise ConfigurationError(
                    f"At most {limits.max_models} models may run in parallel, got {len(parsed)}",
                    var,
                )
            models[task] = tuple(parsed)

        llm = LLMSettings(
            temperature=_parse_number(env.get("TEMPERATURE"), DEFAULT_TEMPERATURE, float),
            max_tokens=_parse_number(env.get("MAX_TOKENS"), DEFAULT_MAX_TOKENS, int),
            base_url=env.get("OPENROUTER_BASE_URL") or DEFAULT_BASE_URL,
            timeout=_parse_number(env.get("REQUEST_TIMEOUT"), DEFAULT_REQUEST_TIMEOUT, float),
        )

        return cls(
            api_key=env.get("OPENROUTER_API_KEY") or None,
            code_models=models["code"],
            frontend_models=models["frontend"],
            backend_models=models["backend"],
            plan_models=models["plan"],
            llm=llm,
            limits=limits,
        )

    def models_for(self, task: str) -> list[str]:
        """Return the configured model list for a review task."""
        by_task = {
            "code": self.code_models,
            "git": self.code_models,
            "frontend": self.frontend_models,
            "backend": self.backend_models,
            "plan": self.plan_models,
        }
        if task not in by_task:
            raise ConfigurationError(f"No model list configured for task '{task}'", "task")
        return list(by_task[task])

    def require_api_key(self) -> str:
        """Return the API key, or raise if it was never configured."""
        if not self.api_key:
            raise ConfigurationError(
                "OPENROUTER_API_KEY environment variable is required", "OPENROUTER_API_KEY"
            )
        return self.api_key


def parse_models(
    value: str | Sequence[str] | None,
    defaults: Sequence[str],
    field_name: str = "models",
) -> list[str]:
    """Parse a model list setting.

    Accepts a list of strings or a JSON array string. Blank entries are
    dropped; an empty result falls back to ``defaults``.

    Raises:
        ConfigurationError: If the value is not an array of strings.
    """
    if value is None:
        return list(defaults)

    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            decoded = None
        if not isinstance(decoded, list):
            raise ConfigurationError(
                "Model configuration must be an array of strings, got: string. "
                'Example: ["anthropic/claude-3.5-sonnet", "openai/gpt-4-turbo"]',
                field_name,
            )
        value = decoded

    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(
            f"Model configuration must be an array of strings, got: {type(value).__name__}",
            field_name,
        )

    models: list[str] = []
    for entry in value:
        if not isinstance(entry, str):
            raise ConfigurationError(
                f"Model identifiers must be strings, got: {type(entry).__name__}", field_name
            )
        if entry.strip():
            models.append(entry)

    return models if models else list(defaults)


def _parse_number(raw: str | None, default: _N, kind: Callable[[str], _N]) -> _N:
    # Unparsable, zero or non-finite values fall back to the default
    if not raw:
        return default
    try:
        parsed = kind(raw)
    except ValueError:
        return default
    if not math.isfinite(parsed):
        return default
    return parsed or default
