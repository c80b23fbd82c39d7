"""Code Council: multi-model review fan-out over OpenRouter."""

__version__ = "0.1.0"
