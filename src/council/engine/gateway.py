"""Model Gateway - One chat-completion call per model via OpenRouter."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from council.config import LLMSettings
from council.errors import GatewayError, is_rate_limited

logger = logging.getLogger(__name__)

NO_CONTENT_MESSAGE = "No response content from model"


class ModelGateway:
    """
    Thin async client for the OpenRouter chat-completions endpoint.

    The API key and settings are fixed at construction and only read
    afterwards, so one gateway can serve any number of concurrent calls.
    """

    def __init__(
        self,
        api_key: str,
        settings: LLMSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or LLMSettings()
        self._client = client or httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.timeout,
        )
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    @property
    def settings(self) -> LLMSettings:
        return self._settings

    async def __aenter__(self) -> ModelGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def invoke(self, model: str, system_prompt: str, user_message: str) -> str:
        """
        Send one chat request and return the model's text.

        Args:
            model: Model identifier (e.g., "anthropic/claude-3.5-sonnet")
            system_prompt: System prompt for the model
            user_message: User message

        Returns:
            The model's response content

        Raises:
            GatewayError: If the call fails or returns no usable content
        """
        logger.debug(
            "Sending chat request", extra={"model": model, "message_length": len(user_message)}
        )

        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "temperature": self._settings.temperature,
            "max_tokens": self._settings.max_tokens,
        }

        try:
            response = await self._client.post(
                "/chat/completions", json=payload, headers=self._headers
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise self._classify(
                model, _status_message(exc.response), exc.response.status_code
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise self._classify(model, str(exc) or type(exc).__name__) from exc

        text = extract_content(body)
        if not text:
            logger.error("Empty response from model", extra={"model": model})
            raise GatewayError(NO_CONTENT_MESSAGE, status_code=500, retryable=False)

        logger.debug("Received response", extra={"model": model, "length": len(text)})
        return text

    @staticmethod
    def _classify(model: str, message: str, status_code: int | None = None) -> GatewayError:
        logger.error("Chat request failed", extra={"model": model, "error": message})
        return GatewayError(message, status_code=status_code, retryable=is_rate_limited(message))


def extract_content(body: Any) -> str | None:
    """Pull the first choice's text out of a chat-completion response body.

    Content may be a plain string or a list of typed parts; for a list, the
    ``text`` parts are joined with newlines and other parts are ignored.
    Returns None when the body carries no usable content.
    """
    if not isinstance(body, dict):
        return None
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict):
        return None

    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "\n".join(
            part["text"]
            for part in content
            if isinstance(part, dict)
            and part.get("type") == "text"
            and isinstance(part.get("text"), str)
        )
    return None


def _status_message(response: httpx.Response) -> str:
    # OpenRouter errors look like {"error": {"code": 429, "message": "..."}}
    detail = response.reason_phrase
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        detail = str(body["error"].get("message") or detail)
    return f"{response.status_code} {detail}".strip()
