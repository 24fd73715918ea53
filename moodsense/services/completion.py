"""
Completion Service
==================
Narrow wrapper around the Groq chat-completion API (OpenAI-compatible).

The relay only ever needs one thing from the vendor: given a system
prompt and a user prompt, give back some text. Everything else about the
vendor (URL, auth header, response shape) stays inside this module so
the router's prompt construction and error translation can be tested
without a network.

Contract of generate():
    - returns the first choice's message content
    - returns None when the API answered but produced no usable text
    - raises CompletionError for anything else (non-2xx, transport
      failure, unparseable body)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from moodsense.config import Settings, get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class CompletionError(Exception):
    """The completion API could not be reached or returned an error."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompletionParams:
    """Model parameters sent with every completion request."""

    model: str = "mixtral-8x7b-32768"
    temperature: float = 0.7
    max_tokens: int = 1024

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompletionParams":
        return cls(
            model=settings.groq_model,
            temperature=settings.completion_temperature,
            max_tokens=settings.completion_max_tokens,
        )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CompletionService:
    """Sends a two-message conversation to Groq and returns the reply text."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._api_url = self._settings.groq_api_url

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        params: CompletionParams | None = None,
    ) -> Optional[str]:
        """Request a completion for the given prompts.

        Returns the generated text, or None if the response carried no
        usable content. Raises CompletionError on failure.
        """
        params = params or CompletionParams.from_settings(self._settings)

        headers = {
            "Authorization": f"Bearer {self._settings.groq_api_key}",
            "Content-Type": "application/json",
        }

        payload = {
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "model": params.model,
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
        }

        timeout = self._settings.completion_timeout_seconds
        client_kwargs = {} if timeout is None else {"timeout": timeout}

        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                response = await client.post(self._api_url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise CompletionError(f"Completion request failed: {exc}") from exc

        if not response.is_success:
            raise CompletionError(
                f"Completion API error {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise CompletionError("Completion API returned a non-JSON body") from exc

        logger.debug("Completion received from %s (%d)", params.model, response.status_code)
        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: object) -> Optional[str]:
        """Pull choices[0].message.content out of the response, if present."""
        if not isinstance(data, dict):
            return None
        choices = data.get("choices") or []
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return None
        message = choices[0].get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content:
            return None
        return content


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_service: CompletionService | None = None


def get_completion_service() -> CompletionService:
    global _default_service
    if _default_service is None:
        _default_service = CompletionService()
    return _default_service
