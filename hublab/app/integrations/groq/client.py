# hublab/app/integrations/groq/client.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from openai import APIError, APIStatusError, OpenAI
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from hublab.app.core.config import settings

log = logging.getLogger(__name__)


class AIUnavailable(RuntimeError):
    """Raised when no Groq API key is configured."""
    pass


class AIUpstreamError(RuntimeError):
    """The completion endpoint answered with an error or nothing usable."""

    def __init__(self, message: str, details: Any = None):
        self.details = details if details is not None else message
        super().__init__(message)


def _upstream_details(err: APIError) -> Any:
    """Best-effort body of a failed call, the way the API returned it."""
    if isinstance(err, APIStatusError):
        try:
            return err.response.text
        except Exception:
            return str(err)
    return str(err)


class GroqClient:
    """Thin wrapper around Groq's OpenAI-compatible chat completions with retries."""

    def __init__(self) -> None:
        self.enabled = settings.ai_configured
        if self.enabled:
            self._client = OpenAI(
                api_key=settings.groq_api_key,
                base_url=settings.groq_base_url,
                timeout=settings.groq_timeout_seconds,
                max_retries=0,
            )
        else:
            self._client = None

    def _require_enabled(self) -> None:
        if not self.enabled or self._client is None:
            raise AIUnavailable("GROQ_API_KEY not configured")

    def complete(
        self,
        messages: Sequence[Dict[str, str]],
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Send a chat-style conversation and return the first choice's text.
        Raises AIUpstreamError when the call fails or the reply is empty.
        """
        self._require_enabled()
        req: Dict[str, Any] = {
            "model": model or settings.groq_model,
            "messages": list(messages),
            "temperature": settings.groq_temperature if temperature is None else temperature,
            "max_tokens": max_tokens or settings.groq_max_tokens,
        }
        try:
            resp = self._create(req)
        except APIError as e:
            log.error("Groq API error: %s", e)
            raise AIUpstreamError("AI generation failed", details=_upstream_details(e)) from e

        choices: List[Any] = getattr(resp, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise AIUpstreamError("No content from AI")
        return content

    def _create(self, req: Dict[str, Any]) -> Any:
        @retry(
            retry=retry_if_exception_type(APIError),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
            stop=stop_after_attempt(settings.groq_max_attempts),
            reraise=True,
        )
        def _call() -> Any:
            return self._client.chat.completions.create(**req)

        return _call()


# Simple singleton
_client: Optional[GroqClient] = None


def get_groq_client() -> GroqClient:
    global _client
    if _client is None:
        _client = GroqClient()
    return _client


def reset_groq_client() -> None:
    """Drop the cached client so the next call re-reads settings."""
    global _client
    _client = None
