# balance_sheet_llm/llm_client/gemini_client.py
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..errors import ProviderError
from ._retry import call_with_retry
from .base import LLMClient

log = logging.getLogger(__name__)

# Low temperature keeps the financial analysis factual rather than creative.
ANALYSIS_TEMPERATURE = 0.2


def is_transient(exc: Exception) -> bool:
    return isinstance(exc, (genai_errors.ServerError, httpx.TransportError))


class GeminiClient(LLMClient):
    """
    Gemini client wrapper that implements LLMClient.complete.

    Sends the prompt as plain text content and returns the raw text response.
    """

    def __init__(
        self,
        api_key: str,
        timeout_seconds: float = 120.0,
        max_retries: int = 1,
        retry_delay_seconds: float = 1.0,
        client: Optional[Any] = None,
    ) -> None:
        if not api_key:
            raise ProviderError("A Gemini API key is required.")

        self.client = client or genai.Client(
            api_key=api_key,
            # HttpOptions.timeout is in milliseconds
            http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )
        self.temperature = ANALYSIS_TEMPERATURE
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds

    def complete(self, prompt: str, model_id: str) -> str:
        def _call():
            return self.client.models.generate_content(
                model=model_id,
                contents=prompt,
                config=types.GenerateContentConfig(temperature=self.temperature),
            )

        try:
            resp = call_with_retry(
                _call,
                is_transient=is_transient,
                max_retries=self.max_retries,
                delay_s=self.retry_delay_seconds,
                context=f"Gemini generate_content ({model_id})",
            )
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            log.error("Gemini request failed: %s", type(exc).__name__)
            raise ProviderError(str(exc)) from exc

        return self._extract_text(resp)

    @staticmethod
    def _extract_text(resp) -> str:
        """
        Try to extract text from a Gemini response in a robust way.
        """
        text = getattr(resp, "text", "") or ""
        if text and text.strip():
            return text

        # Fallback: stitch from first candidate
        candidates = getattr(resp, "candidates", None) or []
        if not candidates:
            return text
        content = getattr(candidates[0], "content", None)
        parts = (getattr(content, "parts", None) or []) if content is not None else []
        return "".join(getattr(pt, "text", None) or "" for pt in parts)
