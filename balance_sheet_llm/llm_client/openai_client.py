# balance_sheet_llm/llm_client/openai_client.py
from __future__ import annotations

import logging
from typing import Any, Optional

import openai
from openai import OpenAI

from ..errors import ProviderError
from ..prompts.templates import ANALYST_PERSONA
from ._retry import call_with_retry
from .base import LLMClient

log = logging.getLogger(__name__)

# Connection problems, timeouts (APITimeoutError subclasses APIConnectionError)
# and 5xx responses. Auth, rate-limit and 4xx errors are not retried.
TRANSIENT_ERRORS = (openai.APIConnectionError, openai.InternalServerError)


def is_transient(exc: Exception) -> bool:
    return isinstance(exc, TRANSIENT_ERRORS)


class OpenAIClient(LLMClient):
    """
    OpenAI chat-completions wrapper that implements LLMClient.complete.
    The prompt is sent as a single user message, without a system message.
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
            raise ProviderError("An OpenAI API key is required.")

        # SDK-level retries are disabled; retry policy lives in call_with_retry
        self.client = client or OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds

    def complete(self, prompt: str, model_id: str) -> str:
        messages = [{"role": "user", "content": ANALYST_PERSONA + prompt}]

        def _call():
            return self.client.chat.completions.create(
                model=model_id,
                messages=messages,
            )

        try:
            response = call_with_retry(
                _call,
                is_transient=is_transient,
                max_retries=self.max_retries,
                delay_s=self.retry_delay_seconds,
                context=f"OpenAI completion ({model_id})",
            )
        except openai.OpenAIError as exc:
            log.error("OpenAI request failed: %s", type(exc).__name__)
            raise ProviderError(str(exc)) from exc

        return self._extract_text(response)

    @staticmethod
    def _extract_text(response) -> str:
        """
        Content of the first choice; missing choices or content give "".
        """
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None) or ""
