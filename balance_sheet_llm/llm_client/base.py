# balance_sheet_llm/llm_client/base.py
from __future__ import annotations

from typing import Protocol


class LLMClient(Protocol):
    """
    Minimal interface for a provider that can answer a text prompt.
    Credentials are bound when the client is constructed.
    """

    def complete(self, prompt: str, model_id: str) -> str:
        """
        Send the composed prompt to model_id and return the raw answer text.

        Implementations raise ProviderError (or a subclass) on failure.
        """
        ...
