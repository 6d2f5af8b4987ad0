# balance_sheet_llm/llm_client/unavailable.py
from __future__ import annotations

from ..errors import ProviderUnavailableError
from .base import LLMClient


class UnavailableClient(LLMClient):
    """
    Placeholder for providers listed in the catalog without an integration.
    Every call fails; it is never a silent no-op.
    """

    def __init__(self, provider: str, api_key: str = "", **_: object) -> None:
        self.provider = provider

    def complete(self, prompt: str, model_id: str) -> str:
        raise ProviderUnavailableError(
            f"{self.provider} integration is not yet available"
        )
