# balance_sheet_llm/llm_client/factory.py
from __future__ import annotations

from functools import partial
from typing import Callable, Dict, Optional

from ..catalog import Provider
from ..config import AppSettings
from ..errors import UnsupportedProviderError
from .base import LLMClient
from .gemini_client import GeminiClient
from .openai_client import OpenAIClient
from .unavailable import UnavailableClient

ClientFactory = Callable[..., LLMClient]

# Providers are added by registering a factory here.
CLIENT_FACTORIES: Dict[str, ClientFactory] = {
    Provider.OPENAI.value: OpenAIClient,
    Provider.GEMINI.value: GeminiClient,
    Provider.XAI.value: partial(UnavailableClient, Provider.XAI.value),
    Provider.DEEPSEEK.value: partial(UnavailableClient, Provider.DEEPSEEK.value),
}


def build_client(
    provider_id: str,
    api_key: str,
    settings: Optional[AppSettings] = None,
    factories: Optional[Dict[str, ClientFactory]] = None,
) -> LLMClient:
    """
    Construct the client registered for provider_id.

    Raises UnsupportedProviderError for ids with no registered factory.
    """
    settings = settings or AppSettings()
    registry = CLIENT_FACTORIES if factories is None else factories

    key = provider_id.value if isinstance(provider_id, Provider) else str(provider_id)
    factory = registry.get(key)
    if factory is None:
        raise UnsupportedProviderError("Unsupported AI provider")

    return factory(
        api_key=api_key,
        timeout_seconds=settings.timeout_seconds,
        max_retries=settings.max_retries,
        retry_delay_seconds=settings.retry_delay_seconds,
    )
