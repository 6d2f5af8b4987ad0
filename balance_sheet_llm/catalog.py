# balance_sheet_llm/catalog.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union


class Provider(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    XAI = "xai"
    DEEPSEEK = "deepseek"

    @property
    def display_name(self) -> str:
        return PROVIDER_DISPLAY_NAMES[self]


PROVIDER_DISPLAY_NAMES = {
    Provider.OPENAI: "OpenAI",
    Provider.GEMINI: "Google Gemini",
    Provider.XAI: "xAI",
    Provider.DEEPSEEK: "DeepSeek",
}


@dataclass(frozen=True)
class ModelDescriptor:
    """One selectable model and the provider that serves it."""
    id: str
    display_name: str
    provider: Provider


AI_MODELS: Tuple[ModelDescriptor, ...] = (
    ModelDescriptor("gpt-4o-mini", "GPT-4o Mini", Provider.OPENAI),
    ModelDescriptor("o1-mini", "o1 Mini", Provider.OPENAI),
    ModelDescriptor("o3-mini", "o3 Mini", Provider.OPENAI),
    ModelDescriptor("gpt-4-turbo-preview", "GPT-4 Turbo", Provider.OPENAI),
    ModelDescriptor("gpt-3.5-turbo", "GPT-3.5 Turbo", Provider.OPENAI),
    ModelDescriptor("gemini-1.5-pro", "Gemini 1.5 Pro", Provider.GEMINI),
    ModelDescriptor("gemini-pro", "Gemini Pro", Provider.GEMINI),
    ModelDescriptor("xai-1.0", "xAI 1.0", Provider.XAI),
    ModelDescriptor("deepseek-coder", "DeepSeek Coder", Provider.DEEPSEEK),
)

DEFAULT_PROVIDER = Provider.OPENAI
DEFAULT_MODEL_ID = "o1-mini"


def list_models() -> List[ModelDescriptor]:
    return list(AI_MODELS)


def models_for(provider_id: Union[str, Provider]) -> List[ModelDescriptor]:
    """
    Models served by provider_id, in catalog order.
    Unknown provider ids simply have no models.
    """
    key = provider_id.value if isinstance(provider_id, Provider) else str(provider_id)
    return [m for m in AI_MODELS if m.provider.value == key]


def first_model_for(provider_id: Union[str, Provider]) -> Optional[str]:
    models = models_for(provider_id)
    return models[0].id if models else None
