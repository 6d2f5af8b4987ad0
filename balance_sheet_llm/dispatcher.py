# balance_sheet_llm/dispatcher.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from .config import AppSettings
from .formatting.response import format_response
from .llm_client.factory import ClientFactory, build_client
from .prompts.templates import build_prompt

log = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error occurred"


@dataclass(frozen=True)
class AnalysisRequest:
    provider_id: str
    model_id: str
    api_key: str
    document_text: str
    prompts: Tuple[str, ...]

    def __repr__(self) -> str:
        # Keep keys and document contents out of logs and tracebacks
        return (
            f"AnalysisRequest(provider_id={self.provider_id!r}, model_id={self.model_id!r}, "
            f"document_chars={len(self.document_text)}, prompts={len(self.prompts)})"
        )


@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of one analysis: html_content on success, error_message on failure.
    Exactly one of the two is set.
    """
    html_content: Optional[str] = None
    error_message: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.html_content is None) == (self.error_message is None):
            raise ValueError("AnalysisResult needs exactly one of html_content / error_message")

    @classmethod
    def success(cls, html_content: str) -> "AnalysisResult":
        return cls(html_content=html_content)

    @classmethod
    def failure(cls, error_message: str) -> "AnalysisResult":
        return cls(error_message=error_message or UNKNOWN_ERROR)

    @property
    def ok(self) -> bool:
        return self.error_message is None


def run_request(
    request: AnalysisRequest,
    *,
    settings: Optional[AppSettings] = None,
    clients: Optional[Dict[str, ClientFactory]] = None,
) -> AnalysisResult:
    """
    Send one analysis request to its provider and format the answer.

    Never raises: every failure comes back as AnalysisResult.failure.
    """
    try:
        prompt = build_prompt(request.document_text, request.prompts)
        client = build_client(
            request.provider_id,
            request.api_key,
            settings=settings,
            factories=clients,
        )
        log.info(
            "Dispatching analysis to %s/%s (%d prompt chars)",
            request.provider_id, request.model_id, len(prompt),
        )
        raw_text = client.complete(prompt, request.model_id)
        return AnalysisResult.success(format_response(raw_text))
    except Exception as exc:  # noqa: BLE001
        log.warning("Analysis with %s failed: %s", request.provider_id, exc)
        return AnalysisResult.failure(str(exc) or UNKNOWN_ERROR)


def analyze(
    provider_id: str,
    model_id: str,
    api_key: str,
    document_text: str,
    prompts: Sequence[str],
    *,
    settings: Optional[AppSettings] = None,
    clients: Optional[Dict[str, ClientFactory]] = None,
) -> AnalysisResult:
    request = AnalysisRequest(
        provider_id=str(getattr(provider_id, "value", provider_id)),
        model_id=model_id,
        api_key=api_key,
        document_text=document_text,
        prompts=tuple(prompts),
    )
    return run_request(request, settings=settings, clients=clients)
