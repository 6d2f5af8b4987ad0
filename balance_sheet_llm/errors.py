# balance_sheet_llm/errors.py
from __future__ import annotations


class AnalyzerError(RuntimeError):
    """Base class for errors raised by balance_sheet_llm."""


class DocumentParseError(AnalyzerError):
    """The uploaded bytes could not be opened as a PDF."""


class ProviderError(AnalyzerError):
    """A provider call failed (auth, quota, network, bad response...)."""


class ProviderUnavailableError(ProviderError):
    """The provider is listed in the catalog but has no integration yet."""


class UnsupportedProviderError(ProviderError):
    pass


class AnalysisInProgressError(AnalyzerError):
    """An analyze action arrived while another one was still running."""
