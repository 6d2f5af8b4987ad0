"""PDF balance sheet analysis through a choice of LLM providers."""

__version__ = "0.1.0"
