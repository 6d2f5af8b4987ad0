# balance_sheet_llm/pdf_extraction/extraction.py
from __future__ import annotations

import io
import logging
from typing import Iterable, List

from pypdf import PdfReader
from pypdf.errors import PyPdfError
from tqdm import tqdm

from ..errors import DocumentParseError

log = logging.getLogger(__name__)

# pypdf surfaces malformed objects and content streams through its own errors
# and through plain Python ones.
PARSE_ERRORS = (PyPdfError, ValueError, KeyError, TypeError, AttributeError, IndexError)


def page_fragments(page) -> List[str]:
    """
    Text fragments of a single page, in reading order.

    A fragment is one non-empty line of pypdf's text extraction for the page,
    with surrounding whitespace removed. Multi-column layouts may interleave;
    that is accepted.
    """
    raw = page.extract_text() or ""
    return [line.strip() for line in raw.splitlines() if line.strip()]


def text_from_pages(pages: Iterable, progress: bool = False) -> str:
    """
    Join the fragments of every page, in page order, with single spaces.
    No other separator is inserted between pages.
    """
    fragments: List[str] = []
    for page in tqdm(pages, desc="Pages", unit="page", disable=not progress):
        fragments.extend(page_fragments(page))
    return " ".join(fragments)


def open_pdf(data: bytes) -> PdfReader:
    """Open PDF bytes, raising DocumentParseError for anything unreadable."""
    if not data:
        raise DocumentParseError("The selected file is empty.")
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            # Statements are sometimes "protected" with an empty user password
            if not reader.decrypt(""):
                raise DocumentParseError("The PDF is password protected.")
        # Touch the page tree so structural errors surface here
        len(reader.pages)
    except DocumentParseError:
        raise
    except PARSE_ERRORS + (OSError,) as exc:
        raise DocumentParseError(f"Could not read PDF: {exc}") from exc
    return reader


def extract_text(data: bytes, progress: bool = False) -> str:
    """
    Full text of a PDF given as raw bytes.

    Raises DocumentParseError if the bytes are not a valid document.
    """
    reader = open_pdf(data)
    log.info("Extracting text from %d page(s)", len(reader.pages))
    try:
        return text_from_pages(reader.pages, progress=progress)
    except PARSE_ERRORS as exc:
        raise DocumentParseError(f"Could not extract text: {exc}") from exc
