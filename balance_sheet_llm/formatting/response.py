# balance_sheet_llm/formatting/response.py
from __future__ import annotations

import re
from typing import List, Pattern

import markdown
import nh3

# Boilerplate openers models like to prepend, tried in this order.
# Each consumes through the first newline; without "." matching newlines a
# single-line answer is left untouched.
PREAMBLE_PATTERNS: List[Pattern[str]] = [
    re.compile(r"^Here'?s? (?:is )?(?:an? )?(?:analysis|answer|response|summary).*?\n", re.IGNORECASE),
    re.compile(r"^Based on.*?\n", re.IGNORECASE),
    re.compile(r"^After analyzing.*?\n", re.IGNORECASE),
]

MARKDOWN_EXTENSIONS = ["tables", "sane_lists", "fenced_code"]

ALLOWED_TAGS = {
    "a", "b", "blockquote", "br", "code", "del", "em", "h1", "h2", "h3", "h4",
    "h5", "h6", "hr", "i", "li", "ol", "p", "pre", "strong", "sub", "sup",
    "table", "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
}
ALLOWED_ATTRIBUTES = {
    "a": {"href", "title"},
    "td": {"align"},
    "th": {"align"},
}


def strip_preamble(text: str) -> str:
    """Remove at most one leading boilerplate line (single pass)."""
    for pattern in PREAMBLE_PATTERNS:
        stripped, n = pattern.subn("", text, count=1)
        if n:
            return stripped
    return text


def format_response(raw: str) -> str:
    """
    Clean a raw model answer and convert it to HTML.

    The output is NOT sanitized; run it through sanitize_html before it is
    placed in a page.
    """
    text = strip_preamble(raw or "").strip()
    if not text:
        return ""
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def sanitize_html(html: str) -> str:
    """Allow-list sanitization of model-generated HTML."""
    return nh3.clean(
        html or "",
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes={"http", "https", "mailto"},
    )
