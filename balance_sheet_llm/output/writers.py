# balance_sheet_llm/output/writers.py
from __future__ import annotations

import html
import json
from pathlib import Path
from typing import Any, Dict

REPORT_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<h1>{title}</h1>
{body}
</body>
</html>
"""


def write_report_html(path: Path, body_html: str, title: str) -> None:
    """
    Write a standalone HTML page around an already-sanitized analysis body.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        REPORT_TEMPLATE.format(title=html.escape(title), body=body_html),
        encoding="utf-8",
    )


def write_run_metadata(path: Path, metadata: Dict[str, Any]) -> None:
    """
    Write run metadata (provider, model, timings, status) as JSON.
    Callers must not put API keys in here.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(metadata, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
