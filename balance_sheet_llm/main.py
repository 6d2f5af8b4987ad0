# balance_sheet_llm/main.py
from __future__ import annotations

import getpass
import logging
import mimetypes
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import List, Optional

from .catalog import DEFAULT_MODEL_ID, Provider, first_model_for
from .config import AppSettings, RunConfig, parse_args, run_config_from_args, settings_from_args
from .dispatcher import analyze
from .output.writers import write_report_html, write_run_metadata
from .pdf_extraction.extraction import extract_text
from .shell.session import EMPTY_RESULT_NOTICE, AnalysisSession

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s:%(lineno)d] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def resolve_model(provider: str, model_name: Optional[str]) -> str:
    if model_name:
        return model_name
    if provider == Provider.OPENAI.value:
        return DEFAULT_MODEL_ID
    return first_model_for(provider) or ""


def run_analyze(cfg: RunConfig) -> int:
    started_at = datetime.now(timezone.utc)

    # 1. Sanity checks (PDF)
    if not cfg.pdf_path.exists():
        print(f"PDF not found: {cfg.pdf_path}", file=sys.stderr)
        return 1

    api_key = cfg.api_key
    if api_key is None:
        api_key = getpass.getpass(f"{Provider(cfg.provider).display_name} API key: ")

    # 2. Drive the same session the web UI uses
    session = AnalysisSession(
        extractor=partial(extract_text, progress=True),
        dispatcher=analyze,
        dispatch_kwargs={"settings": cfg.settings},
    )
    content_type, _ = mimetypes.guess_type(cfg.pdf_path.name)
    if not session.select_file(cfg.pdf_path.name, content_type, cfg.pdf_path.read_bytes()):
        print(session.error, file=sys.stderr)
        return 1

    session.change_provider(cfg.provider)
    session.select_model(resolve_model(cfg.provider, cfg.model_name))
    session.set_api_key(api_key)
    session.set_question("run_all_ratios", cfg.run_all_ratios)

    result = session.analyze()
    finished_at = datetime.now(timezone.utc)

    # 3. Outputs
    if result.ok:
        html_body = session.result_html or ""
        if not html_body:
            print(EMPTY_RESULT_NOTICE, file=sys.stderr)
        if cfg.out_html:
            write_report_html(cfg.out_html, html_body, title=f"Analysis of {cfg.pdf_path.name}")
            print(f"- HTML: {cfg.out_html}")
        else:
            print(html_body)
    else:
        print(f"Analysis failed: {result.error_message}", file=sys.stderr)

    if cfg.out_log:
        settings_dict = asdict(cfg.settings)
        run_metadata = {
            "pdf": str(cfg.pdf_path),
            "provider": session.provider,
            "model_id": session.model_id,
            "settings": settings_dict,
            "started_at_utc": started_at.isoformat(),
            "finished_at_utc": finished_at.isoformat(),
            "out_html": str(cfg.out_html) if cfg.out_html else None,
            **session.last_run,
            "error": result.error_message,
        }
        metadata_path = cfg.out_log / "run_metadata.json"
        write_run_metadata(metadata_path, run_metadata)
        print(f"- Metadata: {metadata_path}")

    return 0 if result.ok else 1


def run_serve(settings: AppSettings) -> int:
    from .web.app_factory import create_app

    app = create_app(settings)
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "serve":
        return run_serve(settings_from_args(args))
    return run_analyze(run_config_from_args(args))


if __name__ == "__main__":
    sys.exit(main())
