# balance_sheet_llm/config.py
from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .catalog import DEFAULT_MODEL_ID, DEFAULT_PROVIDER, Provider


@dataclass(frozen=True)
class AppSettings:
    """Process-wide settings shared by the web UI and the CLI."""
    timeout_seconds: float = 120.0
    max_retries: int = 1           # extra attempts on transient failures only
    retry_delay_seconds: float = 1.0
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False
    max_upload_mb: int = 25
    max_sessions: int = 200
    session_idle_seconds: float = 3600.0
    log_level: str = "INFO"


@dataclass
class RunConfig:
    """One `analyze` invocation from the command line."""
    pdf_path: Path
    provider: str
    model_name: Optional[str]
    api_key: Optional[str]      # None -> prompt interactively
    run_all_ratios: bool = True
    out_html: Optional[Path] = None
    out_log: Optional[Path] = None
    settings: AppSettings = field(default_factory=AppSettings)


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="Seconds to wait for a provider response.",
    )
    parser.add_argument(
        "--max_retries",
        type=int,
        default=1,
        help="Extra attempts on transient network/server errors (0 disables).",
    )
    parser.add_argument(
        "--log_level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="balance-sheet-llm",
        description="balance_sheet_llm: PDF balance sheet → LLM → HTML analysis",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the web UI.")
    serve.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve.add_argument("--port", type=int, default=5000, help="Port to listen on.")
    serve.add_argument("--debug", action="store_true", help="Flask debug mode.")
    serve.add_argument(
        "--max_upload_mb",
        type=int,
        default=25,
        help="Largest accepted upload, in megabytes.",
    )
    serve.add_argument(
        "--max_sessions",
        type=int,
        default=200,
        help="Browser sessions kept in memory; least recently used are dropped.",
    )
    serve.add_argument(
        "--session_idle_minutes",
        type=float,
        default=60.0,
        help="Drop a browser session after this long without requests.",
    )
    _add_common(serve)

    analyze = sub.add_parser("analyze", help="Analyze one PDF and print the HTML.")
    analyze.add_argument("--pdf", required=True, help="Path to the balance sheet PDF.")
    analyze.add_argument(
        "--provider",
        default=DEFAULT_PROVIDER.value,
        choices=[p.value for p in Provider],
        help="LLM provider.",
    )
    analyze.add_argument(
        "--model",
        default=None,
        help=f"Model id (default: first catalog model of the provider, "
             f"or {DEFAULT_MODEL_ID} for openai).",
    )
    analyze.add_argument(
        "--api_key",
        default=None,
        help="Provider API key. Prompted for when omitted; never read from the environment.",
    )
    analyze.add_argument(
        "--no_ratios",
        action="store_true",
        help="Disable the 'Run All Ratios' question.",
    )
    analyze.add_argument("--out", default=None, help="Write the HTML report to this file.")
    analyze.add_argument(
        "--out_log",
        default=None,
        help="Directory for run_metadata.json.",
    )
    _add_common(analyze)

    return parser


def settings_from_args(args: argparse.Namespace) -> AppSettings:
    return AppSettings(
        timeout_seconds=args.timeout,
        max_retries=max(0, args.max_retries),
        host=getattr(args, "host", "127.0.0.1"),
        port=getattr(args, "port", 5000),
        debug=getattr(args, "debug", False),
        max_upload_mb=getattr(args, "max_upload_mb", 25),
        max_sessions=getattr(args, "max_sessions", 200),
        session_idle_seconds=getattr(args, "session_idle_minutes", 60.0) * 60,
        log_level=args.log_level,
    )


def run_config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        pdf_path=Path(args.pdf),
        provider=args.provider,
        model_name=args.model,
        api_key=args.api_key,
        run_all_ratios=not args.no_ratios,
        out_html=Path(args.out) if args.out else None,
        out_log=Path(args.out_log) if args.out_log else None,
        settings=settings_from_args(args),
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
