# balance_sheet_llm/web/app_factory.py
from __future__ import annotations

import secrets
from functools import partial
from typing import Optional

from flask import Flask

from ..config import AppSettings
from ..dispatcher import analyze
from ..pdf_extraction.extraction import extract_text
from ..shell.session import AnalysisSession, Dispatcher, Extractor
from ..shell.store import SessionStore
from .routes import create_blueprint


def create_app(
    settings: Optional[AppSettings] = None,
    dispatcher: Optional[Dispatcher] = None,
    extractor: Optional[Extractor] = None,
) -> Flask:
    """
    Application factory: wires settings, the session store and the routes.
    dispatcher/extractor can be replaced (tests use fakes).
    """
    settings = settings or AppSettings()
    dispatch_kwargs = {"settings": settings} if dispatcher is None else {}

    store = SessionStore(
        partial(
            AnalysisSession,
            extractor=extractor or extract_text,
            dispatcher=dispatcher or analyze,
            dispatch_kwargs=dispatch_kwargs,
        ),
        max_sessions=settings.max_sessions,
        idle_seconds=settings.session_idle_seconds,
    )

    app = Flask(__name__)
    app.register_blueprint(create_blueprint(store))
    app.extensions["session_store"] = store

    # Per-process secret: sessions do not outlive the server
    app.config["SECRET_KEY"] = secrets.token_hex(32)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_mb * 1024 * 1024
    app.config["HOST"] = settings.host
    app.config["PORT"] = settings.port
    app.config["DEBUG"] = settings.debug

    return app
