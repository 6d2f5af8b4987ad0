# balance_sheet_llm/web/routes.py
from __future__ import annotations

from flask import Blueprint, current_app, redirect, render_template, request, session, url_for

from ..errors import AnalysisInProgressError
from ..prompts.templates import QUESTION_TOGGLES
from ..shell.session import ERR_BUSY, EMPTY_RESULT_NOTICE, VALIDATION_ERRORS, AnalysisSession
from ..shell.store import SessionStore

SESSION_KEY = "analysis_session_id"


def create_blueprint(store: SessionStore) -> Blueprint:
    bp = Blueprint("web", __name__)

    def current() -> AnalysisSession:
        sid, analysis = store.get_or_create(session.get(SESSION_KEY))
        session[SESSION_KEY] = sid
        return analysis

    def render(analysis: AnalysisSession, code: int = 200, error: str | None = None):
        page_model = analysis.view()
        if error:
            page_model["error"] = error
            page_model["result_html"] = None
        return render_template(
            "index.html",
            question_toggles=QUESTION_TOGGLES,
            empty_result_notice=EMPTY_RESULT_NOTICE,
            **page_model,
        ), code

    @bp.get("/")
    def index():
        return render(current())

    @bp.post("/upload")
    def upload():
        analysis = current()
        file = request.files.get("file")
        if file is None or not file.filename:
            # No selection: same message as a wrong type, stored file kept
            analysis.select_file("", None, b"")
            return render(analysis, 400)

        if not analysis.select_file(file.filename, file.mimetype, file.read()):
            current_app.logger.info("Rejected upload %r (%s)", file.filename, file.mimetype)
            return render(analysis, 400)

        current_app.logger.info("File selected: %s", file.filename)
        return redirect(url_for("web.index"))

    @bp.post("/provider")
    def change_provider():
        analysis = current()
        analysis.change_provider((request.form.get("provider") or "").strip())
        return redirect(url_for("web.index"))

    @bp.post("/analyze")
    def run_analysis():
        analysis = current()
        if analysis.busy:
            current_app.logger.info("Ignored analyze request while busy")
            return render(analysis, 409, error=ERR_BUSY)

        provider = (request.form.get("provider") or "").strip()
        if provider and provider != analysis.provider:
            analysis.change_provider(provider)
        model_id = (request.form.get("model_id") or "").strip()
        if model_id:
            analysis.select_model(model_id)
        api_key = (request.form.get("api_key") or "").strip()
        # An empty field clears the key unless the user asked to reuse it
        if api_key or request.form.get("keep_api_key") is None:
            analysis.set_api_key(api_key)
        for name in QUESTION_TOGGLES:
            analysis.set_question(name, request.form.get(name) is not None)

        try:
            result = analysis.analyze()
        except AnalysisInProgressError:
            current_app.logger.info("Ignored duplicate analyze request")
            return render(analysis, 409, error=ERR_BUSY)

        if result.ok:
            current_app.logger.info(
                "Analysis ok provider=%s model=%s", analysis.provider, analysis.model_id
            )
            return render(analysis)

        current_app.logger.info("Analysis failed: %s", result.error_message)
        code = 400 if result.error_message in VALIDATION_ERRORS else 502
        return render(analysis, code)

    @bp.post("/reset")
    def reset():
        sid = session.pop(SESSION_KEY, None)
        if sid:
            store.discard(sid)
        return redirect(url_for("web.index"))

    return bp
