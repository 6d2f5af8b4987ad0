# balance_sheet_llm/shell/session.py
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..catalog import DEFAULT_MODEL_ID, DEFAULT_PROVIDER, Provider, first_model_for, models_for
from ..dispatcher import AnalysisResult, analyze as dispatch_analysis
from ..errors import AnalysisInProgressError
from ..formatting.response import sanitize_html
from ..pdf_extraction.extraction import extract_text
from ..prompts.templates import default_toggles, prompts_for

log = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"

ERR_NOT_PDF = "Please select a PDF file"
ERR_MISSING_INPUT = "Please select a file and provide an API key"
ERR_NO_QUESTIONS = "Please select at least one analysis option"
ERR_NO_TEXT = "No text could be extracted from the PDF"
ERR_GENERIC = "An error occurred"
ERR_BUSY = "An analysis is already in progress"
EMPTY_RESULT_NOTICE = "The model returned no analysis text."

VALIDATION_ERRORS = frozenset({ERR_NOT_PDF, ERR_MISSING_INPUT, ERR_NO_QUESTIONS})


class ShellState(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    ANALYZING = "analyzing"
    RESULT_READY = "result_ready"
    ERROR_SHOWN = "error_shown"


@dataclass(frozen=True)
class SelectedFile:
    name: str
    content_type: str
    data: bytes = field(repr=False)


Extractor = Callable[[bytes], str]
Dispatcher = Callable[..., AnalysisResult]


class AnalysisSession:
    """
    UI state for one user: selected file, provider/model, API key,
    question toggles and the last result or error.

    Mutated only through the transition methods below. analyze() holds a busy
    flag so a second analyze action while one is running is rejected.
    """

    def __init__(
        self,
        extractor: Extractor = extract_text,
        dispatcher: Dispatcher = dispatch_analysis,
        dispatch_kwargs: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._extractor = extractor
        self._dispatcher = dispatcher
        self._dispatch_kwargs = dict(dispatch_kwargs or {})
        self._lock = threading.Lock()
        self._busy = False

        self.state = ShellState.IDLE
        self.selected_file: Optional[SelectedFile] = None
        self.provider: str = DEFAULT_PROVIDER.value
        self.model_id: str = DEFAULT_MODEL_ID
        self.api_key: str = ""
        self.toggles: Dict[str, bool] = default_toggles()
        self.result_html: Optional[str] = None
        self.error: Optional[str] = None
        self.last_run: Dict[str, Any] = {}

    # ---- transitions -------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._busy

    def select_file(self, name: str, content_type: Optional[str], data: bytes) -> bool:
        """
        Accept a file whose declared type is PDF. Anything else only sets an
        error; the previously stored file is kept.
        """
        if (content_type or "").lower() != PDF_MIME_TYPE:
            self.error = ERR_NOT_PDF
            return False
        self.selected_file = SelectedFile(name=name, content_type=PDF_MIME_TYPE, data=data)
        self.error = None
        self.result_html = None
        if not self._busy:
            self.state = ShellState.FILE_SELECTED
        return True

    def change_provider(self, provider_id: str) -> None:
        self.provider = str(getattr(provider_id, "value", provider_id))
        first = first_model_for(self.provider)
        if first is not None:
            self.model_id = first

    def select_model(self, model_id: str) -> None:
        self.model_id = model_id

    def set_api_key(self, api_key: str) -> None:
        self.api_key = api_key or ""

    def set_question(self, name: str, enabled: bool) -> None:
        if name in self.toggles:
            self.toggles[name] = bool(enabled)

    def prompts(self) -> List[str]:
        return prompts_for(self.toggles)

    def analyze(self) -> AnalysisResult:
        """
        Run one analysis with the current inputs.

        Raises AnalysisInProgressError if another analysis is running;
        every other failure ends in ERROR_SHOWN with a message.
        """
        if self._busy:
            raise AnalysisInProgressError(ERR_BUSY)
        if self.selected_file is None or not self.api_key:
            return self._fail(ERR_MISSING_INPUT)

        prompts = self.prompts()
        if not prompts:
            return self._fail(ERR_NO_QUESTIONS)

        with self._lock:
            if self._busy:
                raise AnalysisInProgressError(ERR_BUSY)
            self._busy = True

        selected = self.selected_file
        try:
            self.error = None
            self.state = ShellState.ANALYZING
            result = self._run(selected, prompts)
        finally:
            with self._lock:
                self._busy = False

        if self.selected_file is not selected:
            # A different file was chosen while this one was being analyzed
            log.info("Discarding analysis of %s; file changed", selected.name)
            self.last_run["status"] = "discarded"
            self.state = ShellState.FILE_SELECTED
            return result

        if result.ok:
            self.result_html = sanitize_html(result.html_content or "")
            self.state = ShellState.RESULT_READY
        else:
            self.error = result.error_message
            self.state = ShellState.ERROR_SHOWN
        return result

    # ---- internals ---------------------------------------------------

    def _run(self, selected: SelectedFile, prompts: Sequence[str]) -> AnalysisResult:
        started = time.monotonic()
        self.last_run = {
            "file_name": selected.name,
            "provider": self.provider,
            "model_id": self.model_id,
            "prompts": list(prompts),
        }
        try:
            document_text = self._extractor(selected.data)
            self.last_run["document_chars"] = len(document_text)
            if not document_text.strip():
                result = AnalysisResult.failure(ERR_NO_TEXT)
            else:
                result = self._dispatcher(
                    self.provider,
                    self.model_id,
                    self.api_key,
                    document_text,
                    list(prompts),
                    **self._dispatch_kwargs,
                )
        except Exception as exc:  # noqa: BLE001
            log.warning("Analysis of %s failed: %s", selected.name, exc)
            result = AnalysisResult.failure(str(exc) or ERR_GENERIC)

        self.last_run["duration_seconds"] = round(time.monotonic() - started, 3)
        self.last_run["status"] = "ok" if result.ok else "failed"
        return result

    def _fail(self, message: str) -> AnalysisResult:
        self.last_run = {}
        self.error = message
        self.state = ShellState.ERROR_SHOWN
        return AnalysisResult.failure(message)

    def view(self) -> Dict[str, Any]:
        """
        Render snapshot. The result is only shown when there is no error.
        """
        return {
            "state": self.state.value,
            "busy": self._busy,
            "file_name": self.selected_file.name if self.selected_file else None,
            "provider": self.provider,
            "providers": [(p.value, p.display_name) for p in Provider],
            "model_id": self.model_id,
            "models": models_for(self.provider),
            "has_api_key": bool(self.api_key),
            "toggles": dict(self.toggles),
            "error": self.error,
            "result_html": None if self.error else self.result_html,
            "result_empty": (
                self.state is ShellState.RESULT_READY
                and not self.error
                and not self.result_html
            ),
        }
