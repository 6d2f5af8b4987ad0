# balance_sheet_llm/shell/store.py
from __future__ import annotations

import logging
import secrets
import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from .session import AnalysisSession

log = logging.getLogger(__name__)


class SessionStore:
    """
    In-memory sessions keyed by a random id. Nothing is persisted; sessions
    (and the API keys and PDFs they hold) disappear with the process.

    Sessions idle for longer than idle_seconds are dropped, and at most
    max_sessions are kept (least recently used go first).
    """

    def __init__(
        self,
        factory: Callable[[], AnalysisSession],
        max_sessions: int = 200,
        idle_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._factory = factory
        self._max_sessions = max(1, max_sessions)
        self._idle_seconds = idle_seconds
        self._clock = clock
        # id -> (session, last access); oldest access first
        self._sessions: "OrderedDict[str, Tuple[AnalysisSession, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def get_or_create(self, session_id: Optional[str]) -> Tuple[str, AnalysisSession]:
        with self._lock:
            now = self._clock()
            self._evict_idle(now)

            if session_id and session_id in self._sessions:
                session, _ = self._sessions.pop(session_id)
                self._sessions[session_id] = (session, now)
                return session_id, session

            while len(self._sessions) >= self._max_sessions:
                self._sessions.popitem(last=False)
                log.info("Session store full; dropped least recently used session")

            new_id = secrets.token_urlsafe(16)
            session = self._factory()
            self._sessions[new_id] = (session, now)
            return new_id, session

    def _evict_idle(self, now: float) -> None:
        while self._sessions:
            oldest_id, (_, last_access) = next(iter(self._sessions.items()))
            if now - last_access <= self._idle_seconds:
                break
            del self._sessions[oldest_id]

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
