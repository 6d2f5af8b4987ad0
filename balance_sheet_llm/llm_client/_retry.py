# balance_sheet_llm/llm_client/_retry.py
from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


def call_with_retry(
    fn: Callable[[], T],
    *,
    is_transient: Callable[[Exception], bool],
    max_retries: int = 1,
    delay_s: float = 1.0,
    context: str = "provider call",
) -> T:
    """
    Run fn, retrying up to max_retries extra times when is_transient(exc).

    Anything not transient (auth, quota, bad request) is raised immediately.
    """
    attempts = max(0, max_retries) + 1
    last_exc: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except Exception as exc:
            last_exc = exc
            if not is_transient(exc) or attempt == attempts:
                raise
            wait = delay_s * attempt
            log.warning(
                "Transient error during %s (attempt %d/%d): %s; retrying in %.1fs",
                context, attempt, attempts, exc, wait,
            )
            time.sleep(wait)

    # Unreachable: the loop either returns or raises
    raise RuntimeError(f"{context} failed") from last_exc
