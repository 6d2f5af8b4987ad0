# tests/test_retry.py
import pytest

from balance_sheet_llm.llm_client import _retry
from balance_sheet_llm.llm_client._retry import call_with_retry


class Transient(Exception):
    pass


class Fatal(Exception):
    pass


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(_retry.time, "sleep", lambda s: None)


def _flaky(errors, value="ok"):
    calls = []

    def fn():
        calls.append(1)
        if errors:
            raise errors.pop(0)
        return value

    return fn, calls


def test_transient_failure_is_retried_once():
    fn, calls = _flaky([Transient("reset")])
    out = call_with_retry(fn, is_transient=lambda e: isinstance(e, Transient), max_retries=1)
    assert out == "ok"
    assert len(calls) == 2


def test_retry_is_bounded():
    fn, calls = _flaky([Transient("1"), Transient("2"), Transient("3")])
    with pytest.raises(Transient):
        call_with_retry(fn, is_transient=lambda e: isinstance(e, Transient), max_retries=1)
    assert len(calls) == 2


def test_non_transient_errors_are_not_retried():
    fn, calls = _flaky([Fatal("401")])
    with pytest.raises(Fatal):
        call_with_retry(fn, is_transient=lambda e: isinstance(e, Transient), max_retries=3)
    assert len(calls) == 1


def test_zero_retries_means_single_attempt():
    fn, calls = _flaky([Transient("x")])
    with pytest.raises(Transient):
        call_with_retry(fn, is_transient=lambda e: True, max_retries=0)
    assert len(calls) == 1
