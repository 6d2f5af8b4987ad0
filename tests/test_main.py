# tests/test_main.py
import json

import pytest

from balance_sheet_llm import main as main_mod
from balance_sheet_llm.config import parse_args, run_config_from_args
from balance_sheet_llm.dispatcher import AnalysisResult

from conftest import FakeDispatcher


@pytest.fixture
def fake_pipeline(monkeypatch, fake_dispatcher):
    monkeypatch.setattr(main_mod, "extract_text", lambda data, progress=False: "Total assets 100")
    monkeypatch.setattr(main_mod, "analyze", fake_dispatcher)
    return fake_dispatcher


def test_parse_analyze_defaults():
    cfg = run_config_from_args(parse_args(["analyze", "--pdf", "bs.pdf"]))
    assert cfg.provider == "openai"
    assert cfg.model_name is None
    assert cfg.api_key is None
    assert cfg.run_all_ratios is True
    assert cfg.settings.timeout_seconds == 120.0
    assert cfg.settings.max_retries == 1


def test_parse_rejects_unknown_provider():
    with pytest.raises(SystemExit):
        parse_args(["analyze", "--pdf", "bs.pdf", "--provider", "mistral"])


@pytest.mark.parametrize(
    "provider, model, expected",
    [("openai", None, "o1-mini"), ("gemini", None, "gemini-1.5-pro"), ("gemini", "gemini-pro", "gemini-pro")],
)
def test_resolve_model(provider, model, expected):
    assert main_mod.resolve_model(provider, model) == expected


def test_analyze_writes_html_and_metadata(tmp_pdf, tmp_path, fake_pipeline):
    out_html = tmp_path / "out" / "report.html"
    out_log = tmp_path / "logs"

    code = main_mod.main([
        "analyze", "--pdf", str(tmp_pdf), "--provider", "gemini",
        "--api_key", "g-secret", "--out", str(out_html), "--out_log", str(out_log),
    ])

    assert code == 0
    assert "<p>Current ratio 1.5</p>" in out_html.read_text(encoding="utf-8")
    meta_text = (out_log / "run_metadata.json").read_text(encoding="utf-8")
    assert "g-secret" not in meta_text
    meta = json.loads(meta_text)
    assert meta["provider"] == "gemini"
    assert meta["model_id"] == "gemini-1.5-pro"
    assert meta["status"] == "ok"
    assert fake_pipeline.calls[0]["api_key"] == "g-secret"


def test_analyze_prompts_for_missing_key(tmp_pdf, monkeypatch, fake_pipeline, capsys):
    monkeypatch.setattr(main_mod.getpass, "getpass", lambda prompt: "typed-key")
    assert main_mod.main(["analyze", "--pdf", str(tmp_pdf)]) == 0
    assert fake_pipeline.calls[0]["api_key"] == "typed-key"
    assert "Current ratio" in capsys.readouterr().out


def test_analyze_failure_exit_code(tmp_pdf, monkeypatch, capsys):
    monkeypatch.setattr(main_mod, "extract_text", lambda data, progress=False: "text")
    monkeypatch.setattr(
        main_mod, "analyze", FakeDispatcher(AnalysisResult.failure("xai integration is not yet available"))
    )
    code = main_mod.main(["analyze", "--pdf", str(tmp_pdf), "--provider", "xai", "--api_key", "k"])
    assert code == 1
    assert "not yet available" in capsys.readouterr().err


def test_analyze_missing_pdf(tmp_path, capsys):
    code = main_mod.main(["analyze", "--pdf", str(tmp_path / "nope.pdf"), "--api_key", "k"])
    assert code == 1
    assert "PDF not found" in capsys.readouterr().err


def test_non_pdf_extension_is_rejected(tmp_path, fake_pipeline, capsys):
    txt = tmp_path / "bs.txt"
    txt.write_text("hello", encoding="utf-8")
    assert main_mod.main(["analyze", "--pdf", str(txt), "--api_key", "k"]) == 1
    assert "Please select a PDF file" in capsys.readouterr().err
    assert fake_pipeline.calls == []


def test_analyze_reports_empty_answer(tmp_pdf, monkeypatch, capsys):
    monkeypatch.setattr(main_mod, "extract_text", lambda data, progress=False: "text")
    monkeypatch.setattr(main_mod, "analyze", FakeDispatcher(AnalysisResult.success("")))
    assert main_mod.main(["analyze", "--pdf", str(tmp_pdf), "--api_key", "k"]) == 0
    assert "The model returned no analysis text." in capsys.readouterr().err


def test_serve_session_limits_are_parsed():
    from balance_sheet_llm.config import settings_from_args

    settings = settings_from_args(
        parse_args(["serve", "--max_sessions", "10", "--session_idle_minutes", "5"])
    )
    assert settings.max_sessions == 10
    assert settings.session_idle_seconds == 300.0
