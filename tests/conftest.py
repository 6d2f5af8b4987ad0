# tests/conftest.py
import io

import pytest

from balance_sheet_llm.dispatcher import AnalysisResult


class FakePage:
    """Page stand-in exposing pypdf's extract_text()."""

    def __init__(self, text):
        self._text = text

    def extract_text(self):
        return self._text


class FakeLLMClient:
    """Records prompts and returns a canned answer."""

    def __init__(self, answer="## Ratios\n\n| Ratio | Value |\n|---|---|\n| Current | 1.5 |", error=None):
        self.answer = answer
        self.error = error
        self.calls = []
        self.api_key = None

    def __call__(self, api_key, **kwargs):
        # Used as a client factory in the registry
        self.api_key = api_key
        self.factory_kwargs = kwargs
        return self

    def complete(self, prompt, model_id):
        self.calls.append({"prompt": prompt, "model_id": model_id})
        if self.error is not None:
            raise self.error
        return self.answer


class FakeDispatcher:
    def __init__(self, result=None):
        self.result = result or AnalysisResult.success("<p>Current ratio 1.5</p>")
        self.calls = []

    def __call__(self, provider_id, model_id, api_key, document_text, prompts, **kwargs):
        self.calls.append(
            {
                "provider_id": provider_id,
                "model_id": model_id,
                "api_key": api_key,
                "document_text": document_text,
                "prompts": prompts,
            }
        )
        return self.result


@pytest.fixture
def fake_pages():
    return [FakePage("A\nB"), FakePage("C"), FakePage("D\nE")]


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def fake_dispatcher():
    return FakeDispatcher()


@pytest.fixture
def blank_pdf_bytes():
    """A tiny 2-page PDF with no text layer."""
    from pypdf import PdfWriter

    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


@pytest.fixture
def tmp_pdf(tmp_path, blank_pdf_bytes):
    pdf_path = tmp_path / "sample.pdf"
    pdf_path.write_bytes(blank_pdf_bytes)
    return pdf_path


def build_text_pdf(pages):
    """
    Minimal PDF whose pages carry a real text layer: one Helvetica line per
    string, each positioned lower on the page than the previous one.
    """
    page_ids = [4 + 2 * i for i in range(len(pages))]
    kids = " ".join(f"{pid} 0 R" for pid in page_ids)
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for pid, lines in zip(page_ids, pages):
        objects.append(
            (
                f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 300 300] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {pid + 1} 0 R >>"
            ).encode()
        )
        ops = ["BT", "/F1 12 Tf"]
        for j, line in enumerate(lines):
            ops.append(f"1 0 0 1 20 {260 - 24 * j} Tm ({line}) Tj")
        ops.append("ET")
        data = "\n".join(ops).encode()
        objects.append(b"<< /Length %d >>\nstream\n" % len(data) + data + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % num + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


@pytest.fixture
def text_pdf_bytes():
    return build_text_pdf([["A", "B"], ["C"], ["D", "E"]])
