import io
import shlex
import sys
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docimport.document.models import Document

EXTERNAL_APP = Path(__file__).parent / "fixtures" / "external_app.py"


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setTitle("Potato Report")
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def external_app_command() -> str:
    """Command line prefix running the stand-in external application."""
    return shlex.join([sys.executable, str(EXTERNAL_APP)])


@pytest.fixture()
def make_document():  # type: ignore[no-untyped-def]
    created: list[Document] = []

    def _make(
        reference: str = "doc.txt",
        content: bytes = b"",
        metadata: dict[str, list[str]] | None = None,
    ) -> Document:
        doc = Document.create(reference, content, metadata)
        created.append(doc)
        return doc

    yield _make
    for doc in created:
        doc.release()
