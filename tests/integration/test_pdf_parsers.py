import io

import pytest

from docimport.parser.base import BaseDocumentParser
from docimport.parser.exceptions import ContentTypeMismatchError
from docimport.parser.pdfplumber_adapter import PdfPlumberParser
from docimport.parser.pymupdf_adapter import PyMuPdfParser

pytestmark = pytest.mark.integration

PARSERS = [PdfPlumberParser, PyMuPdfParser]


@pytest.fixture(params=PARSERS, ids=["pdfplumber", "pymupdf"])
def parser(request: pytest.FixtureRequest) -> BaseDocumentParser:
    return request.param()


class TestPdfParsers:
    def test_extracts_text(self, parser: BaseDocumentParser, sample_pdf_bytes: bytes) -> None:
        result = parser.parse("a.pdf", io.BytesIO(sample_pdf_bytes))
        assert result.content_type == "application/pdf"
        assert "Hello PDF World" in result.text

    def test_extracts_info_metadata(
        self, parser: BaseDocumentParser, sample_pdf_bytes: bytes
    ) -> None:
        result = parser.parse("a.pdf", io.BytesIO(sample_pdf_bytes))
        titles = [v for k, v in result.metadata.items() if k.casefold() == "pdf:title"]
        assert titles == [["Potato Report"]]
        assert result.metadata["pdf:pageCount"] == ["1"]

    def test_extracts_every_page(
        self, parser: BaseDocumentParser, multi_page_pdf_bytes: bytes
    ) -> None:
        result = parser.parse("a.pdf", io.BytesIO(multi_page_pdf_bytes))
        assert "Page one content" in result.text
        assert "Page two content" in result.text
        assert result.metadata["pdf:pageCount"] == ["2"]

    def test_result_is_stripped(self, parser: BaseDocumentParser, sample_pdf_bytes: bytes) -> None:
        result = parser.parse("a.pdf", io.BytesIO(sample_pdf_bytes))
        assert result.text == result.text.strip()

    def test_non_pdf_is_a_mismatch(self, parser: BaseDocumentParser) -> None:
        with pytest.raises(ContentTypeMismatchError):
            parser.parse("a.pdf", io.BytesIO(b"not a pdf"))
