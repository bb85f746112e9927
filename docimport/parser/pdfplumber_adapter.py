import io
from typing import BinaryIO

import pdfplumber

from docimport.document.models import Document
from docimport.parser.base import BaseDocumentParser, ParseResult
from docimport.parser.detector import PDF, looks_like_pdf
from docimport.parser.exceptions import ContentTypeMismatchError, ExtractionError


class PdfPlumberParser(BaseDocumentParser):
    """Extracts text and document info from PDF using pdfplumber."""

    def parse(
        self, reference: str, stream: BinaryIO, document: Document | None = None
    ) -> ParseResult:
        pdf_bytes = stream.read()
        if not looks_like_pdf(pdf_bytes[:1024]):
            raise ContentTypeMismatchError(PDF, f"'{reference}' is not a PDF")
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
                info = dict(pdf.metadata or {})
                page_count = len(pdf.pages)
        except Exception as exc:
            raise ExtractionError(f"pdfplumber extraction failed: {exc}") from exc

        metadata = {
            f"pdf:{key}": [str(value)]
            for key, value in info.items()
            if value not in (None, "")
        }
        metadata["pdf:pageCount"] = [str(page_count)]
        return ParseResult(content_type=PDF, text="\n".join(pages).strip(), metadata=metadata)
