from typing import BinaryIO

import pymupdf

from docimport.document.models import Document
from docimport.parser.base import BaseDocumentParser, ParseResult
from docimport.parser.detector import PDF, looks_like_pdf
from docimport.parser.exceptions import ContentTypeMismatchError, ExtractionError


class PyMuPdfParser(BaseDocumentParser):
    """Extracts text and document info from PDF using PyMuPDF."""

    def parse(
        self, reference: str, stream: BinaryIO, document: Document | None = None
    ) -> ParseResult:
        pdf_bytes = stream.read()
        if not looks_like_pdf(pdf_bytes[:1024]):
            raise ContentTypeMismatchError(PDF, f"'{reference}' is not a PDF")
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
                info = dict(doc.metadata or {})
        except Exception as exc:
            raise ExtractionError(f"pymupdf extraction failed: {exc}") from exc

        metadata = {
            f"pdf:{key}": [str(value)]
            for key, value in info.items()
            if value not in (None, "")
        }
        metadata["pdf:pageCount"] = [str(len(pages))]
        return ParseResult(content_type=PDF, text="\n".join(pages).strip(), metadata=metadata)
