from docimport.config.settings import Settings
from docimport.parser.base import BaseDocumentParser
from docimport.parser.detector import PDF
from docimport.parser.document_parser import DocumentParser
from docimport.parser.pdfplumber_adapter import PdfPlumberParser
from docimport.parser.pymupdf_adapter import PyMuPdfParser
from docimport.parser.text_adapter import TextParser


class ParserFactory:
    """Creates the document parser configured in settings."""

    PDF_ENGINES: dict[str, type[BaseDocumentParser]] = {
        "pdfplumber": PdfPlumberParser,
        "pymupdf": PyMuPdfParser,
    }

    @classmethod
    def create(
        cls,
        settings: Settings,
        extra_parsers: dict[str, BaseDocumentParser] | None = None,
    ) -> DocumentParser:
        """Build a DocumentParser for text and PDF, plus any *extra_parsers*.

        Extra parsers are keyed by content type and take precedence.
        """
        engine = settings.parser_engine.lower()
        pdf_cls = cls.PDF_ENGINES.get(engine)
        if pdf_cls is None:
            raise ValueError(
                f"Unknown parser engine '{engine}'. Choose from: {list(cls.PDF_ENGINES)}"
            )
        parsers: dict[str, BaseDocumentParser] = {
            PDF: pdf_cls(),
            "text/*": TextParser(),
        }
        parsers.update(extra_parsers or {})
        return DocumentParser(parsers, retry_on_mismatch=settings.parse_retry_on_mismatch)
