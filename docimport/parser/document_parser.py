from docimport.document.content import CachedContent
from docimport.document.models import Document
from docimport.logging.logger import Log
from docimport.parser import detector
from docimport.parser.base import BaseDocumentParser, ParseResult
from docimport.parser.exceptions import (
    ContentTypeMismatchError,
    ExtractionError,
    UnsupportedContentTypeError,
)


class DocumentParser:
    """Routes content to the parser registered for its content type.

    Content types are matched exactly first, then by their major type
    (``text/*``). When a parser reports a content-type mismatch and
    *retry_on_mismatch* is set, the type is detected again from the bytes
    alone and parsing is retried once with that type's parser.
    """

    def __init__(
        self,
        parsers: dict[str, BaseDocumentParser],
        retry_on_mismatch: bool = True,
    ) -> None:
        self._parsers = {key.lower(): parser for key, parser in parsers.items()}
        self._retry_on_mismatch = retry_on_mismatch

    def parser_for(self, content_type: str) -> BaseDocumentParser:
        content_type = content_type.split(";", 1)[0].strip().lower()
        parser = self._parsers.get(content_type)
        if parser is None:
            parser = self._parsers.get(content_type.split("/", 1)[0] + "/*")
        if parser is None:
            raise UnsupportedContentTypeError(f"No parser for content type '{content_type}'")
        return parser

    def parse(
        self,
        reference: str,
        content: CachedContent,
        declared_content_type: str | None = None,
        document: Document | None = None,
    ) -> ParseResult:
        """Detect the content type and extract text and metadata.

        Raises:
            ExtractionError: if parsing fails (including after the retry).
        """
        content_type = declared_content_type or detector.detect(
            reference, content.head(detector.HEAD_SIZE)
        )
        try:
            return self._parse_as(content_type, reference, content, document)
        except ContentTypeMismatchError as exc:
            if not self._retry_on_mismatch:
                raise
            actual = detector.detect_from_content(content.head(detector.HEAD_SIZE))
            if actual == content_type:
                raise
            Log.warning(
                f"'{reference}' is not {content_type} ({exc}); retrying as {actual}"
            )
            return self._parse_as(actual, reference, content, document)

    def _parse_as(
        self,
        content_type: str,
        reference: str,
        content: CachedContent,
        document: Document | None,
    ) -> ParseResult:
        parser = self.parser_for(content_type)
        Log.debug(f"Parsing '{reference}' as {content_type} with {type(parser).__name__}")
        try:
            return parser.parse(reference, content.open(), document)
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"{type(parser).__name__} failed: {exc}") from exc
