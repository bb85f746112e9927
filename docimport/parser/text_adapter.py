from typing import BinaryIO

from docimport.document.models import Document
from docimport.parser.base import BaseDocumentParser, ParseResult
from docimport.parser.detector import HEAD_SIZE, TEXT, looks_binary, looks_like_pdf
from docimport.parser.exceptions import ContentTypeMismatchError


class TextParser(BaseDocumentParser):
    """Decodes text content as UTF-8, replacing undecodable bytes."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def parse(
        self, reference: str, stream: BinaryIO, document: Document | None = None
    ) -> ParseResult:
        data = stream.read()
        head = data[:HEAD_SIZE]
        if looks_like_pdf(head) or looks_binary(head):
            raise ContentTypeMismatchError(TEXT, f"'{reference}' does not contain plain text")
        return ParseResult(
            content_type=TEXT,
            text=data.decode(self._encoding, errors="replace"),
        )
