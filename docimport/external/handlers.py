from typing import BinaryIO

from docimport.document.models import Document
from docimport.external.app import ExternalApp
from docimport.handler.base import DocumentTagger, DocumentTransformer
from docimport.parser.base import BaseDocumentParser, ParseResult


class ExternalTagger(DocumentTagger):
    """Adds metadata harvested from an external application; content is untouched."""

    def __init__(self, app: ExternalApp) -> None:
        self.app = app

    def tag(self, doc: Document, parsed: bool) -> None:
        self.app.apply(doc, replace_content=False)


class ExternalTransformer(DocumentTransformer):
    """Replaces content with an external application's output and adds its metadata."""

    def __init__(self, app: ExternalApp) -> None:
        self.app = app

    def transform(self, doc: Document, parsed: bool) -> None:
        self.app.apply(doc, replace_content=True)


class ExternalParser(BaseDocumentParser):
    """Uses an external application as the extraction engine for a content type."""

    def __init__(self, app: ExternalApp, content_type: str, encoding: str = "utf-8") -> None:
        self.app = app
        self.content_type = content_type
        self._encoding = encoding

    def parse(
        self, reference: str, stream: BinaryIO, document: Document | None = None
    ) -> ParseResult:
        doc = Document.create(
            reference,
            stream,
            document.metadata.copy() if document is not None else None,
            max_memory=self.app.max_memory,
            cancel_token=document.cancel_token if document is not None else None,
        )
        try:
            result = self.app.execute(doc)
        finally:
            doc.release()
        metadata: dict[str, list[str]] = {}
        for name, value in result.metadata:
            if name.strip():
                metadata.setdefault(name, []).append(value)
        return ParseResult(
            content_type=self.content_type,
            text=result.output.decode(self._encoding, errors="replace"),
            metadata=metadata,
        )
