from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import BinaryIO

from docimport.document.models import Document


@dataclass
class ParseResult:
    """Output of a parser: detected type, plain text and raw metadata."""

    content_type: str
    text: str
    metadata: dict[str, list[str]] = field(default_factory=dict)


class BaseDocumentParser(ABC):
    """Contract for all content/metadata extraction adapters."""

    @abstractmethod
    def parse(
        self, reference: str, stream: BinaryIO, document: Document | None = None
    ) -> ParseResult:
        """Extract plain text and metadata from a document stream.

        Args:
            reference: Document reference, used as a hint only.
            stream: Readable binary stream positioned at the start of the content.
            document: The document being imported, when parsing inside the
                pipeline. Parsers may read its metadata and must honour its
                cancel token; they never modify it.

        Returns:
            ParseResult with content type, text and metadata.

        Raises:
            ContentTypeMismatchError: if the content is not of the handled type.
            ExtractionError: if extraction fails for any other reason.
        """
