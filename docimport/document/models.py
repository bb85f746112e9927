from dataclasses import dataclass, field
from typing import BinaryIO

from docimport.document.cancellation import CancelToken
from docimport.document.content import DEFAULT_MAX_MEMORY, CachedContent
from docimport.document.metadata import DOC_CONTENT_TYPE, DOC_REFERENCE, Metadata


@dataclass
class Document:
    """A document travelling through the importer.

    The reference is an opaque identifier (URI, path, ...) and is never
    interpreted as a filesystem path by the importer itself.
    """

    reference: str
    content: CachedContent
    metadata: Metadata = field(default_factory=Metadata)
    parsed: bool = False
    cancel_token: CancelToken = field(default_factory=CancelToken)

    def __post_init__(self) -> None:
        if DOC_REFERENCE not in self.metadata:
            self.metadata.set_string(DOC_REFERENCE, self.reference)

    @classmethod
    def create(
        cls,
        reference: str,
        data: bytes | BinaryIO,
        metadata: Metadata | dict[str, list[str]] | None = None,
        *,
        max_memory: int = DEFAULT_MAX_MEMORY,
        cancel_token: CancelToken | None = None,
    ) -> "Document":
        """Build a document from raw bytes or a readable binary stream."""
        if isinstance(data, bytes):
            content = CachedContent.from_bytes(data, max_memory)
        else:
            content = CachedContent.from_stream(data, max_memory)
        if metadata is None:
            meta = Metadata()
        elif isinstance(metadata, Metadata):
            meta = metadata
        else:
            meta = Metadata(metadata)
        return cls(
            reference=reference,
            content=content,
            metadata=meta,
            cancel_token=cancel_token or CancelToken(),
        )

    @property
    def content_type(self) -> str | None:
        return self.metadata.get_string(DOC_CONTENT_TYPE)

    def replace_content(self, data: bytes) -> None:
        """Swap in new content, releasing the previous cache."""
        previous = self.content
        self.content = CachedContent.from_bytes(data, previous.max_memory)
        previous.close()

    def release(self) -> None:
        if not self.content.closed:
            self.content.close()
