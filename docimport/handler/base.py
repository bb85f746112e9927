from abc import ABC, abstractmethod
from enum import Enum

from docimport.document.models import Document


class OnMatch(str, Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


class DocumentFilter(ABC):
    """Contract for filters: decide whether a document matches."""

    on_match: OnMatch = OnMatch.INCLUDE

    @abstractmethod
    def is_matched(self, doc: Document, parsed: bool) -> bool:
        """Return True when *doc* matches this filter's criteria.

        The on-match polarity is applied by the handler envelope, not here.
        """


class DocumentTagger(ABC):
    """Contract for taggers: add or modify metadata in place."""

    @abstractmethod
    def tag(self, doc: Document, parsed: bool) -> None:
        """Mutate ``doc.metadata``.

        Raises:
            Exception: any failure; reported as a HandlerError for this branch.
        """


class DocumentTransformer(ABC):
    """Contract for transformers: rewrite content (and possibly metadata)."""

    @abstractmethod
    def transform(self, doc: Document, parsed: bool) -> None:
        """Mutate ``doc.content`` and/or ``doc.metadata`` in place."""


class DocumentSplitter(ABC):
    """Contract for splitters: derive child documents."""

    @abstractmethod
    def split(self, doc: Document, parsed: bool) -> list[Document]:
        """Return child documents, or an empty list when nothing was split.

        Children must own their content; they are imported independently.
        """


HandlerAction = DocumentFilter | DocumentTagger | DocumentTransformer | DocumentSplitter
