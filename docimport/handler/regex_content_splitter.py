from docimport.document.metadata import DOC_EMBEDDED_PARENT_REFERENCE, DOC_EMBEDDED_REFERENCE
from docimport.document.models import Document
from docimport.fields.patterns import PatternCache
from docimport.handler.base import DocumentSplitter
from docimport.logging.logger import Log


class RegexContentSplitter(DocumentSplitter):
    """Splits text content on a separator pattern.

    Child references are ``<parent reference>!<n>``, counted from 1. Blank
    parts are dropped; fewer than two remaining parts means no split.
    """

    def __init__(self, separator: str, case_sensitive: bool = False) -> None:
        self.separator = separator
        self.case_sensitive = case_sensitive
        self._patterns = PatternCache()

    def split(self, doc: Document, parsed: bool) -> list[Document]:
        pattern = self._patterns.get(self.separator, self.case_sensitive)
        parts = [part for part in pattern.split(doc.content.read_text()) if part and part.strip()]
        if len(parts) < 2:
            return []

        children: list[Document] = []
        for index, part in enumerate(parts, start=1):
            child = Document.create(
                f"{doc.reference}!{index}",
                part.encode("utf-8"),
                max_memory=doc.content.max_memory,
            )
            child.metadata.set_string(DOC_EMBEDDED_PARENT_REFERENCE, doc.reference)
            child.metadata.set_string(DOC_EMBEDDED_REFERENCE, str(index))
            children.append(child)
        Log.debug(f"Split '{doc.reference}' into {len(children)} documents")
        return children
