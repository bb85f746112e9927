from docimport.document.models import Document
from docimport.fields.patterns import PatternCache
from docimport.handler.base import DocumentFilter, OnMatch


class RegexMetadataFilter(DocumentFilter):
    """Accepts or rejects documents on a metadata field value.

    A document matches when any value of *field* fully matches *regex*.
    A blank regex matches every document, which lets operators disable the
    filter without removing it.
    """

    def __init__(
        self,
        field: str,
        regex: str | None,
        on_match: OnMatch = OnMatch.INCLUDE,
        case_sensitive: bool = False,
    ) -> None:
        self.field = field
        self.on_match = on_match
        self._regex = regex
        self._case_sensitive = case_sensitive
        self._patterns = PatternCache()

    @property
    def regex(self) -> str | None:
        return self._regex

    @regex.setter
    def regex(self, value: str | None) -> None:
        self._regex = value
        self._patterns.clear()

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    @case_sensitive.setter
    def case_sensitive(self, value: bool) -> None:
        self._case_sensitive = value
        self._patterns.clear()

    def is_matched(self, doc: Document, parsed: bool) -> bool:
        regex = self._regex
        if regex is None or not regex.strip():
            return True
        pattern = self._patterns.get(regex, self._case_sensitive)
        return any(pattern.fullmatch(value) for value in doc.metadata.get_strings(self.field))

    def __repr__(self) -> str:
        return (
            f"RegexMetadataFilter(field={self.field!r}, regex={self._regex!r}, "
            f"on_match={self.on_match.value}, case_sensitive={self._case_sensitive})"
        )
