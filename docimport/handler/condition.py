from dataclasses import dataclass, field

from docimport.document.metadata import DOC_REFERENCE, Metadata
from docimport.fields.patterns import PatternCache


@dataclass(frozen=True)
class RestrictTo:
    """Field/pattern predicate deciding whether a handler applies to a document.

    The pattern must match a whole field value. ``document.reference`` always
    resolves to the document reference, even when absent from the metadata.
    """

    field: str
    pattern: str
    case_sensitive: bool = False
    _cache: PatternCache = field(
        default_factory=PatternCache, init=False, repr=False, compare=False, hash=False
    )

    def values(self, reference: str, metadata: Metadata) -> list[str]:
        values = metadata.get_strings(self.field)
        if not values and self.field.casefold() == DOC_REFERENCE.casefold():
            return [reference]
        return values

    def matches(self, reference: str, metadata: Metadata) -> bool:
        compiled = self._cache.get(self.pattern, self.case_sensitive)
        return any(compiled.fullmatch(value) for value in self.values(reference, metadata))


def matches(
    conditions: tuple[RestrictTo, ...] | list[RestrictTo],
    reference: str,
    metadata: Metadata,
) -> bool:
    """True when *conditions* is empty or any one of them matches."""
    if not conditions:
        return True
    return any(condition.matches(reference, metadata) for condition in conditions)
