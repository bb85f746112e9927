"""Multi-valued, case-insensitive document metadata."""

from collections.abc import Iterable, Iterator

DOC_REFERENCE = "document.reference"
DOC_CONTENT_TYPE = "document.contentType"
DOC_EMBEDDED_PARENT_REFERENCE = "document.embedded.parent.reference"
DOC_EMBEDDED_REFERENCE = "document.embedded.reference"


class Metadata:
    """Ordered mapping of field name to a list of string values.

    Lookups ignore case; the first spelling used for a field is the one kept
    for storage and iteration. A field without values does not exist.
    """

    def __init__(self, initial: dict[str, Iterable[str]] | None = None) -> None:
        self._fields: dict[str, tuple[str, list[str]]] = {}
        if initial:
            for name, values in initial.items():
                self.add_string(name, *values)

    @staticmethod
    def _key(name: str) -> str:
        return name.casefold()

    def get_strings(self, name: str) -> list[str]:
        """Return a copy of the values of *name*, empty when absent."""
        entry = self._fields.get(self._key(name))
        return list(entry[1]) if entry else []

    def get_string(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of *name*."""
        entry = self._fields.get(self._key(name))
        return entry[1][0] if entry else default

    def add_string(self, name: str, *values: str) -> None:
        """Append values to *name*, keeping existing ones."""
        if not values:
            return
        key = self._key(name)
        entry = self._fields.get(key)
        if entry is None:
            self._fields[key] = (name, [str(v) for v in values])
        else:
            entry[1].extend(str(v) for v in values)

    def set_string(self, name: str, *values: str) -> None:
        """Replace all values of *name*. No values removes the field."""
        self.remove(name)
        self.add_string(name, *values)

    def remove(self, name: str) -> list[str]:
        entry = self._fields.pop(self._key(name), None)
        return entry[1] if entry else []

    def merge(self, pairs: Iterable[tuple[str, str]]) -> int:
        """Append ``(field, value)`` pairs in order; blank field names are skipped.

        Returns:
            Number of values added.
        """
        added = 0
        for name, value in pairs:
            if not name or not name.strip():
                continue
            self.add_string(name, value)
            added += 1
        return added

    def fields(self) -> list[str]:
        return [name for name, _ in self._fields.values()]

    def items(self) -> Iterator[tuple[str, list[str]]]:
        for name, values in self._fields.values():
            yield name, list(values)

    def to_dict(self) -> dict[str, list[str]]:
        return dict(self.items())

    def copy(self) -> "Metadata":
        return Metadata(self.to_dict())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._key(name) in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields())

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Metadata):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Metadata({self.to_dict()!r})"
