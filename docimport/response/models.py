import weakref
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from docimport.document.models import Document


class Status(str, Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    ERROR = "error"


@dataclass(frozen=True)
class ImporterStatus:
    """Outcome of importing one document."""

    status: Status = Status.SUCCESS
    description: str = ""
    exception: BaseException | None = None

    @property
    def is_success(self) -> bool:
        return self.status is Status.SUCCESS

    @property
    def is_rejected(self) -> bool:
        return self.status is Status.REJECTED

    @property
    def is_error(self) -> bool:
        return self.status is Status.ERROR

    @property
    def root_cause(self) -> BaseException | None:
        """Innermost exception in the ``__cause__`` chain."""
        exc = self.exception
        while exc is not None and exc.__cause__ is not None:
            exc = exc.__cause__
        return exc


class ImporterResponse:
    """Result node of the response tree.

    Children are owned through :attr:`nested_responses`; the parent link is a
    weak reference used for lookups only.
    """

    def __init__(
        self,
        reference: str,
        status: ImporterStatus | None = None,
        document: Document | None = None,
    ) -> None:
        self.reference = reference
        self.status = status or ImporterStatus()
        self.document = document
        self._nested: list[ImporterResponse] = []
        self._parent: weakref.ref[ImporterResponse] | None = None

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    @property
    def parent(self) -> "ImporterResponse | None":
        return self._parent() if self._parent is not None else None

    @property
    def nested_responses(self) -> tuple["ImporterResponse", ...]:
        return tuple(self._nested)

    def add_nested_response(self, response: "ImporterResponse") -> None:
        if response is self or response in self.ancestors():
            raise ValueError("A response cannot be nested under itself or a descendant")
        current_parent = response.parent
        if current_parent is not None:
            current_parent.remove_nested_response(response.reference)
        response._parent = weakref.ref(self)
        self._nested.append(response)

    def remove_nested_response(self, reference: str) -> "ImporterResponse | None":
        for index, nested in enumerate(self._nested):
            if nested.reference == reference:
                del self._nested[index]
                nested._parent = None
                return nested
        return None

    def ancestors(self) -> list["ImporterResponse"]:
        found: list[ImporterResponse] = []
        node = self.parent
        while node is not None:
            found.append(node)
            node = node.parent
        return found

    def walk(self) -> Iterator["ImporterResponse"]:
        """Yield this response and every descendant, depth first, in order."""
        yield self
        for nested in self._nested:
            yield from nested.walk()

    def depth(self) -> int:
        """Height of the tree rooted here (a lone response has depth 1)."""
        return 1 + max((nested.depth() for nested in self._nested), default=0)

    def all_successful(self) -> bool:
        """True when this response succeeded and no descendant is in error."""
        return self.is_success and not any(r.status.is_error for r in self.walk())

    def close(self) -> None:
        """Release the content of every document in the tree."""
        for response in self.walk():
            if response.document is not None:
                response.document.release()

    def __repr__(self) -> str:
        return (
            f"ImporterResponse(reference={self.reference!r}, "
            f"status={self.status.status.value}, nested={len(self._nested)})"
        )
