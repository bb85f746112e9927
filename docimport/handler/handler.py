"""Condition-gated handler envelope.

A :class:`Handler` pairs a kind tag with an action payload and a set of
restrict-to conditions. :meth:`Handler.apply` checks the conditions, then
dispatches on the kind. Skipped handlers have no effect: a skipped filter
accepts, a skipped splitter produces no children.
"""

from dataclasses import dataclass, field
from enum import Enum

from docimport.document.models import Document
from docimport.handler.base import (
    DocumentFilter,
    DocumentSplitter,
    DocumentTagger,
    DocumentTransformer,
    HandlerAction,
    OnMatch,
)
from docimport.handler.condition import RestrictTo, matches
from docimport.handler.exceptions import HandlerError
from docimport.logging.logger import Log


class HandlerKind(str, Enum):
    FILTER = "filter"
    TAGGER = "tagger"
    TRANSFORMER = "transformer"
    SPLITTER = "splitter"


_ACTION_TYPES: dict[HandlerKind, type] = {
    HandlerKind.FILTER: DocumentFilter,
    HandlerKind.TAGGER: DocumentTagger,
    HandlerKind.TRANSFORMER: DocumentTransformer,
    HandlerKind.SPLITTER: DocumentSplitter,
}


@dataclass
class HandlerOutcome:
    applied: bool
    accepted: bool = True
    children: list[Document] = field(default_factory=list)


@dataclass(frozen=True)
class Handler:
    kind: HandlerKind
    action: HandlerAction
    restrict_to: tuple[RestrictTo, ...] = ()
    name: str = ""

    def __post_init__(self) -> None:
        expected = _ACTION_TYPES[self.kind]
        if not isinstance(self.action, expected):
            raise TypeError(
                f"{self.kind.value} handler requires a {expected.__name__}, "
                f"got {type(self.action).__name__}"
            )
        if not self.name:
            object.__setattr__(self, "name", type(self.action).__name__)

    @classmethod
    def filter(cls, action: DocumentFilter, *restrict_to: RestrictTo, name: str = "") -> "Handler":
        return cls(HandlerKind.FILTER, action, tuple(restrict_to), name)

    @classmethod
    def tagger(cls, action: DocumentTagger, *restrict_to: RestrictTo, name: str = "") -> "Handler":
        return cls(HandlerKind.TAGGER, action, tuple(restrict_to), name)

    @classmethod
    def transformer(
        cls, action: DocumentTransformer, *restrict_to: RestrictTo, name: str = ""
    ) -> "Handler":
        return cls(HandlerKind.TRANSFORMER, action, tuple(restrict_to), name)

    @classmethod
    def splitter(
        cls, action: DocumentSplitter, *restrict_to: RestrictTo, name: str = ""
    ) -> "Handler":
        return cls(HandlerKind.SPLITTER, action, tuple(restrict_to), name)

    def is_applicable(self, doc: Document) -> bool:
        return matches(self.restrict_to, doc.reference, doc.metadata)

    def apply(self, doc: Document, parsed: bool) -> HandlerOutcome:
        """Run this handler against *doc*.

        Raises:
            HandlerError: if the conditions or the action fail.
        """
        try:
            if not self.is_applicable(doc):
                Log.debug(f"{self.name} skipped for '{doc.reference}' (restrict-to mismatch)")
                return HandlerOutcome(applied=False)
            return self._dispatch(doc, parsed)
        except HandlerError:
            raise
        except Exception as exc:
            raise HandlerError(self.name, doc.reference, str(exc)) from exc

    def _dispatch(self, doc: Document, parsed: bool) -> HandlerOutcome:
        action = self.action
        if self.kind is HandlerKind.FILTER:
            assert isinstance(action, DocumentFilter)
            matched = action.is_matched(doc, parsed)
            return HandlerOutcome(
                applied=True, accepted=matched == (action.on_match is OnMatch.INCLUDE)
            )
        if self.kind is HandlerKind.TAGGER:
            assert isinstance(action, DocumentTagger)
            action.tag(doc, parsed)
            return HandlerOutcome(applied=True)
        if self.kind is HandlerKind.TRANSFORMER:
            assert isinstance(action, DocumentTransformer)
            action.transform(doc, parsed)
            return HandlerOutcome(applied=True)
        assert isinstance(action, DocumentSplitter)
        children = action.split(doc, parsed)
        return HandlerOutcome(applied=True, children=list(children or []))

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.name}"
