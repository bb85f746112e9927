from docimport.handler.base import (
    DocumentFilter,
    DocumentSplitter,
    DocumentTagger,
    DocumentTransformer,
    OnMatch,
)
from docimport.handler.condition import RestrictTo, matches
from docimport.handler.handler import Handler, HandlerKind, HandlerOutcome

__all__ = [
    "DocumentFilter",
    "DocumentSplitter",
    "DocumentTagger",
    "DocumentTransformer",
    "Handler",
    "HandlerKind",
    "HandlerOutcome",
    "OnMatch",
    "RestrictTo",
    "matches",
]
