"""Core functionality modules."""

from .document import build_document, document_from_parser, enrich_document
from .models import (
    Agent,
    AgentType,
    BackgroundPosition,
    Division,
    Document,
    IndexedLine,
    Interlude,
    Line,
    PlaybackState,
    ScrollMode,
    ScrollOutput,
    ScrollState,
    Word,
    WordKey,
    WordTimingMode,
    WordTrack,
)

__all__ = [
    "Agent",
    "AgentType",
    "BackgroundPosition",
    "Division",
    "Document",
    "IndexedLine",
    "Interlude",
    "Line",
    "PlaybackState",
    "ScrollMode",
    "ScrollOutput",
    "ScrollState",
    "Word",
    "WordKey",
    "WordTimingMode",
    "WordTrack",
    "build_document",
    "document_from_parser",
    "enrich_document",
]
