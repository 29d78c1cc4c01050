"""lyricsync - keep a lyric display in step with a playback clock."""

__version__ = "0.1.0"

from .config import SyncConfig
from .core.components.sync import EngineSnapshot, LyricSyncEngine, VirtualScrollable
from .core.document import build_document, document_from_parser
from .core.serialization import document_from_timed_lines, load_document_json
from .exceptions import (
    ConfigError,
    DocumentError,
    LyricSyncError,
    ParseError,
    ValidationError,
)

__all__ = [
    "ConfigError",
    "DocumentError",
    "EngineSnapshot",
    "LyricSyncEngine",
    "LyricSyncError",
    "ParseError",
    "SyncConfig",
    "ValidationError",
    "VirtualScrollable",
    "build_document",
    "document_from_parser",
    "document_from_timed_lines",
    "load_document_json",
]
