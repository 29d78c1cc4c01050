"""Sync component facade."""

from .agents import assign_agent_sides, has_agents
from .cluster import ClusterEngine, ClusterResult, UnionFind
from .easing import CubicBezier, easing_from_string, parse_cubic_bezier
from .engine import (
    EngineSnapshot,
    LyricSyncEngine,
    PreparedDocument,
    PreparedDocumentCache,
    prepare_document,
)
from .interlude import detect_interludes, find_active_interlude
from .layout import LyricLayout, ViewMetrics
from .line_index import LineIndex, build_line_index
from .resolver import PlaybackStateResolver
from .scroll import ScrollCoordinator
from .scrollable import (
    CancelableHandle,
    GestureKind,
    Scrollable,
    ScrollAnimation,
    VirtualScrollable,
)

__all__ = [
    "CancelableHandle",
    "ClusterEngine",
    "ClusterResult",
    "CubicBezier",
    "EngineSnapshot",
    "GestureKind",
    "LineIndex",
    "LyricLayout",
    "LyricSyncEngine",
    "PlaybackStateResolver",
    "PreparedDocument",
    "PreparedDocumentCache",
    "ScrollAnimation",
    "ScrollCoordinator",
    "Scrollable",
    "UnionFind",
    "ViewMetrics",
    "VirtualScrollable",
    "assign_agent_sides",
    "build_line_index",
    "detect_interludes",
    "easing_from_string",
    "find_active_interlude",
    "has_agents",
    "parse_cubic_bezier",
    "prepare_document",
]
