"""Tick-level facade tying the sync components together.

Per document (cached): LineIndex -> ClusterEngine -> InterludeDetector.
Per tick: PlaybackStateResolver -> ScrollCoordinator -> snapshot.
"""

import logging
import time
import weakref
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ....config import SyncConfig
from ...models import Document, Interlude, PlaybackState, ScrollOutput
from .agents import assign_agent_sides, has_agents
from .cluster import ClusterEngine, ClusterResult
from .easing import easing_from_string
from .interlude import detect_interludes
from .layout import LyricLayout, ViewMetrics
from .line_index import LineIndex, build_line_index
from .resolver import PlaybackStateResolver
from .scroll import ScrollCoordinator
from .scrollable import Clock, GestureKind, Scrollable, VirtualScrollable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedDocument:
    """Per-document derived data, computed once and reused every tick."""

    index: LineIndex
    clusters: ClusterResult
    interludes: Tuple[Interlude, ...]
    agent_sides: Dict[str, str] = field(default_factory=dict)
    has_agents: bool = False

    @property
    def lines(self):
        return self.clusters.lines


def prepare_document(document: Document, short_line_group_threshold: float) -> PreparedDocument:
    """Index, cluster and scan a document for interludes.

    The result never references ``document`` itself, so a cache entry
    cannot keep its own key alive. A document without lines has nothing
    to scroll to and gets no interludes.
    """
    index = build_line_index(document)
    clusters = ClusterEngine(short_line_group_threshold).run(index)
    with_agents = has_agents(document, clusters.lines)
    return PreparedDocument(
        index=index,
        clusters=clusters,
        interludes=() if index.is_empty else tuple(detect_interludes(document.divisions)),
        agent_sides=assign_agent_sides(document, clusters.lines) if with_agents else {},
        has_agents=with_agents,
    )


class PreparedDocumentCache:
    """Cache of prepared documents keyed by document identity and threshold.

    Entries are dropped as soon as their document is garbage collected.
    """

    def __init__(self):
        self._entries: Dict[Tuple[int, float], Tuple[weakref.ref, PreparedDocument]] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, document: Document, short_line_group_threshold: float) -> PreparedDocument:
        key = (id(document), short_line_group_threshold)
        entry = self._entries.get(key)
        if entry is not None and entry[0]() is document:
            self.hits += 1
            return entry[1]

        self.misses += 1
        prepared = prepare_document(document, short_line_group_threshold)
        self._entries[key] = (weakref.ref(document, self._evict_callback(key)), prepared)
        return prepared

    def _evict_callback(self, key: Tuple[int, float]):
        cache_ref = weakref.ref(self)

        def evict(ref: weakref.ref) -> None:
            cache = cache_ref()
            if cache is None:
                return
            entry = cache._entries.get(key)
            # id() may already be reused by a newer document under the same key
            if entry is not None and entry[0] is ref:
                del cache._entries[key]

        return evict

    def clear(self) -> None:
        self._entries.clear()


_default_cache = PreparedDocumentCache()


@dataclass(frozen=True)
class EngineSnapshot:
    """Read-only per-tick output for the presentation layer."""

    playback: PlaybackState
    scroll: ScrollOutput
    agent_sides: Dict[str, str]
    progress_direction: str
    has_word_timing: bool
    has_agents: bool = False


class LyricSyncEngine:
    """Resolve playback states and drive scrolling for one loaded document."""

    def __init__(
        self,
        document: Document,
        config: Optional[SyncConfig] = None,
        scrollable: Optional[Scrollable] = None,
        metrics: Optional[ViewMetrics] = None,
        clock: Clock = time.monotonic,
        cache: Optional[PreparedDocumentCache] = None,
    ):
        self.config = config or SyncConfig()
        self.clock = clock
        self.cache = cache or _default_cache
        self._owns_scrollable = scrollable is None
        self.scrollable = (
            scrollable
            if scrollable is not None
            else VirtualScrollable(clock=clock, easing=easing_from_string(self.config.custom_easing))
        )
        self._custom_metrics = metrics
        self.last_snapshot: Optional[EngineSnapshot] = None
        self.scrollable.on_user_gesture(self.user_scroll)
        self.load(document)

    def load(self, document: Document) -> None:
        """Switch to another document, resetting scroll state."""
        self.document = document
        self._prepare()
        self.coordinator = ScrollCoordinator(
            self.scrollable,
            self.metrics,
            self.resolver,
            self.config,
            clock=self.clock,
            subscribe=False,
        )
        logger.info(
            f"Loaded document: {len(self.prepared.lines)} line(s), "
            f"{self.prepared.clusters.cluster_count} cluster(s), "
            f"{len(self.prepared.interludes)} interlude(s)"
        )

    def _prepare(self) -> None:
        self.prepared = self.cache.get(self.document, self.config.short_line_group_threshold)
        self.resolver = PlaybackStateResolver(
            self.prepared.lines,
            self.prepared.interludes,
            preactivate_gap_seconds=self.config.preactivate_gap_seconds,
            preactivate_elapsed_ratio=self.config.preactivate_elapsed_ratio,
        )
        self.metrics = self._custom_metrics or LyricLayout(
            self.prepared.index, self.prepared.interludes
        )

    def set_config(self, config: SyncConfig) -> None:
        """Apply new settings without disturbing scroll state.

        Only a changed grouping threshold reclusters the document; the
        running coordinator keeps its mode, cooldown and animation.
        """
        previous = self.config
        self.config = config
        if config.short_line_group_threshold != previous.short_line_group_threshold:
            self._prepare()
            self.coordinator.resolver = self.resolver
            self.coordinator.metrics = self.metrics
            logger.debug(
                f"Reclustered at {config.short_line_group_threshold}s: "
                f"{self.prepared.clusters.cluster_count} cluster(s)"
            )
        else:
            self.resolver.preactivate_gap_seconds = config.preactivate_gap_seconds
            self.resolver.preactivate_elapsed_ratio = config.preactivate_elapsed_ratio
        self.coordinator.config = config
        if config.custom_easing != previous.custom_easing and self._owns_scrollable:
            self.scrollable.easing = easing_from_string(config.custom_easing)

    def adjusted_time(self, current_time: float) -> float:
        return current_time + self.config.lyric_offset_seconds

    def resolve(self, current_time: float) -> PlaybackState:
        """Playback state at a player time, without touching scroll state."""
        return self.resolver.resolve(self.adjusted_time(current_time))

    def tick(self, current_time: float) -> EngineSnapshot:
        """Process one clock tick and return the presentation snapshot."""
        advance = getattr(self.scrollable, "advance", None)
        if callable(advance):
            advance()
        playback = self.resolve(current_time)
        scroll = self.coordinator.on_tick(playback)
        self.last_snapshot = EngineSnapshot(
            playback=playback,
            scroll=scroll,
            agent_sides=self.prepared.agent_sides,
            progress_direction=self.config.progress_direction.value,
            has_word_timing=self.prepared.index.has_word_timing,
            has_agents=self.prepared.has_agents,
        )
        return self.last_snapshot

    def user_scroll(self, kind: GestureKind = GestureKind.WHEEL) -> None:
        self.coordinator.on_user_scroll(kind)
