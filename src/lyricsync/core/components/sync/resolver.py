"""Map a playback instant to the lyric display state.

The resolver is built once per document (after clustering) and then
queried on every clock tick. It keeps no memory of earlier queries, so
seeks in either direction need no special handling.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from ....config import PREACTIVATE_ELAPSED_RATIO, PREACTIVATE_GAP_SECONDS
from ...models import IndexedLine, Interlude, PlaybackState, WordKey, WordTrack
from ...timing import progress_at
from .interlude import find_active_interlude

logger = logging.getLogger(__name__)


class PlaybackStateResolver:
    """Answers "what is on screen at time t" for one clustered document."""

    def __init__(
        self,
        lines: Sequence[IndexedLine],
        interludes: Sequence[Interlude] = (),
        preactivate_gap_seconds: float = PREACTIVATE_GAP_SECONDS,
        preactivate_elapsed_ratio: float = PREACTIVATE_ELAPSED_RATIO,
    ):
        self.lines = tuple(lines)
        self.interludes = tuple(interludes)
        self.preactivate_gap_seconds = preactivate_gap_seconds
        self.preactivate_elapsed_ratio = preactivate_elapsed_ratio
        self._begins = np.array([line.begin for line in self.lines], dtype=float)
        self._group_ends = np.array([line.group_end for line in self.lines], dtype=float)

    def active_lines(self, time: float) -> List[int]:
        """Ids of lines with begin <= time < group_end, in playback order."""
        if not self.lines:
            return []
        mask = (self._begins <= time) & (self._group_ends > time)
        return np.flatnonzero(mask).tolist()

    def preactivated_line(self, time: float) -> Optional[int]:
        """The upcoming line to focus while nothing is active, if any.

        Tightly packed lines hand over at once; across a longer gap the
        next line is only picked once a share of the gap has elapsed.
        """
        prev = int(np.searchsorted(self._begins, time, side="right")) - 1
        nxt = prev + 1
        if prev < 0 or nxt >= len(self.lines):
            return None
        prev_end = float(self._group_ends[prev])
        if time < prev_end:
            return None
        gap = float(self._begins[nxt]) - prev_end
        if gap <= 0:
            return nxt
        if gap < self.preactivate_gap_seconds:
            return nxt
        if (time - prev_end) / gap > self.preactivate_elapsed_ratio:
            return nxt
        return None

    def line_progress(self, line: IndexedLine, time: float) -> float:
        """Sung fraction of a line, falling back to linear line timing."""
        words = line.source.words
        if words:
            return progress_at(time, words[0].begin, max(w.end for w in words))
        return progress_at(time, line.begin, line.group_end)

    def _word_progress(self, line: IndexedLine, time: float, out: Dict[WordKey, float]) -> None:
        for track in WordTrack:
            for idx, word in enumerate(line.source.track(track)):
                out[WordKey(line.line_id, track, idx)] = progress_at(time, word.begin, word.end)

    def resolve(self, adjusted_time: float) -> PlaybackState:
        """Compute the display state at ``adjusted_time``. Never raises."""
        # Without lines there is nothing to hold an interlude marker against.
        if not self.lines:
            return PlaybackState(time=adjusted_time)

        active = self.active_lines(adjusted_time)
        past_mask = self._group_ends <= adjusted_time
        state = PlaybackState(
            time=adjusted_time,
            active_cluster=active,
            past=dict(enumerate(past_mask.tolist())),
            active_interlude=find_active_interlude(self.interludes, adjusted_time),
        )

        if active:
            cluster_end = float(self._group_ends[active].max())
            state.cluster_end = cluster_end
            first = self.lines[active[0]]
            state.cluster_progress = progress_at(adjusted_time, first.begin, cluster_end)
            for line_id in active:
                line = self.lines[line_id]
                state.past[line_id] = False
                state.line_progress[line_id] = self.line_progress(line, adjusted_time)
                self._word_progress(line, adjusted_time, state.word_progress)
        else:
            state.preactivated_line = self.preactivated_line(adjusted_time)

        return state

    def next_event_gap(self, line_id: int, cluster: Sequence[int], same_begin_eps: float) -> Optional[float]:
        """Seconds from a line's begin to the next line outside ``cluster``.

        Lines starting within ``same_begin_eps`` of the base line are
        skipped. Returns None when no such line exists.
        """
        base = self.lines[line_id]
        members = set(cluster)
        for nxt in self.lines[line_id + 1:]:
            if nxt.line_id in members:
                continue
            gap = nxt.begin - base.begin
            if gap < same_begin_eps:
                continue
            return max(gap, 0.01)
        return None
