"""Scroll arbitration between automatic following and the user.

States:
    FOLLOWING       the view tracks the focus line of each tick.
    USER_OVERRIDE   a user gesture suspended following until a cooldown
                    (wall-clock time) expires.
    INTERLUDE_HOLD  the interlude marker was centred once; following is
                    suspended until the interlude ends.

Interlude entry clears any pending override, so the two suspended states
never coexist.
"""

import logging
import time
from typing import Optional

from ....config import (
    DEFAULT_NEXT_EVENT_GAP,
    SAME_BEGIN_EPS,
    SAME_TARGET_DEBOUNCE_MS,
    SCROLL_EPSILON_PX,
    SyncConfig,
)
from ...models import Interlude, PlaybackState, ScrollMode, ScrollOutput, ScrollState
from ...timing import interlude_scroll_duration_ms, scroll_duration_ms
from .layout import ViewMetrics
from .resolver import PlaybackStateResolver
from .scrollable import CancelableHandle, Clock, GestureKind, Scrollable

logger = logging.getLogger(__name__)


class ScrollCoordinator:
    """Turns playback states and user gestures into scroll animations."""

    def __init__(
        self,
        scrollable: Scrollable,
        metrics: ViewMetrics,
        resolver: PlaybackStateResolver,
        config: Optional[SyncConfig] = None,
        clock: Clock = time.monotonic,
        subscribe: bool = True,
    ):
        self.scrollable = scrollable
        self.metrics = metrics
        self.resolver = resolver
        self.config = config or SyncConfig()
        self.clock = clock
        self.state = ScrollState()
        self.is_programmatic_scroll = False
        self.target_offset: Optional[float] = None
        self.animation_duration_ms = 0
        self._handle: Optional[CancelableHandle] = None
        self._last_interlude_key: Optional[str] = None
        self._last_tick_time: Optional[float] = None
        if subscribe:
            scrollable.on_user_gesture(self.on_user_scroll)

    @property
    def mode(self) -> ScrollMode:
        return self.state.mode

    @property
    def is_animating(self) -> bool:
        return self._handle is not None and not self._handle.done

    def snapshot(self) -> ScrollOutput:
        return ScrollOutput(
            target_offset=self.target_offset,
            animation_duration_ms=self.animation_duration_ms,
            is_animating=self.is_animating,
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_user_scroll(self, kind: GestureKind = GestureKind.WHEEL) -> None:
        """Suspend following after a user gesture.

        Bare scroll notifications that arrive while our own animation runs
        are echoes of it and are ignored.
        """
        self._refresh_guard()
        if not kind.is_gesture and self.is_programmatic_scroll:
            return
        if self.state.interlude_hold_active:
            logger.debug(f"Ignoring {kind.value} gesture during interlude hold")
            return

        now = self.clock()
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self.is_programmatic_scroll = False

        until = now + self.config.user_scroll_cooldown_seconds
        if self.state.suppress_until is None or until > self.state.suppress_until:
            self.state.suppress_until = until
        if self.state.auto_scroll_enabled:
            logger.debug(f"Auto-follow suspended by {kind.value} gesture")
        self.state.auto_scroll_enabled = False

    def on_tick(self, playback: PlaybackState) -> ScrollOutput:
        """Advance the scroll state machine by one tick."""
        now = self.clock()
        self._refresh_guard()
        self._expire_cooldown(now)

        if self._last_tick_time is not None and playback.time < self._last_tick_time:
            logger.debug(f"Backward seek to {playback.time:.2f}s; retargeting")
            self.state.last_scrolled_line_id = None
            self.state.last_scroll_timestamp = None
        self._last_tick_time = playback.time

        if playback.active_interlude is not None:
            self._enter_interlude(playback.active_interlude)
            return self.snapshot()
        self._leave_interlude()

        if self.state.auto_scroll_enabled:
            self._follow(playback, now)
        return self.snapshot()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _refresh_guard(self) -> None:
        if self._handle is not None and self._handle.done:
            self._handle = None
            self.is_programmatic_scroll = False

    def _expire_cooldown(self, now: float) -> None:
        until = self.state.suppress_until
        if until is not None and now >= until:
            self.state.suppress_until = None
            self.state.auto_scroll_enabled = True
            logger.debug("Scroll cooldown expired; auto-follow resumed")

    def _enter_interlude(self, interlude: Interlude) -> None:
        if self._last_interlude_key == interlude.key:
            return
        self._last_interlude_key = interlude.key
        self.state.suppress_until = None
        self.state.auto_scroll_enabled = False
        self.state.interlude_hold_active = True
        logger.debug(f"Entering interlude {interlude.key}")
        self._center_interlude(interlude)

    def _leave_interlude(self) -> None:
        self._last_interlude_key = None
        if not self.state.interlude_hold_active:
            return
        self.state.interlude_hold_active = False
        self.state.auto_scroll_enabled = True
        self.state.last_scrolled_line_id = None
        logger.debug("Interlude over; auto-follow resumed")

    def _anchor_offset(self, top: float, height: float) -> float:
        anchor_y = self.metrics.viewport_height * self.config.anchor_ratio
        offset = top + height / 2.0 - anchor_y
        max_offset = max(0.0, self.metrics.content_height - self.metrics.viewport_height)
        return min(max(offset, 0.0), max_offset)

    def _center_interlude(self, interlude: Interlude) -> None:
        box = self.metrics.interlude_box(interlude)
        if box is None:
            return
        offset = self._anchor_offset(*box)
        self._start_animation(offset, interlude_scroll_duration_ms(interlude.duration))

    def _follow(self, playback: PlaybackState, now: float) -> None:
        target = playback.focus_line
        if target is None:
            return
        box = self.metrics.line_box(target)
        if box is None:
            return

        last_ts = self.state.last_scroll_timestamp
        if (
            target == self.state.last_scrolled_line_id
            and last_ts is not None
            and (now - last_ts) * 1000.0 < SAME_TARGET_DEBOUNCE_MS
        ):
            return

        offset = self._anchor_offset(*box)
        if self.is_animating:
            if self.target_offset is not None and abs(offset - self.target_offset) < SCROLL_EPSILON_PX:
                return
        elif abs(offset - self.scrollable.get_offset()) < SCROLL_EPSILON_PX:
            self.state.last_scrolled_line_id = target
            return

        gap = self.resolver.next_event_gap(target, playback.active_cluster, SAME_BEGIN_EPS)
        duration = scroll_duration_ms(DEFAULT_NEXT_EVENT_GAP if gap is None else gap)
        self._start_animation(offset, duration)
        self.state.last_scrolled_line_id = target
        self.state.last_scroll_timestamp = now

    def _start_animation(self, offset: float, duration_ms: int) -> None:
        """Start a scroll, replacing whatever animation is still running."""
        if self._handle is not None and not self._handle.done:
            self._handle.cancel()
        self._handle = self.scrollable.animate_to(offset, duration_ms)
        self.is_programmatic_scroll = not self._handle.done
        self.target_offset = offset
        self.animation_duration_ms = duration_ms
