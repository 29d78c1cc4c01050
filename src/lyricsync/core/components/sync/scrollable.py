"""Scroll capability interface and an in-memory, tick-driven implementation.

The ScrollCoordinator only ever talks to a ``Scrollable``; the concrete
view (terminal, GUI widget, web bridge) provides one. ``VirtualScrollable``
is a headless implementation advanced by the same clock ticks as the rest
of the engine, used by the CLI replay and the tests.
"""

import logging
import time
from enum import Enum
from typing import Callable, List, Optional, Protocol

from .easing import CubicBezier, EasingFunction, easing_from_string
from ....config import DEFAULT_EASING

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class GestureKind(str, Enum):
    """Origin of a scroll notification."""

    WHEEL = "wheel"
    TOUCH = "touch"
    DRAG = "drag"
    KEYBOARD = "keyboard"
    SCROLL = "scroll"  # bare scroll event; may echo a programmatic scroll

    @property
    def is_gesture(self) -> bool:
        return self is not GestureKind.SCROLL


class CancelableHandle(Protocol):
    """Handle to an in-flight scroll animation."""

    @property
    def done(self) -> bool: ...

    def cancel(self) -> None: ...


class Scrollable(Protocol):
    """What the coordinator needs from a scrolling view."""

    def get_offset(self) -> float: ...

    def animate_to(self, offset: float, duration_ms: int) -> CancelableHandle: ...

    def on_user_gesture(self, callback: Callable[[GestureKind], None]) -> None: ...


class ScrollAnimation:
    """Time-bounded interpolation from one offset to another."""

    def __init__(
        self,
        start_offset: float,
        target_offset: float,
        duration_ms: int,
        started_at: float,
        easing: Optional[EasingFunction] = None,
    ):
        self.start_offset = start_offset
        self.target_offset = target_offset
        self.duration_ms = max(0, int(duration_ms))
        self.started_at = started_at
        self.easing = easing or easing_from_string(DEFAULT_EASING)
        self.cancelled = False
        self.finished = self.duration_ms == 0

    @property
    def done(self) -> bool:
        return self.finished or self.cancelled

    def cancel(self) -> None:
        if not self.done:
            self.cancelled = True

    def progress(self, now: float) -> float:
        if self.duration_ms == 0:
            return 1.0
        elapsed = (now - self.started_at) * 1000.0
        return min(max(elapsed / self.duration_ms, 0.0), 1.0)

    def value_at(self, now: float) -> float:
        """Offset at wall-clock time ``now``; marks the animation finished at the end."""
        fraction = self.progress(now)
        if fraction >= 1.0:
            self.finished = True
            return self.target_offset
        change = self.target_offset - self.start_offset
        return self.start_offset + change * self.easing(fraction)


class VirtualScrollable:
    """Headless scroll view driven by explicit ``advance`` calls."""

    def __init__(
        self,
        offset: float = 0.0,
        clock: Clock = time.monotonic,
        easing: Optional[CubicBezier] = None,
    ):
        self.offset = offset
        self.clock = clock
        self.easing = easing or easing_from_string(DEFAULT_EASING)
        self.animation: Optional[ScrollAnimation] = None
        self._gesture_callbacks: List[Callable[[GestureKind], None]] = []

    def get_offset(self) -> float:
        return self.offset

    def animate_to(self, offset: float, duration_ms: int) -> ScrollAnimation:
        """Start an animation, replacing any that is still running."""
        if self.animation is not None and not self.animation.done:
            logger.debug(f"Replacing scroll animation to {self.animation.target_offset:.1f}")
            self.animation.cancel()
        self.animation = ScrollAnimation(
            self.offset, offset, duration_ms, self.clock(), self.easing
        )
        if self.animation.finished:
            self.offset = offset
        return self.animation

    def on_user_gesture(self, callback: Callable[[GestureKind], None]) -> None:
        self._gesture_callbacks.append(callback)

    @property
    def is_animating(self) -> bool:
        return self.animation is not None and not self.animation.done

    def advance(self, now: Optional[float] = None) -> float:
        """Move the running animation forward to ``now`` and return the offset."""
        if self.animation is not None and not self.animation.done:
            self.offset = self.animation.value_at(self.clock() if now is None else now)
        return self.offset

    def user_gesture(self, kind: GestureKind = GestureKind.WHEEL, delta: float = 0.0) -> None:
        """Simulate the user scrolling by ``delta``; interrupts any animation."""
        if kind.is_gesture and self.animation is not None:
            self.animation.cancel()
        self.offset = max(0.0, self.offset + delta)
        for callback in list(self._gesture_callbacks):
            callback(kind)
