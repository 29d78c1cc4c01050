"""Cubic-bezier easing curves for scroll animations."""

import logging
import re
from typing import Callable, Tuple

from ....config import DEFAULT_EASING

logger = logging.getLogger(__name__)

_BEZIER_RE = re.compile(r"^cubic-bezier\(\s*([^,]+),\s*([^,]+),\s*([^,]+),\s*([^)]+)\)$")

# CSS keyword easings
NAMED_EASINGS = {
    "linear": (0.0, 0.0, 1.0, 1.0),
    "ease": (0.25, 0.1, 0.25, 1.0),
    "ease-in": (0.42, 0.0, 1.0, 1.0),
    "ease-out": (0.0, 0.0, 0.58, 1.0),
    "ease-in-out": (0.42, 0.0, 0.58, 1.0),
}

EasingFunction = Callable[[float], float]


class CubicBezier:
    """CSS-style cubic-bezier timing function with fixed end points (0,0) and (1,1)."""

    NEWTON_ITERATIONS = 8
    EPSILON = 1e-6

    def __init__(self, p1x: float, p1y: float, p2x: float, p2y: float):
        if not (0.0 <= p1x <= 1.0 and 0.0 <= p2x <= 1.0):
            raise ValueError("Bezier x control points must lie in [0, 1]")
        self.points = (p1x, p1y, p2x, p2y)
        # Polynomial coefficients
        self._cx = 3.0 * p1x
        self._bx = 3.0 * (p2x - p1x) - self._cx
        self._ax = 1.0 - self._cx - self._bx
        self._cy = 3.0 * p1y
        self._by = 3.0 * (p2y - p1y) - self._cy
        self._ay = 1.0 - self._cy - self._by

    def _x(self, t: float) -> float:
        return ((self._ax * t + self._bx) * t + self._cx) * t

    def _y(self, t: float) -> float:
        return ((self._ay * t + self._by) * t + self._cy) * t

    def _dx(self, t: float) -> float:
        return (3.0 * self._ax * t + 2.0 * self._bx) * t + self._cx

    def _solve_t(self, x: float) -> float:
        t = x
        for _ in range(self.NEWTON_ITERATIONS):
            err = self._x(t) - x
            if abs(err) < self.EPSILON:
                return t
            slope = self._dx(t)
            if abs(slope) < self.EPSILON:
                break
            t -= err / slope

        # Newton did not converge: bisect
        low, high = 0.0, 1.0
        t = x
        while low < high:
            err = self._x(t) - x
            if abs(err) < self.EPSILON:
                return t
            if err > 0:
                high = t
            else:
                low = t
            t = (low + high) / 2.0
            if high - low < self.EPSILON:
                break
        return t

    def __call__(self, progress: float) -> float:
        if progress <= 0.0:
            return 0.0
        if progress >= 1.0:
            return 1.0
        return self._y(self._solve_t(progress))


def parse_cubic_bezier(spec: str) -> Tuple[float, float, float, float]:
    """Parse "cubic-bezier(a, b, c, d)" or a CSS keyword into control points.

    Raises:
        ValueError: If the string is not a valid easing.
    """
    text = spec.strip().lower()
    if text in NAMED_EASINGS:
        return NAMED_EASINGS[text]
    match = _BEZIER_RE.match(text)
    if not match:
        raise ValueError(f"Invalid easing: {spec!r}")
    p1x, p1y, p2x, p2y = (float(v) for v in match.groups())
    if not (0.0 <= p1x <= 1.0 and 0.0 <= p2x <= 1.0):
        raise ValueError(f"Easing x values must be within [0, 1]: {spec!r}")
    return p1x, p1y, p2x, p2y


def easing_from_string(spec: str) -> CubicBezier:
    """Build an easing function, falling back to the default curve on bad input."""
    try:
        return CubicBezier(*parse_cubic_bezier(spec))
    except ValueError as e:
        logger.warning(f"{e}; falling back to {DEFAULT_EASING}")
        return CubicBezier(*parse_cubic_bezier(DEFAULT_EASING))
