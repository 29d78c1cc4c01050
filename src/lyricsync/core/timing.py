"""Time-code parsing, interval normalization and progress math.

This module handles:
- Parsing clock-style time codes ("1:02.5", "00:01:02.500", "62.5")
- Normalizing malformed intervals to zero-duration ranges
- Word and line progress fractions
- Step functions that map upcoming-event gaps to animation durations
"""

import logging
import math
import re
from typing import Any, Optional, Tuple

logger = logging.getLogger(__name__)

# ----------------------
# Time code regexes
# ----------------------
_HMS_RE = re.compile(r"^(?P<h>\d+):(?P<m>\d+):(?P<s>\d+)(?:\.(?P<frac>\d*))?$")
_MS_RE = re.compile(r"^(?P<m>\d+):(?P<s>\d+)(?:\.(?P<frac>\d*))?$")
_SECONDS_RE = re.compile(r"^(?P<s>\d+(?:\.\d*)?)s?$")

# (upper bound of gap in seconds, duration in ms); the last entry catches the rest
_SCROLL_DURATION_STEPS = (
    (0.2, 150),
    (0.3, 200),
    (0.4, 250),
    (0.5, 300),
    (0.6, 350),
    (0.7, 400),
    (0.8, 450),
    (0.9, 500),
    (1.0, 600),
)
_SCROLL_DURATION_MAX = 850

_INTERLUDE_DURATION_STEPS = (
    (0.2, 150),
    (0.5, 300),
    (1.0, 500),
)
_INTERLUDE_DURATION_MAX = 800


def _fraction(frac: Optional[str]) -> float:
    if not frac:
        return 0.0
    return int(frac) / (10 ** len(frac))


def parse_time_code(value: Any) -> Optional[float]:
    """Parse a time code or number into seconds.

    Returns None when the value cannot be understood.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip()
    if not text:
        return None

    match = _HMS_RE.match(text)
    if match:
        return (
            int(match["h"]) * 3600
            + int(match["m"]) * 60
            + int(match["s"])
            + _fraction(match["frac"])
        )

    match = _MS_RE.match(text)
    if match:
        return int(match["m"]) * 60 + int(match["s"]) + _fraction(match["frac"])

    match = _SECONDS_RE.match(text)
    if match:
        return float(match["s"])

    return None


def is_valid_time(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value >= 0


def normalize_interval(
    begin: Optional[float], end: Optional[float], context: str = ""
) -> Tuple[float, float]:
    """Return a well-formed (begin, end) pair.

    An unusable begin collapses the interval to (0, 0). An unusable end, or one before begin,
    collapses the interval to zero duration at begin. Logs a warning
    whenever something had to be repaired.
    """
    if not is_valid_time(begin):
        fixed_begin = fixed_end = 0.0
    elif not is_valid_time(end) or end < begin:
        fixed_begin = fixed_end = begin
    else:
        fixed_begin, fixed_end = begin, end

    if fixed_begin != begin or fixed_end != end:
        logger.warning(
            f"Malformed time range {begin!r}-{end!r}{' in ' + context if context else ''}; "
            f"using {fixed_begin:.3f}-{fixed_end:.3f}"
        )
    return float(fixed_begin), float(fixed_end)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(high, max(low, value))


def progress_at(time: float, begin: float, end: float) -> float:
    """Fraction of [begin, end] elapsed at time, clamped to [0, 1].

    Zero-length (or inverted) intervals are instantaneous: 0 before
    begin, 1 from begin onward.
    """
    if end <= begin:
        return 1.0 if time >= begin else 0.0
    return clamp((time - begin) / (end - begin))


def scroll_duration_ms(next_event_gap: float) -> int:
    """Scroll animation length for the time left until the next event."""
    for bound, duration in _SCROLL_DURATION_STEPS:
        if next_event_gap < bound:
            return duration
    return _SCROLL_DURATION_MAX


def interlude_scroll_duration_ms(interlude_length: float) -> int:
    """Animation length used when centring an interlude marker."""
    for bound, duration in _INTERLUDE_DURATION_STEPS:
        if interlude_length < bound:
            return duration
    return _INTERLUDE_DURATION_MAX


def format_time(seconds: float) -> str:
    """Format seconds as m:ss.xx for logs and CLI output."""
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)
    minutes = int(seconds // 60)
    return f"{sign}{minutes}:{seconds - minutes * 60:05.2f}"
