"""Configuration settings for lyricsync."""

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from .exceptions import ConfigError

# Timing (can be overridden via environment variables)
LYRIC_OFFSET_SECONDS = float(os.getenv("LYRICSYNC_LYRIC_OFFSET", "0"))
SHORT_LINE_GROUP_THRESHOLD = float(os.getenv("LYRICSYNC_SHORT_LINE_THRESHOLD", "0.6"))
SHORT_LINE_GROUP_RANGE = (0.0, 5.0)

# Interludes are flagged for division gaps >= this many seconds (not overridable)
INTERLUDE_GAP_THRESHOLD = 5.0

# Pre-activation of the next line across a gap. Empirically tuned.
PREACTIVATE_GAP_SECONDS = 1.0
PREACTIVATE_ELAPSED_RATIO = 0.3

# Clustering
MAX_OVERLAP_GROUP_SIZE = 3

# Scrolling
SCROLL_POSITION_OFFSET_PERCENT = int(os.getenv("LYRICSYNC_SCROLL_POSITION", "50"))
USER_SCROLL_COOLDOWN_MS = int(os.getenv("LYRICSYNC_SCROLL_COOLDOWN_MS", "2000"))
SAME_TARGET_DEBOUNCE_MS = 100
SCROLL_EPSILON_PX = 5.0
SAME_BEGIN_EPS = 0.12  # Lines starting this close together scroll as one step
DEFAULT_NEXT_EVENT_GAP = 1.0

DEFAULT_EASING = "cubic-bezier(0.22, 1, 0.36, 1)"
CUSTOM_EASING = os.getenv("LYRICSYNC_EASING", DEFAULT_EASING)


class ProgressDirection(str, Enum):
    """Direction in which sung text fills. Presentation only."""

    LTR = "ltr"
    RTL = "rtl"
    TTB = "ttb"
    BTT = "btt"


PROGRESS_DIRECTION = os.getenv("LYRICSYNC_PROGRESS_DIRECTION", "ltr")


def clamp_short_line_threshold(value: float) -> float:
    """Clamp the short-line grouping threshold into its supported range."""
    low, high = SHORT_LINE_GROUP_RANGE
    return min(high, max(low, value))


@dataclass(frozen=True)
class SyncConfig:
    """Immutable settings passed into every tick.

    Built once (usually from the environment defaults above) and replaced
    wholesale when a user changes a preference.
    """

    lyric_offset_seconds: float = LYRIC_OFFSET_SECONDS
    scroll_position_offset_percent: int = SCROLL_POSITION_OFFSET_PERCENT
    short_line_group_threshold: float = SHORT_LINE_GROUP_THRESHOLD
    user_scroll_cooldown_ms: int = USER_SCROLL_COOLDOWN_MS
    progress_direction: ProgressDirection = ProgressDirection.LTR
    preactivate_gap_seconds: float = PREACTIVATE_GAP_SECONDS
    preactivate_elapsed_ratio: float = PREACTIVATE_ELAPSED_RATIO
    custom_easing: str = CUSTOM_EASING

    def __post_init__(self):
        object.__setattr__(
            self,
            "short_line_group_threshold",
            clamp_short_line_threshold(float(self.short_line_group_threshold)),
        )
        try:
            direction = ProgressDirection(self.progress_direction)
        except ValueError:
            raise ConfigError(
                f"Invalid progress direction: {self.progress_direction!r}. "
                f"Use one of: {', '.join(d.value for d in ProgressDirection)}"
            )
        object.__setattr__(self, "progress_direction", direction)
        if not 0 <= self.scroll_position_offset_percent <= 100:
            raise ConfigError("Scroll position offset must be between 0 and 100")
        if self.user_scroll_cooldown_ms < 0:
            raise ConfigError("User scroll cooldown must be non-negative")
        if self.preactivate_gap_seconds < 0 or self.preactivate_elapsed_ratio < 0:
            raise ConfigError("Pre-activation thresholds must be non-negative")

    @property
    def interlude_gap_threshold_seconds(self) -> float:
        return INTERLUDE_GAP_THRESHOLD

    @property
    def user_scroll_cooldown_seconds(self) -> float:
        return self.user_scroll_cooldown_ms / 1000.0

    @property
    def anchor_ratio(self) -> float:
        return self.scroll_position_offset_percent / 100.0

    def with_overrides(self, **overrides: Any) -> "SyncConfig":
        """Return a copy with the given non-None fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def validate_config() -> None:
    """Validate configuration values."""
    if not 0 <= SCROLL_POSITION_OFFSET_PERCENT <= 100:
        raise ConfigError("Invalid scroll position offset")

    if USER_SCROLL_COOLDOWN_MS < 0:
        raise ConfigError("Invalid user scroll cooldown")

    if PROGRESS_DIRECTION not in {d.value for d in ProgressDirection}:
        raise ConfigError(f"Invalid progress direction: {PROGRESS_DIRECTION}")


def default_config(progress_direction: Optional[str] = None) -> SyncConfig:
    """Build a SyncConfig from the environment-backed defaults."""
    return SyncConfig(progress_direction=progress_direction or PROGRESS_DIRECTION)

# Validate config on import
validate_config()
