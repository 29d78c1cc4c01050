"""Validation utilities."""

import math
from pathlib import Path

from ..config import SHORT_LINE_GROUP_RANGE
from ..exceptions import ValidationError

MAX_LYRIC_OFFSET = 10.0


def validate_offset(offset: float) -> float:
    """Validate the lyric timing offset."""
    if not math.isfinite(offset) or abs(offset) > MAX_LYRIC_OFFSET:
        raise ValidationError(
            f"Lyric offset must be between -{MAX_LYRIC_OFFSET:g} and +{MAX_LYRIC_OFFSET:g} seconds"
        )
    return offset


def validate_scroll_position(percent: int) -> int:
    """Validate the anchor position as a percentage of the viewport."""
    if not 0 <= percent <= 100:
        raise ValidationError("Scroll position offset must be between 0 and 100")
    return percent


def validate_short_line_threshold(threshold: float) -> float:
    """Validate the short-line grouping threshold.

    Out-of-range values are clamped by the engine; here they are rejected
    so command-line typos do not pass silently.
    """
    low, high = SHORT_LINE_GROUP_RANGE
    if not low <= threshold <= high:
        raise ValidationError(f"Short-line threshold must be between {low:g} and {high:g} seconds")
    return threshold


def validate_time_range(start: float, end: float, step: float) -> None:
    """Validate a replay window."""
    if step <= 0:
        raise ValidationError("Step must be positive")
    if end < start:
        raise ValidationError(f"End ({end:.2f}s) is before start ({start:.2f}s)")


def validate_document_path(path: str) -> Path:
    """Validate that a document file exists and looks like JSON."""
    doc_path = Path(path)
    if not doc_path.is_file():
        raise ValidationError(f"Document not found: {path}")
    if doc_path.suffix.lower() != ".json":
        raise ValidationError("Document file must have a .json extension")
    return doc_path
