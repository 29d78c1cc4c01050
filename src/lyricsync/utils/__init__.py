"""Utility modules."""

from .logging import setup_logging, get_logger
from .validation import (
    validate_document_path,
    validate_offset,
    validate_scroll_position,
    validate_short_line_threshold,
    validate_time_range,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "validate_document_path",
    "validate_offset",
    "validate_scroll_position",
    "validate_short_line_threshold",
    "validate_time_range",
]
