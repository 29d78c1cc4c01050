"""Instrumental break detection between divisions."""

import logging
from typing import List, Optional, Sequence

from ....config import INTERLUDE_GAP_THRESHOLD
from ...models import Division, Interlude

logger = logging.getLogger(__name__)


def detect_interludes(
    divisions: Sequence[Division], threshold: float = INTERLUDE_GAP_THRESHOLD
) -> List[Interlude]:
    """Flag every gap of at least ``threshold`` seconds between adjacent divisions."""
    interludes: List[Interlude] = []
    for i in range(len(divisions) - 1):
        current = divisions[i]
        following = divisions[i + 1]
        gap = following.begin - current.end
        if gap >= threshold:
            interludes.append(Interlude(start=current.end, end=following.begin, division_index=i))

    if interludes:
        logger.debug(f"Detected {len(interludes)} interlude(s)")
    return interludes


def find_active_interlude(interludes: Sequence[Interlude], time: float) -> Optional[Interlude]:
    """Return the interlude whose [start, end) window contains time."""
    for interlude in interludes:
        if interlude.contains(time):
            return interlude
    return None
