"""Flatten a Document into one time-ordered sequence of lines."""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from ...models import Document, IndexedLine, WordTimingMode
from ...timing import normalize_interval

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineIndex:
    """Lines of a document in playback order.

    Attributes:
        lines: Lines sorted by begin, ties kept in document order.
        division_last_line_index: For each division, the index into
            ``lines`` of its last line in playback order (-1 if empty).
        has_word_timing: True if the document is word-timed or any line
            carries word timings.
    """

    lines: Tuple[IndexedLine, ...]
    division_last_line_index: Tuple[int, ...]
    has_word_timing: bool

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, line_id: int) -> IndexedLine:
        return self.lines[line_id]

    @property
    def is_empty(self) -> bool:
        return not self.lines


def build_line_index(document: Document) -> LineIndex:
    """Sort every line of the document by begin time and number it."""
    flat: List[Tuple[float, int, int, float, float, object]] = []
    order = 0
    for div_idx, division in enumerate(document.divisions):
        for line in division.lines:
            begin, end = normalize_interval(line.begin, line.end, f"line {order}")
            flat.append((begin, order, div_idx, begin, end, line))
            order += 1

    # Stable sort keeps document order for equal begins
    flat.sort(key=lambda item: (item[0], item[1]))

    lines = tuple(
        IndexedLine(
            line_id=line_id,
            order=item_order,
            division_index=div_idx,
            begin=begin,
            end=end,
            original_end=end,
            group_end=end,
            source=line,
        )
        for line_id, (_, item_order, div_idx, begin, end, line) in enumerate(flat)
    )

    last_index = [-1] * len(document.divisions)
    for indexed in lines:
        last_index[indexed.division_index] = max(
            last_index[indexed.division_index], indexed.line_id
        )

    has_word_timing = document.word_timing_mode is WordTimingMode.WORD or any(
        indexed.source.words for indexed in lines
    )

    logger.debug(f"Indexed {len(lines)} line(s) across {len(document.divisions)} division(s)")
    return LineIndex(
        lines=lines,
        division_last_line_index=tuple(last_index),
        has_word_timing=has_word_timing,
    )
