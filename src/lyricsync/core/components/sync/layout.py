"""Vertical layout of lyric lines and interlude markers."""

from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ...models import Interlude
from .line_index import LineIndex

Box = Tuple[float, float]  # (top, height)


class ViewMetrics(Protocol):
    """Geometry the ScrollCoordinator needs to turn lines into offsets."""

    @property
    def viewport_height(self) -> float: ...

    @property
    def content_height(self) -> float: ...

    def line_box(self, line_id: int) -> Optional[Box]: ...

    def interlude_box(self, interlude: Interlude) -> Optional[Box]: ...


class LyricLayout:
    """Stacked layout with fixed row heights.

    Each line takes one main row plus one auxiliary row per background,
    translation or pronunciation track. An interlude marker sits after the
    last line of the division that precedes the interlude.
    """

    def __init__(
        self,
        index: LineIndex,
        interludes: Sequence[Interlude] = (),
        viewport_height: float = 600.0,
        line_height: float = 60.0,
        extra_row_height: float = 30.0,
        interlude_height: float = 40.0,
        line_spacing: float = 0.0,
        padding_top: float = 0.0,
        padding_bottom: float = 0.0,
    ):
        self._viewport_height = viewport_height
        self._line_boxes: List[Box] = []
        self._interlude_boxes: Dict[str, Box] = {}

        markers_after: Dict[int, List[Interlude]] = {}
        leading: List[Interlude] = []
        for interlude in interludes:
            anchor = self._anchor_line(index, interlude.division_index)
            if anchor < 0:
                leading.append(interlude)
            else:
                markers_after.setdefault(anchor, []).append(interlude)

        y = padding_top
        for interlude in leading:
            self._interlude_boxes[interlude.key] = (y, interlude_height)
            y += interlude_height + line_spacing
        for line in index.lines:
            height = line_height + extra_row_height * line.source.extra_rows()
            self._line_boxes.append((y, height))
            y += height + line_spacing
            for interlude in markers_after.get(line.line_id, []):
                self._interlude_boxes[interlude.key] = (y, interlude_height)
                y += interlude_height + line_spacing
        self._content_height = y + padding_bottom

    @staticmethod
    def _anchor_line(index: LineIndex, division_index: int) -> int:
        """Last line of the division, or of the nearest earlier non-empty one."""
        last = index.division_last_line_index
        for div in range(min(division_index, len(last) - 1), -1, -1):
            if last[div] >= 0:
                return last[div]
        return -1

    @property
    def viewport_height(self) -> float:
        return self._viewport_height

    @property
    def content_height(self) -> float:
        return self._content_height

    def line_box(self, line_id: int) -> Optional[Box]:
        if 0 <= line_id < len(self._line_boxes):
            return self._line_boxes[line_id]
        return None

    def interlude_box(self, interlude: Interlude) -> Optional[Box]:
        return self._interlude_boxes.get(interlude.key)

    def max_offset(self) -> float:
        return max(0.0, self._content_height - self._viewport_height)
