"""Group lines that must be displayed together into clusters.

Lines whose time ranges overlap (duets, call-and-response) and bursts of
very short lines are merged so that the whole group shares one visible
lifetime ending at the group's latest line end.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Tuple

from ....config import MAX_OVERLAP_GROUP_SIZE, SHORT_LINE_GROUP_THRESHOLD, clamp_short_line_threshold
from ...models import IndexedLine
from .line_index import LineIndex

logger = logging.getLogger(__name__)


class UnionFind:
    """Disjoint sets over 0..n-1 with path compression.

    The root of a merged set is always the root of the first argument to
    ``union``, so merging in ascending order keeps roots deterministic.
    """

    def __init__(self, size: int):
        self.parent = list(range(size))

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: int, b: int) -> None:
        ra = self.find(a)
        rb = self.find(b)
        if ra != rb:
            self.parent[rb] = ra


def _overlap(a: IndexedLine, b: IndexedLine) -> float:
    return min(a.original_end, b.original_end) - max(a.begin, b.begin)


@dataclass(frozen=True)
class ClusterResult:
    """Lines with ``group_end`` assigned, plus each line's cluster id.

    A cluster id is the smallest line id among the cluster's members.
    """

    lines: Tuple[IndexedLine, ...]
    cluster_ids: Tuple[int, ...]

    def members(self, cluster_id: int) -> List[int]:
        return [i for i, cid in enumerate(self.cluster_ids) if cid == cluster_id]

    def cluster_of(self, line_id: int) -> int:
        return self.cluster_ids[line_id]

    @property
    def cluster_count(self) -> int:
        return len(set(self.cluster_ids))


class ClusterEngine:
    """Assigns display clusters and group ends to indexed lines."""

    def __init__(self, short_line_group_threshold: float = SHORT_LINE_GROUP_THRESHOLD):
        self.short_line_group_threshold = clamp_short_line_threshold(short_line_group_threshold)

    def _provisional_groups(self, lines: Tuple[IndexedLine, ...]) -> Tuple[List[int], int]:
        """Direct-overlap pass: each line seeds a group of at most three."""
        group_ids = [-1] * len(lines)
        next_group = 0
        for i, line in enumerate(lines):
            if group_ids[i] != -1:
                continue
            members = [i]
            for j in range(i + 1, len(lines)):
                if len(members) >= MAX_OVERLAP_GROUP_SIZE:
                    break
                other = lines[j]
                if other.begin >= line.original_end:
                    break  # sorted by begin: nothing later can overlap
                if group_ids[j] != -1:
                    continue
                if _overlap(line, other) > 0:
                    members.append(j)
            for idx in members:
                group_ids[idx] = next_group
            next_group += 1
        return group_ids, next_group

    def run(self, index: LineIndex) -> ClusterResult:
        """Compute clusters for an index. Pure and idempotent."""
        lines = index.lines
        if not lines:
            return ClusterResult(lines=(), cluster_ids=())

        group_ids, group_count = self._provisional_groups(lines)
        sets = UnionFind(group_count)

        # Overlap closure: any line overlapping an earlier one shares its
        # cluster, even when the provisional group was already full.
        reach = 0
        for j in range(1, len(lines)):
            if _overlap(lines[reach], lines[j]) > 0:
                sets.union(group_ids[reach], group_ids[j])
            if lines[j].original_end > lines[reach].original_end:
                reach = j

        # Short-line continuation
        for i in range(len(lines) - 1):
            if lines[i].duration < self.short_line_group_threshold:
                sets.union(group_ids[i], group_ids[i + 1])

        group_end: Dict[int, float] = {}
        first_member: Dict[int, int] = {}
        for i, line in enumerate(lines):
            root = sets.find(group_ids[i])
            if root not in group_end or line.original_end > group_end[root]:
                group_end[root] = line.original_end
            first_member.setdefault(root, i)

        updated = []
        cluster_ids = []
        for i, line in enumerate(lines):
            root = sets.find(group_ids[i])
            updated.append(replace(line, group_end=group_end[root]))
            cluster_ids.append(first_member[root])

        result = ClusterResult(lines=tuple(updated), cluster_ids=tuple(cluster_ids))
        logger.debug(
            f"Clustered {len(lines)} line(s) into {result.cluster_count} cluster(s) "
            f"(short-line threshold {self.short_line_group_threshold:.2f}s)"
        )
        return result
