"""
Segment Tree for O(log n) Range Aggregation

This module provides:
- Monoid descriptions (associative operation + identity) for sum/min/max
- Array-backed segment tree with build, point update and range query
- O(n) build, O(log n) update and query

The tree knows nothing about graphs; heavy_light.py maps tree paths onto
contiguous position ranges and asks this structure for their aggregates.
"""

import logging
import math
import operator
from dataclasses import dataclass
from typing import Any, Callable, Dict, Sequence

from errors import InvalidIndexError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Monoid:
    """Associative binary operation with an identity element."""
    name: str
    operation: Callable[[Any, Any], Any]
    identity: Any


SUM = Monoid('sum', operator.add, 0)
MIN = Monoid('min', min, math.inf)
MAX = Monoid('max', max, -math.inf)

MONOIDS: Dict[str, Monoid] = {m.name: m for m in (SUM, MIN, MAX)}


def get_monoid(name: str) -> Monoid:
    """Look up a monoid by name ('sum', 'min', 'max')."""
    try:
        return MONOIDS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown aggregation operator '{name}', expected one of {sorted(MONOIDS)}"
        ) from None


class SegmentTree:
    """
    Segment tree over positions [0, size).

    Node 0 covers the whole range; node k has children 2k+1 and 2k+2.
    Each internal node stores the monoid combination of its children, so a
    range query only touches O(log size) nodes.

    Build: O(size)
    Update: O(log size)
    Query: O(log size)
    """

    def __init__(self, size: int, monoid: Monoid = SUM):
        """
        Allocate an empty segment tree.

        Args:
            size: Number of positions
            monoid: Aggregation operator and its identity (default: sum)
        """
        if size < 0:
            raise ValueError(f"Size must be non-negative, got {size}")
        self.size = size
        self.monoid = monoid
        self.tree = [monoid.identity] * (4 * size)

    def __len__(self):
        return self.size

    def _combine(self, a, b):
        return self.monoid.operation(a, b)

    def _check_index(self, index: int):
        if not 0 <= index < self.size:
            raise InvalidIndexError(f"Position {index} out of range for size {self.size}")

    def build_from_ordered_values(self, values: Sequence):
        """
        Initialize leaves so that position i holds values[i].

        Args:
            values: Position-ordered values; empty means no-op
        """
        if len(values) == 0:
            return
        if len(values) != self.size:
            raise ValueError(
                f"Expected {self.size} values, got {len(values)}"
            )
        self._build(values, 0, 0, self.size - 1)
        logger.debug(f"Segment tree built over {self.size} positions ({self.monoid.name})")

    def _build(self, values: Sequence, node: int, start: int, end: int):
        if start == end:
            self.tree[node] = values[start]
            return
        mid = (start + end) // 2
        self._build(values, 2 * node + 1, start, mid)
        self._build(values, 2 * node + 2, mid + 1, end)
        self.tree[node] = self._combine(self.tree[2 * node + 1], self.tree[2 * node + 2])

    def update(self, index: int, value):
        """
        Replace the value at a position and recompute its ancestors.

        Args:
            index: Position in [0, size)
            value: New value
        """
        self._check_index(index)
        self._update(0, 0, self.size - 1, index, value)

    def _update(self, node: int, start: int, end: int, index: int, value):
        if start == end:
            self.tree[node] = value
            return
        mid = (start + end) // 2
        if index <= mid:
            self._update(2 * node + 1, start, mid, index, value)
        else:
            self._update(2 * node + 2, mid + 1, end, index, value)
        self.tree[node] = self._combine(self.tree[2 * node + 1], self.tree[2 * node + 2])

    def query(self, left: int, right: int):
        """
        Aggregate values over the closed range [left, right].

        Args:
            left: Left position (inclusive)
            right: Right position (inclusive)

        Returns:
            Combined value, or the identity when left > right
        """
        if left > right:
            return self.monoid.identity
        self._check_index(left)
        self._check_index(right)
        return self._query(0, 0, self.size - 1, left, right)

    def _query(self, node: int, start: int, end: int, left: int, right: int):
        # No overlap
        if right < start or end < left:
            return self.monoid.identity
        # Full containment
        if left <= start and end <= right:
            return self.tree[node]
        mid = (start + end) // 2
        return self._combine(
            self._query(2 * node + 1, start, mid, left, right),
            self._query(2 * node + 2, mid + 1, end, left, right),
        )

    def get(self, index: int):
        """Get the value stored at a single position."""
        return self.query(index, index)

    def total(self):
        """Aggregate over every position."""
        if self.size == 0:
            return self.monoid.identity
        return self.tree[0]
