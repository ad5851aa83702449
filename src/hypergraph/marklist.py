"""
MarkSet: sparse membership and ordering over a fixed integer universe.

Cells and nets are identified by integer ids in 0..n-1. A MarkSet tags a
subset of them, tells whether an id has been tagged, and maps every tagged id
to its position in tagging order (0..count-1). Clearing only touches the ids
that were tagged, so a large netlist can be queried repeatedly through small
subsets without paying O(n) per query.
"""

from __future__ import annotations
import logging
from typing import Iterator

logger = logging.getLogger(__name__)


class MarkSet:
    """
    Reusable marker over ids 0..size-1.

    Attributes:
        size: Number of ids in the universe.
        marked: marked[i] is True while id i is marked.
        list: Marked ids in the order they were marked.
        index: index[i] is the position of i in `list`; only valid while
            marked[i] is True.
    """

    def __init__(self, size: int):
        if size < 0:
            raise ValueError(f"MarkSet size must be non-negative, got {size}")
        self.size = size
        self.marked = [False] * size
        self.list: list[int] = []
        self.index = [0] * size

    def mark(self, i: int) -> bool:
        """
        Mark id `i`. Marking an already marked id does nothing.

        Returns:
            True if `i` was newly marked, False if it was already marked.
        """
        if self.marked[i]:
            return False
        self.marked[i] = True
        self.index[i] = len(self.list)
        self.list.append(i)
        return True

    def clear(self) -> None:
        """Unmark every marked id. Costs O(number marked), not O(size)."""
        for i in self.list:
            self.marked[i] = False
        self.list.clear()

    def is_marked(self, i: int) -> bool:
        return self.marked[i]

    def index_of(self, i: int) -> int:
        """Position of `i` in marking order."""
        if not self.marked[i]:
            raise KeyError(i)
        return self.index[i]

    def dump(self) -> None:
        """Log the marked ids and their positions."""
        logger.debug("There are %d elements marked", len(self.list))
        for i in self.list:
            logger.debug("Element %d index %d", i, self.index[i])

    def __len__(self) -> int:
        return len(self.list)

    def __contains__(self, i: int) -> bool:
        return 0 <= i < self.size and self.marked[i]

    def __iter__(self) -> Iterator[int]:
        return iter(self.list)

    def __repr__(self) -> str:
        return f"MarkSet(size={self.size}, marked={len(self.list)})"
