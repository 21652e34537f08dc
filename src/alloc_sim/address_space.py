from __future__ import annotations

import bisect
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Tuple

from .block_interval import BlockInterval, Gap
from .errors import BlockNotFoundError, InvalidConfigurationError

if TYPE_CHECKING:
    from .strategies import PlacementStrategy


class AddressSpace:
    """
    Bounded linear address space `[0, size)` holding allocated intervals.

    Only allocated intervals are stored, sorted by low address. Free gaps are
    recomputed from them on demand, so freeing a block merges it with its
    neighbouring gaps without any coalescing pass.
    """

    def __init__(self, size: int) -> None:
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            raise InvalidConfigurationError(f"Address space size must be a positive integer, got {size!r}")
        self.size = size
        self._allocated: List[BlockInterval] = []

    # -- Queries -------------------------------------------------------------------
    def contains_block(self, block_id: int) -> bool:
        return self._find(block_id) is not None

    def block_dimension(self, block_id: int) -> Optional[int]:
        """Length of the block, or None when no such block is allocated."""
        interval = self._find(block_id)
        if interval is None:
            return None
        return interval.length

    def list_block_ids(self) -> List[int]:
        return [interval.block_id for interval in self._allocated]

    def get_interval(self, block_id: int) -> Optional[BlockInterval]:
        return self._find(block_id)

    def require_block(self, block_id: int) -> BlockInterval:
        interval = self._find(block_id)
        if interval is None:
            raise BlockNotFoundError(block_id)
        return interval

    def intervals(self) -> List[BlockInterval]:
        """Return a copy of the allocated list in address order."""
        return list(self._allocated)

    def free_gaps(self) -> List[Gap]:
        gaps: List[Gap] = []
        cursor = 0
        for interval in self._allocated:
            if interval.low > cursor:
                gaps.append(Gap(cursor, interval.low - 1))
            cursor = interval.high + 1
        if cursor < self.size:
            gaps.append(Gap(cursor, self.size - 1))
        return gaps

    def neighboring_gaps(self, block_id: int) -> Set[Gap]:
        """Gaps touching either boundary of the block; empty for unknown ids."""
        interval = self._find(block_id)
        if interval is None:
            return set()
        return {gap for gap in self.free_gaps() if gap.touches(interval)}

    def allocated_total(self) -> int:
        return sum(interval.length for interval in self._allocated)

    def available(self) -> int:
        return self.size - self.allocated_total()

    def largest_gap(self) -> int:
        gaps = self.free_gaps()
        if not gaps:
            return 0
        return max(gap.length for gap in gaps)

    def fragmentation(self) -> float:
        total_free = self.available()
        if total_free == 0:
            return 0.0
        return 1.0 - (self.largest_gap() / total_free)

    # -- Mutation ------------------------------------------------------------------
    def allocate(self, block_id: int, dimension: int, strategy: "PlacementStrategy") -> Optional[BlockInterval]:
        """
        Place a new block of `dimension` addresses using `strategy`.
        Returns the new interval, or None when the strategy finds no gap or the
        id is already allocated. A failed call leaves the space untouched.
        """
        if not isinstance(dimension, int) or isinstance(dimension, bool) or dimension <= 0:
            raise InvalidConfigurationError(f"Block dimension must be a positive integer, got {dimension!r}")
        if self.contains_block(block_id):
            return None
        low = strategy.choose(self.free_gaps(), dimension)
        if low is None:
            return None
        interval = BlockInterval(block_id=block_id, low=low, high=low + dimension - 1)
        index = bisect.bisect_left([existing.low for existing in self._allocated], interval.low)
        self._allocated.insert(index, interval)
        return interval

    def deallocate(self, block_id: int) -> Optional[BlockInterval]:
        interval = self._find(block_id)
        if interval is None:
            return None
        self._allocated.remove(interval)
        return interval

    def compact(self) -> None:
        """Slide every block towards address 0, keeping order and lengths."""
        cursor = 0
        compacted: List[BlockInterval] = []
        for interval in self._allocated:
            moved = interval.shifted_to(cursor)
            compacted.append(moved)
            cursor = moved.high + 1
        self._allocated = compacted

    # -- Introspection -------------------------------------------------------------
    def snapshot(self) -> Dict[str, List[Tuple[int, int, int]]]:
        """Expose current allocation map for diagnostics."""
        return {
            "allocated": [interval.as_tuple() for interval in self._allocated],
            "free": [(gap.low, gap.high, gap.length) for gap in self.free_gaps()],
        }

    def _find(self, block_id: int) -> Optional[BlockInterval]:
        for interval in self._allocated:
            if interval.block_id == block_id:
                return interval
        return None

    def __len__(self) -> int:
        return len(self._allocated)

    def __repr__(self) -> str:
        return f"AddressSpace(size={self.size}, blocks={self.list_block_ids()})"
