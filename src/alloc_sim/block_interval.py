from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(frozen=True, slots=True)
class BlockInterval:
    """
    Inclusive address range owned by a caller-identified block.

    Identity is the block_id, never the position inside the address space.
    Intervals are immutable; compaction replaces them with shifted copies of
    the same length.
    """

    block_id: int
    low: int
    high: int

    @property
    def length(self) -> int:
        return self.high - self.low + 1

    def shifted_to(self, low: int) -> "BlockInterval":
        """Return a copy starting at `low` with the same length."""
        return replace(self, low=low, high=low + self.length - 1)

    def overlaps(self, other: "BlockInterval") -> bool:
        return not (self.high < other.low or other.high < self.low)

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.block_id, self.low, self.high)


@dataclass(frozen=True, slots=True)
class Gap:
    """Unallocated inclusive range derived from the allocated intervals."""

    low: int
    high: int

    @property
    def length(self) -> int:
        return self.high - self.low + 1

    def touches(self, interval: BlockInterval) -> bool:
        return self.high + 1 == interval.low or interval.high + 1 == self.low
