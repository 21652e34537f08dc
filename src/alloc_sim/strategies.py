from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from .block_interval import Gap
from .errors import InvalidConfigurationError


class StrategyType(Enum):
    FIRST_FIT = 0
    BEST_FIT = 1
    WORST_FIT = 2

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: Union["StrategyType", str, int]) -> "StrategyType":
        """Accept an enum member, its value, or a name such as "best-fit"."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise InvalidConfigurationError(f"Unknown strategy value: {value}") from None
        key = str(value).strip().upper().replace("-", "_")
        if not key.endswith("_FIT") and key.endswith("FIT"):
            key = key[: -len("FIT")] + "_FIT"
        try:
            return cls[key]
        except KeyError:
            raise InvalidConfigurationError(f"Unknown strategy: {value!r}") from None


_DISPLAY_NAMES: Dict[StrategyType, str] = {
    StrategyType.FIRST_FIT: "FIRST_FIT",
    StrategyType.BEST_FIT: "BEST_FIT",
    StrategyType.WORST_FIT: "WORST_FIT",
}


class PlacementStrategy(ABC):
    """Abstract placement policy: pick the low address of a gap for a new block."""

    strategy_type: StrategyType

    @abstractmethod
    def choose(self, gaps: Sequence[Gap], dimension: int) -> Optional[int]:
        ...

    @property
    def name(self) -> str:
        return self.strategy_type.display_name

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FirstFit(PlacementStrategy):
    """
    Scan the gaps in address order and take the first one that is large enough.
    Cheap, and tends to leave small leftovers near the start of the space.
    """

    strategy_type = StrategyType.FIRST_FIT

    def choose(self, gaps: Sequence[Gap], dimension: int) -> Optional[int]:
        for gap in sorted(gaps, key=lambda g: g.low):
            if gap.length >= dimension:
                return gap.low
        return None


class BestFit(PlacementStrategy):
    """
    Choose the sufficient gap that leaves the smallest leftover.
    Equal leftovers resolve to the lower address.
    """

    strategy_type = StrategyType.BEST_FIT

    def choose(self, gaps: Sequence[Gap], dimension: int) -> Optional[int]:
        candidates: List[Gap] = [gap for gap in gaps if gap.length >= dimension]
        if not candidates:
            return None
        target = min(candidates, key=lambda gap: (gap.length - dimension, gap.low))
        return target.low


class WorstFit(PlacementStrategy):
    """
    Only ever consider the single largest gap. If it cannot hold the block the
    allocation fails, even when a smaller sufficient gap exists.
    """

    strategy_type = StrategyType.WORST_FIT

    def choose(self, gaps: Sequence[Gap], dimension: int) -> Optional[int]:
        if not gaps:
            return None
        largest = min(gaps, key=lambda gap: (-gap.length, gap.low))
        if largest.length >= dimension:
            return largest.low
        return None


_STRATEGIES = {
    StrategyType.FIRST_FIT: FirstFit,
    StrategyType.BEST_FIT: BestFit,
    StrategyType.WORST_FIT: WorstFit,
}


def strategy_for(kind: Union[StrategyType, str, int]) -> PlacementStrategy:
    return _STRATEGIES[StrategyType.parse(kind)]()
