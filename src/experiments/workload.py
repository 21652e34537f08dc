from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional

from alloc_sim import Allocate, Compact, Deallocate
from alloc_sim.instructions import Instruction


@dataclass
class WorkloadConfig:
    max_dimension: int = 8
    free_probability: float = 0.35
    compact_probability: float = 0.02


class WorkloadGenerator:
    """
    Generate allocate/free/compact streams for stress-testing placement strategies.

    Frees only target ids that were requested earlier, so most deallocations hit
    a live block, while allocations that failed produce harmless misses.
    """

    def __init__(self, config: Optional[WorkloadConfig] = None, seed: Optional[int] = None) -> None:
        self.config = config or WorkloadConfig()
        self.random = random.Random(seed)
        self._next_id = 1
        self._live: List[int] = []

    def next_instruction(self) -> Instruction:
        roll = self.random.random()
        if roll < self.config.compact_probability:
            return Compact()
        if self._live and roll < self.config.compact_probability + self.config.free_probability:
            index = self.random.randrange(len(self._live))
            block_id = self._live.pop(index)
            return Deallocate(block_id)
        block_id = self._next_id
        self._next_id += 1
        self._live.append(block_id)
        return Allocate(block_id, self.random.randint(1, self.config.max_dimension))

    def generate(self, count: int) -> List[Instruction]:
        return [self.next_instruction() for _ in range(count)]
