from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterable, Iterator, List, Optional, Tuple, Union

from .errors import InvalidConfigurationError


class InstructionType(Enum):
    ALLOCATION = 0
    DEALLOCATION = 1
    COMPACT = 2


@dataclass(frozen=True)
class Allocate:
    block_id: int
    dimension: int

    kind = InstructionType.ALLOCATION

    def __post_init__(self) -> None:
        if not isinstance(self.dimension, int) or isinstance(self.dimension, bool) or self.dimension <= 0:
            raise InvalidConfigurationError(
                f"Allocate({self.block_id}) needs a positive dimension, got {self.dimension!r}"
            )

    def as_record(self) -> Tuple[int, int, int]:
        return (self.kind.value, self.block_id, self.dimension)


@dataclass(frozen=True)
class Deallocate:
    block_id: int

    kind = InstructionType.DEALLOCATION

    def as_record(self) -> Tuple[int, int, int]:
        return (self.kind.value, self.block_id, 0)


@dataclass(frozen=True)
class Compact:
    kind = InstructionType.COMPACT

    def as_record(self) -> Tuple[int, int, int]:
        return (self.kind.value, 0, 0)


Instruction = Union[Allocate, Deallocate, Compact]
INSTRUCTION_CLASSES = (Allocate, Deallocate, Compact)


class InstructionQueue:
    """
    FIFO of pending instructions.

    Looking at the queue (peek, peek_all, iteration) never consumes it; drain()
    is the only bulk removal.
    """

    def __init__(self, instructions: Optional[Iterable[Instruction]] = None) -> None:
        self._items: Deque[Instruction] = deque()
        if instructions:
            self.extend(instructions)

    def append(self, instruction: Instruction) -> None:
        if not isinstance(instruction, INSTRUCTION_CLASSES):
            raise InvalidConfigurationError(f"Not an instruction: {instruction!r}")
        self._items.append(instruction)

    def extend(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.append(instruction)

    def peek(self) -> Optional[Instruction]:
        return self._items[0] if self._items else None

    def pop(self) -> Instruction:
        return self._items.popleft()

    def peek_all(self) -> Tuple[Instruction, ...]:
        return tuple(self._items)

    def drain(self) -> List[Instruction]:
        drained = list(self._items)
        self._items.clear()
        return drained

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.peek_all())
