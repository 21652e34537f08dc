from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

from .address_space import AddressSpace
from .block_interval import BlockInterval
from .errors import InvalidConfigurationError
from .instructions import Allocate, Compact, Deallocate, Instruction, InstructionQueue
from .strategies import PlacementStrategy

if TYPE_CHECKING:
    from experiments.instrumentation import SimulationProfiler


class SimulatorState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINED = "drained"


@dataclass(frozen=True)
class InstructionOutcome:
    step: int
    instruction: Instruction
    succeeded: bool
    interval: Optional[BlockInterval] = None


class Simulator:
    """
    Drive a FIFO of instructions against one address space with one strategy.

    Every dequeued instruction is consumed exactly once whether or not it had
    an effect. A bounded run() leaves the rest of the queue in place so the
    simulation can be resumed later.
    """

    def __init__(
        self,
        space: AddressSpace,
        strategy: PlacementStrategy,
        instructions: Iterable[Instruction] = (),
        *,
        profiler: Optional["SimulationProfiler"] = None,
    ) -> None:
        self.space = space
        self.strategy = strategy
        self.pending = InstructionQueue(instructions)
        self.profiler = profiler
        if profiler is not None and profiler.strategy is None:
            profiler.strategy = strategy.name
        self.history: List[InstructionOutcome] = []
        self.state = SimulatorState.IDLE
        self._step = 0

    # -- Queue ---------------------------------------------------------------------
    def enqueue(self, instruction: Instruction) -> None:
        self.pending.append(instruction)
        if self.state is SimulatorState.DRAINED:
            self.state = SimulatorState.IDLE

    def extend(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.enqueue(instruction)

    def remaining(self) -> Tuple[Instruction, ...]:
        return self.pending.peek_all()

    # -- Execution -----------------------------------------------------------------
    def run(self, steps: int) -> List[InstructionOutcome]:
        """Process at most `steps` instructions, stopping early on an empty queue."""
        if steps < 0:
            raise InvalidConfigurationError(f"Step count must be non-negative, got {steps}")
        return self._run(limit=steps)

    def run_all(self) -> List[InstructionOutcome]:
        return self._run(limit=None)

    def _run(self, limit: Optional[int]) -> List[InstructionOutcome]:
        self.state = SimulatorState.RUNNING
        outcomes: List[InstructionOutcome] = []
        while len(self.pending) > 0 and (limit is None or len(outcomes) < limit):
            instruction = self.pending.peek()
            try:
                outcome = self._apply(instruction)
            finally:
                self.pending.pop()
            self.history.append(outcome)
            outcomes.append(outcome)
        self.state = SimulatorState.DRAINED if len(self.pending) == 0 else SimulatorState.IDLE
        if self.profiler:
            self.profiler.record_event(
                "run_complete",
                {
                    "processed": len(outcomes),
                    "pending": len(self.pending),
                    "state": self.state.value,
                    **self._heap_fields(),
                },
            )
        return outcomes

    def _apply(self, instruction: Instruction) -> InstructionOutcome:
        self._step += 1
        if isinstance(instruction, Allocate):
            return self._allocate(instruction)
        if isinstance(instruction, Deallocate):
            return self._deallocate(instruction)
        return self._compact(instruction)

    def _allocate(self, instruction: Allocate) -> InstructionOutcome:
        interval = self.space.allocate(instruction.block_id, instruction.dimension, self.strategy)
        if self.profiler:
            payload: Dict[str, Any] = {
                "block_id": instruction.block_id,
                "dimension": instruction.dimension,
                **self._heap_fields(),
            }
            if interval is not None:
                payload["low"] = interval.low
                payload["high"] = interval.high
            self.profiler.record_event(
                "allocation" if interval is not None else "allocation_failed", payload, step=self._step
            )
        return InstructionOutcome(
            step=self._step,
            instruction=instruction,
            succeeded=interval is not None,
            interval=interval,
        )

    def _deallocate(self, instruction: Deallocate) -> InstructionOutcome:
        interval = self.space.deallocate(instruction.block_id)
        if self.profiler:
            self.profiler.record_event(
                "deallocation" if interval is not None else "deallocation_missed",
                {"block_id": instruction.block_id, **self._heap_fields()},
                step=self._step,
            )
        return InstructionOutcome(
            step=self._step,
            instruction=instruction,
            succeeded=interval is not None,
            interval=interval,
        )

    def _compact(self, instruction: Compact) -> InstructionOutcome:
        before = self.space.fragmentation()
        self.space.compact()
        if self.profiler:
            self.profiler.record_event(
                "compaction",
                {"fragmentation_before": before, **self._heap_fields()},
                step=self._step,
            )
        return InstructionOutcome(step=self._step, instruction=instruction, succeeded=True)

    # -- Introspection -------------------------------------------------------------
    def stats(self) -> Dict[str, Any]:
        allocations = [o for o in self.history if isinstance(o.instruction, Allocate)]
        return {
            "strategy": self.strategy.name,
            "state": self.state.value,
            "blocks": len(self.space),
            "capacity": self.space.size,
            "used": self.space.allocated_total(),
            "free": self.space.available(),
            "largest_gap": self.space.largest_gap(),
            "fragmentation": self.space.fragmentation(),
            "pending": len(self.pending),
            "processed": len(self.history),
            "failed_allocations": sum(1 for o in allocations if not o.succeeded),
        }

    def _heap_fields(self) -> Dict[str, Any]:
        return {
            "heap_used": self.space.allocated_total(),
            "heap_free": self.space.available(),
            "fragmentation": self.space.fragmentation(),
        }
