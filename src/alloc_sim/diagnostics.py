"""
Read-only reporting over an address space and a simulator.

Nothing here mutates the space or consumes pending instructions. The text
renderers reproduce the line formats of the classic allocation demo so that
reports can be diffed against it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, FrozenSet, List

from .address_space import AddressSpace
from .block_interval import Gap
from .instructions import Allocate, Deallocate

if TYPE_CHECKING:
    from .simulator import InstructionOutcome, Simulator


@dataclass(frozen=True)
class BlockRow:
    block_id: int
    low: int
    high: int
    length: int


def block_table(space: AddressSpace) -> List[BlockRow]:
    return [
        BlockRow(interval.block_id, interval.low, interval.high, interval.length)
        for interval in space.intervals()
    ]


def free_slot_table(space: AddressSpace) -> List[Gap]:
    return space.free_gaps()


def unique_gaps(space: AddressSpace) -> FrozenSet[Gap]:
    return frozenset(space.free_gaps())


def neighbor_groups(space: AddressSpace) -> Dict[int, FrozenSet[Gap]]:
    """Map every allocated block to the free gaps touching it."""
    return {block_id: frozenset(space.neighboring_gaps(block_id)) for block_id in space.list_block_ids()}


def fragmentation_ratio(space: AddressSpace) -> float:
    return space.fragmentation()


# -- Text rendering ------------------------------------------------------------------
def format_outcome(outcome: "InstructionOutcome") -> str:
    instruction = outcome.instruction
    if isinstance(instruction, Allocate):
        if outcome.succeeded and outcome.interval is not None:
            return (
                f"AllocationInstruction: Allocated block: {instruction.block_id}  "
                f"dimension: {instruction.dimension} "
                f"addresses: {outcome.interval.low}-{outcome.interval.high}"
            )
        return f"AllocationInstruction failed: block: {instruction.block_id} dimension: {instruction.dimension}"
    if isinstance(instruction, Deallocate):
        suffix = "" if outcome.succeeded else " (not allocated)"
        return f"DeallocationInstruction: block: {instruction.block_id}{suffix}"
    return "CompactInstruction"


def render_blocks(space: AddressSpace) -> str:
    lines = ["Allocated Blocks:"]
    for row in block_table(space):
        lines.append(f"({row.low}-{row.high}) --> ID {row.block_id}")
    return "\n".join(lines)


def render_free_slots(space: AddressSpace) -> str:
    lines = ["Free Slots:"]
    for gap in free_slot_table(space):
        lines.append(f"({gap.low}-{gap.high}) --> EMPTY")
    return "\n".join(lines)


def render_simulation_details(simulator: "Simulator") -> str:
    """Summarise strategy, queued instructions and block layout without consuming the queue."""
    records = ", ".join(
        "({}, {}, {})".format(*instruction.as_record()) for instruction in simulator.remaining()
    )
    lines = [
        "Simulation Details:",
        f"Strategy: {simulator.strategy.name}",
        f"List of Remaining Instructions: [{records}]",
        "Current Memory Structure:",
    ]
    rows = block_table(simulator.space)
    if not rows:
        lines.append("Memory is empty.")
    else:
        lines.append("Memory Blocks:")
        for row in rows:
            lines.append(
                f"Block ID: {row.block_id}, Low Address: {row.low}, "
                f"High Address: {row.high}, Dimension: {row.length}"
            )
    return "\n".join(lines)
