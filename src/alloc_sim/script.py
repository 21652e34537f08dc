from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping

from .errors import InvalidConfigurationError
from .instructions import Allocate, Compact, Deallocate, Instruction, InstructionType

_TYPE_ALIASES = {
    "ALLOCATE": InstructionType.ALLOCATION,
    "ALLOCATION": InstructionType.ALLOCATION,
    "DEALLOCATE": InstructionType.DEALLOCATION,
    "DEALLOCATION": InstructionType.DEALLOCATION,
    "FREE": InstructionType.DEALLOCATION,
    "COMPACT": InstructionType.COMPACT,
}

# Sequence scripted by the classic demo: three 3-unit blocks, a free of an id
# that never existed, then compaction.
DEMO_SCRIPT: List[Instruction] = [
    Allocate(1, 3),
    Allocate(3, 3),
    Allocate(2, 3),
    Deallocate(0),
    Compact(),
]


def _parse_type(value: Any) -> InstructionType:
    if isinstance(value, InstructionType):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return InstructionType(value)
        except ValueError:
            raise InvalidConfigurationError(f"Unknown instruction type: {value}") from None
    key = str(value).strip().upper()
    if key not in _TYPE_ALIASES:
        raise InvalidConfigurationError(f"Unknown instruction type: {value!r}")
    return _TYPE_ALIASES[key]


def instruction_from_record(record: Mapping[str, Any]) -> Instruction:
    """
    Build an instruction from a `{type, blockId, dimension}` record.

    `block_id` is accepted as an alias of `blockId`; dimension is only read for
    allocations.
    """
    if not isinstance(record, Mapping):
        raise InvalidConfigurationError(f"Instruction record must be an object: {record!r}")
    if "type" not in record:
        raise InvalidConfigurationError(f"Instruction record has no type: {record!r}")
    kind = _parse_type(record["type"])
    if kind is InstructionType.COMPACT:
        return Compact()
    block_id = record.get("blockId", record.get("block_id"))
    if not isinstance(block_id, int) or isinstance(block_id, bool):
        raise InvalidConfigurationError(f"Instruction record needs an integer blockId: {record!r}")
    if kind is InstructionType.DEALLOCATION:
        return Deallocate(block_id)
    return Allocate(block_id, record.get("dimension"))


def instruction_to_record(instruction: Instruction) -> Dict[str, Any]:
    kind, block_id, dimension = instruction.as_record()
    return {"type": InstructionType(kind).name, "blockId": block_id, "dimension": dimension}


def iter_records(path: str) -> Iterator[Dict[str, Any]]:
    with Path(path).open("r", encoding="utf-8") as handle:
        for line_no, line in enumerate(handle, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as exc:
                raise InvalidConfigurationError(f"{path}:{line_no}: invalid JSON ({exc.msg})") from exc


def load_script(path: str) -> List[Instruction]:
    return [instruction_from_record(record) for record in iter_records(path)]


def write_script(path: str, instructions: Iterable[Instruction]) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        for instruction in instructions:
            json.dump(instruction_to_record(instruction), handle)
            handle.write("\n")
