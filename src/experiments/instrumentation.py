from __future__ import annotations

import csv
import json
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional


@dataclass
class SimulationProfiler:
    """
    Structured event log for a Simulator run.

    Each record carries a sequence number, the placement strategy and, for
    per-instruction events, the simulator step, alongside heap usage and the
    fragmentation ratio at that moment. Records can be flushed to disk as JSONL
    and CSV, or streamed line by line with write_immediately.
    """

    run_id: str
    strategy: Optional[str] = None
    output_dir: Optional[str] = None
    write_immediately: bool = False
    events: List[Dict[str, object]] = field(default_factory=list)

    def record_event(self, event_type: str, payload: Dict[str, object], *, step: Optional[int] = None) -> None:
        record: Dict[str, object] = {
            "seq": len(self.events),
            "timestamp": time.time(),
            "run_id": self.run_id,
            "event": event_type,
        }
        if self.strategy is not None:
            record["strategy"] = self.strategy
        if step is not None:
            record["step"] = step
        record.update(payload)
        self.events.append(record)
        if self.write_immediately and self.output_dir:
            self._write_jsonl([record], mode="a")

    def counts(self) -> Dict[str, int]:
        return dict(Counter(str(event["event"]) for event in self.events))

    def step_events(self) -> List[Dict[str, object]]:
        """Records tied to a processed instruction, in step order."""
        return [event for event in self.events if "step" in event]

    def fragmentation_series(self) -> List[float]:
        return [float(event["fragmentation"]) for event in self.step_events()]

    def flush(self) -> None:
        if not self.output_dir or not self.events:
            return
        self._write_jsonl(self.events, mode="w")
        # Run summaries have no step; blank cells keep the CSV rectangular.
        fieldnames = sorted({key for event in self.events for key in event})
        with self._path("csv").open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=fieldnames, restval="")
            writer.writeheader()
            writer.writerows(self.events)

    def _path(self, suffix: str) -> Path:
        directory = Path(self.output_dir)
        directory.mkdir(parents=True, exist_ok=True)
        return directory / f"{self.run_id}.{suffix}"

    def _write_jsonl(self, records: Iterable[Dict[str, object]], *, mode: str) -> None:
        with self._path("jsonl").open(mode, encoding="utf-8") as handle:
            for record in records:
                handle.write(json.dumps(record) + "\n")
