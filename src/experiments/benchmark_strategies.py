from __future__ import annotations

import argparse
import csv
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from alloc_sim import AddressSpace, Compact, Simulator, StrategyType, strategy_for
from experiments.instrumentation import SimulationProfiler
from experiments.workload import WorkloadConfig, WorkloadGenerator


@dataclass
class BenchmarkConfig:
    label: str
    size: int
    strategy: StrategyType
    steps: int = 200
    compact_threshold: Optional[float] = None
    workload: WorkloadConfig = field(default_factory=WorkloadConfig)


def run_single(
    config: BenchmarkConfig,
    seed: int,
    *,
    trajectory_dir: Optional[str] = None,
) -> Dict[str, float]:
    generator = WorkloadGenerator(config.workload, seed=seed)
    profiler = SimulationProfiler(run_id=f"{config.label}_seed{seed}")
    simulator = Simulator(AddressSpace(config.size), strategy_for(config.strategy), profiler=profiler)

    fragmentation_sum = 0.0
    used_sum = 0.0
    peak_fragmentation = 0.0
    compactions = 0
    trajectory_rows: List[Dict[str, float]] = []

    for step in range(1, config.steps + 1):
        instruction = generator.next_instruction()
        simulator.enqueue(instruction)
        (outcome,) = simulator.run(1)
        if isinstance(instruction, Compact):
            compactions += 1

        stats = simulator.stats()
        fragmentation_sum += stats["fragmentation"]
        used_sum += stats["used"]
        peak_fragmentation = max(peak_fragmentation, stats["fragmentation"])

        trajectory_rows.append(
            {
                "step": step,
                "strategy": config.strategy.display_name,
                "kind": instruction.kind.name,
                "succeeded": int(outcome.succeeded),
                "blocks": stats["blocks"],
                "used": stats["used"],
                "largest_gap": stats["largest_gap"],
                "fragmentation": stats["fragmentation"],
                "failed_allocations": stats["failed_allocations"],
            }
        )

        if config.compact_threshold is not None and stats["fragmentation"] > config.compact_threshold:
            simulator.enqueue(Compact())
            simulator.run(1)
            compactions += 1

    if trajectory_dir and trajectory_rows:
        os.makedirs(trajectory_dir, exist_ok=True)
        trajectory_path = os.path.join(trajectory_dir, f"{config.label}_seed{seed}.csv")
        with open(trajectory_path, "w", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(trajectory_rows[0].keys()))
            writer.writeheader()
            writer.writerows(trajectory_rows)

    final_stats = simulator.stats()
    counts = profiler.counts()
    attempts = counts.get("allocation", 0) + counts.get("allocation_failed", 0)
    summary: Dict[str, float] = {
        "config": config.label,
        "strategy": config.strategy.display_name,
        "seed": seed,
        "steps": config.steps,
        "allocations": float(counts.get("allocation", 0)),
        "failed_allocations": float(counts.get("allocation_failed", 0)),
        "failure_rate": counts.get("allocation_failed", 0) / attempts if attempts else 0.0,
        "missed_frees": float(counts.get("deallocation_missed", 0)),
        "compactions": float(compactions),
        "avg_fragmentation": fragmentation_sum / config.steps if config.steps else 0.0,
        "peak_fragmentation": peak_fragmentation,
        "avg_utilisation": used_sum / (config.steps * config.size) if config.steps else 0.0,
        "final_blocks": float(final_stats["blocks"]),
        "final_fragmentation": final_stats["fragmentation"],
    }
    return summary


def build_default_configs(args: argparse.Namespace) -> List[BenchmarkConfig]:
    workload = WorkloadConfig(
        max_dimension=args.max_dimension,
        free_probability=args.free_probability,
        compact_probability=args.compact_probability,
    )
    return [
        BenchmarkConfig(
            label=kind.name.lower(),
            size=args.size,
            strategy=kind,
            steps=args.steps,
            compact_threshold=args.compact_threshold,
            workload=workload,
        )
        for kind in StrategyType
    ]


def write_summary(path: str, records: Iterable[Dict[str, float]]) -> None:
    records = list(records)
    if not records:
        return
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(records[0].keys()))
        writer.writeheader()
        writer.writerows(records)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare first/best/worst fit on seeded random workloads.")
    parser.add_argument("--size", type=int, default=256, help="Address space size.")
    parser.add_argument("--steps", type=int, default=500, help="Instructions per run.")
    parser.add_argument("--seeds", type=int, default=5, help="Number of random seeds to evaluate.")
    parser.add_argument("--seed-offset", type=int, default=0, help="Offset applied to generated seeds.")
    parser.add_argument("--max-dimension", type=int, default=16, help="Largest block requested.")
    parser.add_argument("--free-probability", type=float, default=0.35, help="Chance that a step frees a block.")
    parser.add_argument("--compact-probability", type=float, default=0.0, help="Chance that a step compacts.")
    parser.add_argument(
        "--compact-threshold",
        type=float,
        default=None,
        help="Compact whenever fragmentation exceeds this level.",
    )
    parser.add_argument("--output", type=str, default="results/strategies.csv", help="Path to CSV summary output.")
    parser.add_argument(
        "--trajectory-dir",
        type=str,
        default=None,
        help="Optional directory to write per-run trajectory CSV files.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configs = build_default_configs(args)
    seeds = [args.seed_offset + index for index in range(args.seeds)]

    summaries: List[Dict[str, float]] = []
    for config in configs:
        for seed in seeds:
            summaries.append(run_single(config, seed, trajectory_dir=args.trajectory_dir))

    write_summary(args.output, summaries)

    for summary in summaries:
        print(
            f"[{summary['config']} seed={summary['seed']}] "
            f"failure_rate={summary['failure_rate']:.2f} "
            f"avg_fragmentation={summary['avg_fragmentation']:.3f} "
            f"peak_fragmentation={summary['peak_fragmentation']:.3f} "
            f"compactions={int(summary['compactions'])}"
        )


if __name__ == "__main__":
    main()
