from __future__ import annotations

import argparse
from typing import List, Optional

from alloc_sim import AddressSpace, Simulator, StrategyType, strategy_for
from alloc_sim.diagnostics import (
    format_outcome,
    render_blocks,
    render_free_slots,
    render_simulation_details,
)
from alloc_sim.instructions import Instruction
from alloc_sim.script import DEMO_SCRIPT, load_script
from experiments.instrumentation import SimulationProfiler


def run_simulation(
    size: int,
    strategy: str,
    instructions: List[Instruction],
    *,
    first_steps: Optional[int] = None,
    trace_dir: Optional[str] = None,
) -> Simulator:
    profiler = SimulationProfiler(run_id=f"sim_{StrategyType.parse(strategy).name.lower()}", output_dir=trace_dir)
    simulator = Simulator(AddressSpace(size), strategy_for(strategy), instructions, profiler=profiler)

    outcomes = simulator.run(first_steps) if first_steps is not None else []
    outcomes += simulator.run_all()
    for outcome in outcomes:
        print(format_outcome(outcome))

    print(render_blocks(simulator.space))
    print(render_free_slots(simulator.space))
    print(f"Fragmentation: {simulator.space.fragmentation():.3f}")
    print(render_simulation_details(simulator))
    profiler.flush()
    return simulator


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay an allocation script against one placement strategy.")
    parser.add_argument("--size", type=int, default=10, help="Address space size.")
    parser.add_argument(
        "--strategy",
        type=str,
        default="best_fit",
        help="Placement strategy: first_fit, best_fit or worst_fit.",
    )
    parser.add_argument(
        "--script",
        type=str,
        default=None,
        help="JSON Lines file of {type, blockId, dimension} records. Defaults to the demo sequence.",
    )
    parser.add_argument("--steps", type=int, default=2, help="Size of the first bounded run before running the rest.")
    parser.add_argument("--trace-dir", type=str, default=None, help="Optional directory for JSONL/CSV event traces.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    instructions = load_script(args.script) if args.script else list(DEMO_SCRIPT)
    run_simulation(
        args.size,
        args.strategy,
        instructions,
        first_steps=args.steps,
        trace_dir=args.trace_dir,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
