from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd


def load_trajectories(trajectory_dir: str) -> pd.DataFrame:
    """Concatenate every per-run trajectory CSV written by benchmark_strategies."""
    paths = sorted(Path(trajectory_dir).glob("*.csv"))
    if not paths:
        raise FileNotFoundError(f"No trajectory CSV files under {trajectory_dir}")
    frames = []
    for path in paths:
        frame = pd.read_csv(path)
        frame["run"] = path.stem
        frames.append(frame)
    return pd.concat(frames, ignore_index=True)


def mean_fragmentation(df: pd.DataFrame) -> pd.DataFrame:
    """Average fragmentation per step and strategy across seeds."""
    grouped = df.groupby(["strategy", "step"], as_index=False)["fragmentation"].mean()
    return grouped.pivot(index="step", columns="strategy", values="fragmentation")


def plot(df: pd.DataFrame, output: str, title: str = "External fragmentation by strategy") -> None:
    series = mean_fragmentation(df)
    fig, ax = plt.subplots(figsize=(6.9, 4.2))
    series.plot(ax=ax, linewidth=1)
    ax.set_xlabel("step")
    ax.set_ylabel("fragmentation (1 - largest gap / free)")
    ax.set_ylim(0.0, 1.0)
    ax.set_title(title)
    Path(output).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output, bbox_inches="tight")
    plt.close(fig)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Plot fragmentation trajectories per placement strategy.")
    parser.add_argument("trajectory_dir", type=str, help="Directory produced by benchmark_strategies --trajectory-dir.")
    parser.add_argument("--output", type=str, default="results/fragmentation.png", help="Image path.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    df = load_trajectories(args.trajectory_dir)
    plot(df, args.output)
    print(f"Wrote {args.output} from {df['run'].nunique()} runs")


if __name__ == "__main__":
    main()
