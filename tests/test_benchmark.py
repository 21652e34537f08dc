import tempfile
import unittest
from pathlib import Path

from alloc_sim import Allocate, Compact, Deallocate, StrategyType
from experiments.benchmark_strategies import BenchmarkConfig, run_single, write_summary
from experiments.plot_fragmentation import load_trajectories, mean_fragmentation, plot
from experiments.run_simulation import main as run_simulation_main
from experiments.workload import WorkloadConfig, WorkloadGenerator


class WorkloadTests(unittest.TestCase):
    def test_generator_is_deterministic_per_seed(self) -> None:
        first = WorkloadGenerator(seed=7).generate(50)
        second = WorkloadGenerator(seed=7).generate(50)
        self.assertEqual(first, second)

    def test_frees_only_previously_requested_ids(self) -> None:
        config = WorkloadConfig(max_dimension=4, free_probability=0.5, compact_probability=0.1)
        requested = set()
        for instruction in WorkloadGenerator(config, seed=3).generate(200):
            if isinstance(instruction, Allocate):
                self.assertLessEqual(instruction.dimension, 4)
                requested.add(instruction.block_id)
            elif isinstance(instruction, Deallocate):
                self.assertIn(instruction.block_id, requested)
            else:
                self.assertIsInstance(instruction, Compact)


class BenchmarkHarnessTests(unittest.TestCase):
    def test_summary_contains_core_metrics(self) -> None:
        for kind in StrategyType:
            config = BenchmarkConfig(label=kind.name.lower(), size=64, strategy=kind, steps=60)
            summary = run_single(config, seed=123)
            self.assertEqual(summary["strategy"], kind.display_name)
            self.assertGreaterEqual(summary["allocations"], 1)
            self.assertGreaterEqual(summary["avg_fragmentation"], 0.0)
            self.assertLessEqual(summary["peak_fragmentation"], 1.0)
            self.assertLessEqual(summary["avg_utilisation"], 1.0)

    def test_compact_threshold_triggers_compaction(self) -> None:
        config = BenchmarkConfig(
            label="compacting",
            size=32,
            strategy=StrategyType.FIRST_FIT,
            steps=80,
            compact_threshold=0.0,
            workload=WorkloadConfig(max_dimension=4, free_probability=0.4, compact_probability=0.0),
        )
        summary = run_single(config, seed=5)
        self.assertGreaterEqual(summary["compactions"], 1)
        self.assertEqual(summary["final_fragmentation"], 0.0)

    def test_trajectories_feed_the_plot(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            trajectory_dir = Path(tmpdir) / "traj"
            summaries = []
            for kind in StrategyType:
                config = BenchmarkConfig(label=kind.name.lower(), size=48, strategy=kind, steps=25)
                summaries.append(run_single(config, seed=1, trajectory_dir=str(trajectory_dir)))
            summary_path = Path(tmpdir) / "summary.csv"
            write_summary(str(summary_path), summaries)
            self.assertTrue(summary_path.exists())

            df = load_trajectories(str(trajectory_dir))
            self.assertEqual(df["run"].nunique(), 3)
            series = mean_fragmentation(df)
            self.assertEqual(set(series.columns), {"FIRST_FIT", "BEST_FIT", "WORST_FIT"})
            self.assertEqual(len(series), 25)

            image = Path(tmpdir) / "frag.png"
            plot(df, str(image))
            self.assertTrue(image.exists())


class RunSimulationCliTests(unittest.TestCase):
    def test_demo_run_writes_trace(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            exit_code = run_simulation_main(["--strategy", "best_fit", "--trace-dir", tmpdir])
            self.assertEqual(exit_code, 0)
            self.assertTrue((Path(tmpdir) / "sim_best_fit.jsonl").exists())
            self.assertTrue((Path(tmpdir) / "sim_best_fit.csv").exists())


if __name__ == "__main__":
    unittest.main()
