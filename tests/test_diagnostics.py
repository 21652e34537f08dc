import unittest

from alloc_sim import AddressSpace, Allocate, BestFit, Compact, Deallocate, FirstFit, Gap, Simulator
from alloc_sim.diagnostics import (
    BlockRow,
    block_table,
    format_outcome,
    fragmentation_ratio,
    free_slot_table,
    neighbor_groups,
    render_blocks,
    render_free_slots,
    render_simulation_details,
    unique_gaps,
)
from alloc_sim.script import DEMO_SCRIPT


class DiagnosticsTableTests(unittest.TestCase):
    def setUp(self) -> None:
        self.space = AddressSpace(10)
        strategy = FirstFit()
        self.space.allocate(7, 2, strategy)
        self.space.allocate(8, 3, strategy)
        self.space.allocate(9, 2, strategy)
        self.space.deallocate(8)

    def test_block_table(self) -> None:
        self.assertEqual(block_table(self.space), [BlockRow(7, 0, 1, 2), BlockRow(9, 5, 6, 2)])

    def test_free_slot_table_and_unique_gaps(self) -> None:
        self.assertEqual(free_slot_table(self.space), [Gap(2, 4), Gap(7, 9)])
        self.assertEqual(unique_gaps(self.space), frozenset({Gap(7, 9), Gap(2, 4)}))
        self.assertIn(Gap(2, 4), unique_gaps(self.space))

    def test_neighbor_groups(self) -> None:
        groups = neighbor_groups(self.space)
        self.assertEqual(groups[7], frozenset({Gap(2, 4)}))
        self.assertEqual(groups[9], frozenset({Gap(2, 4), Gap(7, 9)}))

    def test_fragmentation_ratio(self) -> None:
        self.assertAlmostEqual(fragmentation_ratio(self.space), 0.5)

    def test_render_tables(self) -> None:
        self.assertEqual(
            render_blocks(self.space),
            "Allocated Blocks:\n(0-1) --> ID 7\n(5-6) --> ID 9",
        )
        self.assertEqual(
            render_free_slots(self.space),
            "Free Slots:\n(2-4) --> EMPTY\n(7-9) --> EMPTY",
        )

    def test_reporting_does_not_mutate(self) -> None:
        before = self.space.snapshot()
        block_table(self.space)
        neighbor_groups(self.space)
        render_free_slots(self.space)
        self.assertEqual(self.space.snapshot(), before)


class DiagnosticsReportTests(unittest.TestCase):
    def test_format_outcomes(self) -> None:
        simulator = Simulator(
            AddressSpace(5),
            BestFit(),
            [Allocate(1, 3), Allocate(2, 9), Deallocate(4), Deallocate(1), Compact()],
        )
        lines = [format_outcome(outcome) for outcome in simulator.run_all()]
        self.assertEqual(
            lines,
            [
                "AllocationInstruction: Allocated block: 1  dimension: 3 addresses: 0-2",
                "AllocationInstruction failed: block: 2 dimension: 9",
                "DeallocationInstruction: block: 4 (not allocated)",
                "DeallocationInstruction: block: 1",
                "CompactInstruction",
            ],
        )

    def test_simulation_details_do_not_consume_queue(self) -> None:
        simulator = Simulator(AddressSpace(10), BestFit(), DEMO_SCRIPT)
        simulator.run(2)
        report = render_simulation_details(simulator)
        self.assertEqual(len(simulator.pending), 3)
        self.assertEqual(
            report.splitlines(),
            [
                "Simulation Details:",
                "Strategy: BEST_FIT",
                "List of Remaining Instructions: [(0, 2, 3), (1, 0, 0), (2, 0, 0)]",
                "Current Memory Structure:",
                "Memory Blocks:",
                "Block ID: 1, Low Address: 0, High Address: 2, Dimension: 3",
                "Block ID: 3, Low Address: 3, High Address: 5, Dimension: 3",
            ],
        )
        self.assertEqual(render_simulation_details(simulator), report)

    def test_simulation_details_for_empty_space(self) -> None:
        simulator = Simulator(AddressSpace(4), FirstFit())
        self.assertIn("Memory is empty.", render_simulation_details(simulator))
        self.assertIn("List of Remaining Instructions: []", render_simulation_details(simulator))

    def test_drain_is_explicit(self) -> None:
        simulator = Simulator(AddressSpace(10), FirstFit(), DEMO_SCRIPT)
        drained = simulator.pending.drain()
        self.assertEqual(drained, DEMO_SCRIPT)
        self.assertEqual(len(simulator.pending), 0)
        self.assertEqual(simulator.space.list_block_ids(), [])


if __name__ == "__main__":
    unittest.main()
