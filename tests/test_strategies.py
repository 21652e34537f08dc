import unittest

from alloc_sim import (
    BestFit,
    FirstFit,
    Gap,
    InvalidConfigurationError,
    StrategyType,
    WorstFit,
    strategy_for,
)

GAPS = [Gap(0, 4), Gap(8, 10), Gap(14, 15), Gap(20, 29)]


class FirstFitTests(unittest.TestCase):
    def test_returns_lowest_sufficient_gap(self) -> None:
        strategy = FirstFit()
        self.assertEqual(strategy.choose(GAPS, 2), 0)
        self.assertEqual(strategy.choose(GAPS, 6), 20)

    def test_ignores_input_order(self) -> None:
        self.assertEqual(FirstFit().choose(list(reversed(GAPS)), 3), 0)

    def test_fails_without_sufficient_gap(self) -> None:
        self.assertIsNone(FirstFit().choose(GAPS, 11))
        self.assertIsNone(FirstFit().choose([], 1))


class BestFitTests(unittest.TestCase):
    def test_minimises_leftover(self) -> None:
        strategy = BestFit()
        self.assertEqual(strategy.choose(GAPS, 2), 14)
        self.assertEqual(strategy.choose(GAPS, 3), 8)
        self.assertEqual(strategy.choose(GAPS, 4), 0)

    def test_ties_resolve_to_lower_address(self) -> None:
        gaps = [Gap(10, 13), Gap(0, 3), Gap(20, 29)]
        self.assertEqual(BestFit().choose(gaps, 3), 0)

    def test_leftover_is_minimal_among_candidates(self) -> None:
        strategy = BestFit()
        for dimension in range(1, 11):
            low = strategy.choose(GAPS, dimension)
            candidates = [gap for gap in GAPS if gap.length >= dimension]
            chosen = next(gap for gap in GAPS if gap.low == low)
            self.assertEqual(
                chosen.length - dimension,
                min(gap.length - dimension for gap in candidates),
            )

    def test_fails_without_sufficient_gap(self) -> None:
        self.assertIsNone(BestFit().choose(GAPS, 11))


class WorstFitTests(unittest.TestCase):
    def test_uses_largest_gap(self) -> None:
        self.assertEqual(WorstFit().choose(GAPS, 1), 20)
        self.assertEqual(WorstFit().choose(GAPS, 10), 20)

    def test_fails_when_largest_gap_is_too_small(self) -> None:
        self.assertIsNone(WorstFit().choose(GAPS, 11))
        self.assertIsNone(WorstFit().choose([Gap(4, 4)], 2))
        self.assertIsNone(WorstFit().choose([], 1))

    def test_largest_gap_tie_resolves_to_lower_address(self) -> None:
        self.assertEqual(WorstFit().choose([Gap(10, 14), Gap(0, 4)], 2), 0)


class StrategyLookupTests(unittest.TestCase):
    def test_display_names(self) -> None:
        self.assertEqual(StrategyType.FIRST_FIT.display_name, "FIRST_FIT")
        self.assertEqual(BestFit().name, "BEST_FIT")
        self.assertEqual(WorstFit().strategy_type, StrategyType.WORST_FIT)

    def test_strategy_for_accepts_names_and_values(self) -> None:
        self.assertIsInstance(strategy_for("best-fit"), BestFit)
        self.assertIsInstance(strategy_for("first_fit"), FirstFit)
        self.assertIsInstance(strategy_for("WorstFit"), WorstFit)
        self.assertIsInstance(strategy_for(StrategyType.FIRST_FIT), FirstFit)
        self.assertIsInstance(strategy_for(2), WorstFit)

    def test_unknown_strategy(self) -> None:
        with self.assertRaises(InvalidConfigurationError):
            strategy_for("next_fit")
        with self.assertRaises(InvalidConfigurationError):
            strategy_for(7)
        for flag in (True, False):
            with self.assertRaises(InvalidConfigurationError):
                StrategyType.parse(flag)


if __name__ == "__main__":
    unittest.main()
