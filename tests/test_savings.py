import unittest
from datetime import date

from planner.goals import Goal, ReturnPhase
from planner.savings import apply_savings, order_by_priority, redistribute_leftover
from utils.dates import add_months

TODAY = date(2026, 1, 1)


def _goal(gid, amount, months, rate=0.02):
    return Goal(
        id=gid, name=gid, category="Other", amount=amount,
        target_date=add_months(TODAY, months), horizon_months=months,
        return_phases=(ReturnPhase(months, rate),),
    )


class TestApplySavings(unittest.TestCase):
    def test_emergency_fund_first_then_nearest_date(self):
        goals = [_goal("emergency-fund", 10_000, 6), _goal("g2", 5_000, 3)]
        out = apply_savings(goals, 12_000)

        self.assertEqual([g.id for g in out.goals], ["emergency-fund", "g2"])
        ef, g2 = out.goals
        self.assertEqual(ef.initial_amount, 10_000)
        self.assertEqual(ef.remaining_amount, 0)
        self.assertEqual(g2.initial_amount, 2_000)
        self.assertEqual(g2.remaining_amount, 3_000)
        self.assertEqual(out.leftover, 0)
        self.assertEqual(out.total_allocated, 12_000)

    def test_keeps_input_order_and_cardinality(self):
        goals = [_goal("far", 8_000, 48), _goal("near", 1_000, 2), _goal("emergency-fund", 3_000, 12)]
        out = apply_savings(goals, 3_500)

        self.assertEqual([g.id for g in out.goals], ["far", "near", "emergency-fund"])
        self.assertEqual(out.goals[2].initial_amount, 3_000)
        self.assertEqual(out.goals[1].initial_amount, 500)
        self.assertEqual(out.goals[0].initial_amount, 0)
        self.assertEqual(out.goals[0].remaining_amount, 8_000)

    def test_invariants_across_lump_sums(self):
        goals = [_goal("a", 4_000, 10), _goal("b", 2_500, 20), _goal("emergency-fund", 6_000, 30)]
        total = sum(g.amount for g in goals)
        for lump in (0, 100, 6_000, 9_999.99, 12_500, 20_000):
            out = apply_savings(goals, lump)
            self.assertEqual(len(out.goals), len(goals))
            allocated = sum(g.initial_amount for g in out.goals)
            self.assertAlmostEqual(allocated, min(lump, total), places=9)
            self.assertAlmostEqual(out.leftover, lump - out.total_allocated, places=9)
            self.assertGreaterEqual(out.leftover, 0)
            for g in out.goals:
                self.assertAlmostEqual(g.initial_amount + g.remaining_amount, g.amount, places=9)

    def test_does_not_touch_inputs(self):
        goals = [_goal("a", 4_000, 10)]
        apply_savings(goals, 1_000)
        self.assertIsNone(goals[0].initial_amount)
        self.assertIsNone(goals[0].remaining_amount)

    def test_negative_lump_sum_is_nothing(self):
        out = apply_savings([_goal("a", 4_000, 10)], -50)
        self.assertEqual(out.goals[0].initial_amount, 0)
        self.assertEqual(out.leftover, 0)


class TestOrderByPriority(unittest.TestCase):
    def test_emergency_fund_beats_earlier_dates(self):
        goals = [_goal("b", 1, 9), _goal("emergency-fund", 1, 24), _goal("a", 1, 3)]
        self.assertEqual([g.id for g in order_by_priority(goals)], ["emergency-fund", "a", "b"])


class TestRedistributeLeftover(unittest.TestCase):
    def test_proportional_to_open_remaining(self):
        goals = [
            _goal("a", 3_000, 12).with_savings(0, 3_000),
            _goal("b", 1_000, 12).with_savings(0, 1_000),
            _goal("c", 500, 12).with_savings(500, 0),
        ]
        out = redistribute_leftover(goals, 2_000)
        self.assertAlmostEqual(out.goals[0].initial_amount, 1_500)
        self.assertAlmostEqual(out.goals[0].remaining_amount, 1_500)
        self.assertAlmostEqual(out.goals[1].initial_amount, 500)
        self.assertIs(out.goals[2], goals[2])
        self.assertAlmostEqual(out.leftover, 0)
        self.assertAlmostEqual(out.total_allocated, 2_000)

    def test_never_beyond_what_is_needed(self):
        goals = [_goal("a", 3_000, 12).with_savings(0, 3_000), _goal("b", 1_000, 12)]
        out = redistribute_leftover(goals, 10_000)
        self.assertAlmostEqual(out.goals[0].remaining_amount, 0)
        self.assertAlmostEqual(out.goals[1].remaining_amount, 0)
        self.assertAlmostEqual(out.total_allocated, 4_000)
        self.assertAlmostEqual(out.leftover, 6_000)

    def test_nothing_to_do(self):
        goals = [_goal("a", 3_000, 12).with_savings(3_000, 0)]
        out = redistribute_leftover(goals, 500)
        self.assertEqual(out.leftover, 500)
        self.assertEqual(out.total_allocated, 0)


if __name__ == "__main__":
    unittest.main()
