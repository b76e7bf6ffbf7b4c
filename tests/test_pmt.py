import unittest

import numpy as np

from planner.goals import ReturnPhase
from planner.pmt import (
    InvalidHorizonError, compute_sum_f, phase_rate_at, phase_rate_schedule,
    required_payment,
)


class TestPhaseSchedule(unittest.TestCase):
    def test_schedule_follows_phases(self):
        phases = [ReturnPhase(2, 0.06), ReturnPhase(3, 0.03)]
        np.testing.assert_allclose(
            phase_rate_schedule(phases, 5), [0.06, 0.06, 0.03, 0.03, 0.03]
        )

    def test_schedule_pads_and_truncates(self):
        phases = [ReturnPhase(2, 0.06), ReturnPhase(1, 0.03)]
        np.testing.assert_allclose(phase_rate_schedule(phases, 5), [0.06, 0.06, 0.03, 0.03, 0.03])
        np.testing.assert_allclose(phase_rate_schedule(phases, 1), [0.06])

    def test_rate_past_last_phase_is_last_rate(self):
        phases = [ReturnPhase(6, 0.08), ReturnPhase(6, 0.02)]
        self.assertEqual(phase_rate_at(phases, 0), 0.08)
        self.assertEqual(phase_rate_at(phases, 5), 0.08)
        self.assertEqual(phase_rate_at(phases, 6), 0.02)
        self.assertEqual(phase_rate_at(phases, 40), 0.02)


class TestSumF(unittest.TestCase):
    def test_zero_rate_is_horizon(self):
        self.assertAlmostEqual(compute_sum_f([ReturnPhase(24, 0.0)], 24), 24.0)

    def test_single_phase_matches_closed_form(self):
        i, h = 0.05 / 12, 36
        expected = (1 + i) * ((1 + i) ** h - 1) / i
        self.assertAlmostEqual(compute_sum_f([ReturnPhase(h, 0.05)], h), expected, places=9)

    def test_multi_phase_by_hand(self):
        phases = [ReturnPhase(1, 0.12), ReturnPhase(1, 0.0)]
        # month 0 compounds twice at 1%, month 1 once at 0%
        self.assertAlmostEqual(compute_sum_f(phases, 2), 1.01 ** 2 + 1.0, places=12)


class TestRequiredPayment(unittest.TestCase):
    def test_round_trip_law(self):
        phases = [ReturnPhase(24, 0.06), ReturnPhase(12, 0.03)]
        pmt = required_payment(50_000, phases, 36)
        self.assertAlmostEqual(pmt * compute_sum_f(phases, 36), 50_000, places=6)

    def test_once_is_lump_sum(self):
        phases = [ReturnPhase(12, 0.0)]
        self.assertAlmostEqual(required_payment(12_000, phases, 12, "Once"), 1_000.0)
        self.assertAlmostEqual(required_payment(12_000, phases, 12), 1_000.0)

    def test_example_single_goal_reaches_target(self):
        phases = [ReturnPhase(12, 0.06)]
        pmt = required_payment(12_000, phases, 12)
        self.assertAlmostEqual(pmt, 12_000 / compute_sum_f(phases, 12), places=9)

        # each contribution compounds from its month to the target date
        balance = 0.0
        for month in range(12):
            balance = (balance + pmt) * (1 + phase_rate_at(phases, month) / 12)
        self.assertAlmostEqual(balance, 12_000, places=6)

        balance = 0.0
        for month in range(12):
            balance = (balance + round(pmt, 2)) * (1 + 0.06 / 12)
        self.assertLess(abs(balance - 12_000), 0.10)

    def test_present_value_annuity(self):
        phases = [ReturnPhase(60, 0.05)]
        pmt = required_payment(40_000, phases, 60, "Annual", 4)
        pv_factor = (1 - 1.05 ** -4) / 0.05
        self.assertAlmostEqual(pmt, 10_000 / pv_factor, places=9)

    def test_quarterly_uses_rate_per_period(self):
        phases = [ReturnPhase(48, 0.08), ReturnPhase(12, 0.02)]
        pmt = required_payment(40_000, phases, 60, "Quarterly", 2)
        r = 0.08 / 4
        self.assertAlmostEqual(pmt, 5_000 / ((1 - (1 + r) ** -8) / r), places=9)

    def test_zero_rate_annuity_falls_back_to_linear(self):
        phases = [ReturnPhase(24, 0.0)]
        self.assertAlmostEqual(required_payment(40_000, phases, 24, "Quarterly", 2), 625.0)

    def test_frequency_without_period_is_lump_sum(self):
        phases = [ReturnPhase(12, 0.0)]
        self.assertAlmostEqual(required_payment(12_000, phases, 12, "Monthly", None), 1_000.0)

    def test_invalid_horizon(self):
        with self.assertRaises(InvalidHorizonError):
            required_payment(1_000, [ReturnPhase(0, 0.05)], 0)
        with self.assertRaises(ValueError):
            required_payment(1_000, [], -3)

    def test_unknown_frequency(self):
        with self.assertRaises(ValueError):
            required_payment(1_000, [ReturnPhase(12, 0.05)], 12, "Weekly", 2)


if __name__ == "__main__":
    unittest.main()
