import unittest

from planner.adjustments import household_expenses_for_retirement


class TestRetirementHousehold(unittest.TestCase):
    def test_large_family_scaled_to_two_adults(self):
        self.assertEqual(household_expenses_for_retirement(6_000, 4), 3_000.0)
        self.assertEqual(household_expenses_for_retirement(5_000, 3), 3_333.0)

    def test_small_or_individual_unchanged(self):
        self.assertEqual(household_expenses_for_retirement(6_000, 2), 6_000)
        self.assertEqual(household_expenses_for_retirement(6_000, 5, "individual"), 6_000)
        self.assertEqual(household_expenses_for_retirement(6_000, None), 6_000)

    def test_negative_expenses(self):
        with self.assertRaises(ValueError):
            household_expenses_for_retirement(-1, 3)


if __name__ == "__main__":
    unittest.main()
