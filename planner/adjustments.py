# planner/adjustments.py — Household-size scaling for retirement costs

from config import RETIREMENT_HOUSEHOLD_ADULTS


def household_expenses_for_retirement(
    monthly_expenses: float,
    family_size: int,
    planning_type: str = "family",
) -> float:
    """
    Retirement is planned for two adults: children leave the household.
    Family plans with more members than that are scaled down; individual
    plans and small households are returned unchanged.
    """
    if monthly_expenses < 0:
        raise ValueError("Monthly expenses cannot be negative.")
    if planning_type != "family" or not family_size:
        return monthly_expenses
    if family_size <= RETIREMENT_HOUSEHOLD_ADULTS:
        return monthly_expenses
    return float(round(monthly_expenses * RETIREMENT_HOUSEHOLD_ADULTS / family_size))

