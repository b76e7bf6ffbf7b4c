# planner/savings.py — Apply existing savings (a one-time lump sum) to goals
#
# Priority: emergency fund first, then nearest target date. Greedy: each
# goal takes what it can until the pool runs dry.

from typing import NamedTuple

from config import GAP_EPSILON, MONEY_DECIMALS


class SavingsAllocation(NamedTuple):
    goals: list              # same order and length as the input
    leftover: float          # unused savings, always >= 0
    total_allocated: float


def _priority_key(goal):
    return (not goal.is_emergency_fund, goal.target_date)


def order_by_priority(goals) -> list:
    """Emergency fund first, remaining goals by ascending target date (stable)."""
    return sorted(goals, key=_priority_key)


def apply_savings(goals, lump_sum: float) -> SavingsAllocation:
    """
    Walk goals in priority order; each takes min(pool, amount).

    initial_amount   = what the savings cover
    remaining_amount = what the monthly budget still has to fund
    """
    goals = list(goals)
    pool = max(float(lump_sum or 0.0), 0.0)
    applied = [None] * len(goals)

    for i in sorted(range(len(goals)), key=lambda i: _priority_key(goals[i])):
        goal = goals[i]
        initial = min(pool, goal.amount) if pool > GAP_EPSILON else 0.0
        pool -= initial
        applied[i] = goal.with_savings(initial, goal.amount - initial)

    total_allocated = sum(g.initial_amount for g in applied)
    leftover = max(float(lump_sum or 0.0) - total_allocated, 0.0)
    return SavingsAllocation(applied, leftover, total_allocated)


def redistribute_leftover(goals, leftover: float) -> SavingsAllocation:
    """
    Spread leftover savings over goals that still have an open remaining
    amount (typically after a goal was added or enlarged), proportionally to
    what each still needs and never beyond it.
    """
    goals = list(goals)
    leftover = max(float(leftover or 0.0), 0.0)
    total_gap = sum(g.funding_target for g in goals if g.funding_target > GAP_EPSILON)

    if leftover <= GAP_EPSILON or total_gap <= GAP_EPSILON:
        return SavingsAllocation(goals, leftover, 0.0)

    spend = min(leftover, total_gap)
    result, used = [], 0.0
    for goal in goals:
        gap = goal.funding_target
        if gap <= GAP_EPSILON:
            result.append(goal)
            continue
        top_up = max(min(round(spend * gap / total_gap, MONEY_DECIMALS), gap, spend - used), 0.0)
        used += top_up
        initial = (goal.initial_amount or 0.0) + top_up
        result.append(goal.with_savings(initial, gap - top_up))

    return SavingsAllocation(result, leftover - used, used)
