# planner/allocator.py — Sequential month-by-month allocation of a fixed budget
#
# Each simulated month:
#   1. pick the active goals for the funding style
#   2. capped proportional pass (share of initial PMT, never above it)
#   3. compound every balance at its phase rate, add this month's money
#   4. goals that reach target hand back what they don't need
#   5. uncapped pass: spread the leftover pool by remaining gap
# Every amount is rounded to cents when it is assigned.

import math
import warnings
from dataclasses import dataclass
from datetime import date
from typing import Optional

import numpy as np
import pandas as pd

from config import FUNDING_STYLES, DEFAULT_FUNDING_STYLE, NEAR_TERM_MONTHS, GAP_EPSILON
from planner.pmt import InvalidHorizonError, phase_rate_at, required_payment
from planner.savings import redistribute_leftover
from utils.dates import add_months, month_diff, month_start


class BudgetShortfallWarning(UserWarning):
    """Total theoretical PMT exceeds the monthly budget; goals are under-funded."""


# ─────────────────────────────────────────────────────────────────────────────
# RESULT
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(eq=False)
class GoalResult:
    """Simulated outcome for one goal. Arrays are read-only."""
    goal: object
    required_pmt: float              # realized: mean of non-zero monthly allocations
    amount_at_target: float
    remaining_gap: float
    monthly_allocations: np.ndarray
    initial_pmt: float               # theoretical, used only as weight / cap
    running_balances: np.ndarray
    funded_month: Optional[int] = None

    @property
    def is_funded(self) -> bool:
        return self.remaining_gap <= 0

    def to_frame(self, start: date = None) -> pd.DataFrame:
        months = np.arange(len(self.monthly_allocations))
        frame = pd.DataFrame({
            "month":      months,
            "allocation": self.monthly_allocations,
            "balance":    self.running_balances,
        })
        if start is not None:
            first = month_start(start)
            frame.insert(1, "date", [add_months(first, int(m)) for m in months])
        return frame


class _Track:
    """Mutable working state for one goal during a single simulation."""
    __slots__ = ("index", "goal", "target", "horizon", "initial_pmt",
                 "allocations", "balances", "complete", "funded_month")

    def __init__(self, index, goal, horizon, initial_pmt, total_months):
        self.index        = index
        self.goal         = goal
        self.target       = float(goal.funding_target)
        self.horizon      = horizon
        self.initial_pmt  = initial_pmt
        self.allocations  = np.zeros(total_months)
        self.balances     = np.zeros(total_months)
        self.complete     = self.target <= GAP_EPSILON
        self.funded_month = None

    def gap(self, month: int) -> float:
        if self.complete:
            return 0.0
        return max(self.target - self.balances[month], 0.0)


# ─────────────────────────────────────────────────────────────────────────────
# MONEY HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def _cents(x: float) -> float:
    return round(x, 2)


def _cents_floor(x: float) -> float:
    return math.floor(x * 100 + 1e-6) / 100


def _cents_ceil(x: float) -> float:
    return math.ceil(x * 100 - 1e-6) / 100


def _take(amount: float, pool: float) -> float:
    """Round to cents, never more than what is left in the pool."""
    return max(min(_cents(amount), _cents_floor(pool)), 0.0)


# ─────────────────────────────────────────────────────────────────────────────
# ACTIVE-SET SELECTION
# ─────────────────────────────────────────────────────────────────────────────

def _hybrid_buckets(tracks) -> list:
    """
    Bucket once, on the initial months-to-target; membership never changes.
      A: emergency fund   B: 1-60 months   C: > 60 months
    """
    emergency = [t for t in tracks if t.goal.is_emergency_fund]
    near = [t for t in tracks
            if not t.goal.is_emergency_fund and 0 < t.horizon <= NEAR_TERM_MONTHS]
    far  = [t for t in tracks
            if not t.goal.is_emergency_fund and t.horizon > NEAR_TERM_MONTHS]
    return [b for b in (emergency, near, far) if b]


def _select_active(style: str, tracks, month: int, buckets) -> list:
    if style == "waterfall":
        fundable = [t for t in tracks if not t.complete and t.horizon - month > 0]
        if not fundable:
            return []
        return [min(fundable, key=lambda t: (t.goal.target_date, t.index))]

    if style == "hybrid":
        for bucket in buckets:
            unfunded = [t for t in bucket if not t.complete and t.horizon - month > 0]
            if unfunded:
                return unfunded
        return []

    # parallel
    return [t for t in tracks if not t.complete and t.horizon - month >= 0]


# ─────────────────────────────────────────────────────────────────────────────
# ENGINE
# ─────────────────────────────────────────────────────────────────────────────

def _initial_pmt(goal, horizon: int) -> float:
    if goal.funding_target <= GAP_EPSILON:
        return 0.0
    try:
        return required_payment(
            goal.funding_target, goal.return_phases, horizon,
            goal.payment_frequency, goal.payment_period,
        )
    except InvalidHorizonError:
        # Past-due goal: no theoretical PMT, it can still take surplus
        return 0.0


def allocate(
    goals,
    budget: float,
    funding_style: str = DEFAULT_FUNDING_STYLE,
    leftover_savings: float = 0.0,
    today: date = None,
) -> list:
    """
    Simulate month by month how `budget` is split across `goals`.

    Returns one GoalResult per input goal, in input order. Inputs are never
    mutated. A budget below the total theoretical PMT still runs (partial
    funding) and issues a BudgetShortfallWarning.
    """
    if funding_style not in FUNDING_STYLES:
        raise ValueError(
            f"Unknown funding style: '{funding_style}'. Choose from: {FUNDING_STYLES}"
        )
    goals = list(goals)
    if not goals or budget <= 0:
        return []

    if leftover_savings and leftover_savings > 0:
        goals = redistribute_leftover(goals, leftover_savings).goals

    today = today or date.today()
    horizons = [month_diff(today, g.target_date) for g in goals]
    total_months = max(max(horizons), 0)

    tracks = [
        _Track(i, g, h, _initial_pmt(g, h), total_months)
        for i, (g, h) in enumerate(zip(goals, horizons))
    ]

    total_pmt = sum(t.initial_pmt for t in tracks)
    if total_pmt > budget:
        warnings.warn(
            f"Total required PMT ({total_pmt:,.2f}) exceeds monthly budget "
            f"({budget:,.2f}); goals will be under-funded.",
            BudgetShortfallWarning,
            stacklevel=2,
        )

    buckets = _hybrid_buckets(tracks) if funding_style == "hybrid" else []

    for month in range(total_months):
        pool   = float(budget)
        active = _select_active(funding_style, tracks, month, buckets)

        # ── Pass 1: capped proportional on initial PMT ────────────────────
        active_pmt = sum(t.initial_pmt for t in active)
        if active_pmt > 0:
            for t in active:
                share = t.initial_pmt / active_pmt
                amount = _take(min(budget * share, t.initial_pmt), pool)
                t.allocations[month] = amount
                pool -= amount

        # ── Compound every balance, settle completed goals ────────────────
        for t in tracks:
            prev  = t.balances[month - 1] if month > 0 else 0.0
            rate  = phase_rate_at(t.goal.return_phases, month)
            grown = prev * (1 + rate / 12)
            t.balances[month] = grown + t.allocations[month]

            if not t.complete and t.balances[month] >= t.target - GAP_EPSILON:
                # keep only what closes the gap, hand the rest back
                kept   = min(t.allocations[month], max(_cents_ceil(t.target - grown), 0.0))
                refund = _cents(t.allocations[month] - kept)
                t.allocations[month] = kept
                t.balances[month]    = grown + kept
                pool += refund
                t.complete     = True
                t.funded_month = month

        # ── Pass 2: uncapped, proportional to remaining gap ───────────────
        if pool >= 0.01:
            open_goals = [t for t in active if not t.complete]
            total_gap  = sum(t.gap(month) for t in open_goals)
            if total_gap > 0:
                surplus = pool
                for t in open_goals:
                    extra = _take(surplus * t.gap(month) / total_gap, pool)
                    if extra <= 0:
                        continue
                    t.allocations[month] = _cents(t.allocations[month] + extra)
                    t.balances[month]   += extra
                    pool -= extra
                    if t.balances[month] >= t.target - GAP_EPSILON:
                        t.complete     = True
                        t.funded_month = month

    return [_to_result(t, total_months) for t in tracks]


def _to_result(track: _Track, total_months: int) -> GoalResult:
    allocations = track.allocations
    non_zero = allocations[allocations > 0]
    realized_pmt = _cents(float(non_zero.mean())) if len(non_zero) else 0.0

    target_idx = min(track.horizon, total_months) - 1
    amount_at_target = float(track.balances[target_idx]) if target_idx >= 0 else 0.0

    if track.target <= GAP_EPSILON:
        gap = 0.0
    elif track.funded_month is not None and track.funded_month <= target_idx:
        gap = 0.0
    else:
        gap = max(_cents(track.target - amount_at_target), 0.0)

    allocations.flags.writeable = False
    track.balances.flags.writeable = False

    return GoalResult(
        goal                = track.goal,
        required_pmt        = realized_pmt,
        amount_at_target    = _cents(amount_at_target),
        remaining_gap       = gap,
        monthly_allocations = allocations,
        initial_pmt         = track.initial_pmt,
        running_balances    = track.balances,
        funded_month        = track.funded_month,
    )


# ─────────────────────────────────────────────────────────────────────────────
# DIAGNOSTICS
# ─────────────────────────────────────────────────────────────────────────────

def check_budget(results, budget: float) -> list[str]:
    """Returns list of funding diagnostics for the user (not errors)."""
    messages = []
    if not results:
        return messages

    total_pmt = sum(r.initial_pmt for r in results)
    if total_pmt > budget:
        messages.append(
            f"Goals need {total_pmt:,.2f}/month in total but the budget is "
            f"{budget:,.2f} — short by {total_pmt - budget:,.2f}/month."
        )

    for r in results:
        if r.remaining_gap > 0:
            messages.append(
                f"'{r.goal.name}' finishes {r.remaining_gap:,.2f} short of its target."
            )
    return messages
