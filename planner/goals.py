# planner/goals.py — Goal records and the goal-creation boundary
#
# A goal is created (or edited) here: the horizon picks a risk profile, the
# profile's rates are laid out as return phases, and the initial PMT is
# solved once. The allocation engine treats the result as read-only input.

import math
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from config import (
    EMERGENCY_FUND_ID, EMERGENCY_FUND_NAME, GOAL_CATEGORIES,
    PAYMENT_OPTION_CATEGORIES, PAYMENT_FREQUENCIES, PROFILES, DEFAULT_RATES,
    CONSERVATIVE_MAX_YEARS, BALANCED_MAX_YEARS, BALANCED_LOW_PHASE_MONTHS,
    GROWTH_HIGH_SHARE, GROWTH_MID_SHARE, EMERGENCY_BUFFER_MONTHS,
    EMERGENCY_DEFAULT_RATE, EMERGENCY_MIN_RATE, RETIREMENT_ID_PREFIX, RETIREMENT_NAME,
    RETIREMENT_RATE, RETIREMENT_EXPENSE_MULTIPLE, RETIREMENT_DEFAULT_INFLATION,
)
from planner.adjustments import household_expenses_for_retirement
from planner.pmt import InvalidHorizonError, required_payment
from utils.dates import add_months, month_diff


# ─────────────────────────────────────────────────────────────────────────────
# RECORDS
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ReturnPhase:
    """Contiguous span of months compounding at one annual rate."""
    length: int      # months
    rate: float      # annual, e.g. 0.05

    def __post_init__(self):
        if self.length < 0:
            raise ValueError(f"Phase length cannot be negative (got {self.length}).")


@dataclass(frozen=True)
class Goal:
    """User-defined financial goal."""
    id: str
    name: str
    category: str
    amount: float
    target_date: date
    horizon_months: int
    return_phases: tuple
    required_pmt: float = 0.0
    payment_frequency: Optional[str] = None   # Once | Monthly | Quarterly | Biannual | Annual
    payment_period: Optional[float] = None    # years of pay-out after target date
    initial_amount: Optional[float] = None    # set by the savings allocator
    remaining_amount: Optional[float] = None  # set by the savings allocator
    profile: str = "Conservative"
    buffer_months: Optional[int] = None       # emergency fund only
    custom_rates: Optional[dict] = field(default=None, compare=False)

    def __post_init__(self):
        if self.category not in GOAL_CATEGORIES:
            raise ValueError(
                f"Unknown category: '{self.category}'. Choose from: {GOAL_CATEGORIES}"
            )
        if self.payment_frequency is not None and self.payment_frequency not in PAYMENT_FREQUENCIES:
            raise ValueError(
                f"Unknown payment frequency: '{self.payment_frequency}'. "
                f"Choose from: {PAYMENT_FREQUENCIES}"
            )
        if self.profile not in PROFILES:
            raise ValueError(f"Unknown profile: '{self.profile}'. Choose from: {PROFILES}")
        if self.amount < 0:
            raise ValueError("Goal amount cannot be negative.")
        # tuple keeps the record hashable and immutable
        object.__setattr__(self, "return_phases", tuple(self.return_phases))
        total = sum(p.length for p in self.return_phases)
        if total != self.horizon_months:
            raise ValueError(
                f"Return phases cover {total} months but horizon is "
                f"{self.horizon_months} months for goal '{self.name}'."
            )

    @property
    def is_emergency_fund(self) -> bool:
        return self.id == EMERGENCY_FUND_ID

    @property
    def funding_target(self) -> float:
        """What still has to be saved: remaining amount once savings are applied."""
        if self.remaining_amount is not None:
            return self.remaining_amount
        return self.amount

    def with_savings(self, initial_amount: float, remaining_amount: float) -> "Goal":
        return replace(self, initial_amount=initial_amount, remaining_amount=remaining_amount)


# ─────────────────────────────────────────────────────────────────────────────
# HORIZON → PROFILE → RETURN PHASES
# ─────────────────────────────────────────────────────────────────────────────

def recommended_profile(horizon_months: int) -> str:
    """Short horizon = conservative; long horizon can carry growth assets."""
    years = horizon_months / 12
    if years <= CONSERVATIVE_MAX_YEARS:
        return "Conservative"
    if years <= BALANCED_MAX_YEARS:
        return "Balanced"
    return "Growth"


def build_return_phases(horizon_months: int, rates: dict = None) -> list:
    """
    Lay the profile's rates out over the horizon.

      <= 3 years : one phase at the low rate
      <= 7 years : high rate, then the last 24 months at the low rate
      longer     : 72% high, 16% mid, remainder low (glidepath)
    """
    if rates is None:
        rates = DEFAULT_RATES[recommended_profile(horizon_months)]
    years = horizon_months / 12

    if years <= CONSERVATIVE_MAX_YEARS:
        return [ReturnPhase(horizon_months, rates["low"])]

    if years <= BALANCED_MAX_YEARS:
        low = BALANCED_LOW_PHASE_MONTHS
        return [
            ReturnPhase(horizon_months - low, rates["high"]),
            ReturnPhase(low, rates["low"]),
        ]

    high = math.floor(horizon_months * GROWTH_HIGH_SHARE)
    mid  = math.floor(horizon_months * GROWTH_MID_SHARE)
    low  = horizon_months - high - mid
    return [
        ReturnPhase(high, rates["high"]),
        ReturnPhase(mid, rates["mid"]),
        ReturnPhase(low, rates["low"]),
    ]


# ─────────────────────────────────────────────────────────────────────────────
# GOAL FACTORIES
# ─────────────────────────────────────────────────────────────────────────────

def create_goal(
    name: str,
    amount: float,
    target_date: date,
    category: str = "Other",
    goal_id: str = None,
    payment_frequency: str = None,
    payment_period: float = None,
    custom_rates: dict = None,
    profile: str = None,
    today: date = None,
) -> Goal:
    """
    Build a goal the way the goal editor does: reject non-future dates,
    pick the profile from the horizon, lay out phases, solve the initial PMT.
    Editing a goal is just calling this again with the same goal_id.

    profile overrides the recommended one; its default rates are used unless
    custom_rates are given. The phase shape always follows the horizon.
    """
    today = today or date.today()
    horizon = month_diff(today, target_date)
    if horizon <= 0:
        raise InvalidHorizonError(
            f"Target date must be in the future. '{name}' targets "
            f"{target_date.isoformat()}, but today is {today.isoformat()}."
        )

    if profile is not None and profile not in PROFILES:
        raise ValueError(f"Unknown profile: '{profile}'. Choose from: {PROFILES}")
    profile = profile or recommended_profile(horizon)
    rates   = custom_rates or DEFAULT_RATES[profile]
    phases  = build_return_phases(horizon, rates)

    # Pay-out schedules only make sense for tuition / property style goals
    if category in PAYMENT_OPTION_CATEGORIES:
        frequency = payment_frequency or "Once"
        period    = payment_period if frequency != "Once" else None
    else:
        frequency, period = None, None

    pmt = required_payment(amount, phases, horizon, frequency, period)

    return Goal(
        id                = goal_id or f"goal-{name.strip().lower().replace(' ', '-')}",
        name              = name,
        category          = category,
        amount            = amount,
        target_date       = target_date,
        horizon_months    = horizon,
        return_phases     = tuple(phases),
        required_pmt      = pmt,
        payment_frequency = frequency,
        payment_period    = period,
        profile           = profile,
        custom_rates      = custom_rates,
    )


def create_emergency_fund(
    monthly_expenses: float,
    target_date: date,
    buffer_months: int = EMERGENCY_BUFFER_MONTHS,
    rate: float = None,
    today: date = None,
) -> Goal:
    """Safety net: buffer_months of expenses, parked at a savings-account rate."""
    if monthly_expenses <= 0:
        raise ValueError("Monthly expenses are required to size the emergency fund.")
    today   = today or date.today()
    horizon = max(1, month_diff(today, target_date))
    amount  = max(0.0, monthly_expenses * buffer_months)
    rate    = max(EMERGENCY_MIN_RATE, rate or EMERGENCY_DEFAULT_RATE)
    phases  = (ReturnPhase(horizon, rate),)

    return Goal(
        id             = EMERGENCY_FUND_ID,
        name           = EMERGENCY_FUND_NAME,
        category       = "Home",
        amount         = amount,
        target_date    = target_date,
        horizon_months = horizon,
        return_phases  = phases,
        required_pmt   = required_payment(amount, phases, horizon),
        profile        = "Conservative",
        buffer_months  = buffer_months,
    )


def retirement_amount(monthly_costs: float, years: int, inflation_rate: float) -> float:
    """
    Capital needed at retirement: today's monthly costs inflated to the
    retirement year, annualised, times 25 (4% withdrawal rule). Whole units.
    """
    future_monthly = monthly_costs * (1 + inflation_rate) ** years
    return float(math.ceil(future_monthly * 12 * RETIREMENT_EXPENSE_MULTIPLE))


def create_retirement_goal(
    monthly_costs: float,
    current_age: int,
    retirement_age: int,
    inflation_rate: float = RETIREMENT_DEFAULT_INFLATION,
    family_size: int = None,
    planning_type: str = "family",
    goal_id: str = None,
    today: date = None,
) -> Goal:
    """
    Retirement goal sized from monthly living costs. Family plans are scaled
    to two adults first. Long horizon, so one Growth phase at 7%.
    """
    if monthly_costs <= 0:
        raise ValueError("Monthly costs are required to size the retirement goal.")
    years = retirement_age - current_age
    if years <= 0:
        raise InvalidHorizonError(
            f"Retirement age ({retirement_age}) must be above current age ({current_age})."
        )

    today   = today or date.today()
    costs   = household_expenses_for_retirement(monthly_costs, family_size, planning_type)
    amount  = retirement_amount(costs, years, inflation_rate)
    target  = add_months(today, years * 12)
    horizon = month_diff(today, target)
    phases  = (ReturnPhase(horizon, RETIREMENT_RATE),)

    return Goal(
        id             = goal_id or f"{RETIREMENT_ID_PREFIX}-{retirement_age}",
        name           = RETIREMENT_NAME,
        category       = "Retirement",
        amount         = amount,
        target_date    = target,
        horizon_months = horizon,
        return_phases  = phases,
        required_pmt   = required_payment(amount, phases, horizon),
        profile        = "Growth",
    )


# ─────────────────────────────────────────────────────────────────────────────
# VALIDATION
# ─────────────────────────────────────────────────────────────────────────────

def validate_goal_inputs(goals, budget: float) -> list[str]:
    """Returns list of warnings for the user (not errors — just guidance)."""
    warnings_list = []

    if not goals:
        warnings_list.append("No goals defined yet — add at least one goal to build a plan.")
    if budget <= 0:
        warnings_list.append("Monthly budget must be positive to fund any goal.")

    ids = [g.id for g in goals]
    if len(ids) != len(set(ids)):
        warnings_list.append(
            "Duplicate goal ids found (e.g. two goals with the same name). "
            "Give each goal its own id so results can be told apart."
        )

    if goals and not any(g.is_emergency_fund for g in goals):
        warnings_list.append(
            "No emergency fund defined. Consider building a safety net before other goals."
        )

    for g in goals:
        if g.amount == 0:
            warnings_list.append(f"Goal '{g.name}' has a zero amount and will never receive funds.")
        if g.payment_frequency not in (None, "Once") and not g.payment_period:
            warnings_list.append(
                f"Goal '{g.name}' pays out {g.payment_frequency} but has no payment period — "
                f"it is planned as a lump sum at the target date."
            )

    return warnings_list
