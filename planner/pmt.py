# planner/pmt.py — Required monthly payment under a phased-rate schedule
#
# Two goal shapes:
#   - Lump sum at target date ("Once"): each month's unit contribution
#     compounds forward to the target at the rate of the phase it falls in.
#   - Paid out over time after the target date (tuition, mortgage): the
#     target is treated as the present value of an annuity.

import numpy as np

from config import PAYMENTS_PER_YEAR


class InvalidHorizonError(ValueError):
    """Target date is not strictly in the future."""


# ─────────────────────────────────────────────────────────────────────────────
# PHASE SCHEDULE
# ─────────────────────────────────────────────────────────────────────────────

def phase_rate_schedule(return_phases, horizon_months: int) -> np.ndarray:
    """
    Annual rate for every month 0..horizon-1.
    Phases longer than the horizon are truncated; a schedule shorter than the
    horizon keeps the last phase's rate for the remaining months.
    """
    if horizon_months <= 0:
        return np.zeros(0)
    if not return_phases:
        return np.zeros(horizon_months)

    lengths = np.array([max(int(p.length), 0) for p in return_phases])
    rates   = np.array([float(p.rate) for p in return_phases])
    schedule = np.repeat(rates, lengths)

    if len(schedule) < horizon_months:
        pad = np.full(horizon_months - len(schedule), rates[-1])
        schedule = np.concatenate([schedule, pad])
    return schedule[:horizon_months]


def phase_rate_at(return_phases, month: int) -> float:
    """Rate covering `month`; past the last phase the last rate applies."""
    if not return_phases:
        return 0.0
    covered = 0
    for phase in return_phases:
        covered += phase.length
        if month < covered:
            return phase.rate
    return return_phases[-1].rate


def compute_sum_f(return_phases, horizon_months: int) -> float:
    """
    Σ_{t=0}^{h-1} (1 + rate(t)/12)^(h - t)

    Future value at the target date of contributing 1 per month.
    """
    rates = phase_rate_schedule(return_phases, horizon_months)
    exponents = horizon_months - np.arange(horizon_months)
    return float(np.sum((1 + rates / 12) ** exponents))


# ─────────────────────────────────────────────────────────────────────────────
# PMT
# ─────────────────────────────────────────────────────────────────────────────

def required_payment(
    target_amount: float,
    return_phases,
    horizon_months: int,
    payment_frequency: str = None,
    payment_period: float = None,
) -> float:
    """
    Monthly payment required to reach target_amount.

    Frequency None / "Once" (or no payment period): target / sumF.
    Otherwise the target is spread over payment_period years of payments and
    discounted at the first phase's rate (PV annuity).

    sumF lets each deposit grow for the month it is made in. The allocation
    engine adds deposits at month end, so a lone goal funded at exactly this
    payment ends roughly one month of growth short of its target.
    """
    if horizon_months <= 0:
        raise InvalidHorizonError(
            f"Horizon must be at least 1 month (got {horizon_months})."
        )

    if not payment_frequency or payment_frequency == "Once" or not payment_period:
        return target_amount / compute_sum_f(return_phases, horizon_months)

    if payment_frequency not in PAYMENTS_PER_YEAR:
        raise ValueError(
            f"Unknown payment frequency: '{payment_frequency}'. "
            f"Choose from: {['Once'] + list(PAYMENTS_PER_YEAR.keys())}"
        )

    payments_per_year = PAYMENTS_PER_YEAR[payment_frequency]
    total_payments    = payment_period * payments_per_year
    per_payment       = target_amount / total_payments
    first_rate        = return_phases[0].rate if return_phases else 0.0
    rate_per_period   = first_rate / payments_per_year

    if rate_per_period == 0:
        return per_payment / total_payments

    pv_factor = (1 - (1 + rate_per_period) ** -total_payments) / rate_per_period
    return per_payment / pv_factor
