# utils/report.py — Monthly breakdown frames and the printed plan report

from datetime import date

import pandas as pd

from utils.dates import add_months, month_start


def allocation_frame(results, start: date, value: str = "allocation") -> pd.DataFrame:
    """
    Wide monthly breakdown: one row per month, one column per goal.
    value: 'allocation' | 'balance'
    """
    if value not in ("allocation", "balance"):
        raise ValueError(f"Unknown value: {value}")
    if not results:
        return pd.DataFrame()

    n_months = len(results[0].monthly_allocations)
    first = month_start(start)
    index = pd.Index([add_months(first, m) for m in range(n_months)], name="month")

    columns = {}
    for r in results:
        series = r.monthly_allocations if value == "allocation" else r.running_balances
        name = r.goal.name if r.goal.name not in columns else f"{r.goal.name} ({r.goal.id})"
        columns[name] = series
    frame = pd.DataFrame(columns, index=index)
    if value == "allocation":
        frame["Total"] = frame.sum(axis=1).round(2)
    return frame


def summary_frame(results) -> pd.DataFrame:
    """One row per goal, emergency fund first then by target date."""
    rows = []
    for r in sorted(results, key=lambda r: (not r.goal.is_emergency_fund, r.goal.target_date)):
        goal = r.goal
        rows.append({
            "goal":             goal.name,
            "target_date":      goal.target_date,
            "target":           goal.funding_target,
            "initial_pmt":      round(r.initial_pmt, 2),
            "required_pmt":     r.required_pmt,
            "amount_at_target": r.amount_at_target,
            "remaining_gap":    r.remaining_gap,
            "funded":           r.is_funded,
        })
    return pd.DataFrame(rows)


def format_plan_report(
    results,
    budget: float,
    funding_style: str,
    diagnostics: list = None,
    savings=None,
) -> str:
    """Generate a human-readable funding plan report."""
    lines = []
    lines.append("=" * 62)
    lines.append(f"  GOAL FUNDING PLAN")
    lines.append(f"  Funding style : {funding_style}")
    lines.append(f"  Budget        : {budget:>12,.2f} / month")
    if savings is not None:
        lines.append(f"  Savings used  : {savings.total_allocated:>12,.2f}")
        lines.append(f"  Savings left  : {savings.leftover:>12,.2f}")
    lines.append("=" * 62)

    if not results:
        lines.append("  No goals to fund.")
        lines.append("=" * 62)
        return "\n".join(lines)

    lines.append(f"  {'Goal':<20} {'Target':>11} {'PMT':>10} {'At target':>11} {'Gap':>9}")
    lines.append("─" * 62)
    summary = summary_frame(results)
    for _, row in summary.iterrows():
        lines.append(
            f"  {row['goal'][:20]:<20} "
            f"{row['target']:>11,.0f} "
            f"{row['required_pmt']:>10,.2f} "
            f"{row['amount_at_target']:>11,.0f} "
            f"{row['remaining_gap']:>9,.0f}"
        )
    lines.append("─" * 62)
    funded = int(summary["funded"].sum())
    lines.append(f"  Funded goals  : {funded} / {len(summary)}")

    if diagnostics:
        lines.append("\n  WARNINGS:")
        for d in diagnostics:
            lines.append(f"  * {d}")

    lines.append("=" * 62)
    return "\n".join(lines)
