#!/usr/bin/env python3
"""
main.py — Goal Funding Planner

Usage:
  python main.py --plan data/sample_plan.json
  python main.py --plan data/sample_plan.json --style waterfall --budget 3000
  python main.py --plan data/sample_plan.json --savings 20000 --breakdown
"""

import argparse
import os
import sys
import warnings

import pandas as pd

# ── Path fix: works regardless of CWD ────────────────────────────────────────
_ROOT = os.path.dirname(os.path.abspath(__file__))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)
# ─────────────────────────────────────────────────────────────────────────────

from config import FUNDING_STYLES
from data.loader import load_plan
from planner.allocator import BudgetShortfallWarning, allocate, check_budget
from planner.goals import validate_goal_inputs
from planner.savings import apply_savings
from utils.dates import parse_year_month
from utils.report import allocation_frame, format_plan_report


# ─────────────────────────────────────────────────────────────────────────────
# PIPELINE
# ─────────────────────────────────────────────────────────────────────────────

def run_plan(
    plan_path: str,
    budget: float = None,
    funding_style: str = None,
    current_savings: float = None,
    today: str = None,
    show_breakdown: bool = False,
) -> dict:
    """Load goals, apply existing savings, simulate, print the plan."""

    plan = load_plan(plan_path, today=parse_year_month(today) if today else None)
    budget          = plan["budget"] if budget is None else budget
    funding_style   = funding_style or plan["funding_style"]
    current_savings = plan["current_savings"] if current_savings is None else current_savings
    goals           = plan["goals"]

    print(f"\n[STEP 1] Loaded {len(goals)} goals from {plan_path}  (as of {plan['today']})")
    for w in validate_goal_inputs(goals, budget):
        print(f"  * {w}")

    # ── Existing savings ───────────────────────────────────────────────────
    print(f"\n[STEP 2] Applying current savings: {current_savings:,.2f}")
    savings = apply_savings(goals, current_savings)
    for g in savings.goals:
        print(f"  {g.name:<20} covered {g.initial_amount:>12,.2f}   still to fund {g.remaining_amount:>12,.2f}")
    print(f"  Leftover savings: {savings.leftover:,.2f}")

    # ── Simulation ─────────────────────────────────────────────────────────
    print(f"\n[STEP 3] Simulating monthly allocation  (style: {funding_style})")
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", BudgetShortfallWarning)
        results = allocate(
            savings.goals, budget, funding_style,
            leftover_savings=savings.leftover, today=plan["today"],
        )
    for w in caught:
        print(f"  ⚠ {w.message}")

    diagnostics = check_budget(results, budget)
    report = format_plan_report(results, budget, funding_style, diagnostics, savings)
    print("\n" + report)

    if show_breakdown and results:
        frame = allocation_frame(results, plan["today"])
        with pd.option_context("display.max_rows", None, "display.width", 160):
            print("\n  MONTHLY BREAKDOWN")
            print(frame.round(2).to_string())

    return {
        "goals":       savings.goals,
        "savings":     savings,
        "results":     results,
        "diagnostics": diagnostics,
        "report":      report,
    }


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Goal Funding Planner — split a monthly budget across financial goals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --plan data/sample_plan.json
  python main.py --plan data/sample_plan.json --style parallel --budget 4000
  python main.py --plan data/sample_plan.json --savings 0 --breakdown
        """
    )
    parser.add_argument("--plan",      type=str,   required=True,  help="Plan file (JSON)")
    parser.add_argument("--budget",    type=float, default=None,   help="Monthly budget (overrides plan)")
    parser.add_argument("--style",     type=str,   default=None,   choices=FUNDING_STYLES,
                        help="Funding style: waterfall | parallel | hybrid")
    parser.add_argument("--savings",   type=float, default=None,   help="Current savings lump sum (overrides plan)")
    parser.add_argument("--today",     type=str,   default=None,   help="Plan start date YYYY-MM[-DD]")
    parser.add_argument("--breakdown", action="store_true",        help="Print the month-by-month breakdown")
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    run_plan(
        plan_path       = args.plan,
        budget          = args.budget,
        funding_style   = args.style,
        current_savings = args.savings,
        today           = args.today,
        show_breakdown  = args.breakdown,
    )
