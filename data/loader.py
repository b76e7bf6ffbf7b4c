# data/loader.py — Read a plan file (JSON) into Goal records

import json
import os
from datetime import date

from config import DEFAULT_FUNDING_STYLE, EMERGENCY_BUFFER_MONTHS, RETIREMENT_DEFAULT_INFLATION
from planner.goals import create_emergency_fund, create_goal, create_retirement_goal
from utils.dates import parse_year_month


def _require(entry: dict, key: str, where: str):
    if key not in entry:
        raise ValueError(f"Missing '{key}' in {where}.")
    return entry[key]


def parse_plan(raw: dict, today: date = None) -> dict:
    """
    Build goals from a plan dict.

    {
      "today": "2026-01-15",                      (optional)
      "budget": 2500,
      "funding_style": "hybrid",                  (optional)
      "current_savings": 12000,                   (optional)
      "emergency_fund": {"monthly_expenses": 3000, "buffer_months": 3,
                         "target_date": "2026-12", "rate": 0.02},
      "goals": [{"name": "Car", "amount": 20000, "target_date": "2029-06",
                 "category": "Other", "profile": "Growth"}, ...],   (profile optional)
      "retirement": {"monthly_costs": 4000, "current_age": 35, "retirement_age": 60,
                     "inflation_rate": 0.03, "family_size": 4, "planning_type": "family"}
    }
    """
    if "today" in raw and today is None:
        today = parse_year_month(raw["today"])
    today = today or date.today()

    goals = []
    ef = raw.get("emergency_fund")
    if ef:
        goals.append(create_emergency_fund(
            monthly_expenses = float(_require(ef, "monthly_expenses", "emergency_fund")),
            target_date      = parse_year_month(_require(ef, "target_date", "emergency_fund")),
            buffer_months    = int(ef.get("buffer_months", EMERGENCY_BUFFER_MONTHS)),
            rate             = ef.get("rate"),
            today            = today,
        ))

    for i, entry in enumerate(raw.get("goals", [])):
        where = f"goals[{i}]"
        goals.append(create_goal(
            name              = _require(entry, "name", where),
            amount            = float(_require(entry, "amount", where)),
            target_date       = parse_year_month(_require(entry, "target_date", where)),
            category          = entry.get("category", "Other"),
            goal_id           = entry.get("id"),
            payment_frequency = entry.get("payment_frequency"),
            payment_period    = entry.get("payment_period"),
            custom_rates      = entry.get("custom_rates"),
            profile           = entry.get("profile"),
            today             = today,
        ))

    ret = raw.get("retirement")
    if ret:
        goals.append(create_retirement_goal(
            monthly_costs  = float(_require(ret, "monthly_costs", "retirement")),
            current_age    = int(_require(ret, "current_age", "retirement")),
            retirement_age = int(_require(ret, "retirement_age", "retirement")),
            inflation_rate = float(ret.get("inflation_rate", RETIREMENT_DEFAULT_INFLATION)),
            family_size    = ret.get("family_size"),
            planning_type  = ret.get("planning_type", "family"),
            goal_id        = ret.get("id"),
            today          = today,
        ))

    return {
        "today":           today,
        "budget":          float(raw.get("budget", 0.0)),
        "funding_style":   raw.get("funding_style", DEFAULT_FUNDING_STYLE),
        "current_savings": float(raw.get("current_savings", 0.0)),
        "goals":           goals,
    }


def load_plan(path: str, today: date = None) -> dict:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Plan file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Plan file {path} is not valid JSON: {e}") from e
    return parse_plan(raw, today=today)
