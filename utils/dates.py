# utils/dates.py — Calendar-month arithmetic on explicit (year, month) pairs

import calendar
from datetime import date


def month_diff(start: date, end: date) -> int:
    """
    Whole calendar months from start to end.
    Day-of-month is ignored: 2025-01-31 → 2025-02-01 is 1 month,
    2025-01-01 → 2025-01-31 is 0 months.
    """
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    index = d.year * 12 + (d.month - 1) + months
    year, month0 = divmod(index, 12)
    last_day = calendar.monthrange(year, month0 + 1)[1]
    return date(year, month0 + 1, min(d.day, last_day))


def month_start(d: date) -> date:
    return date(d.year, d.month, 1)


def parse_year_month(value: str) -> date:
    """'2027-06' or '2027-06-15' → date (first of month when day omitted)."""
    parts = value.strip().split("-")
    if len(parts) == 2:
        return date(int(parts[0]), int(parts[1]), 1)
    if len(parts) == 3:
        return date(int(parts[0]), int(parts[1]), int(parts[2]))
    raise ValueError(f"Unrecognised date: '{value}'. Use YYYY-MM or YYYY-MM-DD.")
