# config.py — Central configuration for the Goal Funding Planner

# ─────────────────────────────────────────────
# GOALS
# ─────────────────────────────────────────────
EMERGENCY_FUND_ID   = "emergency-fund"   # reserved id, always funded first
EMERGENCY_FUND_NAME = "Safety Net"

GOAL_CATEGORIES = ["Education", "Travel", "Gift", "Home", "Retirement", "Other"]

# Only these categories may be paid out over time after the target date
PAYMENT_OPTION_CATEGORIES = ["Education", "Home"]

PAYMENT_FREQUENCIES = ["Once", "Monthly", "Quarterly", "Biannual", "Annual"]
PAYMENTS_PER_YEAR = {
    "Monthly":   12,
    "Quarterly": 4,
    "Biannual":  2,
    "Annual":    1,
}

# ─────────────────────────────────────────────
# RISK PROFILES & RETURN PHASES
# ─────────────────────────────────────────────
PROFILES = ["Conservative", "Balanced", "Growth"]

CONSERVATIVE_MAX_YEARS = 3        # horizon <= 3y  → Conservative, one phase
BALANCED_MAX_YEARS     = 7        # horizon <= 7y  → Balanced, two phases

# (high, mid, low) annual rates per profile
DEFAULT_RATES = {
    "Conservative": {"high": 0.04, "mid": 0.03, "low": 0.02},
    "Balanced":     {"high": 0.06, "mid": 0.05, "low": 0.03},
    "Growth":       {"high": 0.08, "mid": 0.07, "low": 0.05},
}

BALANCED_LOW_PHASE_MONTHS = 24    # last 2 years de-risked
GROWTH_HIGH_SHARE         = 0.72  # share of horizon at the high rate
GROWTH_MID_SHARE          = 0.16  # share of horizon at the mid rate

# ─────────────────────────────────────────────
# EMERGENCY FUND
# ─────────────────────────────────────────────
EMERGENCY_BUFFER_MONTHS = 3
EMERGENCY_DEFAULT_RATE  = 0.01    # savings account fallback
EMERGENCY_MIN_RATE      = 0.001

# ─────────────────────────────────────────────
# ALLOCATION ENGINE
# ─────────────────────────────────────────────
FUNDING_STYLES        = ["waterfall", "parallel", "hybrid"]
DEFAULT_FUNDING_STYLE = "hybrid"
NEAR_TERM_MONTHS      = 60        # hybrid bucket B: 1-60 months left
MONEY_DECIMALS        = 2         # every allocation rounded to cents
GAP_EPSILON           = 1e-9

# ─────────────────────────────────────────────
# HOUSEHOLD
# ─────────────────────────────────────────────
RETIREMENT_HOUSEHOLD_ADULTS = 2   # retirement costs planned for two adults

# ─────────────────────────────────────────────
# RETIREMENT
# ─────────────────────────────────────────────
RETIREMENT_ID_PREFIX         = "retirement"
RETIREMENT_NAME              = "Your Golden Years"
RETIREMENT_RATE              = 0.07   # single Growth phase until retirement
RETIREMENT_EXPENSE_MULTIPLE  = 25     # 4% rule: 25x annual expenses
RETIREMENT_DEFAULT_INFLATION = 0.03
