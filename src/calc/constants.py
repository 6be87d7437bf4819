"""Planning assumptions shared by the calculators.

Dated limits (401(k), HSA) are also listed per year in
reference/federal-details.json; the values here are the defaults the
calculators use when the caller does not pass a year-specific limit.
"""

# IRS employee elective deferral limit for 2025
K401_EMPLOYEE_CAP_2025 = 23500
K401_EMPLOYEE_CAP = K401_EMPLOYEE_CAP_2025

# HSA contribution limits for 2025
HSA_LIMIT_SINGLE = 4300
HSA_LIMIT_FAMILY = 8550

# Starting HSA target when nothing is contributed yet
HSA_RECOMMENDED_START = 2500

# Employer match defaults: 100% match up to 5% of salary
DEFAULT_MATCH_RATE_PCT = 100
DEFAULT_MATCH_CAP_PCT = 5
DEFAULT_CURRENT_401K_PCT = 5

# Real (inflation-adjusted) return for invested assets
REAL_RETURN_DEFAULT = 0.07

# Net worth impact of debt payoff uses this APR when none is given
DEBT_APR_DEFAULT = 0.18

TRAJECTORY_YEARS = 30
DELAY_MONTHS = 12
MONTHS_PER_YEAR = 12

# Retirement floor for the primary leap
TARGET_RETIREMENT_PCT = 15

# Capital routing waterfall
EF_TARGET_MONTHS = 3
EF_FIRST_MILESTONE_MONTHS = 1
EF_ALLOC_PCT = 0.4
DEBT_ALLOC_PCT = 0.4
HIGH_APR_THRESHOLD_PCT = 10
ASSUMED_DEBT_APR_PCT = 17

# APR range answer -> midpoint used for display and thresholds
DEBT_APR_RANGES = {
    '10-14': 12,
    '10-15': 12,
    '15-19': 17,
    '15-20': 17,
    '20+': 22,
}

# Retirement focus -> (retirement %, brokerage %) of what remains
RETIREMENT_SPLITS = {
    'high': (80, 20),
    'medium': (60, 40),
    'low': (20, 80),
}
DEFAULT_RETIREMENT_SPLIT = (60, 40)

# Rent affordability
RENT_LOW_PCT = 0.28
RENT_HIGH_PCT = 0.35
GAP_DAYS = 14
GAP_LIVING_PCT = 0.35
MOVING_SETUP_COST = 600
RENT_OVERSPEND_PCT = 0.05

HORIZON_YEARS = (1, 10, 30)


def apr_range_to_percent(apr_range):
    """Midpoint APR for an APR range answer, or None when unknown."""
    if not apr_range:
        return None
    return DEBT_APR_RANGES.get(apr_range)


def retirement_split(focus):
    """Retirement/brokerage split for a retirement focus answer."""
    return RETIREMENT_SPLITS.get(focus, DEFAULT_RETIREMENT_SPLIT)
