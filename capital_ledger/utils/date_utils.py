"""Date manipulation utilities"""

from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from capital_ledger.domain.exceptions import ValidationError

DAY_STEPS = {
    "weekly": 7,
    "biweekly": 14,
}

MONTH_STEPS = {
    "monthly": 1,
    "quarterly": 3,
    "annually": 12,
}


def add_months(from_date: date, months: int) -> date:
    """
    Add calendar months, clamping to the last valid day of the target month.

    Jan 31 + 1 month -> Feb 28 (Feb 29 in leap years), never Mar 3.
    """
    return from_date + relativedelta(months=months)


def advance_date(from_date: date, frequency: str) -> date:
    """Advance a date by one payment-frequency step"""
    if frequency in DAY_STEPS:
        return from_date + timedelta(days=DAY_STEPS[frequency])
    if frequency in MONTH_STEPS:
        return add_months(from_date, MONTH_STEPS[frequency])
    raise ValidationError(f"Unknown payment frequency: {frequency!r}")


def days_to_years(days: int) -> float:
    """Actual/365 day-count fraction"""
    return days / 365
