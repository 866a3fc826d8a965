"""Interest accrual projection for securities"""

import math
from datetime import date
from typing import Optional
from capital_ledger.domain.models import InterestEarnings, Security
from capital_ledger.utils.date_utils import MONTH_STEPS, add_months, days_to_years
from capital_ledger.utils.money import round_half_up

PAYMENTS_PER_YEAR = {
    "monthly": 12,
    "quarterly": 4,
    "annually": 1,
}


def next_payment_date(security: Security, as_of: date, upper_bound: date) -> Optional[date]:
    """
    First scheduled payment strictly after as_of, or None past the bound.

    Candidates are start + k * step months for k = 0, 1, ..., so a security
    that has not started yet reports its start date. Each candidate is
    computed from the start date so month-end clamping does not accumulate
    (Jan 31 -> Feb 28 -> Mar 31).
    """
    step = MONTH_STEPS[security.payment_frequency]
    periods = 0
    candidate = security.start_date
    while candidate <= as_of:
        periods += 1
        candidate = add_months(security.start_date, step * periods)

    if candidate >= upper_bound:
        return None
    return candidate


def remaining_payments(security: Security, as_of: date) -> Optional[int]:
    """Payments left until maturity; None for open-ended, 0 once matured"""
    if security.maturity_date is None:
        return None

    remaining_years = days_to_years((security.maturity_date - as_of).days)
    count = math.ceil(remaining_years * PAYMENTS_PER_YEAR[security.payment_frequency])
    return max(count, 0)


def project_earnings(security: Security, as_of: date) -> InterestEarnings:
    """
    Simple-interest projection on cost * amount, actual/365.

    Open-ended securities (no maturity) accrue only up to as_of.
    """
    upper_bound = security.maturity_date or as_of
    years = days_to_years((upper_bound - security.start_date).days)

    principal_amount = security.cost * security.amount
    total_interest = round_half_up(principal_amount * security.interest_rate * years)

    return InterestEarnings(
        total_interest=total_interest,
        next_payment_date=next_payment_date(security, as_of, upper_bound),
        remaining_payments=remaining_payments(security, as_of),
    )
