"""Amortization math for fixed-installment loans"""

from datetime import date
from typing import List
from capital_ledger.domain.exceptions import ValidationError
from capital_ledger.domain.models import AmortizationEntry
from capital_ledger.utils.date_utils import advance_date
from capital_ledger.utils.money import round_half_up


def _validate_terms(principal: float, annual_rate: float, term_months: int) -> None:
    if principal <= 0:
        raise ValidationError(f"Principal must be positive, got {principal}")
    if not 0 <= annual_rate <= 1:
        raise ValidationError(f"Interest rate must be between 0 and 1, got {annual_rate}")
    if not isinstance(term_months, int) or term_months <= 0:
        raise ValidationError(f"Term must be a positive number of months, got {term_months}")


def calculate_payment_amount(principal: float, annual_rate: float, term_months: int) -> int:
    """
    Fixed periodic payment that retires principal and interest over the term.

    Standard annuity formula on the monthly rate m = annual_rate / 12:

        payment = P * m * (1 + m)^n / ((1 + m)^n - 1)

    A zero rate makes the denominator zero, so it falls back to an even
    split of the principal.

    Example:
        12000 at 12% over 12 months -> m = 0.01 -> 1066.19 -> 1066
    """
    _validate_terms(principal, annual_rate, term_months)

    monthly_rate = annual_rate / 12
    if monthly_rate == 0:
        return round_half_up(principal / term_months)

    growth = (1 + monthly_rate) ** term_months
    payment = principal * monthly_rate * growth / (growth - 1)
    return round_half_up(payment)


def build_amortization_schedule(
    principal: float,
    annual_rate: float,
    term_months: int,
    first_due: date,
    frequency: str = "monthly",
) -> List[AmortizationEntry]:
    """
    Project the per-period interest/principal split of a loan.

    Each period charges interest on the outstanding balance at the monthly
    rate and applies the rest of the fixed payment to principal. The last
    period absorbs the rounding remainder so the balance closes at exactly 0.
    """
    payment = calculate_payment_amount(principal, annual_rate, term_months)
    monthly_rate = annual_rate / 12

    balance = round_half_up(principal)
    due_date = first_due
    schedule = []
    for period in range(1, term_months + 1):
        interest = round_half_up(balance * monthly_rate)
        if period == term_months:
            principal_part = balance
        else:
            principal_part = min(max(payment - interest, 0), balance)
        balance -= principal_part

        schedule.append(
            AmortizationEntry(
                period=period,
                due_date=due_date,
                payment=principal_part + interest,
                interest=interest,
                principal=principal_part,
                balance=balance,
            )
        )
        due_date = advance_date(due_date, frequency)

    return schedule
