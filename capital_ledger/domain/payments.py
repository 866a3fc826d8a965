"""Loan payment application and status transitions"""

import math
from datetime import datetime
from capital_ledger.domain.exceptions import InvalidAmountError, InvalidStateError, ValidationError
from capital_ledger.domain.models import Loan, PaymentOutcome, PaymentRecord
from capital_ledger.utils.date_utils import advance_date
from capital_ledger.utils.money import round_half_up

# Statuses an administrator may set directly. "pending" is never a target.
ADMIN_STATUSES = ("active", "paid", "defaulted", "rejected")


def apply_payment(loan: Loan, amount: float, paid_at: datetime) -> PaymentOutcome:
    """
    Allocate a payment between interest and principal.

    Rules:
    - Only active loans accept payments
    - Amount must be a finite positive number within the remaining balance
    - One month of interest on the outstanding balance is paid first,
      the rest reduces principal
    - If the interest due exceeds the payment, the whole amount is interest
      and principal is untouched
    - Loan becomes "paid" exactly when the new balance is 0

    The loan snapshot is not modified; the caller persists the outcome.
    """
    if loan.status != "active":
        raise InvalidStateError(f"Loan is not active (status={loan.status})")
    if not math.isfinite(amount):
        raise InvalidAmountError(f"Payment amount must be a finite number, got {amount}")
    if amount <= 0:
        raise InvalidAmountError(f"Payment amount must be positive, got {amount}")
    if amount > loan.remaining_balance:
        raise InvalidAmountError(
            f"Payment amount {amount} exceeds remaining balance {loan.remaining_balance}"
        )

    monthly_interest = loan.remaining_balance * (loan.interest_rate / 12)
    principal_portion = max(min(amount - monthly_interest, loan.remaining_balance), 0)
    interest_portion = amount - principal_portion

    new_balance = max(round_half_up(loan.remaining_balance - principal_portion), 0)

    entry = PaymentRecord(
        date=paid_at,
        amount=round_half_up(amount),
        type="principal" if principal_portion > interest_portion else "interest",
    )

    return PaymentOutcome(
        remaining_balance=new_balance,
        status="paid" if new_balance == 0 else loan.status,
        next_payment_due=advance_date(loan.next_payment_due, loan.payment_frequency),
        entry=entry,
        principal_portion=principal_portion,
        interest_portion=interest_portion,
    )


def validate_admin_status(status: str) -> None:
    """Administrative updates are unconditional, but only to a known target"""
    if status not in ADMIN_STATUSES:
        raise ValidationError(f"Cannot set loan status to {status!r}; allowed: {', '.join(ADMIN_STATUSES)}")
