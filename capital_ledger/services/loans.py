"""Loan origination, repayment and status management"""

import logging
import time
import uuid
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from capital_ledger.config import settings
from capital_ledger.domain.amortization import build_amortization_schedule, calculate_payment_amount
from capital_ledger.domain.exceptions import (
    InvalidAmountError,
    InvalidStateError,
    NotFoundError,
    PersistenceConflictError,
    ValidationError,
)
from capital_ledger.domain.models import AmortizationEntry, Loan, OwnerRef
from capital_ledger.domain.payments import apply_payment, validate_admin_status
from capital_ledger.infrastructure.database.repositories import LoanRepository
from capital_ledger.infrastructure.observability.logging import log_payment
from capital_ledger.infrastructure.observability.metrics import (
    loans_created_counter,
    loan_status_counter,
    payment_conflict_counter,
    record_payment,
    record_rejected_payment,
)
from capital_ledger.services.base import BusinessService, owner_filter, parse_id, utcnow
from capital_ledger.utils.date_utils import add_months, advance_date
from capital_ledger.utils.money import round_half_up

logger = logging.getLogger(__name__)

LOAN_FREQUENCIES = ("weekly", "biweekly", "monthly")


class LoanService(BusinessService):
    """Operations on loans; every write is version-checked"""

    def __init__(self, db: Session):
        super().__init__(db)
        self.loans = LoanRepository(db)

    def create_loan(
        self,
        borrower: OwnerRef,
        principal_amount: float,
        interest_rate: float,
        term_months: int,
        start_date: date,
        payment_frequency: str,
        created_by: str,
    ) -> Loan:
        """
        Originate a loan directly in "active" status.

        The installment amount is computed once here and never recomputed.
        """
        if payment_frequency not in LOAN_FREQUENCIES:
            raise ValidationError(f"Loan payment frequency must be one of {', '.join(LOAN_FREQUENCIES)}")
        payment_amount = calculate_payment_amount(principal_amount, interest_rate, term_months)

        loan = Loan(
            id=uuid.uuid4(),
            borrower=borrower,
            principal_amount=principal_amount,
            interest_rate=interest_rate,
            term_months=term_months,
            start_date=start_date,
            end_date=add_months(start_date, term_months),
            payment_frequency=payment_frequency,
            payment_amount=payment_amount,
            status="active",
            remaining_balance=round_half_up(principal_amount),
            next_payment_due=advance_date(start_date, payment_frequency),
            created_by=created_by,
            created_at=utcnow(),
        )

        with self.unit_of_work():
            self.loans.insert(loan)

        loans_created_counter.labels(frequency=payment_frequency).inc()
        logger.info(
            "Loan created",
            extra={"loan_id": str(loan.id), "borrower_type": borrower.kind, "payment_amount": payment_amount},
        )
        return loan

    def get_loan(self, loan_id: str | uuid.UUID) -> Optional[Loan]:
        with self.unit_of_work():
            return self.loans.find_by_id(parse_id(loan_id, "loan"))

    def get_borrower_loans(self, borrower: OwnerRef) -> List[Loan]:
        with self.unit_of_work():
            return self.loans.find_many(**owner_filter(borrower, prefix="borrower"))

    def make_payment(self, loan_id: str | uuid.UUID, amount: float) -> Loan:
        """
        Apply a payment with optimistic concurrency.

        Read the loan, compute the outcome, then write conditioned on the
        version that was read. A lost race rolls back and repeats the whole
        cycle, up to settings.payment_max_retries retries.

        Raises:
            NotFoundError, InvalidStateError, InvalidAmountError,
            PersistenceConflictError (retries exhausted)
        """
        loan_uuid = parse_id(loan_id, "loan")
        attempt = 0

        while True:
            attempt += 1
            try:
                with self.unit_of_work():
                    loan = self.loans.find_by_id(loan_uuid)
                    if loan is None:
                        raise NotFoundError("Loan", loan_uuid)

                    outcome = apply_payment(loan, amount, paid_at=utcnow())

                    written = self.loans.update_by_id(
                        loan_uuid,
                        {
                            "remaining_balance": outcome.remaining_balance,
                            "status": outcome.status,
                            "next_payment_due": outcome.next_payment_due,
                        },
                        expected_version=loan.version,
                    )
                    if not written:
                        raise PersistenceConflictError(
                            f"Loan {loan_uuid} changed since version {loan.version} was read"
                        )
                    self.loans.append_payment(loan_uuid, outcome.entry)
                break

            except PersistenceConflictError:
                payment_conflict_counter.inc()
                if attempt > settings.payment_max_retries:
                    logger.error("Payment retries exhausted", extra={"loan_id": str(loan_uuid), "attempts": attempt})
                    raise
                logger.warning("Payment lost a concurrent write, retrying", extra={"loan_id": str(loan_uuid), "attempt": attempt})
                time.sleep(settings.payment_retry_backoff_seconds * (2 ** (attempt - 1)))

            except (InvalidStateError, InvalidAmountError):
                record_rejected_payment()
                raise

        record_payment(outcome.status)
        log_payment(
            loan_id=str(loan_uuid),
            amount=amount,
            principal_portion=outcome.principal_portion,
            interest_portion=outcome.interest_portion,
            remaining_balance=outcome.remaining_balance,
            status=outcome.status,
            attempts=attempt,
        )
        return self.get_loan(loan_uuid)

    def update_loan_status(self, loan_id: str | uuid.UUID, status: str) -> Loan:
        """Administrative status change; no payment side effects"""
        validate_admin_status(status)
        loan_uuid = parse_id(loan_id, "loan")

        with self.unit_of_work():
            if not self.loans.update_by_id(loan_uuid, {"status": status}):
                raise NotFoundError("Loan", loan_uuid)

        loan_status_counter.labels(status=status).inc()
        logger.info("Loan status updated", extra={"loan_id": str(loan_uuid), "loan_status": status})
        return self.get_loan(loan_uuid)

    def get_amortization_schedule(self, loan_id: str | uuid.UUID) -> List[AmortizationEntry]:
        """
        Projected schedule from the loan's original terms.

        The payment amount amortizes over term_months at the monthly rate, so
        the schedule steps monthly for every loan and ends in the month of the
        loan's end_date, whatever the collection frequency.
        """
        loan = self.get_loan(loan_id)
        if loan is None:
            raise NotFoundError("Loan", loan_id)

        return build_amortization_schedule(
            loan.principal_amount,
            loan.interest_rate,
            loan.term_months,
            first_due=add_months(loan.start_date, 1),
            frequency="monthly",
        )
