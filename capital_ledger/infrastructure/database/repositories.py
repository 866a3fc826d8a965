"""Data access layer for loans, securities and transactions"""

import uuid
from typing import Any, Dict, List, Optional
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session
from capital_ledger.infrastructure.database.models import (
    LoanRecord,
    LoanPaymentRecord,
    SecurityRecord,
    TransactionRecord,
)
from capital_ledger.domain.models import Loan, OwnerRef, PaymentRecord, Security, Transaction


class LoanRepository:
    """Repository for loans and their payment history"""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, loan: Loan) -> uuid.UUID:
        """Persist a new loan and return its id"""
        db_loan = LoanRecord(
            id=loan.id or uuid.uuid4(),
            borrower_type=loan.borrower.kind,
            borrower_id=loan.borrower.id,
            principal_amount=loan.principal_amount,
            interest_rate=loan.interest_rate,
            term_months=loan.term_months,
            start_date=loan.start_date,
            end_date=loan.end_date,
            payment_frequency=loan.payment_frequency,
            payment_amount=loan.payment_amount,
            status=loan.status,
            remaining_balance=loan.remaining_balance,
            next_payment_due=loan.next_payment_due,
            created_by=loan.created_by,
            created_at=loan.created_at,
            version=loan.version,
        )
        self.db.add(db_loan)
        self.db.flush()  # Get ID without committing
        return db_loan.id

    def find_by_id(self, loan_id: uuid.UUID) -> Optional[Loan]:
        """Fetch loan with payment history"""
        db_loan = self.db.get(LoanRecord, loan_id, populate_existing=True)
        return _loan_to_domain(db_loan) if db_loan else None

    def find_many(self, **filters: Any) -> List[Loan]:
        """Fetch loans matching column filters, oldest first"""
        records = (
            self.db.query(LoanRecord)
            .filter_by(**filters)
            .order_by(LoanRecord.created_at)
            .all()
        )
        return [_loan_to_domain(r) for r in records]

    def update_by_id(
        self,
        loan_id: uuid.UUID,
        patch: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> bool:
        """
        Apply a patch and bump the version.

        With expected_version, the write only lands if nobody else has
        written since that version was read. Returns False when no row
        matched (absent loan or lost race).
        """
        stmt = (
            update(LoanRecord)
            .where(LoanRecord.id == loan_id)
            .values(**patch, version=LoanRecord.version + 1)
            .execution_options(synchronize_session=False)
        )
        if expected_version is not None:
            stmt = stmt.where(LoanRecord.version == expected_version)

        result = self.db.execute(stmt)
        return result.rowcount == 1

    def append_payment(self, loan_id: uuid.UUID, entry: PaymentRecord) -> int:
        """Append a history entry after the last one; returns its sequence"""
        last_sequence = self.db.execute(
            select(func.coalesce(func.max(LoanPaymentRecord.sequence), 0))
            .where(LoanPaymentRecord.loan_id == loan_id)
        ).scalar_one()

        db_payment = LoanPaymentRecord(
            loan_id=loan_id,
            sequence=last_sequence + 1,
            paid_at=entry.date,
            amount=entry.amount,
            type=entry.type,
        )
        self.db.add(db_payment)
        self.db.flush()
        return db_payment.sequence


class SecurityRepository:
    """Repository for securities"""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, security: Security) -> uuid.UUID:
        """Persist a new security and return its id"""
        db_security = SecurityRecord(
            id=security.id or uuid.uuid4(),
            owner_type=security.owner.kind,
            owner_id=security.owner.id,
            name=security.name,
            cost=security.cost,
            amount=security.amount,
            interest_rate=security.interest_rate,
            start_date=security.start_date,
            maturity_date=security.maturity_date,
            payment_frequency=security.payment_frequency,
            status=security.status,
            created_by=security.created_by,
            created_at=security.created_at,
        )
        self.db.add(db_security)
        self.db.flush()
        return db_security.id

    def find_by_id(self, security_id: uuid.UUID) -> Optional[Security]:
        db_security = self.db.get(SecurityRecord, security_id, populate_existing=True)
        return _security_to_domain(db_security) if db_security else None

    def find_many(self, **filters: Any) -> List[Security]:
        records = (
            self.db.query(SecurityRecord)
            .filter_by(**filters)
            .order_by(SecurityRecord.created_at)
            .all()
        )
        return [_security_to_domain(r) for r in records]

    def update_by_id(self, security_id: uuid.UUID, patch: Dict[str, Any]) -> bool:
        result = self.db.execute(
            update(SecurityRecord)
            .where(SecurityRecord.id == security_id)
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class TransactionRepository:
    """Repository for ledger transactions (insert and read only)"""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, transaction: Transaction) -> uuid.UUID:
        db_transaction = TransactionRecord(
            id=transaction.id or uuid.uuid4(),
            owner_type=transaction.owner.kind,
            owner_id=transaction.owner.id,
            amount=transaction.amount,
            description=transaction.description,
            category=transaction.category,
            type=transaction.type,
            created_by=transaction.created_by,
            created_at=transaction.created_at,
        )
        self.db.add(db_transaction)
        self.db.flush()
        return db_transaction.id

    def find_by_id(self, transaction_id: uuid.UUID) -> Optional[Transaction]:
        db_transaction = self.db.get(TransactionRecord, transaction_id)
        return _transaction_to_domain(db_transaction) if db_transaction else None

    def find_many(self, **filters: Any) -> List[Transaction]:
        records = (
            self.db.query(TransactionRecord)
            .filter_by(**filters)
            .order_by(TransactionRecord.created_at)
            .all()
        )
        return [_transaction_to_domain(r) for r in records]


def _loan_to_domain(record: LoanRecord) -> Loan:
    return Loan(
        id=record.id,
        borrower=OwnerRef(kind=record.borrower_type, id=record.borrower_id),
        principal_amount=record.principal_amount,
        interest_rate=record.interest_rate,
        term_months=record.term_months,
        start_date=record.start_date,
        end_date=record.end_date,
        payment_frequency=record.payment_frequency,
        payment_amount=record.payment_amount,
        status=record.status,
        remaining_balance=record.remaining_balance,
        next_payment_due=record.next_payment_due,
        created_by=record.created_by,
        created_at=record.created_at,
        payment_history=[
            PaymentRecord(date=p.paid_at, amount=p.amount, type=p.type)
            for p in record.payments
        ],
        version=record.version,
    )


def _security_to_domain(record: SecurityRecord) -> Security:
    return Security(
        id=record.id,
        owner=OwnerRef(kind=record.owner_type, id=record.owner_id),
        name=record.name,
        cost=record.cost,
        amount=record.amount,
        interest_rate=record.interest_rate,
        start_date=record.start_date,
        maturity_date=record.maturity_date,
        payment_frequency=record.payment_frequency,
        status=record.status,
        created_by=record.created_by,
        created_at=record.created_at,
    )


def _transaction_to_domain(record: TransactionRecord) -> Transaction:
    return Transaction(
        id=record.id,
        owner=OwnerRef(kind=record.owner_type, id=record.owner_id),
        amount=record.amount,
        description=record.description,
        category=record.category,
        type=record.type,
        created_by=record.created_by,
        created_at=record.created_at,
    )
