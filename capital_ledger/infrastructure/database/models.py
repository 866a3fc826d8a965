"""SQLAlchemy ORM models for loans, securities and transactions"""

import uuid
from sqlalchemy import Column, BigInteger, Float, DateTime, Date, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class LoanRecord(Base):
    """Loan with its running balance; version guards concurrent writes"""

    __tablename__ = "loan"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    borrower_type = Column(Text, nullable=False)
    borrower_id = Column(Text, nullable=False, index=True)
    principal_amount = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False)
    term_months = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    payment_frequency = Column(Text, nullable=False)
    payment_amount = Column(BigInteger, nullable=False)
    status = Column(Text, nullable=False, default="active")
    remaining_balance = Column(BigInteger, nullable=False)
    next_payment_due = Column(Date, nullable=False)
    created_by = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    version = Column(Integer, nullable=False, default=0)

    payments = relationship(
        "LoanPaymentRecord",
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="LoanPaymentRecord.sequence",
    )


class LoanPaymentRecord(Base):
    """Append-only payment history entry"""

    __tablename__ = "loan_payment"
    __table_args__ = (UniqueConstraint("loan_id", "sequence", name="uq_loan_payment_sequence"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    loan_id = Column(UUID(as_uuid=True), ForeignKey("loan.id", ondelete="CASCADE"), nullable=False)
    sequence = Column(Integer, nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=False)
    amount = Column(BigInteger, nullable=False)
    type = Column(Text, nullable=False)

    loan = relationship("LoanRecord", back_populates="payments")


class SecurityRecord(Base):
    """Interest-bearing security held by an owner"""

    __tablename__ = "security"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_type = Column(Text, nullable=False)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    cost = Column(Float, nullable=False)
    amount = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False)
    start_date = Column(Date, nullable=False)
    maturity_date = Column(Date, nullable=True)
    payment_frequency = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="active")
    created_by = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)


class TransactionRecord(Base):
    """Immutable income or withdrawal"""

    __tablename__ = "ledger_transaction"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_type = Column(Text, nullable=False)
    owner_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    created_by = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
