"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Literal, Optional

OwnerKind = Literal["user", "business"]
LoanFrequency = Literal["weekly", "biweekly", "monthly"]
SecurityFrequency = Literal["monthly", "quarterly", "annually"]
LoanStatus = Literal["pending", "active", "paid", "defaulted", "rejected"]
SecurityStatus = Literal["active", "matured", "cancelled"]
PaymentType = Literal["principal", "interest"]
TransactionType = Literal["income", "withdrawal"]

OWNER_KINDS = ("user", "business")
LOAN_STATUSES = ("pending", "active", "paid", "defaulted", "rejected")
SECURITY_STATUSES = ("active", "matured", "cancelled")


@dataclass(frozen=True)
class OwnerRef:
    """Borrower or owner of a record, tagged by kind"""

    kind: OwnerKind
    id: str


@dataclass
class PaymentRecord:
    """Single entry in a loan's payment history"""

    date: datetime
    amount: int
    type: PaymentType


@dataclass
class Loan:
    """Amortizing loan issued to a user or business"""

    id: Optional[uuid.UUID]
    borrower: OwnerRef
    principal_amount: float
    interest_rate: float  # Annual, as decimal (0.12 = 12%)
    term_months: int
    start_date: date
    end_date: date
    payment_frequency: LoanFrequency
    payment_amount: int  # Fixed at creation
    status: LoanStatus
    remaining_balance: int
    next_payment_due: date
    created_by: str
    created_at: datetime
    payment_history: List[PaymentRecord] = field(default_factory=list)
    version: int = 0


@dataclass
class Security:
    """Interest-bearing investment held by a user or business"""

    id: Optional[uuid.UUID]
    owner: OwnerRef
    name: str
    cost: float  # Purchase price per unit
    amount: float  # Units purchased
    interest_rate: float
    start_date: date
    maturity_date: Optional[date]  # None means open-ended
    payment_frequency: SecurityFrequency
    status: SecurityStatus
    created_by: str
    created_at: datetime


@dataclass
class Transaction:
    """Immutable cash movement recorded against an owner"""

    id: Optional[uuid.UUID]
    owner: OwnerRef
    amount: float
    description: str
    category: str
    type: TransactionType
    created_by: str
    created_at: datetime


@dataclass
class PaymentOutcome:
    """Result of applying one payment to a loan snapshot"""

    remaining_balance: int
    status: LoanStatus
    next_payment_due: date
    entry: PaymentRecord
    principal_portion: float
    interest_portion: float


@dataclass
class InterestEarnings:
    """Projected accrual for a security"""

    total_interest: int
    next_payment_date: Optional[date]
    remaining_payments: Optional[int]


@dataclass
class AmortizationEntry:
    """Single period in a projected repayment schedule"""

    period: int
    due_date: date
    payment: int
    interest: int
    principal: int
    balance: int
