"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Literal, Optional


class OwnerSchema(BaseModel):
    """Borrower or owner reference"""

    type: Literal["user", "business"]
    id: str = Field(..., min_length=1, description="User or business identifier")


class CreateLoanRequest(BaseModel):
    """Request body for POST /v1/loans"""

    borrower: OwnerSchema
    principal_amount: float = Field(..., gt=0, allow_inf_nan=False)
    interest_rate: float = Field(..., ge=0, le=1, description="Annual rate as decimal")
    term_months: int = Field(..., gt=0)
    start_date: date
    payment_frequency: Literal["weekly", "biweekly", "monthly"]


class PaymentRequest(BaseModel):
    """Request body for POST /v1/loans/{loan_id}/payment"""

    amount: float = Field(
        ..., allow_inf_nan=False, description="Payment amount; must be positive and within the remaining balance"
    )


class LoanStatusRequest(BaseModel):
    """Request body for PATCH /v1/loans/{loan_id}/status"""

    status: Literal["active", "paid", "defaulted", "rejected"]


class PaymentRecordSchema(BaseModel):
    """Single entry in a loan's payment history"""

    date: datetime
    amount: int
    type: Literal["principal", "interest"]


class LoanResponse(BaseModel):
    """Loan with derived payment amount and running balance"""

    loan_id: str
    borrower: OwnerSchema
    principal_amount: float
    interest_rate: float
    term_months: int
    start_date: date
    end_date: date
    payment_frequency: str
    payment_amount: int
    status: str
    remaining_balance: int
    next_payment_due: date
    payment_history: List[PaymentRecordSchema]
    created_by: str
    created_at: str


class AmortizationEntrySchema(BaseModel):
    """Single period in a projected repayment schedule"""

    period: int
    due_date: date
    payment: int
    interest: int
    principal: int
    balance: int


class ScheduleResponse(BaseModel):
    """Response for GET /v1/loans/{loan_id}/schedule"""

    loan_id: str
    entries: List[AmortizationEntrySchema]


class CreateSecurityRequest(BaseModel):
    """Request body for POST /v1/securities"""

    owner: OwnerSchema
    name: str = Field(..., min_length=1)
    cost: float = Field(..., ge=1, allow_inf_nan=False, description="Purchase price per unit")
    amount: float = Field(..., ge=1, allow_inf_nan=False, description="Units purchased")
    interest_rate: float = Field(..., ge=0, le=1)
    start_date: date
    maturity_date: Optional[date] = None
    payment_frequency: Literal["monthly", "quarterly", "annually"]


class SecurityStatusRequest(BaseModel):
    """Request body for PATCH /v1/securities/{security_id}/status"""

    status: Literal["active", "matured", "cancelled"]


class SecurityResponse(BaseModel):
    """Security as registered"""

    security_id: str
    owner: OwnerSchema
    name: str
    cost: float
    amount: float
    interest_rate: float
    start_date: date
    maturity_date: Optional[date] = None
    payment_frequency: str
    status: str
    created_by: str
    created_at: str


class EarningsResponse(BaseModel):
    """Response for GET /v1/securities/{security_id}/earnings"""

    total_interest: int
    next_payment_date: Optional[date] = None
    remaining_payments: Optional[int] = None


class CreateTransactionRequest(BaseModel):
    """Request body for POST /v1/transactions"""

    owner: OwnerSchema
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    type: Literal["income", "withdrawal"]


class TransactionResponse(BaseModel):
    """Recorded ledger transaction"""

    transaction_id: str
    owner: OwnerSchema
    amount: float
    description: str
    category: str
    type: str
    created_by: str
    created_at: str


class BalanceResponse(BaseModel):
    """Response for GET /v1/transactions/owner/{owner_type}/{owner_id}/balance"""

    owner: OwnerSchema
    balance: float
