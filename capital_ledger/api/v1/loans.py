"""/v1/loans - origination, repayment and status endpoints"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from capital_ledger.api.v1.schemas import (
    AmortizationEntrySchema,
    CreateLoanRequest,
    LoanResponse,
    LoanStatusRequest,
    OwnerSchema,
    PaymentRecordSchema,
    PaymentRequest,
    ScheduleResponse,
)
from capital_ledger.api.dependencies import get_current_user_id, get_loan_service, get_request_id
from capital_ledger.api.errors import to_http_exception
from capital_ledger.domain.exceptions import DomainException
from capital_ledger.domain.models import Loan, OwnerRef
from capital_ledger.services.base import make_owner
from capital_ledger.services.loans import LoanService

router = APIRouter()


def _to_response(loan: Loan) -> LoanResponse:
    return LoanResponse(
        loan_id=str(loan.id),
        borrower=OwnerSchema(type=loan.borrower.kind, id=loan.borrower.id),
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
        payment_history=[
            PaymentRecordSchema(date=p.date, amount=p.amount, type=p.type)
            for p in loan.payment_history
        ],
        created_by=loan.created_by,
        created_at=loan.created_at.isoformat(),
    )


@router.post("/loans", response_model=LoanResponse)
def create_loan(
    request_body: CreateLoanRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: LoanService = Depends(get_loan_service),
):
    """
    Originate a loan.

    The loan starts "active" with the full principal outstanding and a
    fixed installment computed from the amortization formula.
    """
    try:
        loan = service.create_loan(
            borrower=OwnerRef(kind=request_body.borrower.type, id=request_body.borrower.id),
            principal_amount=request_body.principal_amount,
            interest_rate=request_body.interest_rate,
            term_months=request_body.term_months,
            start_date=request_body.start_date,
            payment_frequency=request_body.payment_frequency,
            created_by=user_id,
        )
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return _to_response(loan)


@router.get("/loans/borrower/{borrower_type}/{borrower_id}", response_model=List[LoanResponse])
def get_borrower_loans(
    borrower_type: str,
    borrower_id: str,
    request: Request,
    service: LoanService = Depends(get_loan_service),
):
    """All loans held by one user or business"""
    try:
        loans = service.get_borrower_loans(make_owner(borrower_id, borrower_type))
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return [_to_response(loan) for loan in loans]


@router.get("/loans/{loan_id}", response_model=LoanResponse)
def get_loan(loan_id: str, request: Request, service: LoanService = Depends(get_loan_service)):
    try:
        loan = service.get_loan(loan_id)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")

    return _to_response(loan)


@router.post("/loans/{loan_id}/payment", response_model=LoanResponse)
def make_payment(
    loan_id: str,
    request_body: PaymentRequest,
    request: Request,
    service: LoanService = Depends(get_loan_service),
):
    """
    Apply a payment to an active loan.

    Returns:
        Updated loan; 400 if the amount is invalid, 409 if the loan is not
        active or concurrent writes kept winning the race
    """
    try:
        loan = service.make_payment(loan_id, request_body.amount)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return _to_response(loan)


@router.patch("/loans/{loan_id}/status", response_model=LoanResponse)
def update_loan_status(
    loan_id: str,
    request_body: LoanStatusRequest,
    request: Request,
    service: LoanService = Depends(get_loan_service),
):
    try:
        loan = service.update_loan_status(loan_id, request_body.status)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return _to_response(loan)


@router.get("/loans/{loan_id}/schedule", response_model=ScheduleResponse)
def get_amortization_schedule(loan_id: str, request: Request, service: LoanService = Depends(get_loan_service)):
    """Projected per-period interest/principal split over the full term"""
    try:
        entries = service.get_amortization_schedule(loan_id)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return ScheduleResponse(
        loan_id=loan_id,
        entries=[
            AmortizationEntrySchema(
                period=e.period,
                due_date=e.due_date,
                payment=e.payment,
                interest=e.interest,
                principal=e.principal,
                balance=e.balance,
            )
            for e in entries
        ],
    )
