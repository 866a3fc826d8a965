"""/v1/securities - investment registration and earnings projection"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from capital_ledger.api.v1.schemas import (
    CreateSecurityRequest,
    EarningsResponse,
    OwnerSchema,
    SecurityResponse,
    SecurityStatusRequest,
)
from capital_ledger.api.dependencies import get_current_user_id, get_request_id, get_security_service
from capital_ledger.api.errors import to_http_exception
from capital_ledger.domain.exceptions import DomainException
from capital_ledger.domain.models import OwnerRef, Security
from capital_ledger.services.base import make_owner
from capital_ledger.services.securities import SecurityService

router = APIRouter()


def _to_response(security: Security) -> SecurityResponse:
    return SecurityResponse(
        security_id=str(security.id),
        owner=OwnerSchema(type=security.owner.kind, id=security.owner.id),
        name=security.name,
        cost=security.cost,
        amount=security.amount,
        interest_rate=security.interest_rate,
        start_date=security.start_date,
        maturity_date=security.maturity_date,
        payment_frequency=security.payment_frequency,
        status=security.status,
        created_by=security.created_by,
        created_at=security.created_at.isoformat(),
    )


@router.post("/securities", response_model=SecurityResponse)
def create_security(
    request_body: CreateSecurityRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: SecurityService = Depends(get_security_service),
):
    """Register a security; maturity, when given, must fall after the start date"""
    try:
        security = service.create_security(
            owner=OwnerRef(kind=request_body.owner.type, id=request_body.owner.id),
            name=request_body.name,
            cost=request_body.cost,
            amount=request_body.amount,
            interest_rate=request_body.interest_rate,
            start_date=request_body.start_date,
            maturity_date=request_body.maturity_date,
            payment_frequency=request_body.payment_frequency,
            created_by=user_id,
        )
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return _to_response(security)


@router.get("/securities/owner/{owner_type}/{owner_id}", response_model=List[SecurityResponse])
def get_owner_securities(
    owner_type: str,
    owner_id: str,
    request: Request,
    service: SecurityService = Depends(get_security_service),
):
    try:
        securities = service.get_owner_securities(make_owner(owner_id, owner_type))
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return [_to_response(s) for s in securities]


@router.get("/securities/{security_id}", response_model=SecurityResponse)
def get_security(security_id: str, request: Request, service: SecurityService = Depends(get_security_service)):
    try:
        security = service.get_security(security_id)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    if not security:
        raise HTTPException(status_code=404, detail="Security not found")

    return _to_response(security)


@router.patch("/securities/{security_id}/status", response_model=SecurityResponse)
def update_security_status(
    security_id: str,
    request_body: SecurityStatusRequest,
    request: Request,
    service: SecurityService = Depends(get_security_service),
):
    try:
        security = service.update_security_status(security_id, request_body.status)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return _to_response(security)


@router.get("/securities/{security_id}/earnings", response_model=EarningsResponse)
def calculate_interest_earnings(
    security_id: str,
    request: Request,
    as_of: Optional[date] = Query(None, description="Projection date (default: today in UTC)"),
    service: SecurityService = Depends(get_security_service),
):
    """
    Project accrued interest for a security.

    Returns:
        Total simple interest to maturity (or to date when open-ended),
        next payment date and remaining payment count
    """
    try:
        earnings = service.calculate_interest_earnings(security_id, as_of=as_of)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return EarningsResponse(
        total_interest=earnings.total_interest,
        next_payment_date=earnings.next_payment_date,
        remaining_payments=earnings.remaining_payments,
    )
