"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from capital_ledger.infrastructure.database.session import get_db
from capital_ledger.services.loans import LoanService
from capital_ledger.services.securities import SecurityService
from capital_ledger.services.transactions import TransactionService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(x_user_id: str = Header(..., min_length=1)) -> str:
    """Acting user, recorded as created_by on new records"""
    return x_user_id


def get_loan_service(db: Session = Depends(get_db)) -> LoanService:
    return LoanService(db)


def get_security_service(db: Session = Depends(get_db)) -> SecurityService:
    return SecurityService(db)


def get_transaction_service(db: Session = Depends(get_db)) -> TransactionService:
    return TransactionService(db)
