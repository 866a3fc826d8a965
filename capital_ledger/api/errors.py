"""Mapping of domain exceptions to HTTP responses"""

import logging
from fastapi import HTTPException
from capital_ledger.domain.exceptions import (
    DomainException,
    InvalidAmountError,
    InvalidStateError,
    NotFoundError,
    PersistenceConflictError,
    PersistenceFailureError,
    ValidationError,
)

STATUS_CODES = {
    ValidationError: 400,
    InvalidAmountError: 400,
    NotFoundError: 404,
    InvalidStateError: 409,
    PersistenceConflictError: 409,
    PersistenceFailureError: 503,
}


def to_http_exception(error: DomainException, request_id: str) -> HTTPException:
    """Translate a domain failure, logging client errors as warnings"""
    status_code = STATUS_CODES.get(type(error), 500)

    if status_code >= 500:
        logging.error(f"{type(error).__name__}: {error}", extra={"request_id": request_id})
        detail = "Storage unavailable" if status_code == 503 else "Internal server error"
    else:
        logging.warning(f"{type(error).__name__}: {error}", extra={"request_id": request_id})
        detail = str(error)

    return HTTPException(status_code=status_code, detail=detail)
