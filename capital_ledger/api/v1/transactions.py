"""/v1/transactions - ledger entries and owner balances"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from capital_ledger.api.v1.schemas import (
    BalanceResponse,
    CreateTransactionRequest,
    OwnerSchema,
    TransactionResponse,
)
from capital_ledger.api.dependencies import get_current_user_id, get_request_id, get_transaction_service
from capital_ledger.api.errors import to_http_exception
from capital_ledger.domain.exceptions import DomainException
from capital_ledger.domain.models import OwnerRef, Transaction
from capital_ledger.services.base import make_owner
from capital_ledger.services.transactions import TransactionService

router = APIRouter()


def _to_response(transaction: Transaction) -> TransactionResponse:
    return TransactionResponse(
        transaction_id=str(transaction.id),
        owner=OwnerSchema(type=transaction.owner.kind, id=transaction.owner.id),
        amount=transaction.amount,
        description=transaction.description,
        category=transaction.category,
        type=transaction.type,
        created_by=transaction.created_by,
        created_at=transaction.created_at.isoformat(),
    )


@router.post("/transactions", response_model=TransactionResponse)
def create_transaction(
    request_body: CreateTransactionRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: TransactionService = Depends(get_transaction_service),
):
    try:
        transaction = service.create_transaction(
            owner=OwnerRef(kind=request_body.owner.type, id=request_body.owner.id),
            amount=request_body.amount,
            description=request_body.description,
            category=request_body.category,
            type=request_body.type,
            created_by=user_id,
        )
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return _to_response(transaction)


@router.get("/transactions/owner/{owner_type}/{owner_id}", response_model=List[TransactionResponse])
def get_owner_transactions(
    owner_type: str,
    owner_id: str,
    request: Request,
    service: TransactionService = Depends(get_transaction_service),
):
    try:
        transactions = service.get_owner_transactions(make_owner(owner_id, owner_type))
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return [_to_response(t) for t in transactions]


@router.get("/transactions/owner/{owner_type}/{owner_id}/balance", response_model=BalanceResponse)
def get_owner_balance(
    owner_type: str,
    owner_id: str,
    request: Request,
    service: TransactionService = Depends(get_transaction_service),
):
    """Income minus withdrawals for one owner; 0 when there are none"""
    try:
        owner = make_owner(owner_id, owner_type)
        balance = service.get_owner_balance(owner)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return BalanceResponse(owner=OwnerSchema(type=owner.kind, id=owner.id), balance=balance)


@router.get("/transactions/creator/{creator_id}", response_model=List[TransactionResponse])
def get_transactions_by_creator(
    creator_id: str,
    request: Request,
    service: TransactionService = Depends(get_transaction_service),
):
    try:
        transactions = service.get_transactions_by_creator(creator_id)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return [_to_response(t) for t in transactions]


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: str,
    request: Request,
    service: TransactionService = Depends(get_transaction_service),
):
    try:
        transaction = service.get_transaction(transaction_id)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request)) from e

    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    return _to_response(transaction)
