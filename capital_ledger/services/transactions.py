"""Ledger transactions and owner balances"""

import logging
import math
import uuid
from typing import List, Optional
from sqlalchemy.orm import Session
from capital_ledger.domain.exceptions import ValidationError
from capital_ledger.domain.ledger import calculate_balance
from capital_ledger.domain.models import OwnerRef, Transaction
from capital_ledger.infrastructure.database.repositories import TransactionRepository
from capital_ledger.infrastructure.observability.metrics import transactions_counter
from capital_ledger.services.base import BusinessService, owner_filter, parse_id, utcnow

logger = logging.getLogger(__name__)

TRANSACTION_TYPES = ("income", "withdrawal")


class TransactionService(BusinessService):
    """Operations on the immutable transaction ledger"""

    def __init__(self, db: Session):
        super().__init__(db)
        self.transactions = TransactionRepository(db)

    def create_transaction(
        self,
        owner: OwnerRef,
        amount: float,
        description: str,
        category: str,
        type: str,
        created_by: str,
    ) -> Transaction:
        if not math.isfinite(amount) or amount < 0:
            raise ValidationError(f"Transaction amount must be a finite non-negative number, got {amount}")
        if type not in TRANSACTION_TYPES:
            raise ValidationError(f"Transaction type must be one of {', '.join(TRANSACTION_TYPES)}")
        if not description or not category:
            raise ValidationError("Description and category must not be empty")

        transaction = Transaction(
            id=uuid.uuid4(),
            owner=owner,
            amount=amount,
            description=description,
            category=category,
            type=type,
            created_by=created_by,
            created_at=utcnow(),
        )

        with self.unit_of_work():
            self.transactions.insert(transaction)

        transactions_counter.labels(type=type).inc()
        logger.info("Transaction recorded", extra={"transaction_id": str(transaction.id), "transaction_type": type})
        return transaction

    def get_transaction(self, transaction_id: str | uuid.UUID) -> Optional[Transaction]:
        with self.unit_of_work():
            return self.transactions.find_by_id(parse_id(transaction_id, "transaction"))

    def get_owner_transactions(self, owner: OwnerRef) -> List[Transaction]:
        with self.unit_of_work():
            return self.transactions.find_many(**owner_filter(owner))

    def get_transactions_by_creator(self, creator_id: str) -> List[Transaction]:
        with self.unit_of_work():
            return self.transactions.find_many(created_by=creator_id)

    def get_owner_balance(self, owner: OwnerRef) -> float:
        """Income minus withdrawals across all of the owner's transactions"""
        return calculate_balance(self.get_owner_transactions(owner))
