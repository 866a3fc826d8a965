"""Ledger balance aggregation"""

import math
from typing import Iterable
from capital_ledger.domain.models import Transaction


def signed_amount(transaction: Transaction) -> float:
    """Income adds to the balance, withdrawals subtract"""
    return transaction.amount if transaction.type == "income" else -transaction.amount


def calculate_balance(transactions: Iterable[Transaction]) -> float:
    """
    Signed sum of income and withdrawals; 0 for no transactions.

    math.fsum keeps the result independent of transaction order.
    """
    return math.fsum(signed_amount(t) for t in transactions)
