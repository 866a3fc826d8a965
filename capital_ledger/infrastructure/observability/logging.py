"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from capital_ledger.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_payment(
    loan_id: str,
    amount: float,
    principal_portion: float,
    interest_portion: float,
    remaining_balance: int,
    status: str,
    attempts: int,
) -> None:
    """Log structured payment outcome for reconciliation"""
    logging.getLogger("capital_ledger.payments").info(
        "Payment applied",
        extra={
            "loan_id": loan_id,
            "step": "payment_applied",
            "amount": amount,
            "principal_portion": round(principal_portion, 2),
            "interest_portion": round(interest_portion, 2),
            "remaining_balance": remaining_balance,
            "loan_status": status,
            "attempts": attempts,
        },
    )
