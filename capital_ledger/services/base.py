"""Shared plumbing for services that run against a database session"""

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from capital_ledger.domain.exceptions import PersistenceFailureError, ValidationError
from capital_ledger.domain.models import OWNER_KINDS, OwnerRef


class BusinessService:
    """Base class for services; one instance per request session"""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def unit_of_work(self) -> Iterator[None]:
        """
        Commit on success, roll back on any failure.

        Database errors surface as PersistenceFailureError; domain errors
        propagate unchanged.
        """
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailureError(f"Entity store error: {e}") from e
        except Exception:
            self.db.rollback()
            raise


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_id(value: str | uuid.UUID, entity: str) -> uuid.UUID:
    """Coerce a record id, rejecting malformed input before any lookup"""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError) as e:
        raise ValidationError(f"Invalid {entity} id: {value!r}") from e


def make_owner(owner_id: str, owner_type: str) -> OwnerRef:
    """Build an owner reference, rejecting unknown kinds"""
    if owner_type not in OWNER_KINDS:
        raise ValidationError(f"Owner type must be one of {', '.join(OWNER_KINDS)}, got {owner_type!r}")
    if not owner_id:
        raise ValidationError("Owner id must not be empty")
    return OwnerRef(kind=owner_type, id=owner_id)


def owner_filter(owner: OwnerRef, prefix: str = "owner") -> dict:
    """Column filters selecting one owner's records"""
    return {f"{prefix}_type": owner.kind, f"{prefix}_id": owner.id}
