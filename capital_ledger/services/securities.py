"""Security registration and interest projection"""

import logging
import uuid
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from capital_ledger.domain.accrual import PAYMENTS_PER_YEAR, project_earnings
from capital_ledger.domain.exceptions import NotFoundError, ValidationError
from capital_ledger.domain.models import SECURITY_STATUSES, InterestEarnings, OwnerRef, Security
from capital_ledger.infrastructure.database.repositories import SecurityRepository
from capital_ledger.infrastructure.observability.metrics import securities_created_counter
from capital_ledger.services.base import BusinessService, owner_filter, parse_id, utcnow

logger = logging.getLogger(__name__)


class SecurityService(BusinessService):
    """Operations on securities"""

    def __init__(self, db: Session):
        super().__init__(db)
        self.securities = SecurityRepository(db)

    def create_security(
        self,
        owner: OwnerRef,
        name: str,
        cost: float,
        amount: float,
        interest_rate: float,
        start_date: date,
        maturity_date: Optional[date],
        payment_frequency: str,
        created_by: str,
    ) -> Security:
        """
        Register a security in "active" status.

        Raises:
            ValidationError: maturity not after start, or out-of-range terms.
                Nothing is written in that case.
        """
        if maturity_date is not None and maturity_date <= start_date:
            raise ValidationError(
                f"Maturity date {maturity_date} must be after start date {start_date}"
            )
        if payment_frequency not in PAYMENTS_PER_YEAR:
            raise ValidationError(f"Security payment frequency must be one of {', '.join(PAYMENTS_PER_YEAR)}")
        if not 0 <= interest_rate <= 1:
            raise ValidationError(f"Interest rate must be between 0 and 1, got {interest_rate}")
        if cost < 1 or amount < 1:
            raise ValidationError("Cost and amount must each be at least 1")
        if not name:
            raise ValidationError("Security name must not be empty")

        security = Security(
            id=uuid.uuid4(),
            owner=owner,
            name=name,
            cost=cost,
            amount=amount,
            interest_rate=interest_rate,
            start_date=start_date,
            maturity_date=maturity_date,
            payment_frequency=payment_frequency,
            status="active",
            created_by=created_by,
            created_at=utcnow(),
        )

        with self.unit_of_work():
            self.securities.insert(security)

        securities_created_counter.inc()
        logger.info("Security created", extra={"security_id": str(security.id), "owner_type": owner.kind})
        return security

    def get_security(self, security_id: str | uuid.UUID) -> Optional[Security]:
        with self.unit_of_work():
            return self.securities.find_by_id(parse_id(security_id, "security"))

    def get_owner_securities(self, owner: OwnerRef) -> List[Security]:
        with self.unit_of_work():
            return self.securities.find_many(**owner_filter(owner))

    def update_security_status(self, security_id: str | uuid.UUID, status: str) -> Security:
        if status not in SECURITY_STATUSES:
            raise ValidationError(f"Security status must be one of {', '.join(SECURITY_STATUSES)}")
        security_uuid = parse_id(security_id, "security")

        with self.unit_of_work():
            if not self.securities.update_by_id(security_uuid, {"status": status}):
                raise NotFoundError("Security", security_uuid)

        logger.info("Security status updated", extra={"security_id": str(security_uuid), "security_status": status})
        return self.get_security(security_uuid)

    def calculate_interest_earnings(
        self,
        security_id: str | uuid.UUID,
        as_of: Optional[date] = None,
    ) -> InterestEarnings:
        """Project accrued interest and upcoming payments as of a date (default: today in UTC)"""
        security = self.get_security(security_id)
        if security is None:
            raise NotFoundError("Security", security_id)

        return project_earnings(security, as_of or utcnow().date())
