"""Pytest fixtures for testing"""

import os

# Keep the application engine off PostgreSQL during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date, datetime, timezone
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from capital_ledger.api.main import create_app
from capital_ledger.config import settings
from capital_ledger.infrastructure.database.models import Base
from capital_ledger.infrastructure.database.session import get_db
from capital_ledger.domain.models import Loan, OwnerRef, Security, Transaction


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def no_retry_backoff(monkeypatch):
    """Retries in tests should not sleep"""
    monkeypatch.setattr(settings, "payment_retry_backoff_seconds", 0.0)


@pytest.fixture
def session_factory() -> sessionmaker:
    """Factory for extra sessions, e.g. to play a concurrent writer"""
    return TestingSessionLocal


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def borrower() -> OwnerRef:
    return OwnerRef(kind="user", id="user_123")


@pytest.fixture
def make_loan(borrower: OwnerRef) -> Callable[..., Loan]:
    """Build an in-memory loan snapshot; override any field by keyword"""

    def _make(**overrides) -> Loan:
        fields = dict(
            id=None,
            borrower=borrower,
            principal_amount=12000,
            interest_rate=0.12,
            term_months=12,
            start_date=date(2024, 1, 15),
            end_date=date(2025, 1, 15),
            payment_frequency="monthly",
            payment_amount=1066,
            status="active",
            remaining_balance=12000,
            next_payment_due=date(2024, 2, 15),
            created_by="admin_1",
            created_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
        )
        fields.update(overrides)
        return Loan(**fields)

    return _make


@pytest.fixture
def make_security(borrower: OwnerRef) -> Callable[..., Security]:
    """Build an in-memory security snapshot; override any field by keyword"""

    def _make(**overrides) -> Security:
        fields = dict(
            id=None,
            owner=borrower,
            name="Treasury Note",
            cost=100,
            amount=10,
            interest_rate=0.05,
            start_date=date(2023, 1, 1),
            maturity_date=date(2024, 1, 1),
            payment_frequency="monthly",
            status="active",
            created_by="admin_1",
            created_at=datetime(2023, 1, 1, tzinfo=timezone.utc),
        )
        fields.update(overrides)
        return Security(**fields)

    return _make


@pytest.fixture
def make_transaction(borrower: OwnerRef) -> Callable[..., Transaction]:
    def _make(type: str, amount: float, **overrides) -> Transaction:
        fields = dict(
            id=None,
            owner=borrower,
            amount=amount,
            description="Test",
            category="test",
            type=type,
            created_by="admin_1",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        fields.update(overrides)
        return Transaction(**fields)

    return _make
