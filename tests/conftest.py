"""Pytest fixtures for testing"""

import logging
import pytest
from datetime import datetime, timedelta
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from billing_service.api.main import create_app
from billing_service.api.dependencies import get_clock
from billing_service.domain.locks import SettlementLocks
from billing_service.domain.service import LoanService
from billing_service.infrastructure.database.models import Base
from billing_service.infrastructure.database.repositories import LoanRepository
from billing_service.infrastructure.database.session import build_engine, get_db
from billing_service.utils.date_utils import local_timezone


# Test database: one shared in-memory connection so TestClient worker threads see the same data
TEST_DATABASE_URL = "sqlite://"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FrozenClock:
    """Controllable "now" in the local timezone"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 5, 17, 9, 0, tzinfo=local_timezone()))


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
def repository(db: Session) -> LoanRepository:
    return LoanRepository(db)


@pytest.fixture
def loan_service(repository: LoanRepository, clock: FrozenClock) -> LoanService:
    """LoanService over the SQLite repository with a frozen clock"""
    return LoanService(
        logger=logging.getLogger("billing_service.tests"),
        loan_store=repository,
        clock=clock,
        locks=SettlementLocks(stripes=4),
    )


@pytest.fixture
def client(db: Session, clock: FrozenClock) -> TestClient:
    """Create FastAPI test client with test database and frozen clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    return TestClient(app)
