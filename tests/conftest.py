"""Pytest fixtures for testing"""

import itertools
import random
from collections import defaultdict
from datetime import date
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from vaultswipe.api.dependencies import get_engine
from vaultswipe.api.main import create_app
from vaultswipe.domain.ledger import LedgerEngine
from vaultswipe.domain.models import LedgerState
from vaultswipe.infrastructure.database.models import Base
from vaultswipe.infrastructure.database.session import get_db


# Test database: one shared in-memory connection
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2025, 2, 15)


def sequential_ids() -> Callable[[str], str]:
    """c1, c2, ... and t1, t2, ... instead of random ids"""
    counters = defaultdict(lambda: itertools.count(1))
    return lambda prefix: f"{prefix}{next(counters[prefix])}"


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def ledger_engine(today: date) -> LedgerEngine:
    """Engine with a fixed clock, predictable ids and seeded color choice"""
    return LedgerEngine(
        default_due_day=1,
        id_factory=sequential_ids(),
        clock=lambda: today,
        rng=random.Random(0),
    )


@pytest.fixture
def two_card_state(ledger_engine: LedgerEngine) -> LedgerState:
    """
    Card c1 (due 31) with t1 12.57 and t2 40.00 pending,
    card c2 (due 20) with t3 18.40 pending and t4 5.00 cleared.
    """
    state = LedgerState()
    state = ledger_engine.add_card(state, "Wells Fargo Cash Back", color="#0F766E", due_day=31)
    state = ledger_engine.add_card(state, "United Mileage Plus", color="#1D4ED8", due_day=20)
    state = ledger_engine.add_transaction(state, "c1", "12.57", date="2025-02-10", merchant="Starbucks")
    state = ledger_engine.add_transaction(state, "c1", "40.00", date="2025-02-11", merchant="Amazon")
    state = ledger_engine.add_transaction(state, "c2", "18.40", date="2025-02-12", merchant="Lyft")
    state = ledger_engine.add_transaction(state, "c2", "5.00", date="2025-02-12", merchant="Parking")
    return ledger_engine.toggle_cleared(state, "t4")


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
def client(db: Session, ledger_engine: LedgerEngine) -> TestClient:
    """Create FastAPI test client with test database and fixed-clock engine"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_engine] = lambda: ledger_engine
    return TestClient(app)
