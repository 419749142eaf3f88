"""
Shared fixtures: a fresh in-memory SQLite database per test, a session on
it, room builders, and a TestClient wired to the same database.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import get_session
from dependencies import verify_token
from main import app
from models import Base, Member, Room


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def make_room(db):
    """Insert a room with given balances directly, bypassing rent accrual."""
    counter = {"n": 100}

    def _make(
        pending="0",
        extra="0",
        rent="5000",
        rate="10",
        meter="100",
        joining_date=date(2026, 1, 15),
        is_active=True,
        members=("Ravi Kumar",),
    ):
        counter["n"] += 1
        room = Room(
            room_number=str(counter["n"]),
            name=" & ".join(members),
            phone="9876543210",
            joining_date=joining_date,
            is_active=is_active,
            monthly_rent=Decimal(rent),
            electricity_rate=Decimal(rate),
            initial_meter_reading=Decimal(meter),
            current_meter_reading=Decimal(meter),
            pending_amount=Decimal(pending),
            extra_balance=Decimal(extra),
            total_paid=Decimal("0"),
        )
        db.add(room)
        db.flush()
        for name in members:
            db.add(Member(room_id=room.id, name=name))
        db.commit()
        return room

    return _make


@pytest.fixture
def client(session_factory):
    def _get_session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[verify_token] = lambda: {"id": 1}
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
