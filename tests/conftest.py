import os

# Must be set before storagehub.core.config is imported
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("SEED_MOCK_DATA", "false")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storagehub.models  # noqa: F401
from storagehub.core.constants import CustomerType, UnitSize
from storagehub.database import get_db
from storagehub.db.base import Base
from storagehub.main import app
from storagehub.schemas.records import CustomerRecord, MonthlyMetricRecord, UnitRecord
from storagehub.services.mock_data import seed_database

SEED_DATE = date(2025, 6, 15)


@pytest.fixture()
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


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: startup (table creation, seeding) stays off
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def seeded_client(client, db_session):
    seed_database(db_session, seed=42, as_of=SEED_DATE)
    return client


# ── Record builders ────────────────────────────────────────────────────────

def make_unit(unit_id, size=UnitSize.SIZE_10, price=100.0, customer_id=None, rented_since=None):
    return UnitRecord(
        id=unit_id,
        size=size,
        price_per_month=price,
        is_occupied=customer_id is not None,
        customer_id=customer_id,
        rented_since=rented_since,
    )


def make_customer(customer_id, type=CustomerType.PRIVATE, start=date(2024, 1, 1), end=None):
    return CustomerRecord(
        id=customer_id,
        name=f"Kunde {customer_id}",
        type=type,
        start_date=start,
        end_date=end,
    )


def make_month(year, month_index, revenue, **kwargs):
    return MonthlyMetricRecord(year=year, month_index=month_index, revenue=revenue, **kwargs)
