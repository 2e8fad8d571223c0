"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["MIRROR_WEBHOOK_URL"] = ""
os.environ["ENVIRONMENT"] = "test"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from pos_api.main import app
from pos_api.models import Base
from pos_api.repositories import SqlDataStore
from pos_api.services.domain import LifecycleService
from shared.infrastructure.db import SessionLocal, engine, get_db


# The application engine is already SQLite in-memory with a StaticPool, so
# sessions opened outside a request (CLI, background tasks) see test data too.


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def store(db_session):
    return SqlDataStore(db_session)


@pytest.fixture
def lifecycle(store):
    return LifecycleService(store)


@pytest.fixture
def seed_tables(store):
    """Tables 2, 3, 5 and 7, all vacant."""
    return {
        no: store.insert_table({"table_no": no, "capacity": capacity})
        for no, capacity in (("2", 2), ("3", 4), ("5", 4), ("7", 6))
    }


@pytest.fixture
def seed_menu(store):
    """A small menu keyed by item name."""
    items = [
        ("Paneer Tikka", "Starters", "150.00", True),
        ("Butter Naan", "Breads", "50.00", True),
        ("Dal Makhani", "Mains", "200.00", True),
        ("Mango Lassi", "Drinks", "80.00", True),
        ("Seasonal Special", "Mains", "300.00", False),
    ]
    return {
        name: store.insert_menu_item({
            "item_name": name,
            "category": category,
            "price": Decimal(price),
            "description": None,
            "kitchen_station": "Main Kitchen",
            "prep_time": 15,
            "available": available,
        })
        for name, category, price, available in items
    }


@pytest.fixture
def order_at_table_5(lifecycle, seed_tables, seed_menu):
    """Pending order at table 5 totalling 250.00 (1 Paneer Tikka + 2 Butter Naan)."""
    return lifecycle.place_order(
        "5",
        [
            {"item_id": seed_menu["Paneer Tikka"].item_id, "quantity": 1},
            {"item_id": seed_menu["Butter Naan"].item_id, "quantity": 2},
        ],
    )
