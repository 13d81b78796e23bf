"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.orders import get_order_service
from database import Base, get_db
from main import app
# Pytest fixtures - imported to make them available to tests
from tests.fixtures import (  # noqa: F401
    build_order_service,
    holding,
    order_service,
    position,
    store,
)
from tests.fixtures.mocks import FlakyHoldingsStore


@pytest.fixture(name="db")
def db_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="client")
def client_fixture(db):
    """Create a test client with the test database."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="client_with_failing_storage")
def client_with_failing_storage_fixture(db):
    """Create a test client whose order service fails on every holding write."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    def override_get_order_service():
        failing_store = FlakyHoldingsStore(
            db, fail_on={"insert_holding", "update_holding", "delete_holding"}
        )
        return build_order_service(failing_store)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_order_service] = override_get_order_service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()

