"""Pytest configuration and fixtures."""

import os

# must be set before the app modules build their engine
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from app.utils.database import Base, SessionLocal, engine
from main import app


@pytest.fixture
def db_tables():
    """Fresh schema for each test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_tables) -> TestClient:
    """HTTP client bound to the in-memory database."""
    return TestClient(app)


@pytest.fixture
def db_session(db_tables):
    """Direct session for asserting on stored rows."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def loan_payload() -> dict:
    """Minimal loan body accepted by POST /api/loans."""
    return {
        "name": "Car loan",
        "amount": 200,
        "due_date": "2026-11-01",
        "category": "Transport",
    }
