"""Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set required environment variables for tests BEFORE importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("USER_ID_HEADER", "X-User-Id")

from routing_forms.main import app
from routing_forms.models.database import Base, enable_sqlite_foreign_keys, get_db
from routing_forms.schemas.form import FormInput
from routing_forms.services.form_service import RoutingFormService, UserIdentity


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine with SQLite in-memory database.

    Yields:
        Engine: SQLAlchemy engine for testing

    Note:
        StaticPool keeps a single connection so the in-memory database is
        shared with the threads TestClient runs handlers on.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(
        bind=db_engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Create a test database session.

    Yields:
        Session: SQLAlchemy session for testing
    """
    session = session_factory()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def form_service(db_session) -> RoutingFormService:
    return RoutingFormService(db_session)


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """TestClient whose requests use the test database."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_user() -> UserIdentity:
    return UserIdentity(id="user_1")


@pytest.fixture
def other_user() -> UserIdentity:
    return UserIdentity(id="user_2")


@pytest.fixture
def auth_headers(sample_user) -> dict:
    return {"X-User-Id": sample_user.id}


@pytest.fixture
def contact_form_payload() -> dict:
    """Provide a minimal form payload as a client would send it."""
    return {
        "id": "f1",
        "name": "Contact",
        "fields": [{"id": "q1", "label": "Email", "type": "text"}],
    }


@pytest.fixture
def sample_routes() -> list:
    return [
        {
            "id": "r1",
            "queryValue": {"type": "group", "children1": {}},
            "action": {"type": "customPageMessage", "value": "Thanks!"},
        },
        {
            "id": "r2",
            "isFallback": True,
            "action": {"type": "externalRedirectUrl", "value": "https://example.com"},
        },
    ]


@pytest.fixture
def contact_form_input(contact_form_payload) -> FormInput:
    return FormInput.model_validate(contact_form_payload)
