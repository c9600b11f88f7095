"""Pytest configuration and fixtures for testing."""

from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.config import Settings
from backend.app.db.base import Base
from backend.app.db.organization_store import SqlOrganizationStore
from backend.app.organizations import create_organization_service
from backend.app.security.permissions import Caller, Privilege
from tests.factories import NOW, InMemoryOrganizationStore


@pytest.fixture(scope="function")
def test_db_engine():
    """Create a test database engine with in-memory SQLite."""
    # One shared connection so the API threadpool sees the same database
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_db_engine):
    """Create a test database session."""
    SessionFactory = sessionmaker(bind=test_db_engine, expire_on_commit=False)
    session = SessionFactory()

    yield session

    session.close()


@pytest.fixture
def test_settings():
    """Settings with the default data languages and municipality type."""
    return Settings(postgres_url="sqlite:///:memory:")


@pytest.fixture
def sql_store(test_session):
    """Organization store on the test session."""
    return SqlOrganizationStore(test_session)


@pytest.fixture
def sql_service(sql_store, test_settings):
    """Organization service over SQLite with a fixed clock."""
    return create_organization_service(sql_store, settings=test_settings, now=lambda: NOW)


@pytest.fixture
def memory_store():
    """Empty in-memory organization store."""
    return InMemoryOrganizationStore()


@pytest.fixture
def memory_service(memory_store, test_settings):
    """Organization service over the in-memory store with a fixed clock."""
    return create_organization_service(memory_store, settings=test_settings, now=lambda: NOW)


@pytest.fixture
def admin():
    """Caller with the global management privilege and no home organization."""
    return Caller(
        user_id=uuid4(),
        privileges=frozenset({Privilege.manage_all_organization_data}),
    )


@pytest.fixture
def local_caller():
    """Factory for callers managing only their own organization tree."""

    def _make(home_organization_id):
        return Caller(
            user_id=uuid4(),
            home_organization_id=home_organization_id,
            privileges=frozenset({Privilege.manage_own_organization_data}),
        )

    return _make
