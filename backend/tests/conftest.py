"""
Pytest configuration and fixtures for tribe tests.
"""
import os

# In-memory SQLite unless the caller points tests somewhere else; must be set before tribe.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import tribe.models  # noqa: F401  (register tables on Base.metadata)
from tests.helpers import at
from tribe.db.base import Base


@pytest.fixture
def engine():
    """Fresh in-memory database per test; StaticPool so every session sees the same tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """FastAPI test client with get_db bound to the test database."""
    from fastapi.testclient import TestClient

    from tribe.db.session import get_db
    from tribe.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def potluck_plan(db):
    from tribe.services.plan_promoter import create_plan

    return create_plan(db, title="Friendsgiving", category="Potluck", start=at(18), end=at(21))


@pytest.fixture
def playdate_plan(db):
    from tribe.services.plan_promoter import create_plan

    return create_plan(db, title="Park playdate", category="Playdate", start=at(10), end=at(12))
