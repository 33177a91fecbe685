"""Shared fixtures: in-memory database, entity accessor and API client."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import projectit.models  # noqa: F401
from projectit.core.database import Base, get_db
from projectit.main import app
from projectit.services.entities import Entities
from projectit.services.entities.repository import SETTINGS_KEY


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
    return sessionmaker(bind=engine, autoflush=True, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def entities(db):
    return Entities.from_session(db)


@pytest.fixture
def integration_settings(entities):
    """Factory that saves the singleton integration settings record."""

    def _save(**fields):
        return entities.integration_settings.create({"setting_key": SETTINGS_KEY, **fields})

    return _save


@pytest.fixture
def client(db):
    # No context manager: the lifespan would create tables in the configured database
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
