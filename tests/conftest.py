# tests/conftest.py

import pytest
from starlette.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from unittest.mock import patch

from raffle_service.main import app
from raffle_service.core.config import settings
from raffle_service.core.limiter import limiter
from raffle_service.db.base_class import Base
from raffle_service.db.session import get_db, make_engine

# Registers every model on Base.metadata
import raffle_service.models  # noqa: F401

ADMIN_HEADERS = {"X-Internal-Api-Key": settings.INTERNAL_API_KEY}


# --- Test Database Setup ---
# A throwaway SQLite file per test: same engine setup (BEGIN IMMEDIATE,
# busy timeout) as the service, and real cross-connection locking for the
# concurrency tests.
@pytest.fixture(scope="function")
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'raffles_test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


# --- Email Mock ---
@pytest.fixture(scope="function")
def sent_emails():
    """Replaces the Resend call; every send succeeds and is recorded."""
    with patch(
        "raffle_service.core.email.send_email",
        return_value={"success": True, "id": "email_test"},
    ) as mock_send:
        yield mock_send


# --- Test Client Fixture ---
@pytest.fixture(scope="function")
def client(db_session, sent_emails):
    """
    Provides a TestClient that uses the test database session.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
