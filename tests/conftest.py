"""
Test configuration for pytest
"""

import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session
from fastapi.testclient import TestClient
from typing import Generator

# Test environment variables
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"

from tableside.core.database import get_session, init_db  # noqa: E402
from tableside.core.events import EventBus  # noqa: E402
from tableside.services.storage import Storage  # noqa: E402


# One shared in-memory connection so the TestClient threads see the same data
test_engine = create_engine(
    "sqlite://",
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a clean database session for each test"""
    init_db(test_engine)

    with Session(test_engine) as session:
        yield session

    # Cleanup
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def bus() -> EventBus:
    """Private event bus so tests never see each other's subscribers"""
    return EventBus()


@pytest.fixture
def storage(db: Session, bus: EventBus) -> Storage:
    return Storage(db, bus=bus)


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """API client bound to the test database session"""
    from tableside.main import app

    def override_get_session():
        yield db

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()
