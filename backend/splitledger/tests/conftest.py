"""
Test fixtures: in-memory database, API client and a few users.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from splitledger.main import app
from splitledger.db.base import Base
from splitledger.db.session import get_db
from splitledger.services.balance_service import BalanceService
from splitledger.services.repository import LedgerRepository
from splitledger.tests.factories import add_user
import splitledger.models  # noqa: F401

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def repository(db):
    return LedgerRepository(db)


@pytest.fixture
def alice(db):
    return add_user(db, "Alice", image_url="https://img.example.com/alice.png")


@pytest.fixture
def bob(db):
    return add_user(db, "Bob")


@pytest.fixture
def carol(db):
    return add_user(db, "Carol")


@pytest.fixture
def service_for(repository):
    """Build a BalanceService whose current user is ``user``."""
    def build(user):
        return BalanceService(repository, lambda: user)
    return build
