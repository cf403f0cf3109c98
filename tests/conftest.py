"""
Shared pytest fixtures — in‑memory SQLite + FastAPI TestClient.
"""
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.community.models import AdminUserModel, VendorModel  # noqa: F401  — register models
from app.community.routers.admin_auth import create_admin
from app.database import Base, get_db
from app.main import app
from app.rewards.models import ReceiptModel, WithdrawalRequestModel  # noqa: F401

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)

ADMIN_USERNAME = "reviewer"
ADMIN_PASSWORD = "correct-horse"


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)


@pytest.fixture()
def db():
    session = _Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def visitor_id():
    return f"visitor-{uuid.uuid4()}"


@pytest.fixture()
def client(db):
    def _override():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def admin_client(client, db):
    """The same client, logged in as an administrator."""
    create_admin(db, ADMIN_USERNAME, ADMIN_PASSWORD, name="Reviewer")
    resp = client.post(
        "/api/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert resp.status_code == 200
    return client
