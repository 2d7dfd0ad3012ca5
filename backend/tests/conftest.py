"""
Pytest fixtures for Flask-based testing.
Integration tests run against a fresh schema per test: in-memory SQLite by
default, or the database named by TEST_DATABASE_URL.
"""
import os
from collections.abc import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from careerpage.core import database as db_module
from careerpage.core.config import settings
from careerpage.core.database import Base
from careerpage.main import app as flask_app

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)


@pytest.fixture(scope="session")
def engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        return create_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(TEST_DATABASE_URL)


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Session on a freshly created schema; the app's SessionLocal is rebound to the same engine."""
    Base.metadata.create_all(engine)
    original_bind = db_module.SessionLocal.kw.get("bind")
    db_module.SessionLocal.configure(bind=engine)
    session = db_module.SessionLocal()
    try:
        yield session
    finally:
        session.close()
        db_module.SessionLocal.configure(bind=original_bind)
        Base.metadata.drop_all(engine)


@pytest.fixture
def client(db_session):
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as c:
        yield c


def _signup_and_login(client, email: str, password: str = "s3cret-pass") -> dict:
    r = client.post("/api/v1/auth/signup", json={"email": email, "password": password})
    assert r.status_code == 201, r.get_json()
    r = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.get_json()
    return {"Authorization": f"Bearer {r.get_json()['access_token']}"}


@pytest.fixture
def login(client):
    """Factory: register + log in a user, returning Authorization headers."""
    return lambda email: _signup_and_login(client, email)


@pytest.fixture
def auth_headers(login) -> dict:
    return login("owner@example.com")


@pytest.fixture
def company(client, auth_headers) -> dict:
    r = client.get("/api/v1/editor/company", headers=auth_headers)
    assert r.status_code == 200
    return r.get_json()["company"]
