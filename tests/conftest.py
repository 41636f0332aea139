"""
Shared pytest fixtures.

Uses a SQLite database file so no Postgres is required for tests.
Tables are created once per session; tests isolate themselves with
unique user ids and dedicated far-future dates.
"""
import os
import uuid

SQLITE_URL = "sqlite:///./test_streakboard.db"
os.environ["DATABASE_URL"] = SQLITE_URL

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app.db.base import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def auth_headers(user_id, name=None, avatar=None, client_date=None) -> dict:
    headers = {"X-User-Id": user_id}
    if name is not None:
        headers["X-User-Name"] = name
    if avatar is not None:
        headers["X-User-Avatar"] = avatar
    if client_date is not None:
        headers["X-Client-Date"] = client_date
    return headers


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def user_id():
    return f"user-{uuid.uuid4().hex[:12]}"
