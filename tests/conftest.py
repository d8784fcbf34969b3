"""
Test configuration: settings from env, in-memory SQLite per test.

Settings are read at import time, so the environment is fixed here before
anything from shiftcal is imported.
"""

import os
from datetime import datetime
from zoneinfo import ZoneInfo

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["TIMEZONE"] = "Asia/Tokyo"
os.environ["COOKIE_SECURE"] = "false"
os.environ["IDENTITY_PROVIDER"] = "db"
os.environ["GOOGLE_CLIENT_ID"] = "test-client.apps.googleusercontent.com"
os.environ["OVERLAP_SELF_CHECK"] = "true"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from shiftcal.auth.deps import get_jwt_config  # noqa: E402
from shiftcal.auth.jwt_tokens import issue_access_token  # noqa: E402
from shiftcal.core.db import Base, get_db  # noqa: E402
from shiftcal.core.roles_registry import Actor  # noqa: E402
from shiftcal.models import User  # noqa: E402

JST = ZoneInfo("Asia/Tokyo")

ADMIN = Actor(user_id=1, role="ADMIN")
ALICE = Actor(user_id=2, role="USER")
BOB = Actor(user_id=3, role="USER")
GUEST = Actor(user_id=4, role="NONE")


def jst(year, month, day, hour=0, minute=0, second=0, microsecond=0):
    return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=JST)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def users(session_factory):
    """Directory with one user per test actor."""
    rows = [
        User(id=ADMIN.user_id, email="admin@example.com", name="Admin", color="#111111", role="ADMIN"),
        User(id=ALICE.user_id, email="alice@example.com", name="Alice", color="#ff0000", role="USER"),
        User(id=BOB.user_id, email="bob@example.com", name="Bob", color="#0000ff", role="USER"),
        User(id=GUEST.user_id, email="guest@example.com", name="Guest", color="#00ff00", role="NONE"),
    ]
    names = {u.id: u.name for u in rows}
    with session_factory() as session:
        session.add_all(rows)
        session.commit()
    return names


@pytest.fixture
def client(session_factory):
    from shiftcal.main import app

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


def login(client: TestClient, actor: Actor) -> None:
    token = issue_access_token(get_jwt_config(), actor)
    client.cookies.set("access_token", token)
