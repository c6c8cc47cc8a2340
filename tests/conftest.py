"""Shared fixtures: a throwaway SQLite database per test, a frozen clock, users and an API client."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("TIMEZONE", "America/Sao_Paulo")
os.environ.setdefault("LOCALE", "pt_BR")
os.environ.setdefault("WORKER_EMBEDDED", "false")

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from booking.config import settings
from booking.core import timeutils
from booking.db.base import Base
from booking.db.session import build_engine, get_db, get_session_factory
from booking.main import app
from booking.models.user import User

# 09:00 in São Paulo (UTC-3)
FROZEN_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, current: datetime):
        self.current = current

    def set(self, value: datetime) -> None:
        self.current = value

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


@pytest.fixture
def clock(monkeypatch):
    frozen = FrozenClock(FROZEN_NOW)
    monkeypatch.setattr(timeutils, "now", lambda: frozen.current)
    return frozen


@pytest.fixture
def engine(tmp_path):
    # File-backed so request threads and worker threads see the same data
    eng = build_engine(f"sqlite:///{tmp_path / 'booking.db'}")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def _add_user(db, name: str, email: str, provider: bool = False, avatar_path: str | None = None) -> User:
    user = User(name=name, email=email, provider=provider, avatar_path=avatar_path)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def provider(db):
    return _add_user(db, "Paulo Barbeiro", "paulo@example.com", provider=True, avatar_path="avatar-paulo.png")


@pytest.fixture
def other_provider(db):
    return _add_user(db, "Rita Cabeleireira", "rita@example.com", provider=True)


@pytest.fixture
def client_user(db):
    return _add_user(db, "Carla Cliente", "carla@example.com")


@pytest.fixture
def other_client(db):
    return _add_user(db, "Diego Cliente", "diego@example.com")


def token_for(user_id: int) -> str:
    return jwt.encode({"id": user_id}, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def auth_headers(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user_id)}"}


@pytest.fixture
def api(session_factory, clock):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth():
    """auth(user_id) -> Authorization header for that user."""
    return auth_headers
