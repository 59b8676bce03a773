"""Shared fixtures for the API and realtime tests."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "friendbook_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"

from friendbook.config import get_settings  # noqa: E402

get_settings.cache_clear()

from friendbook.application.use_cases.users import register_user  # noqa: E402
from friendbook.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from friendbook.infrastructure.security import create_access_token  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


def create_user(name: str, email: str | None = None, password: str = "secret-password"):
    """Persist a user and return ``(user_id, access_token)``."""

    session = SessionLocal()
    try:
        user = register_user(
            session,
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            password=password,
        )
    finally:
        session.close()
    return user.id, create_access_token(user.id)


@pytest.fixture()
def make_user():
    return create_user
