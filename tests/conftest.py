"""Shared test fixtures for the Docfolio test suite.

Tests run against a throwaway SQLite database created in a temporary
directory. Every table is wiped before each test so tests stay isolated.
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone

_TEST_DIR = tempfile.mkdtemp(prefix="docfolio-tests-")

# Point the app at the test database before any app imports.
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL",
    f"sqlite:///{os.path.join(_TEST_DIR, 'docfolio_test.db')}",
)
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ["ENVIRONMENT"] = "development"

import pytest
from fastapi.testclient import TestClient

from docfolio.database import SessionLocal, get_db
from docfolio.main import app
from docfolio.middleware.request_context import _rate_buckets
from docfolio.models import Document, Folder, User

# Children before parents for foreign keys.
_WIPE_ORDER = [Document, Folder, User]

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def day(n: int) -> datetime:
    """A fixed timestamp *n* days after BASE_TIME."""
    return BASE_TIME + timedelta(days=n)


@pytest.fixture(autouse=True)
def _clean_tables():
    """Delete all rows before each test.

    Runs before the test (not after) so failures leave data available
    for debugging.
    """
    db = SessionLocal()
    try:
        for model in _WIPE_ORDER:
            db.query(model).delete()
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    _rate_buckets.clear()  # Reset rate limiter so tests don't hit 429
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class Factory:
    """Inserts rows directly, with explicit timestamps where ordering matters."""

    def __init__(self, db):
        self.db = db
        self._emails = 0

    def user(self, name: str = "Test User", email: str = None) -> User:
        self._emails += 1
        user = User(email=email or f"user{self._emails}@example.com", name=name)
        self.db.add(user)
        self.db.commit()
        return user

    def folder(self, user: User, name: str, created_at: datetime = None) -> Folder:
        folder = Folder(name=name, folders_user_id=user.id, created_at=created_at or BASE_TIME)
        self.db.add(folder)
        self.db.commit()
        return folder

    def document(
        self,
        user: User,
        name: str,
        created_at: datetime = None,
        folder: Folder = None,
        file_size: str = "100 KB",
    ) -> Document:
        doc = Document(
            name=name,
            file_size=file_size,
            document_user_id=user.id,
            folder_document_id=folder.id if folder else None,
            created_at=created_at or BASE_TIME,
        )
        self.db.add(doc)
        self.db.commit()
        return doc


@pytest.fixture()
def make(db) -> Factory:
    return Factory(db)


def make_document(name: str = "report.pdf", user_id: int = 1, **overrides) -> dict:
    """Factory for document creation payloads."""
    payload = {
        "name": name,
        "file_size": "120 KB",
        "document_user_id": user_id,
    }
    payload.update(overrides)
    return payload
