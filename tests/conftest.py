"""Pytest configuration and fixtures."""

import os
import tempfile
from types import SimpleNamespace
from typing import Any, Generator, Optional
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo.errors import DuplicateKeyError

# Set test environment variables before importing app
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-jwt-unit-tests")
os.environ.setdefault("MONGO_URL", "mongodb://localhost:27017/social_test")
os.environ.setdefault("ASSETS_DIR", tempfile.mkdtemp(prefix="assets-"))

JWT_SECRET = "test-secret-key-for-jwt-unit-tests"


# ---------------------------------------------------------------------------
# In-memory document store
# ---------------------------------------------------------------------------

def _matches(document: dict, query: dict) -> bool:
    return all(document.get(key) == value for key, value in query.items())


class FakeCursor:
    """Subset of an async cursor: sort() and to_list()."""

    def __init__(self, documents: list[dict]):
        self._documents = documents

    def sort(self, key: str, direction: int) -> "FakeCursor":
        self._documents = sorted(
            self._documents, key=lambda d: d[key], reverse=direction < 0
        )
        return self

    async def to_list(self, length: Optional[int] = None) -> list[dict]:
        docs = [dict(d) for d in self._documents]
        return docs if length is None else docs[:length]


class FakeCollection:
    """In-memory collection counting reads and writes."""

    def __init__(self, unique_fields: tuple[str, ...] = ()):
        self.documents: list[dict] = []
        self.unique_fields = unique_fields
        self.reads = 0
        self.writes = 0

    async def find_one(self, query: dict, projection: Any = None) -> Optional[dict]:
        self.reads += 1
        for document in self.documents:
            if _matches(document, query):
                return dict(document)
        return None

    def find(self, query: Optional[dict] = None) -> FakeCursor:
        self.reads += 1
        return FakeCursor([d for d in self.documents if _matches(d, query or {})])

    async def insert_one(self, document: dict) -> SimpleNamespace:
        for field in self.unique_fields:
            if any(d.get(field) == document.get(field) for d in self.documents):
                raise DuplicateKeyError(f"E11000 duplicate key error: {field}")
        self.writes += 1
        self.documents.append(dict(document))
        return SimpleNamespace(inserted_id=document["_id"])

    async def create_index(self, keys: Any, unique: bool = False) -> str:
        return "email_1"


class FakeDatabase:
    """Hands out one FakeCollection per name; ``users`` has a unique email."""

    def __init__(self):
        self.collections: dict[str, FakeCollection] = {
            "users": FakeCollection(unique_fields=("email",)),
        }
        self.name = "social_test"

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection()
        return self.collections[name]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def mock_mongo_client() -> MagicMock:
    """Mongo client stand-in whose ping succeeds."""
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    return client


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a temporary asset directory."""
    from src.config import Settings

    return Settings(
        jwt_secret=JWT_SECRET,
        assets_dir=str(tmp_path / "assets"),
        mongo_url="mongodb://localhost:27017/social_test",
    )


@pytest.fixture
def app(test_settings, fake_db, mock_mongo_client) -> Generator:
    """Application with database startup and shutdown mocked out."""
    with (
        patch(
            "src.main.init_database",
            new=AsyncMock(return_value=(mock_mongo_client, fake_db)),
        ),
        patch("src.main.close_database", new_callable=AsyncMock),
    ):
        from src.main import create_app

        yield create_app(test_settings)


@pytest.fixture
def client(app) -> Generator:
    """TestClient running the app lifespan against the in-memory store."""
    from fastapi.testclient import TestClient

    with TestClient(app) as tc:
        yield tc
