# shared fixtures for backend tests
# provides mock db, a fixed clock, entry builders and an httpx test client

import asyncio

import pytest
import pytest_asyncio
from unittest.mock import MagicMock
from datetime import datetime, timedelta, timezone

from httpx import AsyncClient, ASGITransport

from moodjournal.main import app
from moodjournal.models.entry import Activity, JournalEntry, Mood, Symptom, Trigger
from moodjournal.services.db import get_db
from moodjournal.services.entry_store import StoreRegistry, get_store_registry
from moodjournal.dependencies import get_now


# fixed clock, every test sees the same "today"
FIXED_NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)
TODAY = FIXED_NOW.date()
PROFILE_ID = "profile_001"


def days_ago(n: int) -> str:
    """iso date n days before the fixed today"""
    return (TODAY - timedelta(days=n)).isoformat()


def make_entry(
    day: str,
    mood: int = 3,
    symptoms: tuple = (),
    triggers: tuple = (),
    activities: dict | None = None,
    entry_id: str | None = None,
) -> JournalEntry:
    """build a stored journal entry with sensible defaults"""
    return JournalEntry(
        id=entry_id or f"entry-{day}",
        date=day,
        mood=Mood(level=mood),
        symptoms=[Symptom(name=name, intensity=4) for name in symptoms],
        triggers=[Trigger(name=name) for name in triggers],
        activities=[
            Activity(type=kind, value=value) for kind, value in (activities or {}).items()
        ],
        created_at=FIXED_NOW,
        updated_at=FIXED_NOW,
    )


def entry_payload(day: str, mood: int = 3, **extra) -> dict:
    """json body for POST /entries"""
    payload = {"date": day, "mood": {"level": mood, "emoji": ""}}
    payload.update(extra)
    return payload


# async cursor mock

class AsyncCursorMock:
    """mock for motor's async cursor, supports async for and chained methods"""

    def __init__(self, data=None):
        self._data = data or []
        self._index = 0

    def sort(self, *args, **kwargs):
        return self

    def __aiter__(self):
        self._index = 0
        return self

    async def __anext__(self):
        if self._index >= len(self._data):
            raise StopAsyncIteration
        item = self._data[self._index]
        self._index += 1
        return item

    async def to_list(self, length=None):
        if length is not None:
            return self._data[:length]
        return self._data


class MockCollection:
    """mock for a motor collection with async methods"""

    def __init__(self, data=None):
        self._data = data or []

    def find(self, query=None, projection=None):
        results = self._data
        if query:
            results = [d for d in results if self._matches(d, query)]
        return AsyncCursorMock([dict(d) for d in results])

    async def find_one(self, query=None, projection=None):
        for doc in self._data:
            if not query or self._matches(doc, query):
                return dict(doc)
        return None

    async def insert_one(self, doc):
        self._data.append(dict(doc))
        result = MagicMock()
        result.inserted_id = doc.get("id")
        return result

    async def insert_many(self, docs):
        for doc in docs:
            self._data.append(dict(doc))
        result = MagicMock()
        result.inserted_ids = [doc.get("id") for doc in docs]
        return result

    async def replace_one(self, query, replacement, upsert=False):
        result = MagicMock()
        result.modified_count = 0
        for i, doc in enumerate(self._data):
            if self._matches(doc, query):
                self._data[i] = dict(replacement)
                result.modified_count = 1
                return result
        if upsert:
            self._data.append(dict(replacement))
        return result

    async def delete_one(self, query):
        result = MagicMock()
        result.deleted_count = 0
        for i, doc in enumerate(self._data):
            if self._matches(doc, query):
                del self._data[i]
                result.deleted_count = 1
                break
        return result

    async def delete_many(self, query):
        before = len(self._data)
        self._data = [d for d in self._data if not self._matches(d, query)]
        result = MagicMock()
        result.deleted_count = before - len(self._data)
        return result

    async def create_index(self, *args, **kwargs):
        return "mock_index"

    def _matches(self, doc, query):
        """equality-only query matching for tests"""
        return all(doc.get(key) == value for key, value in query.items())


class YieldingCollection(MockCollection):
    """mock collection whose writes yield to the event loop first, like motor's"""

    async def insert_one(self, doc):
        await asyncio.sleep(0)
        return await super().insert_one(doc)

    async def insert_many(self, docs):
        await asyncio.sleep(0)
        return await super().insert_many(docs)

    async def replace_one(self, query, replacement, upsert=False):
        await asyncio.sleep(0)
        return await super().replace_one(query, replacement, upsert=upsert)

    async def delete_one(self, query):
        await asyncio.sleep(0)
        return await super().delete_one(query)

    async def delete_many(self, query):
        await asyncio.sleep(0)
        return await super().delete_many(query)


class FailingCollection(MockCollection):
    """mock collection where the next call of each named write method raises"""

    def __init__(self, data=None, fail_on=()):
        super().__init__(data)
        self.fail_on = set(fail_on)

    def _maybe_fail(self, method):
        if method in self.fail_on:
            self.fail_on.discard(method)
            raise RuntimeError(f"{method} failed")

    async def insert_one(self, doc):
        self._maybe_fail("insert_one")
        return await super().insert_one(doc)

    async def insert_many(self, docs):
        self._maybe_fail("insert_many")
        return await super().insert_many(docs)

    async def replace_one(self, query, replacement, upsert=False):
        self._maybe_fail("replace_one")
        return await super().replace_one(query, replacement, upsert=upsert)


class MockDatabase:
    """mock database that mimics the Database class"""

    def __init__(self):
        self.entries = MockCollection([])
        self.custom_items = MockCollection([])

    async def connect(self):
        pass

    async def close(self):
        pass


@pytest.fixture
def mock_db():
    """create a fresh mock database for each test"""
    return MockDatabase()


@pytest.fixture
def registry():
    """fresh store registry so no entries leak between tests"""
    return StoreRegistry()


@pytest_asyncio.fixture
async def client(mock_db, registry):
    """httpx async test client with mocked db and a fixed clock"""

    async def override_get_db():
        return mock_db

    async def override_get_store_registry():
        return registry

    def override_get_now():
        return FIXED_NOW

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_store_registry] = override_get_store_registry
    app.dependency_overrides[get_now] = override_get_now

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
