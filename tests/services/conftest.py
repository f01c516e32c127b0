"""Service test fixtures — real SQLite store, running storage worker, fake store.

Invariants:
    - Every test gets a fresh store file under tmp_path
    - Worker fixtures are stopped (and the store closed) after each test

Design Decisions:
    - FakeStore tracks in-flight calls: lets tests prove the worker never
      enters the store concurrently, which a real SQLite file cannot show
"""

import asyncio
from datetime import datetime, timezone

import pytest

from phonebook.core.errors import StoreError
from phonebook.infrastructure.kv_store import KeyValueStore
from phonebook.services.storage_worker import StorageWorker


class FakeStore:
    """In-memory KeyValueStoreLike with failure injection and concurrency tracking."""

    def __init__(self):
        self.data: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[str] = set()
        self.in_flight = 0
        self.max_in_flight = 0
        self.opened = False
        self.closed = False

    async def open(self) -> None:
        self.opened = True

    async def close(self) -> None:
        self.closed = True

    async def _enter(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        # Yield so concurrent callers would overlap if they could
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        self.in_flight -= 1
        if operation in self.fail_on:
            raise StoreError("injected failure", operation)

    async def put(self, key: str, value: bytes) -> None:
        await self._enter("put", key)
        self.data[key] = value

    async def get(self, key: str) -> bytes | None:
        await self._enter("get", key)
        return self.data.get(key)

    async def health_check(self) -> bool:
        return "health_check" not in self.fail_on


class StepClock:
    """Deterministic clock: each call advances one second."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current.replace(second=(self.current.second + 1) % 60)
        return now


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def step_clock():
    return StepClock(datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
async def fake_worker(fake_store, step_clock):
    worker = StorageWorker(fake_store, inbox_size=8, clock=step_clock)
    await worker.start()
    yield worker
    await worker.stop()


@pytest.fixture
async def sqlite_store(tmp_path):
    return KeyValueStore(str(tmp_path / "records.sqlite3"))


@pytest.fixture
async def sqlite_worker(sqlite_store):
    worker = StorageWorker(sqlite_store, inbox_size=16)
    await worker.start()
    yield worker
    await worker.stop()
