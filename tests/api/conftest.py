"""API test fixtures — FastAPI test client wired to a real storage worker.

Invariants:
    - Every test gets a fresh SQLite store under tmp_path
    - The storage_worker singleton is restored after each test

Design Decisions:
    - Worker singleton patched instead of running the lifespan: httpx's
      ASGITransport does not send lifespan events
"""

import pytest
from httpx import ASGITransport, AsyncClient

import phonebook.services.storage_worker as worker_module
from phonebook.infrastructure.kv_store import KeyValueStore
from phonebook.main import app
from phonebook.services.storage_worker import StorageWorker


@pytest.fixture
async def store(tmp_path):
    return KeyValueStore(str(tmp_path / "records.sqlite3"))


@pytest.fixture
async def worker(store):
    w = StorageWorker(store, inbox_size=64)
    await w.start()
    yield w
    await w.stop()


@pytest.fixture
async def client(worker):
    """FastAPI test client with the storage worker singleton patched."""
    original_worker = worker_module.storage_worker
    worker_module.storage_worker = worker

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    worker_module.storage_worker = original_worker


@pytest.fixture
async def client_without_worker():
    original_worker = worker_module.storage_worker
    worker_module.storage_worker = None

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c

    worker_module.storage_worker = original_worker
