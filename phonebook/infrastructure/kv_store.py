"""Embedded Key-Value Store — SQLite file behind SQLAlchemy's async engine.

Invariants:
    - put() returns only after the write is committed
    - get() returns None only for an absent key; engine failures raise StoreError
    - Every SQLAlchemy / OS exception mapped to StoreError, rolled back and logged
    - No concurrency safety of its own: only the storage worker calls into it

Design Decisions:
    - One KeyValueStore per process, opened on startup and closed on shutdown
      by the worker that owns it (no global import side effects)
    - Upsert via SQLite ON CONFLICT: last write wins, one round trip per put
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from phonebook.core.domain_types import StoreOperation
from phonebook.core.errors import StoreError
from phonebook.db.base import Base
from phonebook.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Owns the single handle to the on-disk store."""

    def __init__(self, store_path: str):
        self.store_path = store_path
        self.engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    async def open(self) -> None:
        """Create the file, engine and table. Safe to call once per lifetime."""
        if self.is_open:
            return
        try:
            Path(self.store_path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(
                f"Cannot create store directory: {e}",
                extra={"operation": StoreOperation.OPEN.value},
            )
            raise StoreError("Cannot create store directory", StoreOperation.OPEN.value) from e

        engine = create_async_engine(f"sqlite+aiosqlite:///{self.store_path}")
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            await engine.dispose()
            logger.error(
                f"Cannot open store: {e}",
                extra={"operation": StoreOperation.OPEN.value},
            )
            raise StoreError("Cannot open store", StoreOperation.OPEN.value) from e

        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )
        logger.info(f"Store opened at {self.store_path}")

    async def close(self) -> None:
        """Dispose the engine. Idempotent."""
        if self.engine is None:
            return
        engine, self.engine = self.engine, None
        self._session_factory = None
        await engine.dispose()
        logger.info(f"Store closed at {self.store_path}")

    @asynccontextmanager
    async def _session(self, operation: StoreOperation) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback and StoreError mapping."""
        if self._session_factory is None:
            raise StoreError("Store is not open", operation.value)
        session = self._session_factory()
        extra = {"operation": operation.value}
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"Store integrity error: {e}", extra=extra)
            raise StoreError("Integrity constraint violated", operation.value) from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"Store operational error: {e}", extra=extra)
            raise StoreError("I/O or operational error", operation.value) from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"Store driver error: {e}", extra=extra)
            raise StoreError("Storage driver error", operation.value) from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}", extra=extra)
            raise StoreError("Storage operation failed", operation.value) from e
        finally:
            await session.close()

    async def put(self, key: str, value: bytes) -> None:
        """Write or overwrite the value for key."""
        stmt = sqlite_insert(KeyValueEntry).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=["key"],
            set_={"value": stmt.excluded["value"]},
        )
        async with self._session(StoreOperation.PUT) as db:
            await db.execute(stmt)
            await db.commit()

    async def get(self, key: str) -> bytes | None:
        """Current value for key, or None when absent."""
        async with self._session(StoreOperation.GET) as db:
            entry = await db.get(KeyValueEntry, key)
            return entry.value if entry is not None else None

    async def health_check(self) -> bool:
        """Check the store answers a trivial query (for readiness probes)."""
        try:
            async with self._session(StoreOperation.HEALTH_CHECK) as db:
                await db.execute(text("SELECT 1"))
            return True
        except StoreError as e:
            logger.error(f"Store health check failed: {e.message}")
            return False
