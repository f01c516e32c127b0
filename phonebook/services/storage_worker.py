"""Storage Worker — the single serialized execution point for all store operations.

Invariants:
    - Exactly one consumer task: the store never sees two operations at once
    - Messages processed one at a time, in inbox (FIFO) order
    - Each failure reported exactly once, to the submitting caller; no retries
    - A failing message fails only its own reply; the worker keeps running
    - Every accepted reply is resolved: if the consumer exits, in-flight,
      queued and late-landing messages fail with WorkerUnavailableError
    - The worker owns the store: opens it in start(), closes it in stop()

Design Decisions:
    - asyncio.Queue(maxsize) as inbox: full inbox makes submitters wait (backpressure)
    - Reply via asyncio.Future per message: callers await a typed result or error
    - storage_worker module singleton installed by the FastAPI lifespan
      (same pattern as a session manager initialized on startup)
    - A caller that stops waiting does not cancel the write; its reply is dropped
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from phonebook.core import record_codec
from phonebook.core.errors import (
    CorruptRecordError, CorruptValueError, ErrorContext, StorageOperationError,
    StoreError, WorkerUnavailableError,
)
from phonebook.core.record import CreateRequest, LookupRequest, Record, build_record
from phonebook.core.repository_protocols import KeyValueStoreLike

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ─── Messages ────────────────────────────────────────────────────

@dataclass(frozen=True)
class CreateRecordMessage:
    request: CreateRequest


@dataclass(frozen=True)
class LookupRecordMessage:
    request: LookupRequest


@dataclass(frozen=True)
class HealthCheckMessage:
    pass


StorageMessage = CreateRecordMessage | LookupRecordMessage | HealthCheckMessage


@dataclass
class _Envelope:
    message: StorageMessage
    reply: asyncio.Future


_STOP = object()


def _stopped_error() -> WorkerUnavailableError:
    return WorkerUnavailableError("Storage worker stopped before replying")


# ─── Worker ──────────────────────────────────────────────────────

class StorageWorker:
    """Serializes put/get calls against a store it exclusively owns."""

    def __init__(
        self,
        store: KeyValueStoreLike,
        inbox_size: int = 1024,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._store = store
        self._inbox_size = inbox_size
        self._clock = clock
        self._inbox: asyncio.Queue | None = None
        self._task: asyncio.Task | None = None
        self._accepting = False
        self._consumer_alive = False
        self._current: _Envelope | None = None

    @property
    def is_running(self) -> bool:
        return self._accepting and self._consumer_alive

    @property
    def queue_depth(self) -> int:
        return self._inbox.qsize() if self._inbox is not None else 0

    async def start(self) -> None:
        """Open the store and spawn the consumer task."""
        if self._task is not None:
            return
        await self._store.open()
        self._inbox = asyncio.Queue(maxsize=self._inbox_size)
        self._accepting = True
        self._consumer_alive = True
        self._task = asyncio.create_task(self._run(), name="storage-worker")
        logger.info("Storage worker started")

    async def stop(self) -> None:
        """Finish queued work, stop the consumer task, close the store."""
        task = self._task
        if task is None:
            return
        self._accepting = False
        try:
            if not task.done():
                await self._inbox.put(_STOP)
                await task
            elif not task.cancelled() and task.exception() is not None:
                logger.error(
                    "Storage worker had already exited with an error",
                    exc_info=task.exception(),
                )
        finally:
            self._task = None
            self._fail_pending()
            await self._store.close()
            logger.info("Storage worker stopped")

    # ─── Caller API ──────────────────────────────────────────────

    async def create(self, request: CreateRequest) -> None:
        await self._submit(CreateRecordMessage(request))

    async def lookup(self, request: LookupRequest) -> Record | None:
        return await self._submit(LookupRecordMessage(request))

    async def health_check(self) -> bool:
        return await self._submit(HealthCheckMessage())

    async def _submit(self, message: StorageMessage) -> Any:
        if not self.is_running:
            raise WorkerUnavailableError()
        reply = asyncio.get_running_loop().create_future()
        await self._inbox.put(_Envelope(message, reply))
        # A put that waited on a full inbox can land after the consumer exited
        if not self._consumer_alive and not reply.done():
            reply.set_exception(_stopped_error())
        return await reply

    # ─── Consumer loop ───────────────────────────────────────────

    async def _run(self) -> None:
        try:
            while True:
                envelope = await self._inbox.get()
                try:
                    if envelope is _STOP:
                        return
                    self._current = envelope
                    await self._process(envelope)
                    self._current = None
                finally:
                    self._inbox.task_done()
        finally:
            self._accepting = False
            self._consumer_alive = False
            if self._current is not None and not self._current.reply.done():
                self._current.reply.set_exception(_stopped_error())
            self._fail_pending()

    async def _process(self, envelope: _Envelope) -> None:
        message = envelope.message
        logger.debug(
            "Processing storage message",
            extra={
                "message_type": type(message).__name__,
                "queue_depth": self.queue_depth,
            },
        )
        try:
            result = await self._dispatch(message)
        except Exception as e:
            if not envelope.reply.done():
                envelope.reply.set_exception(e)
        else:
            if not envelope.reply.done():
                envelope.reply.set_result(result)

    async def _dispatch(self, message: StorageMessage) -> Any:
        if isinstance(message, CreateRecordMessage):
            return await self.handle_create(message.request)
        if isinstance(message, LookupRecordMessage):
            return await self.handle_lookup(message.request)
        if isinstance(message, HealthCheckMessage):
            return await self.handle_health_check()
        raise TypeError(f"Unknown storage message: {type(message).__name__}")

    def _fail_pending(self) -> None:
        """Fail every reply still sitting in the inbox."""
        if self._inbox is None:
            return
        while True:
            try:
                envelope = self._inbox.get_nowait()
            except asyncio.QueueEmpty:
                return
            self._inbox.task_done()
            if envelope is _STOP:
                continue
            if not envelope.reply.done():
                envelope.reply.set_exception(_stopped_error())

    # ─── Operations ──────────────────────────────────────────────

    async def handle_create(self, request: CreateRequest) -> None:
        """Stamp, encode and store a record. Overwrites any previous value."""
        record = build_record(request, self._clock())
        try:
            await self._store.put(record.phone_number, record_codec.encode(record))
        except StoreError as e:
            logger.error(
                "Create failed",
                extra={
                    "phone_number": request.phone_number,
                    "operation": e.operation,
                    "error_code": e.code,
                },
            )
            raise StorageOperationError(
                "create", ErrorContext(phone_number=request.phone_number),
            ) from e

    async def handle_lookup(self, request: LookupRequest) -> Record | None:
        """Fetch and decode a record; None when the key was never written."""
        try:
            raw = await self._store.get(request.phone_number)
        except StoreError as e:
            logger.error(
                "Lookup failed",
                extra={
                    "phone_number": request.phone_number,
                    "operation": e.operation,
                    "error_code": e.code,
                },
            )
            raise StorageOperationError(
                "lookup", ErrorContext(phone_number=request.phone_number),
            ) from e
        if raw is None:
            return None
        try:
            return record_codec.decode(raw)
        except CorruptValueError as e:
            logger.error(
                f"Corrupt value under key: {e.reason}",
                extra={"phone_number": request.phone_number, "error_code": e.code},
            )
            raise CorruptRecordError(request.phone_number) from e

    async def handle_health_check(self) -> bool:
        return await self._store.health_check()


# Singleton (installed on startup)
storage_worker: StorageWorker | None = None


async def start_storage_worker(
    store: KeyValueStoreLike, inbox_size: int = 1024,
) -> StorageWorker:
    global storage_worker
    worker = StorageWorker(store, inbox_size=inbox_size)
    await worker.start()
    storage_worker = worker
    return worker


async def stop_storage_worker() -> None:
    global storage_worker
    if storage_worker is None:
        return
    worker, storage_worker = storage_worker, None
    await worker.stop()


def get_storage_worker() -> StorageWorker:
    """FastAPI dependency for the running storage worker."""
    if storage_worker is None or not storage_worker.is_running:
        raise WorkerUnavailableError()
    return storage_worker
