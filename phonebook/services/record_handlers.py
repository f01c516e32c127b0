"""Record Handlers — translate create/lookup intents into worker calls and outcomes.

Invariants:
    - create_record returns ACCEPTED or INTERNAL_FAILURE
    - lookup_record returns FOUND, NOT_FOUND or INTERNAL_FAILURE
    - NOT_FOUND is not an error; a corrupt value is (INTERNAL_FAILURE)
    - No error detail leaves this layer: failures are logged, outcome is generic

Design Decisions:
    - Optional timeout via asyncio.wait_for: a timed-out create may still land
      in the store; the caller owns that inconsistency
    - No retries here either: one attempt per inbound request
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, TypeVar

from phonebook.core.domain_types import Outcome, PhoneNumber
from phonebook.core.errors import PhonebookError, WorkerTimeoutError
from phonebook.core.record import CreateRequest, LookupRequest, Record
from phonebook.core.repository_protocols import StorageWorkerLike

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CreateOutcome:
    outcome: Outcome
    request: CreateRequest


@dataclass(frozen=True)
class LookupOutcome:
    outcome: Outcome
    record: Record | None = None


class RecordHandlers:
    """Boundary-facing create/lookup operations."""

    def __init__(
        self, worker: StorageWorkerLike, timeout_seconds: float | None = None,
    ):
        self.worker = worker
        self.timeout_seconds = timeout_seconds

    async def create_record(
        self, phone_number: str, first_name: str, last_name: str,
    ) -> CreateOutcome:
        request = CreateRequest(
            phone_number=PhoneNumber(phone_number),
            first_name=first_name,
            last_name=last_name,
        )
        try:
            await self._await_worker(self.worker.create(request))
        except PhonebookError as e:
            _log_failure("create", phone_number, e)
            return CreateOutcome(Outcome.INTERNAL_FAILURE, request)
        return CreateOutcome(Outcome.ACCEPTED, request)

    async def lookup_record(self, phone_number: str) -> LookupOutcome:
        request = LookupRequest(phone_number=PhoneNumber(phone_number))
        try:
            record = await self._await_worker(self.worker.lookup(request))
        except PhonebookError as e:
            _log_failure("lookup", phone_number, e)
            return LookupOutcome(Outcome.INTERNAL_FAILURE)
        if record is None:
            return LookupOutcome(Outcome.NOT_FOUND)
        return LookupOutcome(Outcome.FOUND, record)

    async def _await_worker(self, call: Awaitable[T]) -> T:
        if self.timeout_seconds is None:
            return await call
        try:
            return await asyncio.wait_for(call, self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise WorkerTimeoutError(self.timeout_seconds) from e


def _log_failure(operation: str, phone_number: str, exc: PhonebookError) -> None:
    logger.error(
        f"Record {operation} failed: {exc.message}",
        extra={
            "phone_number": phone_number,
            "operation": operation,
            "error_code": exc.code,
        },
    )
