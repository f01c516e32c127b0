"""Record Routes — create and look up contacts by phone number.

Invariants:
    - POST /phone_number: 200 echoes the body, 500 on internal failure
    - GET /phone_number/{phone_number}: 200 record, 404 empty body, 500 on internal failure
    - Internal failure body is the generic INTERNAL_ERROR envelope

Design Decisions:
    - Paths kept stable for existing clients (/phone_number, not /api/v1)
    - RecordHandlers built per request from the worker singleton (cheap, stateless)
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from phonebook.api.error_handlers import internal_error_response
from phonebook.config import get_settings
from phonebook.core.domain_types import Outcome
from phonebook.schemas.record import NewRecord, RecordResponse
from phonebook.services.record_handlers import RecordHandlers
from phonebook.services.storage_worker import StorageWorker, get_storage_worker

logger = logging.getLogger(__name__)
router = APIRouter(tags=["records"])

SERVICE_BANNER = "phonebook"


def get_record_handlers(
    worker: StorageWorker = Depends(get_storage_worker),
) -> RecordHandlers:
    return RecordHandlers(
        worker, timeout_seconds=get_settings().request_timeout_seconds,
    )


@router.get("/", response_class=PlainTextResponse)
async def index():
    return SERVICE_BANNER


@router.post("/phone_number", response_model=NewRecord)
async def add_record(
    body: NewRecord, handlers: RecordHandlers = Depends(get_record_handlers),
):
    """Create (or overwrite) the record for a phone number."""
    result = await handlers.create_record(
        body.phone_number, body.first_name, body.last_name,
    )
    if result.outcome is not Outcome.ACCEPTED:
        return internal_error_response()
    return body


@router.get("/phone_number/{phone_number}", response_model=RecordResponse)
async def get_record(
    phone_number: str, handlers: RecordHandlers = Depends(get_record_handlers),
):
    """Look up the record stored under a phone number."""
    result = await handlers.lookup_record(phone_number)
    if result.outcome is Outcome.FOUND:
        return RecordResponse.from_record(result.record)
    if result.outcome is Outcome.NOT_FOUND:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return internal_error_response()
