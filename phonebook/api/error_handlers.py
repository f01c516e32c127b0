"""Error Handlers — the API's no-leak failure boundary.

Invariants:
    - Every internal failure (route outcome, PhonebookError >= 500, unhandled
      exception) leaves the process as the same INTERNAL_ERROR envelope
    - PhonebookError < 500 keeps its code and message
    - RequestValidationError → 400 with field-level details
    - Exception detail, store paths and codec reasons are logged, never returned

Design Decisions:
    - internal_error_response() is the only builder of the generic body:
      routes returning INTERNAL_FAILURE and the global handlers share it
    - Kept out of main.py so the app module only wires things together
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from phonebook.core.errors import ErrorCategory, ErrorSeverity, PhonebookError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_CODE = "INTERNAL_ERROR"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


def internal_error_response(
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> JSONResponse:
    """Generic failure envelope: says something went wrong, never what."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": INTERNAL_ERROR_CODE,
                "message": INTERNAL_ERROR_MESSAGE,
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(PhonebookError, _handle_phonebook_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)


async def _handle_phonebook_error(request: Request, exc: PhonebookError):
    extra = {
        "error_code": exc.code,
        "path": request.url.path,
        "phone_number": exc.context.phone_number,
    }
    if exc.http_status >= 500:
        logger.error(f"PhonebookError: {exc.message}", extra=extra)
        return internal_error_response()
    logger.warning(f"PhonebookError: {exc.message}", extra=extra)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def _handle_validation_error(request: Request, exc: RequestValidationError):
    logger.warning(
        f"Validation error on {request.url.path}: {exc.errors()}",
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in e["loc"]),
                        "message": e["msg"],
                        "type": e["type"],
                    }
                    for e in exc.errors()
                ],
            },
        },
    )


async def _handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"path": request.url.path},
    )
    return internal_error_response()
