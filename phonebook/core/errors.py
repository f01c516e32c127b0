"""Error Hierarchy — typed, categorized exceptions for all Phonebook failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - StoreError is raised only by the storage engine adapter
    - OperationError subclasses are raised only by the storage worker
    - to_response() for 500-level errors never carries the internal message

Design Decisions:
    - Single hierarchy with PhonebookError base: FastAPI global handler catches all
    - Worker errors chain the adapter/codec error via __cause__ instead of copying it
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    CORRUPTION = "corruption"
    STORAGE = "storage"
    WORKER = "worker"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    phone_number: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class PhonebookError(Exception):
    """Base exception for all Phonebook errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        internal = self.http_status >= 500
        return {
            "error": {
                "code": "INTERNAL_ERROR" if internal else self.code,
                "message": (
                    "An unexpected error occurred" if internal else self.message
                ),
                "category": (
                    ErrorCategory.INTERNAL.value if internal else self.category.value
                ),
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Codec Errors ────────────────────────────────────────────────

class CorruptValueError(PhonebookError):
    """Stored bytes could not be decoded into a Record."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Stored value is corrupt: {reason}",
            "CORRUPT_VALUE", ErrorCategory.CORRUPTION,
            ErrorSeverity.ERROR, context, 500,
        )
        self.reason = reason


# ─── Storage Engine Errors ───────────────────────────────────────

class StoreError(PhonebookError):
    """Embedded storage engine failed to complete an operation."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


# ─── Worker Errors ───────────────────────────────────────────────

class OperationError(PhonebookError):
    """A storage operation executed by the worker failed."""


class StorageOperationError(OperationError):
    """Worker operation failed because the store reported an error."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage operation '{operation}' failed",
            "STORAGE_OPERATION_FAILED", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class CorruptRecordError(OperationError):
    """Worker read a value that does not decode into a Record."""
    def __init__(self, phone_number: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.phone_number = phone_number
        super().__init__(
            "Stored record could not be decoded",
            "CORRUPT_RECORD", ErrorCategory.CORRUPTION,
            ErrorSeverity.ERROR, ctx, 500,
        )


class WorkerUnavailableError(PhonebookError):
    """Storage worker is not running or stopped before replying."""
    def __init__(self, message: str = "Storage worker is not running",
                 context: ErrorContext | None = None):
        super().__init__(
            message, "WORKER_UNAVAILABLE", ErrorCategory.WORKER,
            ErrorSeverity.CRITICAL, context, 500,
        )


class WorkerTimeoutError(PhonebookError):
    """Caller gave up waiting for the storage worker."""
    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"Storage worker did not reply within {timeout_seconds}s",
            "WORKER_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, context, 504,
        )
        self.timeout_seconds = timeout_seconds
