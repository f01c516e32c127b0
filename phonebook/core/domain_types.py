"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - PhoneNumber is the store key — never use a bare str where a key is meant
    - Handler outcomes encoded as an Enum — no raw string matching at the boundary

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

PhoneNumber = NewType("PhoneNumber", str)


# ─── Value Types ─────────────────────────────────────────────────

Timestamp = NewType("Timestamp", str)   # YYYY-MM-DDTHH:MM:SSZ, UTC


# ─── Enums ───────────────────────────────────────────────────────

class Outcome(str, Enum):
    """What a request handler reports to the HTTP boundary."""
    ACCEPTED = "accepted"
    FOUND = "found"
    NOT_FOUND = "not_found"
    INTERNAL_FAILURE = "internal_failure"


class StoreOperation(str, Enum):
    """Storage engine operations, used to label StoreError and log lines."""
    OPEN = "open"
    PUT = "put"
    GET = "get"
    HEALTH_CHECK = "health_check"
    CLOSE = "close"
