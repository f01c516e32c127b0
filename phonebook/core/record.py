"""Record Model — the stored contact and the transient requests that produce it.

Invariants:
    - Record is frozen: read-only after construction
    - created_at is always UTC, second precision, YYYY-MM-DDTHH:MM:SSZ
    - CreateRequest has no created_at: only build_record() assigns it

Design Decisions:
    - Plain frozen dataclasses, no pydantic: core stays free of boundary concerns
    - Clock passed in as a datetime: build_record() stays pure and testable
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone

from phonebook.core.domain_types import PhoneNumber, Timestamp

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
TIMESTAMP_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}Z")


@dataclass(frozen=True)
class Record:
    """One contact, keyed by phone number."""
    phone_number: PhoneNumber
    first_name: str
    last_name: str
    created_at: Timestamp


@dataclass(frozen=True)
class CreateRequest:
    phone_number: PhoneNumber
    first_name: str
    last_name: str


@dataclass(frozen=True)
class LookupRequest:
    phone_number: PhoneNumber


def format_timestamp(moment: datetime) -> Timestamp:
    """Render an aware moment as UTC with second precision.

    Naive datetimes are rejected: their zone is unknown, so labelling them
    `Z` could record local time as UTC.
    """
    if moment.tzinfo is None or moment.utcoffset() is None:
        raise ValueError("timestamp requires a timezone-aware datetime")
    return Timestamp(moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT))


def is_valid_timestamp(value: str) -> bool:
    """True for ASCII `YYYY-MM-DDTHH:MM:SSZ` naming a real calendar second."""
    if not TIMESTAMP_PATTERN.fullmatch(value):
        return False
    try:
        datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        return False
    return True


def build_record(request: CreateRequest, now: datetime) -> Record:
    """Turn a create request into a Record stamped with `now`."""
    return Record(
        phone_number=request.phone_number,
        first_name=request.first_name,
        last_name=request.last_name,
        created_at=format_timestamp(now),
    )
