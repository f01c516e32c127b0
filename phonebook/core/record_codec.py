"""Record Codec — JSON encode/decode contract for stored values.

Invariants:
    - decode(encode(r)) == r for every valid Record
    - encode() is deterministic: sorted keys, compact separators, UTF-8
    - decode() raises CorruptValueError on any malformed input, never returns None

Design Decisions:
    - camelCase field names in the stored form: same names as the HTTP payloads,
      so a value read straight out of the store is self-describing
    - Unknown keys ignored on decode: tolerant of values written by newer builds
"""

import json

from phonebook.core.domain_types import PhoneNumber, Timestamp
from phonebook.core.errors import CorruptValueError
from phonebook.core.record import Record, is_valid_timestamp

_FIELDS = {
    "phoneNumber": "phone_number",
    "firstName": "first_name",
    "lastName": "last_name",
    "createdAt": "created_at",
}


def encode(record: Record) -> bytes:
    """Serialize a Record to its stored byte form."""
    payload = {
        stored: getattr(record, attr) for stored, attr in _FIELDS.items()
    }
    return json.dumps(
        payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False,
    ).encode("utf-8")


def decode(data: bytes) -> Record:
    """Parse stored bytes back into a Record."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CorruptValueError(f"invalid UTF-8 at byte {e.start}") from e

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptValueError(f"invalid JSON ({e.msg})") from e

    if not isinstance(payload, dict):
        raise CorruptValueError(
            f"expected object, got {type(payload).__name__}",
        )

    values = {}
    for stored, attr in _FIELDS.items():
        value = payload.get(stored)
        if not isinstance(value, str):
            raise CorruptValueError(f"field '{stored}' missing or not a string")
        values[attr] = value

    if not is_valid_timestamp(values["created_at"]):
        raise CorruptValueError("field 'createdAt' has invalid format")

    return Record(
        phone_number=PhoneNumber(values["phone_number"]),
        first_name=values["first_name"],
        last_name=values["last_name"],
        created_at=Timestamp(values["created_at"]),
    )
