"""Record Schemas — Pydantic models for the phone_number endpoints.

Invariants:
    - NewRecord.phone_number: stripped, non-empty
    - NewRecord carries no createdAt: a client-supplied one is ignored
    - RecordResponse omits phoneNumber (the caller already has it in the path)

Design Decisions:
    - Field aliases + populate_by_name: camelCase on the wire, snake_case in code
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from phonebook.core.record import Record


class NewRecord(BaseModel):
    """Create payload — echoed back on success."""
    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(alias="phoneNumber", min_length=1, max_length=64)
    first_name: str = Field(alias="firstName", max_length=256)
    last_name: str = Field(alias="lastName", max_length=256)

    @field_validator("phone_number")
    @classmethod
    def strip_phone_number(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("phoneNumber cannot be empty or whitespace")
        return v


class RecordResponse(BaseModel):
    """Lookup response — public-facing record data."""
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    created_at: str = Field(alias="createdAt")

    @classmethod
    def from_record(cls, record: Record) -> "RecordResponse":
        return cls(
            first_name=record.first_name,
            last_name=record.last_name,
            created_at=record.created_at,
        )
