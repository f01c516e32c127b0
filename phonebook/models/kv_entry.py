"""KeyValueEntry ORM — the embedded store's only table.

Invariants:
    - key is the primary key: at most one value per key
    - value is opaque bytes; only the codec interprets it

Design Decisions:
    - No created/updated columns: record metadata lives inside the encoded value
"""

from sqlalchemy import LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from phonebook.db.base import Base


class KeyValueEntry(Base):
    """One key -> value pair."""
    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
