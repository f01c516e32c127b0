"""Database Infrastructure — SQLAlchemy Base for the embedded store's single table.

Invariants:
    - One table only: the store is a plain key -> bytes map

Design Decisions:
    - aiosqlite driver: embedded, on-disk, in-process; no server to run
"""
