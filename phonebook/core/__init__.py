"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Codec and record construction are pure and deterministic (clock injected)

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
