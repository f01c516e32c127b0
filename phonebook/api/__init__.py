"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Internal failures never leak detail to the client

Design Decisions:
    - Thin routes delegate to RecordHandlers
"""
