"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Wire names are camelCase; Python attributes are snake_case

Design Decisions:
    - Separate from core.record: schemas are API contracts, Record is the domain value
"""
