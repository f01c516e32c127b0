"""Infrastructure Layer — embedded store adapter and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every engine failure mapped to StoreError (core/errors.py)

Design Decisions:
    - Thin wrappers over raw clients: one responsibility per module
"""
