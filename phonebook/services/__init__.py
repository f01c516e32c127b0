"""Services Layer — storage worker and request handlers (imperative shell).

Invariants:
    - Only the storage worker touches the key-value store
    - Handlers talk to the worker through StorageWorkerLike, never to the store

Design Decisions:
    - Thin handlers map worker results to outcomes; routes map outcomes to HTTP
"""
