"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Storage IO accessed through Protocol types, implementations injected by the shell

Design Decisions:
    - Protocol over ABC: structural subtyping, lets tests pass plain fakes
    - Async in Protocol: implementations do IO, core functions that use the
      results stay synchronous
"""

from typing import Protocol

from phonebook.core.record import CreateRequest, LookupRequest, Record


class KeyValueStoreLike(Protocol):
    """Contract for the embedded key-value store — implemented by infrastructure."""
    async def open(self) -> None: ...
    async def put(self, key: str, value: bytes) -> None: ...
    async def get(self, key: str) -> bytes | None: ...
    async def health_check(self) -> bool: ...
    async def close(self) -> None: ...


class StorageWorkerLike(Protocol):
    """Contract the request handlers rely on — implemented by StorageWorker."""
    async def create(self, request: CreateRequest) -> None: ...
    async def lookup(self, request: LookupRequest) -> Record | None: ...
