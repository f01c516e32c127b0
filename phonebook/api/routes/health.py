"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /api/v1/health/ always returns 200 if process is up (liveness)
    - GET /api/v1/health/ready returns 503 unless the worker answers a health check

Design Decisions:
    - Readiness goes through the worker inbox like any other store access:
      the probe never touches the store handle concurrently with a write
"""

import asyncio
import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from phonebook.config import get_settings
from phonebook.core.errors import PhonebookError
from phonebook.services import storage_worker as worker_module

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": "phonebook"}


@router.get("/ready")
async def readiness_check():
    """Readiness probe — store reachable through the storage worker."""
    worker = worker_module.storage_worker
    store_ok = False
    if worker is not None and worker.is_running:
        try:
            store_ok = await asyncio.wait_for(
                worker.health_check(), get_settings().request_timeout_seconds,
            )
        except (PhonebookError, asyncio.TimeoutError) as e:
            logger.warning(f"Readiness check failed: {e}")
    if not store_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "store_unavailable"},
        )
    return {"status": "ready", "checks": {"store": "healthy"}}
