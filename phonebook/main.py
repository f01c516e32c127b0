"""Phonebook API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PhonebookError → structured JSON responses
    - Store opened exactly once on startup and closed on shutdown, both via
      the storage worker that owns it

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from phonebook.api.error_handlers import register_error_handlers
from phonebook.api.routes import health, records
from phonebook.config import get_settings
from phonebook.infrastructure.kv_store import KeyValueStore
from phonebook.infrastructure.observability import setup_logging
from phonebook.services.storage_worker import (
    start_storage_worker, stop_storage_worker,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    await start_storage_worker(
        KeyValueStore(settings.store_path),
        inbox_size=settings.worker_inbox_size,
    )
    logger.info("Phonebook API started")
    try:
        yield
    finally:
        logger.info("Phonebook API shutting down")
        await stop_storage_worker()


app = FastAPI(title="Phonebook API", version="1.0.0", lifespan=lifespan)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(records.router)
