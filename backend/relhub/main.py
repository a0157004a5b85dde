"""relhub API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CrmError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from relhub.api.error_handlers import register_error_handlers
from relhub.api.routes import contact_activity, contacts, dashboard, health
from relhub.config import get_settings
from relhub.infrastructure.database import init_db
from relhub.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_url.startswith("sqlite"):
        await manager.create_all()
    logger.info("relhub API started")
    yield
    await manager.dispose()
    logger.info("relhub API shutting down")


app = FastAPI(title="relhub API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(contacts.router)
app.include_router(contact_activity.router)
app.include_router(dashboard.router)

register_error_handlers(app)
