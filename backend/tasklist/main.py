"""Task-List API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TaskListError -> {status, message, data, error} envelopes
    - CORS configured from settings (not hardcoded)
    - Database, token service and mailer built once on startup via the lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Token service and mailer live on app.state and reach services through
      dependencies, never as module globals
    - Pending emails are drained on shutdown so none are cut off mid-send
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tasklist.api.error_handlers import register_error_handlers
from tasklist.api.routes import health, lists, todos, users
from tasklist.config import get_settings
from tasklist.infrastructure.database import init_db
from tasklist.infrastructure.mailer import build_mailer
from tasklist.infrastructure.observability import setup_logging
from tasklist.services.token_service import build_token_service

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
    app.state.token_service = build_token_service(settings)
    app.state.mailer = build_mailer(settings)
    logger.info("Task-list API started")
    yield
    logger.info("Task-list API shutting down")
    await app.state.mailer.drain()
    await manager.dispose()


app = FastAPI(title="Task-List API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(lists.router)
app.include_router(todos.router)

register_error_handlers(app)
