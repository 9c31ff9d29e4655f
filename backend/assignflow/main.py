"""Assignflow API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map AssignflowError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, side-effect pool and orchestrator built on startup via lifespan
    - Shutdown drains the side-effect pool before the engine is disposed

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Orchestrator on app.state: one graph per process, replaceable in tests
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from assignflow.api.error_handlers import register_error_handlers
from assignflow.api.routes import health, worker_assignments
from assignflow.config import get_settings
from assignflow.infrastructure.database import init_db
from assignflow.infrastructure.observability import setup_logging
from assignflow.infrastructure.side_effect_pool import SideEffectPool
from assignflow.services.wiring import build_orchestrator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db_manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    pool = SideEffectPool(
        workers=settings.side_effect_workers,
        queue_size=settings.side_effect_queue_size,
    )
    pool.start()
    app.state.side_effect_pool = pool
    app.state.orchestrator = build_orchestrator(db_manager, pool, settings)
    logger.info("Assignflow API started")
    yield
    logger.info("Assignflow API shutting down")
    await pool.shutdown(settings.side_effect_shutdown_timeout_seconds)
    await db_manager.dispose()


app = FastAPI(
    title="Assignflow API", version="1.0.0", lifespan=lifespan,
)

# CORS origins come from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(worker_assignments.router)

register_error_handlers(app)
