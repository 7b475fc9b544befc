from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stretch_tracker import __version__
from stretch_tracker.core.config import settings
from stretch_tracker.core.errors import (
    StretchTrackerException,
    stretch_tracker_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from stretch_tracker.core.logging import configure_logging
from stretch_tracker.db.base import Base, engine
from stretch_tracker.routers import actions as actions_router
from stretch_tracker.routers import admin as admin_router
from stretch_tracker.routers import preferences as preferences_router
from stretch_tracker.routers import selection as selection_router
from stretch_tracker.routers import stats as stats_router
from stretch_tracker.routers import stretches as stretches_router
from stretch_tracker.stores import Stores, get_stores

configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "Starting stretch-tracker",
        version=__version__,
        env=settings.APP_ENV,
        backend=settings.STORE_BACKEND,
        timezone=settings.TIMEZONE,
    )
    if settings.STORE_BACKEND == "sql" and settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured")
    yield
    logger.info("Shutting down stretch-tracker")


app = FastAPI(
    title="Stretch Tracker API",
    description=(
        "**Stretch habit tracker**\n\n"
        "Keeps a catalog of stretches, records completed / skipped actions and "
        "picks the next stretch with a weighted-random policy that favors "
        "high-priority and long-neglected items, capped per stretch per day.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(StretchTrackerException, stretch_tracker_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(stretches_router.router)
app.include_router(selection_router.router)
app.include_router(actions_router.router)
app.include_router(stats_router.router)
app.include_router(preferences_router.router)
app.include_router(admin_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(stores: Stores = Depends(get_stores)):
    """
    Returns `{"status": "ok", "store": "ok"}` when the configured backend
    answers a catalog read. Returns HTTP 503 otherwise.
    """
    try:
        stores.catalog.list()
        store_status = "ok"
    except StretchTrackerException:
        store_status = "unreachable"

    if store_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "store": store_status},
        )
    return {
        "status": "ok",
        "store": store_status,
        "backend": settings.STORE_BACKEND,
        "env": settings.APP_ENV,
    }
