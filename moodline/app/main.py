from __future__ import annotations

import logging
import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .api.v1.routes import router as v1_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .middleware import RequestLoggingMiddleware
from .services.metrics_view import MetricsView
from .services.preferences import PreferencesStore
from .services.store import EntryStore

logger = logging.getLogger(__name__)


def build_services(app: FastAPI, settings: Settings) -> None:
    """Attach one store, its metrics view and the preferences to ``app.state``."""

    rng = random.Random(settings.dummy_seed) if settings.dummy_seed is not None else None
    store = EntryStore(rng=rng, tz=settings.tzinfo)
    app.state.settings = settings
    app.state.entry_store = store
    app.state.metrics_view = MetricsView(store, tz=settings.tzinfo)
    app.state.preferences = PreferencesStore()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the in-memory services on startup and detach them on shutdown."""

    configure_logging()
    settings = get_settings()
    build_services(app, settings)
    logger.info(
        "Starting Moodline %s tz=%s range_days=%s",
        settings.version,
        settings.local_tz or "local",
        settings.default_range_days,
    )
    try:
        yield
    finally:
        app.state.metrics_view.close()
        logger.info("Moodline stopped with %s entries in memory", len(app.state.entry_store.entries))


app = FastAPI(title="Moodline", version=get_settings().version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(v1_router)


@app.get("/healthz")
async def healthz(request: Request, settings: Settings = Depends(get_settings)) -> dict[str, object]:
    store: EntryStore = request.app.state.entry_store
    return {
        "status": "ok",
        "version": settings.version,
        "entries": len(store.entries),
        "store_version": store.version,
    }


@app.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
