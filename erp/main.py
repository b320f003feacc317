# erp/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from erp.api.routers.inventory import router as inventory_router
from erp.api.routers.notifications import router as notifications_router
from erp.api.routers.transactions import router as transactions_router
from erp.core.config import get_settings
from erp.core.logging import setup_logging
from erp.db.base import init_models
from erp.db.session import close_engines, get_session_factory
from erp.http_problem_handlers import register_exception_handlers
from erp.obs.metrics import PrometheusMiddleware
from erp.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger("erp")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if getattr(app.state, "notification_dispatcher", None) is None:
        app.state.notification_dispatcher = NotificationDispatcher(
            get_session_factory(), background=settings.NOTIFY_IN_BACKGROUND
        )
    logger.info("inventory-erp started (env=%s)", settings.ENV)
    try:
        yield
    finally:
        await app.state.notification_dispatcher.drain()
        await close_engines()


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    init_models()

    app = FastAPI(
        title="Inventory ERP",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(PrometheusMiddleware)
    register_exception_handlers(app)

    app.include_router(transactions_router)
    app.include_router(inventory_router)
    app.include_router(notifications_router)

    @app.get("/healthz", tags=["ops"])
    async def healthz():
        return {"status": "ok"}

    @app.get("/metrics", tags=["ops"])
    async def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
