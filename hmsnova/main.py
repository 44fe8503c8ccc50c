"""HMS Nova API — FastAPI application factory."""


import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hmsnova.core.config import settings
from hmsnova.core.exceptions import register_exception_handlers
from hmsnova.middleware.audit import AuditMiddleware
from hmsnova.routers.v1.activities import (
    audits_router,
    inspections_router,
    measures_router,
    meetings_router,
)
from hmsnova.routers.v1.chemicals import router as chemicals_router
from hmsnova.routers.v1.environment import router as environment_router
from hmsnova.routers.v1.incidents import router as incidents_router
from hmsnova.routers.v1.osha import router as osha_router
from hmsnova.routers.v1.reminders import router as reminders_router
from hmsnova.routers.v1.users import router as users_router
from hmsnova.routers.v1.workers_comp import router as workers_comp_router
from hmsnova.schemas.common import HealthResponse

_V1_ROUTERS = (
    incidents_router,
    osha_router,
    reminders_router,
    meetings_router,
    inspections_router,
    audits_router,
    measures_router,
    chemicals_router,
    environment_router,
    workers_comp_router,
    users_router,
)


def _configure_logging() -> None:
    """Set up structured logging for the application."""
    level = logging.DEBUG if settings.app_env == "development" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    for noisy in ("sqlalchemy.engine", "httpcore", "httpx", "openai", "pdfminer"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def create_app() -> FastAPI:
    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url="/docs" if settings.app_env == "development" else None,
        redoc_url="/redoc" if settings.app_env == "development" else None,
    )

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # --- Audit middleware ---
    app.add_middleware(AuditMiddleware)

    # --- Global exception handlers ---
    register_exception_handlers(app)

    # --- v1 API routes (/api/v1/*) ---
    for router in _V1_ROUTERS:
        app.include_router(router, prefix="/api/v1")

    # --- Health check ---
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health():
        return HealthResponse(app=settings.app_name, env=settings.app_env)

    return app


app = create_app()
