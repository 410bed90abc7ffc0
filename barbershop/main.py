# barbershop/main.py

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .booking import DayLocks
from .config import Settings, get_settings
from .data import seed
from .db import build_engine, create_db_and_tables
from .errors import BookingError
from .logging_config import configure_logging
from .routers import (
    appointments_routes,
    auth_routes,
    client_details_routes,
    services_routes,
    users_routes,
)

logger = logging.getLogger(__name__)


def _describe(errors) -> str:
    parts = []
    for err in errors:
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name)

    # Owned per app instance, never module globals
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.day_locks = DayLocks()

    create_db_and_tables(app.state.engine)
    seed(app.state.engine, settings)

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": _describe(exc.errors())})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("request.failed", extra={"path": request.url.path, "method": request.method})
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    for module in (auth_routes, users_routes, services_routes, appointments_routes, client_details_routes):
        app.include_router(module.router, prefix="/api")

    logger.info("app.ready", extra={"database_url": settings.database_url})
    return app
