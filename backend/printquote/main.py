"""FastAPI application entry point."""
import logging
import random
from datetime import datetime
from typing import Callable

import httpx
from fastapi import FastAPI

from . import models
from .auth import router as auth_router
from .config import Settings, get_settings
from .context import build_context
from .errors import install_error_handlers
from .logging_config import setup_logging
from .middleware import RequestLogMiddleware
from .routers.backup import router as backup_router
from .routers.calculations import router as calculations_router
from .routers.catalog import router as catalog_router
from .routers.clients import router as clients_router
from .routers.commissions import router as commissions_router
from .routers.employees import router as employees_router
from .routers.materials import router as materials_router
from .routers.postal_codes import router as postal_codes_router
from .routers.settings import router as settings_router
from .routers.stock_items import router as stock_items_router
from .routers.users import router as users_router
from .security import PasswordHasher

logger = logging.getLogger("printquote")


def create_app(
    settings: Settings | None = None,
    *,
    clock: Callable[[], datetime] | None = None,
    rng: random.Random | None = None,
    hasher: PasswordHasher | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the API around an explicit application context."""

    settings = settings or get_settings()
    settings.check_runtime()
    setup_logging(settings.log_level, settings.log_json)

    context = build_context(
        settings, clock=clock, rng=rng, hasher=hasher, http_transport=http_transport
    )

    app = FastAPI(title="PrintQuote Backend", version="0.1.0")
    app.state.context = context
    install_error_handlers(app)
    app.add_middleware(RequestLogMiddleware)

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(clients_router)
    app.include_router(materials_router)
    app.include_router(stock_items_router)
    app.include_router(employees_router)
    app.include_router(calculations_router)
    app.include_router(settings_router)
    app.include_router(commissions_router)
    app.include_router(backup_router)
    app.include_router(postal_codes_router)
    app.include_router(catalog_router)

    @app.on_event("startup")
    async def on_startup() -> None:
        """Ensure database tables exist."""

        async with context.engine.begin() as conn:
            await conn.run_sync(models.Base.metadata.create_all)
        logger.info("PrintQuote backend started (%s)", settings.environment)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await context.engine.dispose()

    @app.get("/health", tags=["system"])
    async def healthcheck() -> dict[str, str]:
        """Simple readiness probe for uptime checks."""

        return {"status": "ok"}

    return app


app = create_app()
