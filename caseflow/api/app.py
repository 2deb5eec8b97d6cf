"""FastAPI application factory and lifespan management.

create_app() builds the fully configured application: logging,
database engine and session factory, notification dispatcher,
middleware, exception handlers, and routes. The lifespan context
manager logs startup and disposes the connection pool on shutdown.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from caseflow.api.dependencies import get_settings
from caseflow.api.middleware import RequestTracingMiddleware, register_exception_handlers
from caseflow.api.routes import api_router
from caseflow.core.config import Settings
from caseflow.core.logging import setup_logging
from caseflow.db.session import create_engine, create_session_factory
from caseflow.services.notifications.dispatcher import NotificationDispatcher

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown."""
    settings: Settings = app.state.settings
    logger.info(
        "application_starting",
        version="0.1.0",
        debug=settings.debug,
        database=app.state.engine.dialect.name,
        api_prefix=settings.api_prefix,
    )
    yield
    logger.info("application_shutting_down")
    await app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return a fully configured FastAPI application."""
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    app = FastAPI(
        title="Caseflow",
        description="Court case management API: filing, duplicate detection, lifecycle, hearings",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = create_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.notification_dispatcher = NotificationDispatcher(app.state.session_factory)

    app.add_middleware(RequestTracingMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.api_prefix)

    return app
