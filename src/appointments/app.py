"""Application entry point for the appointment negotiation service.

Configures:
- **structlog** with JSON rendering (production) or colored console (development)
- **Sentry** error forwarding when ``SENTRY_DSN`` is set
- **SQLite** inquiry store and audit trail
- **Submission gate** and **negotiation service** wired with their collaborators
- **FastAPI** routes, request-id middleware, Prometheus metrics, health probes
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from appointments.api import register_error_handlers, router
from appointments.audit.logger import AuditLogger
from appointments.audit.store import close_audit_db, init_audit_db
from appointments.config import Settings, get_settings
from appointments.directory import (
    InMemoryPropertyCatalog,
    InMemoryUserDirectory,
    PropertyCatalog,
    UserDirectory,
    load_directory_fixture,
)
from appointments.health import register_health_routes
from appointments.notifications import LogNotifier, NullNotifier
from appointments.observability.metrics import setup_metrics
from appointments.observability.middleware import SERVICE_NAME, RequestIdMiddleware
from appointments.observability.sentry import get_sentry_processor, init_sentry
from appointments.service import NegotiationService
from appointments.store.schema import open_inquiry_db
from appointments.store.sqlite import SqliteInquiryStore
from appointments.submission import SubmissionGate

logger = structlog.get_logger()


def configure_logging(production: bool = False, sentry_enabled: bool = False) -> None:
    """Configure structlog for production (JSON) or development (console).

    Args:
        production: JSON rendering at INFO level if ``True``; colored console
            at DEBUG level otherwise.
        sentry_enabled: Forward ERROR events to Sentry.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
    ]
    if sentry_enabled:
        shared_processors.append(get_sentry_processor())
    shared_processors.extend(
        [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
    )

    if production:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        log_level = logging.INFO
    else:
        renderer = structlog.dev.ConsoleRenderer()
        log_level = logging.DEBUG

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)


def initialize_services(
    settings: Settings | None = None,
    *,
    catalog: PropertyCatalog | None = None,
    directory: UserDirectory | None = None,
) -> dict[str, Any]:
    """Set up all shared services for the application.

    Opens the inquiry and audit databases, resolves the property catalog and
    user directory (injected, loaded from the fixture file, or empty), and
    builds the submission gate and negotiation service.

    Args:
        settings: Application settings.  If ``None``, ``get_settings()`` is used.
        catalog: Property catalog override.
        directory: User directory override.

    Returns:
        A dict of initialized service instances keyed by name.
    """
    if settings is None:
        settings = get_settings()

    services: dict[str, Any] = {"settings": settings}

    for path in (settings.db_path, settings.audit_db_path):
        if str(path) != ":memory:":
            path.parent.mkdir(parents=True, exist_ok=True)

    inquiry_conn = open_inquiry_db(settings.db_path)
    services["inquiry_conn"] = inquiry_conn
    store = SqliteInquiryStore(inquiry_conn)
    services["store"] = store

    audit_conn = init_audit_db(settings.audit_db_path)
    services["audit_conn"] = audit_conn
    audit_logger = AuditLogger(audit_conn)
    services["audit_logger"] = audit_logger

    if catalog is None or directory is None:
        fixture = settings.directory_fixture_path
        if fixture is not None and fixture.exists():
            loaded_catalog, loaded_directory = load_directory_fixture(fixture)
        else:
            logger.warning("directory_fixture_missing", path=str(fixture) if fixture else None)
            loaded_catalog, loaded_directory = InMemoryPropertyCatalog(), InMemoryUserDirectory()
        catalog = catalog or loaded_catalog
        directory = directory or loaded_directory
    services["catalog"] = catalog
    services["directory"] = directory

    services["gate"] = SubmissionGate(store, catalog, directory, audit_logger=audit_logger)
    services["service"] = NegotiationService(
        store, catalog=catalog, audit_logger=audit_logger, directory=directory
    )

    services["notifier"] = LogNotifier() if settings.notifications_enabled else NullNotifier()

    logger.info(
        "services_initialized",
        db_path=str(settings.db_path),
        audit_db_path=str(settings.audit_db_path),
        notifications=settings.notifications_enabled,
    )
    return services


def close_services(services: dict[str, Any]) -> None:
    """Close the database connections opened by ``initialize_services``."""
    inquiry_conn = services.get("inquiry_conn")
    if inquiry_conn is not None:
        inquiry_conn.close()
    audit_conn = services.get("audit_conn")
    if audit_conn is not None:
        close_audit_db(audit_conn)
    logger.info("database_connections_closed")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Lifespan context manager: closes database connections on shutdown."""
    logger.info("application_starting")
    yield
    close_services(app.state.services)


def create_app(services: dict[str, Any]) -> FastAPI:
    """Create the FastAPI app with routes, middleware, metrics and probes.

    Args:
        services: The initialized services dict from ``initialize_services``.

    Returns:
        The configured FastAPI application.
    """
    app = FastAPI(title="Appointment Negotiation Service", lifespan=lifespan)
    app.state.services = services
    app.add_middleware(RequestIdMiddleware)
    register_error_handlers(app)
    app.include_router(router)
    register_health_routes(app)
    setup_metrics(app)
    return app


def main() -> None:
    """Configure logging and error reporting, build services, and serve."""
    settings = get_settings()
    sentry_enabled = init_sentry(
        settings.sentry_dsn, "production" if settings.production else "development"
    )
    configure_logging(production=settings.production, sentry_enabled=sentry_enabled)
    logger.info("application_configured", port=settings.port)

    services = initialize_services(settings)
    app = create_app(services)

    uvicorn.run(app, host=settings.host, port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
