"""Application entry point for the InfluencerFlow API.

Configures:
- **structlog** with JSON rendering (production) or colored console (development),
  forwarding ERROR events to Sentry when a DSN is configured
- **Shared services** (database, repositories, domain services, API clients)
  stored on ``app.state.services``
- **Error handlers** rendering every domain error as ``{detail, code, details?}``
- **Routers** for every API area plus ``/health``, ``/ready`` and ``/metrics``
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from influencerflow.auth.routes import router as auth_router
from influencerflow.campaigns.routes import router as campaigns_router
from influencerflow.campaigns.service import CampaignService
from influencerflow.config import Settings, get_settings, validate_credentials
from influencerflow.contracts.routes import router as contracts_router
from influencerflow.contracts.service import ContractService
from influencerflow.dashboard.routes import router as dashboard_router
from influencerflow.dashboard.stats import DashboardService
from influencerflow.domain.errors import InfluencerFlowError, first_validation_message
from influencerflow.email.replies import ReplyProcessor
from influencerflow.email.resend import ResendClient
from influencerflow.email.webhooks import router as email_router
from influencerflow.health import register_health_routes
from influencerflow.instagram.client import InstagramClient
from influencerflow.instagram.routes import router as instagram_router
from influencerflow.llm.client import get_openai_client
from influencerflow.llm.content import ContentGenerator
from influencerflow.llm.routes import router as llm_router
from influencerflow.messaging.routes import router as messaging_router
from influencerflow.negotiations.routes import router as negotiations_router
from influencerflow.negotiations.service import NegotiationService
from influencerflow.observability.metrics import setup_metrics
from influencerflow.observability.middleware import RequestIdMiddleware
from influencerflow.observability.sentry import get_sentry_processor, init_sentry
from influencerflow.outreach.routes import router as outreach_router
from influencerflow.outreach.service import OutreachService
from influencerflow.store.campaigns import CampaignStore
from influencerflow.store.collaborations import CollaborationStore
from influencerflow.store.communications import CommunicationLogStore
from influencerflow.store.directory import DirectoryStore
from influencerflow.store.messages import MessageStore, NotificationStore
from influencerflow.store.negotiations import NegotiationStore
from influencerflow.store.schema import close_db, init_db

logger = structlog.get_logger()


def configure_logging(production: bool = False, sentry_enabled: bool = False) -> None:
    """Configure structlog for production (JSON) or development (console).

    Production mode (*production=True*): JSON rendering at INFO level.
    Development mode: colored console rendering at DEBUG level.

    Args:
        production: Enable production mode if ``True``.
        sentry_enabled: Forward ERROR events to Sentry if ``True``.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if sentry_enabled:
        shared_processors.append(get_sentry_processor())

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

    structlog.contextvars.bind_contextvars(service="influencerflow-api")


def initialize_services(settings: Settings | None = None) -> dict[str, Any]:
    """Set up all shared services for the application.

    Opens the SQLite database, builds the repositories and domain services,
    and creates the Resend, OpenAI and Instagram clients.  A client whose
    credentials are missing is left as ``None`` and its feature degrades
    (outreach email fails and is logged, content generation returns 503).

    Args:
        settings: Application settings.  If ``None``, ``get_settings()`` is used.

    Returns:
        A dict of initialized service instances keyed by name.
    """
    if settings is None:
        settings = get_settings()

    services: dict[str, Any] = {}

    # a. Storage
    db_path = settings.database_path
    if str(db_path) != ":memory:":
        db_path.parent.mkdir(parents=True, exist_ok=True)
    db = init_db(db_path)
    services["db"] = db

    directory = DirectoryStore(db)
    campaigns = CampaignStore(db)
    negotiations = NegotiationStore(db)
    communications = CommunicationLogStore(db)
    collaborations = CollaborationStore(db)
    messages = MessageStore(db)
    notifications = NotificationStore(db)
    services.update(
        directory=directory,
        campaigns=campaigns,
        negotiations=negotiations,
        communications=communications,
        collaborations=collaborations,
        messages=messages,
        notifications=notifications,
    )

    # b. External clients
    resend_client = None
    resend_api_key = settings.resend_api_key.get_secret_value()
    if resend_api_key:
        resend_client = ResendClient(
            api_key=resend_api_key,
            from_address=settings.resend_from_address,
            reply_to=settings.resend_reply_to,
        )
        logger.info("resend_client_initialized")
    else:
        logger.warning("resend_client_disabled", reason="RESEND_API_KEY not set")
    services["resend_client"] = resend_client

    openai_client = get_openai_client(settings)
    services["openai_client"] = openai_client
    if openai_client is not None:
        services["content_generator"] = ContentGenerator(openai_client, settings.openai_model)
        logger.info("openai_client_initialized", model=settings.openai_model)
    else:
        services["content_generator"] = None
        logger.warning("openai_client_disabled", reason="OPENAI_API_KEY not set")

    services["instagram_client"] = InstagramClient(
        access_token=settings.instagram_access_token.get_secret_value(),
        app_secret=settings.facebook_app_secret.get_secret_value(),
    )

    # c. Domain services
    negotiation_service = NegotiationService(
        db, negotiations, campaigns, communications, directory
    )
    services["negotiation_service"] = negotiation_service
    services["contract_service"] = ContractService(
        db,
        communications,
        negotiations,
        campaigns,
        directory,
        collaborations,
        notifications,
    )
    services["campaign_service"] = CampaignService(
        db, campaigns, directory, collaborations, demo_mode=settings.demo_mode
    )
    services["dashboard_service"] = DashboardService(
        campaigns, collaborations, directory, demo_mode=settings.demo_mode
    )
    services["outreach_service"] = OutreachService(
        db,
        communications,
        campaigns,
        directory,
        messages,
        notifications,
        negotiation_service,
        resend_client=resend_client,
        app_url=settings.app_url,
    )
    services["reply_processor"] = ReplyProcessor(
        db, communications, campaigns, directory, notifications
    )

    services["_settings"] = settings
    return services


def close_services(services: dict[str, Any]) -> None:
    """Close HTTP clients and the database connection."""
    for name in ("resend_client", "instagram_client"):
        client = services.get(name)
        if client is not None:
            client.close()
    openai_client = services.get("openai_client")
    if openai_client is not None:
        openai_client.close()
    db = services.get("db")
    if db is not None:
        close_db(db)
        logger.info("database_closed")


async def handle_domain_error(request: Request, exc: InfluencerFlowError) -> JSONResponse:
    """Render an ``InfluencerFlowError`` with its status and code."""
    if exc.status_code >= 500:
        logger.error("request_failed", code=exc.code, detail=exc.message)
    return JSONResponse(content=exc.to_dict(), status_code=exc.status_code)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 ``VALIDATION_FAILED``."""
    return JSONResponse(
        content={"detail": first_validation_message(exc), "code": "VALIDATION_FAILED"},
        status_code=400,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Lifespan context manager for FastAPI startup and shutdown.

    On shutdown: closes the API clients and the database connection.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application.
    """
    logger.info("api_starting")
    yield
    close_services(app.state.services)


def create_app(services: dict[str, Any]) -> FastAPI:
    """Create the FastAPI app with every router, error handler and probe.

    Args:
        services: The initialized services dict from ``initialize_services``.

    Returns:
        The configured FastAPI application.
    """
    fastapi_app = FastAPI(title="InfluencerFlow API", lifespan=lifespan)
    fastapi_app.state.services = services
    fastapi_app.state.settings = services.get("_settings", get_settings())

    fastapi_app.add_middleware(RequestIdMiddleware)
    fastapi_app.add_exception_handler(InfluencerFlowError, handle_domain_error)
    fastapi_app.add_exception_handler(RequestValidationError, handle_validation_error)

    for router in (
        auth_router,
        campaigns_router,
        negotiations_router,
        contracts_router,
        outreach_router,
        llm_router,
        email_router,
        instagram_router,
        dashboard_router,
        messaging_router,
    ):
        fastapi_app.include_router(router)

    register_health_routes(fastapi_app)
    setup_metrics(fastapi_app)
    return fastapi_app


async def main() -> None:
    """Main entry point: configure, build the app and serve it with uvicorn.

    1. Configure logging and Sentry
    2. Validate credentials
    3. Initialize services and create the FastAPI app
    4. Serve until shutdown, then close the database
    """
    settings = get_settings()
    init_sentry(settings.sentry_dsn, "production" if settings.production else "development")
    configure_logging(production=settings.production, sentry_enabled=bool(settings.sentry_dsn))
    logger.info("application_starting")

    validate_credentials(settings)

    services = initialize_services(settings)
    fastapi_app = create_app(services)

    config = uvicorn.Config(
        fastapi_app,
        host="0.0.0.0",
        port=settings.port,
        log_level="info",
    )
    server = uvicorn.Server(config)

    try:
        await server.serve()
    finally:
        close_services(services)


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
