"""
FastAPI application serving the ideaboard GraphQL API
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..auth.tokens import TokenIssuer
from ..config import settings
from ..database.connection import dispose_database, init_database, test_database_connection
from ..events import USER_ADDED, EventBus
from ..logging import configure_logging, get_logger
from ..middleware import REQUEST_ID_HEADER, LoggingContextMiddleware

configure_logging(debug=settings.debug, log_level=settings.log_level)
logger = get_logger(__name__)

# Rotated session tokens and the request id are readable by browser clients
EXPOSED_HEADERS = ["x-token", "x-refresh-token", REQUEST_ID_HEADER]


def _is_production() -> bool:
    return settings.environment.lower() in ("production", "prod")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the token issuer, the connection pool and the event bus."""
    # Raises when either signing secret is missing
    app.state.token_issuer = TokenIssuer.from_settings(settings)

    init_database()
    ok, error = await test_database_connection()
    if not ok:
        logger.error("Database unavailable at startup", error=error)
        if _is_production():
            raise RuntimeError(error)

    app.state.event_bus = EventBus()
    logger.info("ideaboard API started", version=__version__, environment=settings.environment)

    try:
        yield
    finally:
        await app.state.event_bus.close()
        await dispose_database()
        logger.info("ideaboard API stopped")


def create_app() -> FastAPI:
    """Build the application; GraphQL is skipped when IDEABOARD_DISABLE_GRAPHQL is set."""
    app = FastAPI(
        title="ideaboard API",
        description="Users, boards, suggestions and a books catalog over GraphQL",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=EXPOSED_HEADERS,
    )

    @app.get("/health")
    async def health(request: Request):  # pyright: ignore [reportUnusedFunction]
        bus: EventBus | None = getattr(request.app.state, "event_bus", None)
        return {
            "status": "healthy",
            "version": __version__,
            "user_added_subscribers": bus.subscriber_count(USER_ADDED) if bus else 0,
        }

    if not os.getenv("IDEABOARD_DISABLE_GRAPHQL"):
        from ..graphql.schema import create_graphql_router, validate_schema

        validate_schema()
        app.include_router(create_graphql_router())
        logger.info("GraphQL endpoint mounted", endpoint="/graphql")

    return app


app = create_app()
