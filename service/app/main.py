"""FastAPI application factory for the Salesforce MCP gateway.

Builds the tool registry, credential provider and dispatcher once on
startup via the lifespan context manager, stored on app.state so routers
can access them without globals. Nothing else is shared between requests:
every tool call exchanges its own token and opens its own HTTP client.

Run with:
    uvicorn app.main:create_app --factory --port 3000
"""

import functools
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app import __version__
from app.config import Settings
from app.middleware.api_key import ApiKeyMiddleware
from app.routers import health, mcp
from app.salesforce.auth import CredentialProvider
from app.salesforce.client import SalesforceClient
from app.tools.dispatcher import ToolDispatcher
from app.tools.registry import build_registry

logger = logging.getLogger(__name__)


def create_dispatcher(settings: Settings) -> ToolDispatcher:
    """Wire the registry, credential provider and client factory together."""
    client_factory = functools.partial(
        SalesforceClient,
        api_version=settings.sfdc_api_version,
        timeout=settings.sfdc_http_timeout_seconds,
        max_records=settings.sfdc_query_max_records,
    )
    return ToolDispatcher(
        registry=build_registry(),
        credentials=CredentialProvider(settings),
        client_factory=client_factory,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize shared, read-only resources on startup."""
    settings: Settings = app.state.settings
    dispatcher = create_dispatcher(settings)
    app.state.dispatcher = dispatcher

    logger.info(
        "SFDC MCP gateway ready (tools=%d, api_version=%s)",
        len(dispatcher.registry),
        settings.sfdc_api_version,
    )
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="SFDC MCP Gateway",
        description="MCP tools for querying and editing Salesforce Cases",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        ApiKeyMiddleware,
        api_key=settings.mcp_api_key.get_secret_value(),
        protected_paths=settings.get_protected_paths_set(),
    )

    app.include_router(health.router)
    app.include_router(mcp.router)
    return app
