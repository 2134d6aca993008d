"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolrelay.config import ToolRelaySettings
from toolrelay.errors import NoSessionsError
from toolrelay.ollama import OllamaClient
from toolrelay.routers import health, tasks, tools
from toolrelay.tools import ToolRegistry
from toolrelay.transport import create_sessions

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    Expensive objects (the Ollama client and the tool registry with its
    server processes) are created once at startup and stored in app.state
    for reuse across all requests. The registry closes every server on
    shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: ToolRelaySettings = app.state.settings
    app.state.ollama_client = OllamaClient(host=settings.ollama_host)
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")

    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    registry = ToolRegistry(default_timeout_ms=settings.tool_timeout_ms)
    app.state.tool_registry = registry
    try:
        await registry.initialize(
            create_sessions(
                settings.mcp_servers, init_timeout_s=settings.server_init_timeout_s
            )
        )
    except NoSessionsError as e:
        logger.warning(f"{e} - task endpoints are unavailable")

    try:
        yield
    finally:
        await registry.cleanup()
        logger.info("Tool registry closed")
        await app.state.ollama_client.close()
        logger.info("Ollama client closed")


def create_app(settings: ToolRelaySettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional ToolRelaySettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from toolrelay.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="toolrelay",
        description="Tool orchestration server bridging Ollama models and MCP tool servers",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(tools.router)
    app.include_router(tasks.router)

    return app
