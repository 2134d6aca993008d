"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and services.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from toolrelay.config import ToolRelaySettings
from toolrelay.ollama import OllamaClient
from toolrelay.tools import ToolRegistry


@lru_cache
def get_settings() -> ToolRelaySettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the TOOLRELAY_ prefix.

    Returns:
        ToolRelaySettings: The application configuration settings.
    """
    return ToolRelaySettings()


def get_ollama_client(request: Request) -> OllamaClient:
    """Get the Ollama client from app state.

    Args:
        request: The FastAPI request object.

    Returns:
        OllamaClient: The Ollama client instance.

    Raises:
        HTTPException: If the Ollama client is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "ollama_client"):
        raise HTTPException(
            status_code=503,
            detail="Ollama client not initialized",
        )
    return request.app.state.ollama_client


def get_tool_registry(request: Request) -> ToolRegistry:
    """Get the tool registry created during application startup.

    Args:
        request: The FastAPI request object.

    Returns:
        ToolRegistry: The registry with at least one connected session.

    Raises:
        HTTPException: If no tool server session is connected (503 Service Unavailable).
    """
    registry: ToolRegistry | None = getattr(request.app.state, "tool_registry", None)
    if registry is None or not registry.is_initialized:
        raise HTTPException(
            status_code=503,
            detail={
                "error": {
                    "code": "registry_unavailable",
                    "message": "No tool servers are connected",
                    "details": {},
                }
            },
        )
    return registry
