"""Unit tests for the FastAPI app factory and configuration."""

from fastapi import FastAPI

from toolrelay import __version__, create_app
from toolrelay.config import ToolRelaySettings
from toolrelay.transport.types import ServerLaunchSpec


def test_create_app_returns_fastapi_instance():
    """Test that create_app returns a FastAPI instance."""
    app = create_app()
    assert isinstance(app, FastAPI)


def test_create_app_with_settings(test_settings):
    """Test that create_app accepts custom settings."""
    app = create_app(settings=test_settings)
    assert isinstance(app, FastAPI)
    assert app.state.settings is test_settings


def test_create_app_metadata():
    """Test that app has correct metadata."""
    app = create_app()
    assert app.title == "toolrelay"
    assert app.version == "0.1.0"
    assert "MCP tool servers" in app.description


def test_create_app_includes_routers():
    """Test that every router is registered."""
    app = create_app()

    routes = [route.path for route in app.routes]  # type: ignore[attr-defined]
    assert "/api/v1/health" in routes
    assert "/api/v1/tools" in routes
    assert "/api/v1/tasks" in routes
    assert "/api/v1/tasks/supervised" in routes


def test_create_app_has_cors_middleware(test_settings):
    """Test that CORS middleware is configured."""
    app = create_app(settings=test_settings)

    middleware_classes = [m.cls.__name__ for m in app.user_middleware]  # type: ignore[attr-defined]
    assert "CORSMiddleware" in middleware_classes


def test_version_constant():
    """Test that __version__ is defined and matches app version."""
    assert __version__ == "0.1.0"


def test_settings_default_values():
    """Test that settings have correct default values."""
    settings = ToolRelaySettings()

    assert settings.host == "127.0.0.1"
    assert settings.port == 8000
    assert settings.ollama_host == "http://localhost:11434"
    assert settings.log_level == "INFO"
    assert settings.mcp_servers == {}
    assert settings.tool_timeout_ms == 30000
    assert settings.max_iterations == 5
    assert settings.max_manager_rounds == 3
    assert settings.repair_parameters is True
    assert settings.auto_repair_arguments is False


def test_settings_env_prefix(monkeypatch):
    """Test that settings respect TOOLRELAY_ environment variable prefix."""
    monkeypatch.setenv("TOOLRELAY_PORT", "9000")
    monkeypatch.setenv("TOOLRELAY_OLLAMA_HOST", "http://custom:11434")
    monkeypatch.setenv("TOOLRELAY_TOOL_TIMEOUT_MS", "500")

    settings = ToolRelaySettings()

    assert settings.port == 9000
    assert settings.ollama_host == "http://custom:11434"
    assert settings.tool_timeout_ms == 500


def test_settings_mcp_servers_from_json(monkeypatch):
    """Test that tool servers can be configured as JSON."""
    monkeypatch.setenv(
        "TOOLRELAY_MCP_SERVERS",
        '{"filesystem": {"command": "npx", "args": ["-y", "server-filesystem", "."]}}',
    )

    settings = ToolRelaySettings()

    assert settings.mcp_servers == {
        "filesystem": ServerLaunchSpec(
            command="npx", args=["-y", "server-filesystem", "."]
        )
    }
