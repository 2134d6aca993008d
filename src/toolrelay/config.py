"""Configuration module for toolrelay using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from toolrelay.transport.types import ServerLaunchSpec


class ToolRelaySettings(BaseSettings):
    """Main configuration settings for toolrelay.

    All settings can be overridden via environment variables with the TOOLRELAY_
    prefix. For example, TOOLRELAY_OLLAMA_HOST will override the ollama_host
    setting. Tool servers are passed already resolved as JSON, e.g.::

        TOOLRELAY_MCP_SERVERS='{"filesystem": {"command": "npx", "args": ["-y",
        "@modelcontextprotocol/server-filesystem", "."]}}'
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_host: str = "http://localhost:11434"
    model: str = "qwen2.5:latest"
    temperature: float = 0.3

    # Tool servers, keyed by server name
    mcp_servers: dict[str, ServerLaunchSpec] = Field(default_factory=dict)
    server_init_timeout_s: float = 30.0

    # Tool execution
    tool_timeout_ms: int = 30000
    repair_parameters: bool = True
    auto_repair_arguments: bool = False

    # Agent loops
    max_iterations: int = 5
    max_manager_rounds: int = 3

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="TOOLRELAY_")
