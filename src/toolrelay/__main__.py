"""CLI entry point for toolrelay.

This module provides the command-line interface for starting the toolrelay
server. It can be invoked as `toolrelay` (via the script entry point) or
`python -m toolrelay`. Every option falls back to its TOOLRELAY_* environment
variable, then to the built-in default.
"""

import argparse
import json
import sys

import uvicorn

from toolrelay import __version__, create_app
from toolrelay.config import ToolRelaySettings

# Options whose dest matches a ToolRelaySettings field
SETTINGS_OPTIONS = (
    "host",
    "port",
    "ollama_host",
    "model",
    "mcp_servers",
    "tool_timeout_ms",
    "max_iterations",
    "max_manager_rounds",
    "log_level",
)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the toolrelay command."""
    parser = argparse.ArgumentParser(
        prog="toolrelay",
        description="Tool orchestration server bridging Ollama models and MCP tool servers",
    )
    parser.add_argument("--version", action="version", version=f"toolrelay {__version__}")

    server = parser.add_argument_group("server")
    server.add_argument("--host", help="Bind address (TOOLRELAY_HOST, default 127.0.0.1)")
    server.add_argument("--port", type=int, help="Bind port (TOOLRELAY_PORT, default 8000)")
    server.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (TOOLRELAY_LOG_LEVEL, default INFO)",
    )
    server.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (uvicorn --reload)",
    )

    model = parser.add_argument_group("model")
    model.add_argument(
        "--ollama-host",
        help="Ollama server URL (TOOLRELAY_OLLAMA_HOST, default http://localhost:11434)",
    )
    model.add_argument("--model", help="Model used by the agent loops (TOOLRELAY_MODEL)")

    tools = parser.add_argument_group("tools")
    tools.add_argument(
        "--mcp-servers",
        type=json.loads,
        metavar="JSON",
        help='Tool servers as JSON, e.g. \'{"fs": {"command": "npx", "args": [...]}}\' '
        "(TOOLRELAY_MCP_SERVERS)",
    )
    tools.add_argument(
        "--tool-timeout-ms",
        type=int,
        help="Deadline for a single tool call (TOOLRELAY_TOOL_TIMEOUT_MS, default 30000)",
    )
    tools.add_argument(
        "--max-iterations",
        type=int,
        help="Tool iterations per task (TOOLRELAY_MAX_ITERATIONS, default 5)",
    )
    tools.add_argument(
        "--max-manager-rounds",
        type=int,
        help="Manager/worker rounds per supervised task "
        "(TOOLRELAY_MAX_MANAGER_ROUNDS, default 3)",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> ToolRelaySettings:
    """Build settings where CLI options override environment variables."""
    overrides = {
        name: getattr(args, name)
        for name in SETTINGS_OPTIONS
        if getattr(args, name, None) is not None
    }
    return ToolRelaySettings(**overrides)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the toolrelay CLI.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)

    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=args.reload,
    )


if __name__ == "__main__":
    sys.exit(main())
