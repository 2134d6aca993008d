"""toolrelay: lets Ollama models call tools hosted by MCP tool servers.

This package connects to any number of stdio tool-server processes, merges
their tools into one catalog, and runs bounded single-agent and supervised
manager/worker task loops on top of them.
"""

from toolrelay.app import create_app

__version__ = "0.1.0"

__all__ = ["create_app", "__version__"]
