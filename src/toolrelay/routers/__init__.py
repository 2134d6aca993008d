"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
Each router module defines endpoints for a specific domain (health, tools, tasks).
"""

from toolrelay.routers import health, tasks, tools

__all__ = [
    "health",
    "tasks",
    "tools",
]
