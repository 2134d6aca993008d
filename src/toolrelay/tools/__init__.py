"""Tool registry and parameter repair.

This package aggregates tools from every connected tool server into a single
catalog, routes calls by tool name, and repairs mismatched argument names.
"""

from toolrelay.tools.registry import ToolRegistry
from toolrelay.tools.repair import (
    apply_parameter_mapping,
    build_repair_message,
    suggest_parameter_mapping,
)

__all__ = [
    "ToolRegistry",
    "apply_parameter_mapping",
    "build_repair_message",
    "suggest_parameter_mapping",
]
