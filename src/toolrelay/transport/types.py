"""Type definitions for tool-server sessions.

This module contains dataclasses describing how a tool server is launched,
the tools it declares and the results of calling them.
"""

from dataclasses import dataclass, field
from typing import Any


def _summary_type(param: dict[str, Any]) -> str:
    """Pick a single type name for a parameter schema.

    Type lists such as ["string", "null"] give their first non-null entry;
    schemas without a usable type fall back to "string".
    """
    param_type = param.get("type")
    if isinstance(param_type, list):
        param_type = next(
            (t for t in param_type if isinstance(t, str) and t != "null"), None
        )
    return param_type if isinstance(param_type, str) else "string"


@dataclass
class ServerLaunchSpec:
    """Already-resolved launch parameters for one tool-server process.

    Attributes:
        command: Executable to start (resolved by the caller)
        args: Command line arguments
        env: Environment for the process; None lets the transport decide
        cwd: Working directory for the process
    """

    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] | None = None
    cwd: str | None = None


@dataclass(frozen=True)
class ParameterInfo:
    """A single declared tool parameter.

    `type` and `description` summarize the parameter for repair diagnostics
    and the catalog view. `schema` keeps the declared JSON schema as the
    server sent it (items, enum, nested properties, anyOf, ...) and is what
    the model sees.
    """

    type: str = "string"
    description: str | None = None
    schema: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ParameterSchema:
    """Declared parameters of a tool.

    `properties` keeps the order in which the server declared the parameters;
    parameter repair depends on it.
    """

    properties: dict[str, ParameterInfo] = field(default_factory=dict)
    required: tuple[str, ...] = ()


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool declared by a tool server.

    Attributes:
        name: Tool name, unique within a registry
        description: Human-readable description shown to the model
        parameters: Declared parameter schema
    """

    name: str
    description: str = ""
    parameters: ParameterSchema = field(default_factory=ParameterSchema)

    @staticmethod
    def from_listing(tool: Any) -> "ToolDescriptor":
        """Create a ToolDescriptor from a `tools/list` entry.

        Accepts either an MCP `Tool` object or a plain dict.

        Args:
            tool: One entry of a tool listing

        Returns:
            ToolDescriptor: The validated descriptor

        Raises:
            ValueError: If the entry has no name or an invalid input schema
        """

        def get_value(obj: Any, key: str, default: Any = None) -> Any:
            if isinstance(obj, dict):
                return obj.get(key, default)
            return getattr(obj, key, default)

        name = get_value(tool, "name")
        if not isinstance(name, str) or not name:
            raise ValueError(f"Tool entry without a name: {tool!r}")

        schema = get_value(tool, "inputSchema") or {}
        if not isinstance(schema, dict):
            raise ValueError(f"Tool '{name}' has a non-object input schema")

        raw_properties = schema.get("properties") or {}
        if not isinstance(raw_properties, dict):
            raise ValueError(f"Tool '{name}' has invalid schema properties")

        properties: dict[str, ParameterInfo] = {}
        for param_name, param in raw_properties.items():
            param = param if isinstance(param, dict) else {}
            properties[param_name] = ParameterInfo(
                type=_summary_type(param),
                description=param.get("description"),
                schema=dict(param),
            )

        required = schema.get("required") or []
        if not isinstance(required, list):
            raise ValueError(f"Tool '{name}' has invalid required list")

        return ToolDescriptor(
            name=name,
            description=get_value(tool, "description") or "",
            parameters=ParameterSchema(
                properties=properties,
                required=tuple(str(item) for item in required),
            ),
        )

    def to_ollama_tool(self) -> dict[str, Any]:
        """Convert to the function-tool format accepted by Ollama."""
        properties: dict[str, Any] = {}
        for param_name, info in self.parameters.properties.items():
            if info.schema:
                properties[param_name] = dict(info.schema)
                continue
            prop: dict[str, Any] = {"type": info.type}
            if info.description:
                prop["description"] = info.description
            properties[param_name] = prop

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": properties,
                    "required": list(self.parameters.required),
                },
            },
        }


@dataclass
class ToolResult:
    """Structured result of a tool call.

    Attributes:
        content: Typed content parts as returned by the server
        is_error: Whether the server flagged the result as an error
    """

    content: list[dict[str, Any]] = field(default_factory=list)
    is_error: bool = False

    @property
    def text(self) -> str:
        """Plain-text parts folded in order, newline-joined."""
        return "\n".join(
            str(part.get("text") or "No content")
            for part in self.content
            if isinstance(part, dict) and part.get("type") == "text"
        )
