"""Parameter repair for tool calls with mismatched argument names.

Models frequently call a tool with an argument name that is close to, but not
the same as, the declared one (`filepath` instead of `path`). These helpers
propose renamings and build the diagnostic that is fed back to the model.
"""

from typing import Any, Mapping

from toolrelay.transport.types import ToolDescriptor


def _normalize(key: str) -> str:
    return key.lower().replace("_", "").replace("-", "")


def suggest_parameter_mapping(
    tool: ToolDescriptor, provided_args: Mapping[str, Any]
) -> dict[str, str]:
    """Suggest declared parameter names for unrecognized argument keys.

    For every provided key that the tool does not declare, the first declared
    key (in declaration order) whose normalized form contains, or is contained
    in, the normalized provided key is suggested. First match wins.

    Args:
        tool: The tool's descriptor
        provided_args: Arguments as the model sent them

    Returns:
        dict[str, str]: Mapping of provided key to suggested declared key
    """
    declared = tool.parameters.properties
    suggestions: dict[str, str] = {}

    for key in provided_args:
        if key in declared:
            continue
        normalized = _normalize(key)
        if not normalized:
            continue
        for candidate in declared:
            normalized_candidate = _normalize(candidate)
            if not normalized_candidate:
                continue
            if normalized in normalized_candidate or normalized_candidate in normalized:
                suggestions[key] = candidate
                break

    return suggestions


def apply_parameter_mapping(
    args: Mapping[str, Any], mapping: Mapping[str, str]
) -> dict[str, Any]:
    """Return a copy of args with keys renamed according to mapping."""
    return {mapping.get(key, key): value for key, value in args.items()}


def build_repair_message(
    tool_name: str,
    error_text: str,
    tool: ToolDescriptor | None,
    provided_args: Mapping[str, Any],
    mapping: Mapping[str, str],
) -> str:
    """Build the diagnostic sent back to the model after a failed call.

    Args:
        tool_name: Name of the tool that failed
        error_text: Error reported by the tool server
        tool: The tool's descriptor, if known
        provided_args: Arguments the model sent
        mapping: Suggested renamings from suggest_parameter_mapping

    Returns:
        str: Message listing required and available parameters and suggestions
    """
    message = f"Error using tool {tool_name}:\n{error_text}\n\n"

    if tool is not None:
        message += "Expected parameters:\n"
        message += f"Required: {', '.join(tool.parameters.required)}\n"
        message += f"Available: {', '.join(tool.parameters.properties)}\n"
        message += f"Provided: {', '.join(provided_args) or '(none)'}\n\n"

        if mapping:
            message += "Suggested parameter mappings:\n"
            for provided, suggested in mapping.items():
                message += f"- {provided} -> {suggested}\n"

    return message
