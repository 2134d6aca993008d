"""System prompts for the agent loops."""

from toolrelay.transport.types import ToolDescriptor

TASK_SYSTEM_PROMPT = "You are a helpful assistant."

MANAGER_SYSTEM_PROMPT = """You are a task evaluator that makes sure the worker has completed the Core Task.
Determine if the worker has completed the core task using the tools.
Your response must be JSON with:
{
  "status": "CONTINUE" | "END" | "ERROR",
  "reasoning": "Very brief explanation",
  "nextPrompt": "Next instruction if CONTINUE"
}

Key points:
- If the Core Task is answered, mark it END
- If the worker has not completed the task then mark it CONTINUE
- Only mark it ERROR if the task cannot be completed with the available tools"""


def build_worker_prompt(
    tools: list[ToolDescriptor], allowed_directories: str | None = None
) -> str:
    """Build the worker's system prompt from the tool catalog.

    Args:
        tools: Tools available to the worker
        allowed_directories: Output of list_allowed_directories, if available

    Returns:
        str: The system prompt
    """
    lines = ["You are an assistant that completes tasks using the tools below."]

    if allowed_directories:
        lines.append(
            f"You can operate in the following directories:\n{allowed_directories}"
        )
        lines.append("")
        lines.append("Guidelines:")
        lines.append("- use / to separate directories")
        lines.append("- use list_directory to verify the names of files in a directory")

    lines.append("")
    lines.append("Available tools:")
    lines.extend(f"- {tool.name}: {tool.description}" for tool in tools)
    return "\n".join(lines)
