"""Single-agent task loop.

The loop sends the conversation and the tool catalog to the model, runs the
tool calls it asks for (one at a time, in order), appends their results, and
repeats until the model answers in plain text or the iteration cap is hit.
A reply that only repeats calls which already failed ends the run early.
"""

import json
import logging
from typing import Any

from toolrelay.agents.prompts import TASK_SYSTEM_PROMPT
from toolrelay.conversation import (
    AssistantMessage,
    Conversation,
    ModelReply,
    SystemMessage,
    ToolCall,
    ToolMessage,
    UserMessage,
)
from toolrelay.errors import InvocationError, ToolTimeoutError
from toolrelay.ollama.client import OllamaClient
from toolrelay.tools.registry import ToolRegistry
from toolrelay.tools.repair import apply_parameter_mapping, build_repair_message

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 5
ERROR_MARKER = "Error"
REPEATED_FAILURE_MESSAGE = (
    "I apologize, but I'm having trouble with the correct parameter format. "
    "Let me try a different approach."
)


def is_error_text(text: str) -> bool:
    """Whether a tool's text result looks like an error report."""
    return ERROR_MARKER in text


def call_signature(tool_call: ToolCall) -> tuple[str, str]:
    """Identify a call by its tool name and canonical JSON arguments."""
    return (
        tool_call.tool_name,
        json.dumps(tool_call.arguments, sort_keys=True, default=str),
    )


class TaskLoop:
    """Bounded iterate-until-plain-answer loop over one conversation.

    Attributes:
        conversation: The loop's own message history
        iterations: Tool-bearing iterations performed by the last run()
        last_response: Text of the last model reply
    """

    def __init__(
        self,
        ollama_client: OllamaClient,
        registry: ToolRegistry,
        model: str,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        system_prompt: str = TASK_SYSTEM_PROMPT,
        tool_timeout_ms: int | None = None,
        repair_parameters: bool = True,
        auto_repair_arguments: bool = False,
        options: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the loop.

        Args:
            ollama_client: Client used for model requests
            registry: Tool registry used to route and run calls
            model: Model name
            max_iterations: Cap on tool-bearing iterations per run
            system_prompt: First message of the conversation
            tool_timeout_ms: Per-call deadline; registry default when None
            repair_parameters: Feed parameter diagnostics back on failed calls
            auto_repair_arguments: Rename arguments using suggestions before
                calling the tool
            options: Model options (temperature, etc.)
        """
        self.ollama_client = ollama_client
        self.registry = registry
        self.model = model
        self.max_iterations = max_iterations
        self.tool_timeout_ms = tool_timeout_ms
        self.repair_parameters = repair_parameters
        self.auto_repair_arguments = auto_repair_arguments
        self.options = options if options is not None else {"temperature": 0.3}
        self.conversation = Conversation([SystemMessage(content=system_prompt)])
        self.iterations = 0
        self.last_response = ""
        self._failed_calls: set[tuple[str, str]] = set()

        if not registry.list_all_tools():
            logger.warning("No tools available to the agent")

    def add_user_message(self, content: str) -> None:
        self.conversation.append(UserMessage(content=content))

    async def execute_task(self, prompt: str) -> str:
        """Run a task to completion.

        A failure of the model request ends the task with an error string.

        Args:
            prompt: The user's task

        Returns:
            str: The model's final answer, the cap message, or "Error: ..."
        """
        self.add_user_message(prompt)
        try:
            return await self.run()
        except Exception as e:
            logger.error(f"Error during task execution: {e}")
            return f"Error: {e}"

    async def run(self) -> str:
        """Iterate over the current conversation until a plain answer.

        Returns:
            str: The final answer, a message stating the cap was reached, or
                REPEATED_FAILURE_MESSAGE when the model only repeats calls
                that already failed

        Raises:
            Exception: If the model request fails
        """
        self.iterations = 0
        self._failed_calls = set()

        while self.iterations < self.max_iterations:
            reply = await self._request_reply()
            self.last_response = reply.content
            self.conversation.append(
                AssistantMessage(content=reply.content, tool_calls=tuple(reply.tool_calls))
            )

            if not reply.tool_calls:
                logger.info(f"Task finished after {self.iterations} tool iterations")
                return reply.content

            if all(
                call_signature(call) in self._failed_calls for call in reply.tool_calls
            ):
                logger.warning("Model repeated a failed tool call, stopping")
                self.last_response = REPEATED_FAILURE_MESSAGE
                self.conversation.append(AssistantMessage(content=REPEATED_FAILURE_MESSAGE))
                return REPEATED_FAILURE_MESSAGE

            self.iterations += 1
            logger.info(
                f"Iteration {self.iterations}/{self.max_iterations}: "
                f"{len(reply.tool_calls)} tool calls"
            )
            for tool_call in reply.tool_calls:
                if await self._execute_tool_call(tool_call):
                    self._failed_calls.add(call_signature(tool_call))

        logger.warning(f"Reached maximum iterations ({self.max_iterations})")
        return f"Reached maximum iterations ({self.max_iterations})"

    async def _request_reply(self) -> ModelReply:
        response = await self.ollama_client.chat(
            model=self.model,
            messages=self.conversation.to_ollama(),
            tools=self.registry.ollama_tools(),
            options=self.options,
        )
        return ModelReply.from_response(response)

    async def _execute_tool_call(self, tool_call: ToolCall) -> bool:
        """Run one call and record its outcome in the conversation.

        Returns:
            bool: True if the tool reported an error for these arguments
        """
        name = tool_call.tool_name
        arguments = tool_call.arguments
        if self.auto_repair_arguments:
            mapping = self.registry.suggest_parameter_mapping(name, arguments)
            if mapping:
                logger.info(f"Renaming arguments for '{name}': {mapping}")
                arguments = apply_parameter_mapping(arguments, mapping)

        logger.info(f"Calling tool '{name}' with args: {arguments}")
        try:
            result = await self.registry.call_tool(
                name, arguments, timeout_ms=self.tool_timeout_ms
            )
        except ToolTimeoutError as e:
            self._append_tool_message(tool_call, str(e))
            return False
        except InvocationError as e:
            logger.warning(f"Tool '{name}' failed: {e}")
            self._append_tool_failure(tool_call, arguments, str(e))
            return True

        if result is None:
            self._append_unavailable(name)
            return False

        text = result.text
        logger.debug(f"Tool '{name}' result: {text}")
        if is_error_text(text):
            self._append_tool_failure(tool_call, arguments, text)
            return True
        self._append_tool_message(tool_call, text)
        return False

    def _append_tool_failure(
        self, tool_call: ToolCall, arguments: dict[str, Any], error_text: str
    ) -> None:
        if not self.repair_parameters:
            self._append_tool_message(tool_call, error_text)
            return

        name = tool_call.tool_name
        mapping = self.registry.suggest_parameter_mapping(name, arguments)
        message = build_repair_message(
            name, error_text, self.registry.get_tool(name), arguments, mapping
        )
        self._append_tool_message(tool_call, message)

    def _append_tool_message(self, tool_call: ToolCall, content: str) -> None:
        self.conversation.append(
            ToolMessage(
                content=content,
                tool_name=tool_call.tool_name,
                tool_call_id=tool_call.id,
            )
        )

    def _append_unavailable(self, name: str) -> None:
        self.conversation.append(
            AssistantMessage(
                content=f"I don't have a tool called '{name}'. Let's continue without it."
            )
        )
