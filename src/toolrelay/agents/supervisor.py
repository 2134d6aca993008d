"""Manager/worker supervised task loop.

A worker (a TaskLoop with its own conversation) does the tool-using work. After
each worker turn, a manager that never calls tools reads the worker's answer
and returns a ManagerVerdict deciding whether the task is finished, failed, or
needs another instruction. Both run sequentially in the caller's task.
"""

import logging
from typing import Any

from toolrelay.agents.prompts import MANAGER_SYSTEM_PROMPT, build_worker_prompt
from toolrelay.agents.task_loop import DEFAULT_MAX_ITERATIONS, TaskLoop
from toolrelay.agents.verdict import ManagerVerdict, VerdictStatus, parse_manager_verdict
from toolrelay.conversation import (
    AssistantMessage,
    Conversation,
    ModelReply,
    SystemMessage,
    UserMessage,
)
from toolrelay.errors import MaxIterationsError, TaskError, ToolRelayError
from toolrelay.ollama.client import OllamaClient
from toolrelay.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

COMPLETION_SENTINEL = "<END>"
DEFAULT_MAX_ROUNDS = 3
ALLOWED_DIRECTORIES_TOOL = "list_allowed_directories"


class ManagerWorkerLoop:
    """Dual-agent loop with an independent completion judge.

    Attributes:
        worker: The TaskLoop doing the tool-using work
        manager_conversation: The manager's own message history
        rounds: Manager/worker round trips performed by the last task
    """

    def __init__(
        self,
        ollama_client: OllamaClient,
        registry: ToolRegistry,
        model: str,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        worker_max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tool_timeout_ms: int | None = None,
        repair_parameters: bool = True,
        auto_repair_arguments: bool = False,
        worker_options: dict[str, Any] | None = None,
        manager_options: dict[str, Any] | None = None,
    ) -> None:
        self.ollama_client = ollama_client
        self.registry = registry
        self.model = model
        self.max_rounds = max_rounds
        self.manager_options = manager_options
        self.manager_conversation = Conversation(
            [SystemMessage(content=MANAGER_SYSTEM_PROMPT)]
        )
        self.worker = TaskLoop(
            ollama_client,
            registry,
            model,
            max_iterations=worker_max_iterations,
            system_prompt=build_worker_prompt(registry.list_all_tools()),
            tool_timeout_ms=tool_timeout_ms,
            repair_parameters=repair_parameters,
            auto_repair_arguments=auto_repair_arguments,
            options=worker_options if worker_options is not None else {"temperature": 0.7},
        )
        self.rounds = 0

    async def initialize(self) -> "ManagerWorkerLoop":
        """Refresh the worker prompt with the allowed directories, if exposed.

        Must be called before process_task() to take effect; failures are
        logged and the generic prompt is kept.
        """
        if self.registry.route(ALLOWED_DIRECTORIES_TOOL) is None:
            return self

        try:
            allowed = await self.registry.call_tool_text(ALLOWED_DIRECTORIES_TOOL)
        except ToolRelayError as e:
            logger.warning(f"Could not list allowed directories: {e}")
            return self

        if len(self.worker.conversation) == 1:
            self.worker.conversation = Conversation(
                [
                    SystemMessage(
                        content=build_worker_prompt(
                            self.registry.list_all_tools(), allowed_directories=allowed
                        )
                    )
                ]
            )
        return self

    async def process_task(self, prompt: str) -> str:
        """Run the task until the manager ends it.

        Args:
            prompt: The core task

        Returns:
            str: The worker's final answer followed by the completion sentinel
                on END, or the worker's answer alone when the manager continues
                without a next instruction

        Raises:
            TaskError: If the manager reports an error or the worker's model
                request fails
            MaxIterationsError: If max_rounds rounds pass without an END
        """
        logger.info(f"Core task: {prompt}")
        self.worker.add_user_message(prompt)
        self.rounds = 0

        while self.rounds < self.max_rounds:
            self.rounds += 1
            worker_text = await self._worker_turn()
            verdict = await self._manager_turn(worker_text)
            logger.info(
                f"Round {self.rounds}/{self.max_rounds}: manager status "
                f"{verdict.status.value} ({verdict.reasoning})"
            )

            if verdict.status is VerdictStatus.END:
                return f"{worker_text}\n{COMPLETION_SENTINEL}"

            if verdict.status is VerdictStatus.ERROR:
                raise TaskError(verdict.reasoning)

            if not verdict.next_prompt:
                logger.info("Manager continued without a next instruction, stopping")
                return worker_text

            logger.info(f"Continuing with: {verdict.next_prompt}")
            self.worker.add_user_message(verdict.next_prompt)

        raise MaxIterationsError(self.max_rounds)

    async def _worker_turn(self) -> str:
        try:
            return await self.worker.run()
        except Exception as e:
            logger.error(f"Worker failed: {e}")
            raise TaskError(f"Worker failed: {e}") from e

    async def _manager_turn(self, worker_text: str) -> ManagerVerdict:
        self.manager_conversation.append(
            UserMessage(content=f"Worker's response: {worker_text}")
        )
        try:
            response = await self.ollama_client.chat(
                model=self.model,
                messages=self.manager_conversation.to_ollama(),
                options=self.manager_options,
                format=ManagerVerdict.response_schema(),
            )
        except Exception as e:
            logger.error(f"Manager failed: {e}")
            raise TaskError(f"Manager failed: {e}") from e

        try:
            content = ModelReply.from_response(response).content
        except ValueError as e:
            logger.error(f"Manager reply is malformed: {e}")
            content = ""

        self.manager_conversation.append(AssistantMessage(content=content))
        return parse_manager_verdict(content)
