"""Agent loops that drive the model and the tool registry.

This package provides the single-agent TaskLoop and the supervised
ManagerWorkerLoop, along with the manager's verdict type and system prompts.
"""

from toolrelay.agents.supervisor import COMPLETION_SENTINEL, ManagerWorkerLoop
from toolrelay.agents.task_loop import TaskLoop
from toolrelay.agents.verdict import ManagerVerdict, VerdictStatus, parse_manager_verdict

__all__ = [
    "COMPLETION_SENTINEL",
    "ManagerVerdict",
    "ManagerWorkerLoop",
    "TaskLoop",
    "VerdictStatus",
    "parse_manager_verdict",
]
