"""The manager's structured completion decision."""

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

PARSE_FAILURE_REASONING = "Failed to parse manager response"


class VerdictStatus(str, Enum):
    CONTINUE = "CONTINUE"
    END = "END"
    ERROR = "ERROR"


class ManagerVerdict(BaseModel):
    """Verdict returned by the manager after each worker turn.

    The manager answers in JSON using the camelCase key `nextPrompt`.
    """

    status: VerdictStatus = Field(description="Whether the task is finished")
    reasoning: str = Field(description="Very brief explanation")
    next_prompt: str | None = Field(
        default=None,
        alias="nextPrompt",
        description="Next instruction for the worker if CONTINUE",
    )

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def response_schema(cls) -> dict:
        """JSON schema used to constrain the manager's completion."""
        return cls.model_json_schema(by_alias=True)


def parse_manager_verdict(content: str | None) -> ManagerVerdict:
    """Parse the manager's reply as a strict JSON verdict.

    Anything that is not valid JSON matching ManagerVerdict becomes an ERROR
    verdict instead of an exception.
    """
    try:
        return ManagerVerdict.model_validate_json(content or "")
    except ValidationError as e:
        logger.error(f"Failed to parse manager response: {e}")
        return ManagerVerdict(
            status=VerdictStatus.ERROR, reasoning=PARSE_FAILURE_REASONING
        )
