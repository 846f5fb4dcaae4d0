"""
Handoff tool.

A handoff wraps an agent as a tool. When the model calls it, control of the
conversation transfers to the wrapped agent.
"""

import logging
from typing import Any, Optional, TYPE_CHECKING

from pydantic import Field

from ..utils.strings import to_snake_case
from .base import Tool

if TYPE_CHECKING:
    from ..agent import Agent

logger = logging.getLogger(__name__)


class Handoff(Tool):
    """Transfers the conversation to another agent."""

    agent: Any = Field(..., description="Agent receiving the conversation", exclude=True)
    handoff_name: Optional[str] = Field(None, description="Custom tool name")
    handoff_description: Optional[str] = Field(None, description="Custom tool description")

    def __init__(self, agent: "Agent", name: Optional[str] = None, description: Optional[str] = None, **data: Any):
        super().__init__(agent=agent, handoff_name=name, handoff_description=description, **data)

    def name(self) -> str:
        return self.handoff_name or f"transfer_to_{to_snake_case(self.agent.name())}"

    def description(self) -> str:
        if self.handoff_description is not None:
            return self.handoff_description
        agent_name = self.agent.name()
        if agent_name.endswith("Agent"):
            agent_name = agent_name[: -len("Agent")]
        return f"Handoff to the {agent_name.strip()} Agent to handle the request."

    async def run(self) -> None:
        logger.info(f"Handing off to agent {self.agent.name()}")
        await self.agent.invoke()
        return None

    def clone(self) -> "Handoff":
        # The target agent is shared, never copied
        return self.model_copy()
