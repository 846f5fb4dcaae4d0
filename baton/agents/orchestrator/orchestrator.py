"""
Orchestrator.

Entry point of a run: holds the run context, prepares tracing, attaches the
starting agent and returns the agent's final answer.
"""

import logging
from typing import Any, Callable, Dict, Optional, Union

from ..agent import Agent
from ..config import SDKConfig
from ..core.enums import MessageRole
from ..core.interfaces import TransportClient
from ..core.models import Message, Payload
from ..tracing.exporters import LoggingTracingExporter
from ..tracing.processor import TracingProcessor
from ..utils.serializer import ConversationSerializer
from .observers import AgentObserver, StreamedAgentObserver, ToolObserver
from .run_context import RunContext

logger = logging.getLogger(__name__)

DEFAULT_WORKFLOW_NAME = "Unnamed Workflow"


class Orchestrator:
    """Runs agents against a shared run context.

    Usage:
        orchestrator = Orchestrator("Support").with_user_instruction("Where is my order?")
        message = await orchestrator.run(triage_agent)
    """

    def __init__(
        self,
        name: Optional[str] = None,
        context: Optional[RunContext] = None,
        config: Optional[SDKConfig] = None,
    ):
        self.name = name
        if context is None:
            context = RunContext(config=config)
        elif config is not None:
            context.config = config
        self.context = context
        self._agent_role: Union[MessageRole, str] = MessageRole.ASSISTANT
        self._tracing_enabled = self.context.config.tracing_enabled
        self._tracing_processor: Optional[TracingProcessor] = None

    # Configuration

    def with_context_from_data(self, data: Dict[str, Any]) -> "Orchestrator":
        ConversationSerializer.deserialize(data, self.context)
        return self

    def with_client(self, client: TransportClient) -> "Orchestrator":
        self.context.with_client(client)
        return self

    def enable_tracing(self) -> "Orchestrator":
        self._tracing_enabled = True
        return self

    def disable_tracing(self) -> "Orchestrator":
        self._tracing_enabled = False
        return self

    @property
    def tracing_enabled(self) -> bool:
        return self._tracing_enabled

    def with_tracing_processor(self, processor: TracingProcessor) -> "Orchestrator":
        self._tracing_processor = processor
        return self

    @property
    def tracing_processor(self) -> Optional[TracingProcessor]:
        return self._tracing_processor

    def with_user_instruction(self, instruction: str) -> "Orchestrator":
        self.context.add_user_message(instruction)
        return self

    def with_developer_instruction(self, instruction: str) -> "Orchestrator":
        self.context.add_developer_message(instruction)
        return self

    def with_agent_observer(self, *observers: AgentObserver) -> "Orchestrator":
        self.context.with_agent_observer(*observers)
        return self

    def with_tool_observer(self, *observers: ToolObserver) -> "Orchestrator":
        self.context.with_tool_observer(*observers)
        return self

    def with_agent_role(self, agent_role: Union[MessageRole, str]) -> "Orchestrator":
        self._agent_role = agent_role
        return self

    # Running

    async def run(self, agent: Agent) -> Optional[Message]:
        """Invoke ``agent`` and return the final agent message.

        Returns:
            The last conversation message when its role is the agent role,
            otherwise None
        """
        self._prepare_trace()
        agent.bind_context(self.context)
        logger.info(f"Running agent {agent.name()} (streamed={self.context.is_streamed})")

        try:
            await agent.invoke()
        finally:
            if self._tracing_processor is not None:
                self._tracing_processor.stop_current()
                self._tracing_processor.flush()

        last_message = self.context.last_message()
        if last_message is None or last_message.role != self._agent_role:
            logger.info(f"Run finished without a {self._agent_role} message")
            return None
        return last_message

    async def run_streamed(self, agent: Agent, on_response: Callable[[Payload, RunContext], None]) -> Optional[Message]:
        """Like :meth:`run`, streaming every response fragment to ``on_response``."""
        self.context.streamed()
        self.context.remove_agent_observer(StreamedAgentObserver).with_agent_observer(
            StreamedAgentObserver(on_response)
        )
        return await self.run(agent)

    def serialize(self) -> Dict[str, Any]:
        return ConversationSerializer.serialize_from_orchestrator(self)

    def _prepare_trace(self) -> None:
        if not self._tracing_enabled:
            return
        if self._tracing_processor is None:
            self._tracing_processor = TracingProcessor(LoggingTracingExporter(), self.context)
        if not self._tracing_processor.is_started():
            self._tracing_processor.start(self.name or DEFAULT_WORKFLOW_NAME)
