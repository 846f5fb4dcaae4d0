"""
Agent and its invocation state machine.

An agent bundles instructions, model settings, tools, handoffs and MCP
connections. Invoking it runs the model until it produces a final answer,
transferring control when the model calls a handoff tool.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, TypeVar, Union, TYPE_CHECKING

from .core.exceptions import (
    AgentNotBoundError, MaxTurnsExceededError, McpConnectionError,
    ModelBehaviorError, ModelRetriesExceededError,
)
from .core.interfaces import McpConnectionInterface, ToolExecutorInterface, Transporter
from .core.models import ModelSettings, ToolCall
from .tools.base import Tool
from .tools.binding import build_tool
from .tools.executor import ToolExecutor
from .tools.handoff import Handoff
from .transporters.chat_completions import ChatCompletionTransporter

if TYPE_CHECKING:
    from .orchestrator.run_context import RunContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

# A literal value, or a callable computing it from the run context
Resolvable = Union[T, Callable[["RunContext"], T]]

DEFAULT_HANDOFF_INSTRUCTION = """# System context

You are part of a multi-agent system called the Agents SDK, designed to make agent coordination and execution easy. Agents uses two primary abstraction: **Agents** and **Handoffs**.
An agent encompasses instructions and tools and can hand off a conversation to another agent when appropriate.
Handoffs are achieved by calling a handoff function, generally named `transfer_to_<agent_name>`.
Transfers between agents are handled seamlessly in the background; do not mention or draw attention to these transfers in your conversation with the user."""


class Agent:
    """An LLM-backed agent.

    Args:
        name: Agent name, literal or resolved from the run context
        description: Agent description, literal or resolved
        instruction: System instruction, literal or resolved
        model_settings: Model settings, literal or resolved
        tools: Tools the model may call; a later tool with the same name wins
        handoffs: Agents (or :class:`Handoff` wrappers) control can move to
        mcp_connections: MCP servers contributing tools
        transporter: Provider API adapter, Chat Completions by default
        tool_executor: Tool execution engine
        handoff_instruction: Text prepended to the instruction when the
            agent has handoffs
    """

    def __init__(
        self,
        name: Resolvable[str],
        description: Resolvable[str] = "",
        instruction: Resolvable[str] = "",
        model_settings: Optional[Resolvable[ModelSettings]] = None,
        tools: Iterable[Tool] = (),
        handoffs: Iterable[Union["Agent", Handoff]] = (),
        mcp_connections: Iterable[McpConnectionInterface] = (),
        transporter: Optional[Transporter] = None,
        tool_executor: Optional[ToolExecutorInterface] = None,
        handoff_instruction: Optional[Resolvable[str]] = None,
    ):
        self._name = name
        self._description = description
        self._instruction = instruction
        self._model_settings = model_settings
        self._handoff_instruction = handoff_instruction
        self._transporter = transporter or ChatCompletionTransporter()
        self._tool_executor = tool_executor or ToolExecutor()
        self._context: Optional["RunContext"] = None

        self._tools: Dict[str, Tool] = {}
        self._handoffs: Dict[str, Union["Agent", Handoff]] = {}
        self._mcp_connections: List[McpConnectionInterface] = []

        self.with_tool(*tools)
        self.with_handoff(*handoffs)
        self.with_mcp_connection(*mcp_connections)

    def __repr__(self) -> str:
        name = self._name if isinstance(self._name, str) else "<resolved>"
        return f"Agent(name={name!r}, tools={list(self._tools)}, handoffs={list(self._handoffs)})"

    # Context binding

    def bind_context(self, context: "RunContext") -> "Agent":
        self._context = context
        return self

    @property
    def context(self) -> "RunContext":
        if self._context is None:
            raise AgentNotBoundError(f"Agent {self._name!r} is not attached to a run context")
        return self._context

    def _resolve(self, value: Resolvable[T]) -> T:
        return value(self.context) if callable(value) else value

    # Configuration

    def with_name(self, name: Resolvable[str]) -> "Agent":
        self._name = name
        return self

    def with_description(self, description: Resolvable[str]) -> "Agent":
        self._description = description
        return self

    def with_instruction(self, instruction: Resolvable[str]) -> "Agent":
        self._instruction = instruction
        return self

    def with_handoff_instruction(self, instruction: Resolvable[str]) -> "Agent":
        self._handoff_instruction = instruction
        return self

    def with_model_settings(self, settings: Resolvable[ModelSettings]) -> "Agent":
        self._model_settings = settings
        return self

    def with_transporter(self, transporter: Transporter) -> "Agent":
        self._transporter = transporter
        return self

    def with_tool_executor(self, tool_executor: ToolExecutorInterface) -> "Agent":
        self._tool_executor = tool_executor
        return self

    def with_tool(self, *tools: Tool) -> "Agent":
        for tool in tools:
            name = tool.name()
            if name in self._tools:
                logger.debug(f"Agent tool {name} replaced")
            self._tools[name] = tool
        return self

    def with_handoff(self, *handoffs: Union["Agent", Handoff]) -> "Agent":
        for handoff in handoffs:
            self._handoffs[handoff.name()] = handoff
        return self

    def with_mcp_connection(self, *connections: McpConnectionInterface) -> "Agent":
        self._mcp_connections.extend(connections)
        return self

    # Accessors

    def name(self) -> str:
        return self._resolve(self._name)

    def description(self) -> str:
        return self._resolve(self._description)

    def handoff_instruction(self) -> str:
        if self._handoff_instruction is None:
            return DEFAULT_HANDOFF_INSTRUCTION
        return self._resolve(self._handoff_instruction)

    def instruction(self) -> str:
        """System instruction, prefixed with the handoff instruction when handoffs exist."""
        instruction = self._resolve(self._instruction)
        if self._handoffs:
            return f"{self.handoff_instruction()}\n\n{instruction}"
        return instruction

    def model_settings(self) -> ModelSettings:
        """Resolved model settings with configuration defaults filled in."""
        config = self.context.config
        settings = self._resolve(self._model_settings)
        if settings is None:
            settings = ModelSettings(temperature=config.default_temperature)
        if settings.model_name is None:
            settings = settings.model_copy(update={"model_name": config.default_model})
        return settings

    @property
    def transporter(self) -> Transporter:
        return self._transporter

    @property
    def tool_executor(self) -> ToolExecutorInterface:
        return self._tool_executor

    def tools(self) -> Dict[str, Tool]:
        return dict(self._tools)

    def handoffs(self) -> Dict[str, Union["Agent", Handoff]]:
        return dict(self._handoffs)

    def mcp_connections(self) -> List[McpConnectionInterface]:
        return list(self._mcp_connections)

    def handoff_tools(self) -> Dict[str, Handoff]:
        handoff_tools: Dict[str, Handoff] = {}
        for handoff in self._handoffs.values():
            tool = handoff if isinstance(handoff, Handoff) else Handoff(handoff)
            handoff_tools[tool.name()] = tool
        return handoff_tools

    async def mcp_tools(self) -> Dict[str, Tool]:
        mcp_tools: Dict[str, Tool] = {}
        for connection in self._mcp_connections:
            mcp_tools.update(await connection.list_tools())
        return mcp_tools

    async def executable_tools(self) -> Dict[str, Tool]:
        """Every tool the model may call, keyed by name."""
        return {**self._tools, **self.handoff_tools(), **(await self.mcp_tools())}

    # Invocation

    def prepare_handoffs(self) -> None:
        for handoff in self._handoffs.values():
            target = handoff.agent if isinstance(handoff, Handoff) else handoff
            target.bind_context(self.context)

    async def prepare_mcp_connections(self) -> None:
        for connection in self._mcp_connections:
            try:
                await connection.connect()
            except Exception as e:
                logger.error(f"Connecting to MCP server {connection.name()} failed: {e}")
                raise McpConnectionError(
                    "Connecting to MCP server failed",
                    context={"connection": connection.name()}
                ) from e

    async def invoke(self) -> None:
        """Run the model until it answers, handing off when asked to.

        Raises:
            MaxTurnsExceededError: If the model keeps calling tools past the turn limit
            ModelRetriesExceededError: If the model keeps misbehaving past the retry limit
            McpConnectionError: If an MCP server cannot be reached
        """
        context = self.context
        config = context.config
        turns = 0
        consecutive_errors = 0

        while True:
            turns += 1
            if turns > config.max_turns:
                logger.error(f"Agent {self.name()} exceeded {config.max_turns} turns")
                raise MaxTurnsExceededError(
                    f"Agent {self.name()} exceeded the maximum of {config.max_turns} turns",
                    context={"agent": self.name(), "max_turns": config.max_turns}
                )

            self.prepare_handoffs()
            await self.prepare_mcp_connections()
            context.with_system_message(self.instruction())
            context.observer_invoker.agent_before_invoke(context, self)

            try:
                response = await self._transporter.invoke(self, context)
                if response.has_tool_calls:
                    if await self.execute_tools(response.tool_calls):
                        return
                    consecutive_errors = 0
                    continue
            except ModelBehaviorError as e:
                consecutive_errors += 1
                if consecutive_errors > config.max_model_behavior_retries:
                    logger.error(f"Agent {self.name()} gave up after {consecutive_errors - 1} retries: {e}")
                    raise ModelRetriesExceededError(
                        f"Model kept misbehaving: {e.message}",
                        context={"agent": self.name(), "retries": config.max_model_behavior_retries}
                    ) from e
                logger.warning(f"Retrying agent {self.name()} after model behavior error: {e}")
                for message in e.to_messages():
                    context.add_message(message, self)
                continue

            if response.payload is not None:
                message = context.add_agent_message(response.payload, self)
                context.observer_invoker.agent_on_response(context, self, message)
            return

    async def execute_tools(self, tool_calls: List[ToolCall]) -> bool:
        """Execute a batch of tool calls in order.

        A handoff stops the batch: the remaining calls are discarded and the
        target agent takes over.

        Returns:
            Whether control was handed off

        Raises:
            BuildToolError: If a call cannot be turned into a tool
        """
        context = self.context
        tools = await self.executable_tools()

        for tool_call in tool_calls:
            tool = build_tool(tools, tool_call)
            if isinstance(tool, Handoff):
                skipped = len(tool_calls) - tool_calls.index(tool_call) - 1
                if skipped:
                    logger.info(f"Handoff to {tool.agent.name()} discards {skipped} pending tool calls")
                context.observer_invoker.agent_before_handoff(context, self, tool.agent)
                await tool()
                return True
            await self._tool_executor.execute_tool(tool, tool_call, self)

        return False
