"""
Baton agents package.

This package provides agents backed by chat-completion style LLM APIs, with
tool calling, handoffs between agents, MCP tool servers, streaming, tracing
and conversation persistence.
"""

from .config import SDKConfig

# Core models and enums
from .core.models import Message, ToolCall, ToolOutput, Payload, ModelSettings, TransportResponse
from .core.enums import MessageRole, ParameterType, ResponseItemType, SpanType

# Exceptions
from .core.exceptions import (
    BatonError, ModelBehaviorError, BuildToolError, UnparsableToolCallError,
    HandleToolError, AgentNotBoundError, MaxTurnsExceededError,
    ModelRetriesExceededError, McpConnectionError, TransportError, SerializationError,
)

# Tools
from .tools import (
    Tool, ToolParameter, DynamicTool, DynamicProperty, ToolSchemaCompiler, compile_tool,
    ToolExecutor, Handoff, McpTool, McpToolFactory, McpConnection,
)
from .memory import InMemoryToolCache

# Transporters
from .transporters import OpenAITransportClient, ChatCompletionTransporter, ResponsesTransporter

# Agents and orchestration
from .agent import Agent
from .orchestrator import (
    RunContext, AgentObserver, ToolObserver, ObserverInvoker, StreamedAgentObserver, Orchestrator,
)
from .tracing import TracingProcessor, InMemoryTracingExporter, LoggingTracingExporter
from .utils.serializer import ConversationSerializer

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "SDKConfig",

    # Core models and enums
    "Message",
    "ToolCall",
    "ToolOutput",
    "Payload",
    "ModelSettings",
    "TransportResponse",
    "MessageRole",
    "ParameterType",
    "ResponseItemType",
    "SpanType",

    # Exceptions
    "BatonError",
    "ModelBehaviorError",
    "BuildToolError",
    "UnparsableToolCallError",
    "HandleToolError",
    "AgentNotBoundError",
    "MaxTurnsExceededError",
    "ModelRetriesExceededError",
    "McpConnectionError",
    "TransportError",
    "SerializationError",

    # Tools
    "Tool",
    "ToolParameter",
    "DynamicTool",
    "DynamicProperty",
    "ToolSchemaCompiler",
    "compile_tool",
    "ToolExecutor",
    "Handoff",
    "McpTool",
    "McpToolFactory",
    "McpConnection",
    "InMemoryToolCache",

    # Transporters
    "OpenAITransportClient",
    "ChatCompletionTransporter",
    "ResponsesTransporter",

    # Agents and orchestration
    "Agent",
    "RunContext",
    "AgentObserver",
    "ToolObserver",
    "ObserverInvoker",
    "StreamedAgentObserver",
    "Orchestrator",
    "TracingProcessor",
    "InMemoryTracingExporter",
    "LoggingTracingExporter",
    "ConversationSerializer",
]
