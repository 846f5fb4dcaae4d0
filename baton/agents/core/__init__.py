"""
Core abstractions for the agents SDK.

This module provides the fundamental interfaces, data models, and exceptions
that every other package builds upon.
"""

from .enums import MessageRole, ParameterType, ResponseItemType, SpanType

from .models import (
    Message,
    ToolCall,
    ToolOutput,
    Payload,
    ModelSettings,
    TransportResponse,
)

from .exceptions import (
    BatonError,
    ModelBehaviorError,
    BuildToolError,
    UnparsableToolCallError,
    HandleToolError,
    AgentNotBoundError,
    MaxTurnsExceededError,
    ModelRetriesExceededError,
    McpConnectionError,
    TransportError,
    SerializationError,
)

from .interfaces import (
    TransportClient,
    Transporter,
    ToolExecutorInterface,
    McpConnectionInterface,
    ToolCache,
    TracingExporter,
)

__all__ = [
    # Enums
    "MessageRole",
    "ParameterType",
    "ResponseItemType",
    "SpanType",

    # Models
    "Message",
    "ToolCall",
    "ToolOutput",
    "Payload",
    "ModelSettings",
    "TransportResponse",

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

    # Interfaces
    "TransportClient",
    "Transporter",
    "ToolExecutorInterface",
    "McpConnectionInterface",
    "ToolCache",
    "TracingExporter",
]
