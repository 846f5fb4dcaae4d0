"""
Custom exceptions for the agents SDK.

This module defines the exception hierarchy used throughout the SDK. Errors
fall into three groups:

- Model-behavior errors: recoverable. The agent appends the error's feedback
  messages to the conversation and asks the model again.
- Tool-handling errors: raised by a tool body, reported back to the model as
  that tool's output.
- Everything else: fatal, propagated to the caller of the orchestrator.
"""

import json
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Message, ToolCall


class BatonError(Exception):
    """Base exception for all SDK errors.

    It provides common functionality for error tracking and debugging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }


def error_payload(message: str) -> str:
    """Encode an error message the way it is shown to the model."""
    return json.dumps({"error": message}, separators=(",", ":"), ensure_ascii=False)


# Recoverable errors
class ModelBehaviorError(BatonError):
    """The model produced something the SDK cannot act on.

    The agent feeds ``to_messages()`` back into the conversation and
    re-invokes the model instead of failing the run.
    """

    def to_payload(self) -> str:
        return error_payload(self.message)

    def to_messages(self) -> List["Message"]:
        from .models import Message
        from .enums import MessageRole

        return [Message(role=MessageRole.USER, content=self.to_payload())]


class BuildToolError(ModelBehaviorError):
    """A tool call named an unknown tool or carried arguments that cannot be bound."""

    def __init__(
        self,
        message: str,
        tool_call: "ToolCall",
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, context)
        self.tool_call = tool_call

    @property
    def tool_call_id(self) -> str:
        return self.tool_call.id

    @classmethod
    def for_tool_call(cls, tool_call: "ToolCall", message: str) -> "BuildToolError":
        return cls(
            f"Failed to build tool {tool_call.tool}: {message}",
            tool_call,
            context={"tool": tool_call.tool, "tool_call_id": tool_call.id}
        )

    def to_messages(self) -> List["Message"]:
        from .models import ToolOutput

        return [
            self.tool_call,
            ToolOutput(content=self.to_payload(), tool_call_id=self.tool_call.id),
        ]


class UnparsableToolCallError(ModelBehaviorError):
    """The arguments of a tool call are not a JSON object."""

    def __init__(
        self,
        message: str,
        call_id: Optional[str] = None,
        tool_name: Optional[str] = None,
        arguments_payload: Optional[str] = None,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, context)
        self.call_id = call_id
        self.tool_name = tool_name
        self.arguments_payload = arguments_payload

    def to_messages(self) -> List["Message"]:
        from .models import Message, ToolCall, ToolOutput
        from .enums import MessageRole

        if self.call_id is None:
            return [Message(role=MessageRole.USER, content=self.to_payload())]
        return [
            ToolCall.unparsed(self.tool_name or "", self.call_id, self.arguments_payload),
            ToolOutput(content=self.to_payload(), tool_call_id=self.call_id),
        ]


# Tool-local errors
class HandleToolError(BatonError):
    """Raised by a tool body to report a failure back to the model."""

    def to_payload(self) -> str:
        return error_payload(self.message)


# Fatal errors
class AgentNotBoundError(BatonError):
    """An agent was used before being attached to a run context."""
    pass


class MaxTurnsExceededError(BatonError):
    """An agent exceeded the configured number of model round-trips."""
    pass


class ModelRetriesExceededError(BatonError):
    """The model kept misbehaving after the configured number of retries."""
    pass


class McpConnectionError(BatonError):
    """Connecting to an MCP server failed."""
    pass


class TransportError(BatonError):
    """The provider client could not be created or used."""
    pass


class SerializationError(BatonError):
    """A serialized conversation is malformed."""
    pass
