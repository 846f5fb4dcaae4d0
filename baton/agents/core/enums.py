"""
Enumerations for the agents SDK.

This module defines the enums shared by the message model, the tool schema
compiler, the transports and the tracing layer.
"""

from enum import Enum


class MessageRole(str, Enum):
    """Conversation message role.

    Roles understood by chat-completion style providers:
    - SYSTEM: Agent instructions, always kept first in the conversation
    - DEVELOPER: Developer supplied instructions
    - USER: End-user input and fed back model-behavior errors
    - ASSISTANT: Model output, including tool calls
    - TOOL: Tool results
    """
    SYSTEM = "system"
    DEVELOPER = "developer"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"

    def __str__(self) -> str:
        return self.value


class ParameterType(str, Enum):
    """JSON-Schema type of a tool parameter."""
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def primitives(cls) -> tuple:
        return (cls.STRING, cls.NUMBER, cls.INTEGER, cls.BOOLEAN)


class ResponseItemType(str, Enum):
    """Responses API output item types that request a tool execution."""
    FUNCTION_CALL = "function_call"
    FILE_SEARCH_CALL = "file_search_call"
    WEB_SEARCH_CALL = "web_search_call"
    COMPUTER_CALL = "computer_call"
    CODE_INTERPRETER_CALL = "code_interpreter_call"

    def __str__(self) -> str:
        return self.value


class SpanType(str, Enum):
    """Tracing span kinds."""
    AGENT = "agent"
    FUNCTION = "function"
    GENERATION = "generation"
    HANDOFF = "handoff"

    def __str__(self) -> str:
        return self.value
