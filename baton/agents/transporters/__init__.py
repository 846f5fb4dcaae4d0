"""
Transporters for the agents SDK.

A transporter turns the run context into a provider request and the
provider reply into tool calls or a text payload.
"""

from .base import BaseTransporter
from .client import OpenAITransportClient
from .chat_completions import ChatCompletionTransporter
from .responses import ResponsesTransporter
from .streaming import ChatCompletionStream, ResponsesStream

__all__ = [
    "BaseTransporter",
    "OpenAITransportClient",
    "ChatCompletionTransporter",
    "ResponsesTransporter",
    "ChatCompletionStream",
    "ResponsesStream",
]
