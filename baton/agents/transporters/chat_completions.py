"""
Chat Completions transporter.

Sends the whole conversation on every round-trip, with tool calls and tool
outputs mapped onto the ``tool_calls`` / ``tool`` message shapes.
"""

from typing import Any, Dict, List, TYPE_CHECKING

from ..core.enums import MessageRole
from ..core.exceptions import ModelBehaviorError
from ..core.models import Message, Payload, ToolCall, ToolOutput, TransportResponse
from .base import BaseTransporter
from .streaming import ChatCompletionStream

if TYPE_CHECKING:
    from ..agent import Agent
    from ..orchestrator.run_context import RunContext


def chat_message(message: Message) -> Dict[str, Any]:
    """Convert one conversation entry to the Chat Completions wire shape."""
    if isinstance(message, ToolCall):
        return {
            "role": MessageRole.ASSISTANT.value,
            "content": None,
            "tool_calls": [{
                "id": message.id,
                "type": "function",
                "function": {"name": message.tool, "arguments": message.arguments_payload or "{}"},
            }],
        }
    if isinstance(message, ToolOutput):
        return {"role": MessageRole.TOOL.value, "content": message.content, "tool_call_id": message.tool_call_id}
    return message.to_dict()


class ChatCompletionTransporter(BaseTransporter):
    """Transporter for the Chat Completions API."""

    def __init__(self):
        super().__init__("chat_completions")

    async def build_request_payload(self, agent: "Agent", context: "RunContext") -> Dict[str, Any]:
        settings = agent.model_settings()
        payload: Dict[str, Any] = {
            "model": settings.model_name,
            "temperature": settings.temperature,
            "max_completion_tokens": settings.max_tokens,
            "messages": self.build_messages(context),
            **settings.extra_options,
        }

        tools = await self.tool_definitions(agent)
        if tools:
            payload["tools"] = [{"type": "function", "function": definition} for definition in tools]

        if context.is_streamed:
            payload["stream_options"] = {"include_usage": True}
        return payload

    @staticmethod
    def build_messages(context: "RunContext") -> List[Dict[str, Any]]:
        return [chat_message(message) for message in context.conversation()]

    async def invoke_direct(self, agent: "Agent", context: "RunContext", payload: Dict[str, Any]) -> TransportResponse:
        response = await context.client.create_chat_completion(payload)
        return self.handle_response(agent, context, response)

    def handle_response(self, agent: "Agent", context: "RunContext", response: Dict[str, Any]) -> TransportResponse:
        choices = response.get("choices") or []
        if not choices or not isinstance(choices[0].get("message"), dict):
            raise ModelBehaviorError("The model response did not contain a message")

        choice = choices[0]
        message = choice["message"]
        if message.get("tool_calls"):
            tool_calls = [
                ToolCall(
                    tool=(call.get("function") or {}).get("name") or "",
                    id=call.get("id") or "",
                    arguments_payload=(call.get("function") or {}).get("arguments"),
                )
                for call in message["tool_calls"]
            ]
            return TransportResponse(tool_calls=tool_calls)

        usage = response.get("usage") or {}
        payload = Payload(
            content=message.get("content"),
            role=message.get("role"),
            choice=choice.get("index", 0),
            input_tokens=usage.get("prompt_tokens"),
            output_tokens=usage.get("completion_tokens"),
        )
        context.observer_invoker.agent_on_response_interval(context, agent, payload)
        return TransportResponse(payload=payload)

    async def invoke_streamed(self, agent: "Agent", context: "RunContext", payload: Dict[str, Any]) -> TransportResponse:
        stream = ChatCompletionStream(context.client.create_streamed_chat_completion(payload))
        final_payload = await self.consume_stream(agent, context, stream)
        if stream.tool_calls:
            return TransportResponse(tool_calls=stream.tool_calls)
        return TransportResponse(payload=final_payload)
