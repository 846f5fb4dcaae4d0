"""
Responses API transporter.

The provider keeps the conversation server-side: each request carries the
id of the previous response plus only the instructions and the newest input
(the user message, or the outputs of the tools the model just called).
"""

from typing import Any, Dict, List, TYPE_CHECKING

from ..core.enums import MessageRole
from ..core.exceptions import ModelBehaviorError
from ..core.models import Message, Payload, ToolCall, ToolOutput, TransportResponse
from .base import BaseTransporter
from .streaming import ResponsesStream, is_tool_call_item, tool_call_from_item

if TYPE_CHECKING:
    from ..agent import Agent
    from ..orchestrator.run_context import RunContext

_INSTRUCTION_ROLES = (MessageRole.SYSTEM, MessageRole.DEVELOPER)


def response_input(message: Message) -> Dict[str, Any]:
    if isinstance(message, ToolOutput):
        return {"type": "function_call_output", "call_id": message.tool_call_id, "output": message.content}
    return {"role": message.role.value, "content": message.content}


class ResponsesTransporter(BaseTransporter):
    """Transporter for the Responses API."""

    def __init__(self):
        super().__init__("responses")

    async def build_request_payload(self, agent: "Agent", context: "RunContext") -> Dict[str, Any]:
        settings = agent.model_settings()
        payload: Dict[str, Any] = {
            "model": settings.model_name,
            "temperature": settings.temperature,
            "max_output_tokens": settings.max_tokens,
            "previous_response_id": context.previous_response_id,
            "input": self.build_inputs(context),
            **settings.extra_options,
        }

        tools = await self.tool_definitions(agent)
        if tools:
            payload["tools"] = [{"type": "function", **definition} for definition in tools]
        return payload

    @staticmethod
    def build_inputs(context: "RunContext") -> List[Dict[str, Any]]:
        conversation = context.conversation()
        inputs = [response_input(m) for m in conversation if m.role in _INSTRUCTION_ROLES]

        # Trailing batch of call/output pairs.
        trailing_outputs: List[Message] = []
        for message in reversed(conversation):
            if isinstance(message, ToolOutput):
                trailing_outputs.insert(0, message)
            elif not isinstance(message, ToolCall):
                break

        if trailing_outputs:
            inputs.extend(response_input(m) for m in trailing_outputs)
        elif conversation and conversation[-1].role == MessageRole.USER:
            inputs.append(response_input(conversation[-1]))
        return inputs

    async def invoke_direct(self, agent: "Agent", context: "RunContext", payload: Dict[str, Any]) -> TransportResponse:
        response = await context.client.create_response(payload)
        return self.handle_response(agent, context, response)

    def handle_response(self, agent: "Agent", context: "RunContext", response: Dict[str, Any]) -> TransportResponse:
        if not response.get("id"):
            raise ModelBehaviorError("The model response did not contain an id")
        context.with_previous_response_id(response["id"])

        output = response.get("output") or []
        tool_calls = [tool_call_from_item(item) for item in output if is_tool_call_item(item)]
        if tool_calls:
            return TransportResponse(tool_calls=tool_calls)

        content = ""
        role = MessageRole.ASSISTANT.value
        for item in output:
            if item.get("type") != "message":
                continue
            role = item.get("role") or role
            for part in item.get("content") or []:
                if part.get("type") == "output_text":
                    content += part.get("text") or ""

        usage = response.get("usage") or {}
        payload = Payload(
            content=content,
            role=role,
            input_tokens=usage.get("input_tokens"),
            output_tokens=usage.get("output_tokens"),
        )
        context.observer_invoker.agent_on_response_interval(context, agent, payload)
        return TransportResponse(payload=payload)

    async def invoke_streamed(self, agent: "Agent", context: "RunContext", payload: Dict[str, Any]) -> TransportResponse:
        stream = ResponsesStream(
            context.client.create_streamed_response(payload),
            on_response_id=context.with_previous_response_id,
        )
        final_payload = await self.consume_stream(agent, context, stream)
        if stream.tool_calls:
            return TransportResponse(tool_calls=stream.tool_calls)
        return TransportResponse(payload=final_payload)
