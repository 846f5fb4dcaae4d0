"""
Streamed response wrappers.

Each wrapper is an async iterator over the text fragments of a streamed
reply. Tool calls and token usage announced by the stream are collected on
the wrapper while iterating and are available once iteration finishes.
"""

import logging
from typing import Any, AsyncIterator, Callable, Dict, List, Mapping, Optional

from ..core.enums import MessageRole, ResponseItemType
from ..core.exceptions import TransportError
from ..core.models import Payload, ToolCall

logger = logging.getLogger(__name__)

_TOOL_CALL_ITEM_TYPES = {item_type.value for item_type in ResponseItemType}


def is_tool_call_item(item: Mapping[str, Any]) -> bool:
    """Whether a Responses output item is a finished tool call."""
    return item.get("type") in _TOOL_CALL_ITEM_TYPES and item.get("status", "completed") == "completed"


def tool_call_from_item(item: Mapping[str, Any]) -> ToolCall:
    return ToolCall(
        tool=item.get("name") or item["type"],
        id=item.get("call_id") or item["id"],
        arguments_payload=item.get("arguments"),
    )


class ChatCompletionStream:
    """Wraps a Chat Completions chunk stream.

    Tool-call deltas are accumulated per call: the first delta of a call
    carries its id and name, later deltas carry argument fragments and are
    matched by their ``index`` (or, failing that, by the most recent id).
    """

    def __init__(self, chunks: AsyncIterator[Dict[str, Any]]):
        self._chunks = chunks
        self.tool_calls: List[ToolCall] = []
        self.input_tokens: Optional[int] = None
        self.output_tokens: Optional[int] = None
        self.finish_reason: Optional[str] = None

    async def __aiter__(self) -> AsyncIterator[Payload]:
        pending: Dict[str, Dict[str, str]] = {}
        ids_by_index: Dict[int, str] = {}
        current_id: Optional[str] = None
        role: Optional[str] = None

        async for chunk in self._chunks:
            usage = chunk.get("usage")
            if usage:
                self.input_tokens = usage.get("prompt_tokens")
                self.output_tokens = usage.get("completion_tokens")

            choices = chunk.get("choices") or []
            if not choices:
                continue
            choice = choices[0]
            delta = choice.get("delta") or {}
            role = delta.get("role") or role

            for tool_delta in delta.get("tool_calls") or []:
                call_id = tool_delta.get("id")
                index = tool_delta.get("index")
                function = tool_delta.get("function") or {}
                if call_id:
                    pending.setdefault(call_id, {"name": "", "arguments": ""})
                    current_id = call_id
                    if index is not None:
                        ids_by_index[index] = call_id
                else:
                    call_id = ids_by_index.get(index, current_id)
                if call_id is None:
                    logger.warning(f"Dropping tool call delta without a known call: {tool_delta}")
                    continue
                if function.get("name"):
                    pending[call_id]["name"] = function["name"]
                pending[call_id]["arguments"] += function.get("arguments") or ""

            content = delta.get("content")
            if content:
                yield Payload(content=content, role=role, choice=choice.get("index", 0))

            if choice.get("finish_reason"):
                self.finish_reason = choice["finish_reason"]

        if pending and self.finish_reason in ("tool_calls", "stop"):
            self.tool_calls = [
                ToolCall(tool=call["name"], id=call_id, arguments_payload=call["arguments"])
                for call_id, call in pending.items()
            ]
            logger.debug(f"Stream requested {len(self.tool_calls)} tool calls")
        elif pending:
            logger.warning(
                f"Discarding {len(pending)} streamed tool calls, stream finished with reason {self.finish_reason}"
            )


class ResponsesStream:
    """Wraps a Responses API event stream.

    ``on_response_id`` is called as soon as the stream announces the id of
    the response being generated.
    """

    def __init__(
        self,
        events: AsyncIterator[Dict[str, Any]],
        on_response_id: Optional[Callable[[str], None]] = None,
    ):
        self._events = events
        self._on_response_id = on_response_id
        self.tool_calls: List[ToolCall] = []
        self.input_tokens: Optional[int] = None
        self.output_tokens: Optional[int] = None
        self.completed = False

    async def __aiter__(self) -> AsyncIterator[Payload]:
        captured: Dict[str, ToolCall] = {}
        role: str = MessageRole.ASSISTANT.value

        async for event in self._events:
            event_type = event.get("type")

            if event_type == "response.created":
                response_id = (event.get("response") or {}).get("id")
                if response_id and self._on_response_id is not None:
                    self._on_response_id(response_id)

            elif event_type in ("response.output_item.added", "response.output_item.done"):
                item = event.get("item") or {}
                role = item.get("role") or role
                if is_tool_call_item(item):
                    tool_call = tool_call_from_item(item)
                    captured[tool_call.id] = tool_call

            elif event_type == "response.output_text.delta":
                if event.get("delta"):
                    yield Payload(content=event["delta"], role=role)

            elif event_type == "response.completed":
                self.completed = True
                usage = (event.get("response") or {}).get("usage") or {}
                self.input_tokens = usage.get("input_tokens")
                self.output_tokens = usage.get("output_tokens")

            elif event_type in ("response.failed", "error"):
                error = (event.get("response") or {}).get("error") or event
                raise TransportError(f"Streamed response failed: {error.get('message', error)}")

        self.tool_calls = list(captured.values())
