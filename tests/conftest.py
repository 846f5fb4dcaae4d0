"""
Pytest configuration and shared fixtures.

The provider is replaced by :class:`FakeTransportClient`, which replays
scripted provider-shaped replies and records every request it receives.
"""

import copy
import json
from typing import Annotated, Any, AsyncIterator, Dict, List, Optional

import pytest
from pydantic import BaseModel

from baton.agents import Agent, Orchestrator, RunContext, SDKConfig, Tool, ToolParameter
from baton.agents.core.exceptions import HandleToolError


class FakeTransportClient:
    """Scripted stand-in for the provider client."""

    def __init__(self):
        self._replies: List[Any] = []
        self.requests: List[Dict[str, Any]] = []

    def queue(self, *replies: Any) -> "FakeTransportClient":
        self._replies.extend(replies)
        return self

    @property
    def pending(self) -> int:
        return len(self._replies)

    def _next(self, endpoint: str, payload: Dict[str, Any]) -> Any:
        self.requests.append({"endpoint": endpoint, "payload": copy.deepcopy(payload)})
        assert self._replies, f"Unexpected {endpoint} request"
        return self._replies.pop(0)

    async def create_chat_completion(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._next("chat", payload)

    async def create_streamed_chat_completion(self, payload: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        for chunk in self._next("chat_stream", payload):
            yield chunk

    async def create_response(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._next("responses", payload)

    async def create_streamed_response(self, payload: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        for event in self._next("responses_stream", payload):
            yield event


class ResponseBuilder:
    """Builds provider-shaped replies."""

    # Chat Completions

    @staticmethod
    def chat_message(content: str, prompt_tokens: int = 12, completion_tokens: int = 7) -> Dict[str, Any]:
        return {
            "id": "chatcmpl-1",
            "object": "chat.completion",
            "choices": [{
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }],
            "usage": {"prompt_tokens": prompt_tokens, "completion_tokens": completion_tokens},
        }

    @staticmethod
    def chat_tool_calls(*calls: tuple) -> Dict[str, Any]:
        """``calls`` are ``(call_id, tool_name, arguments)`` tuples; dict arguments are JSON encoded."""
        return {
            "id": "chatcmpl-2",
            "object": "chat.completion",
            "choices": [{
                "index": 0,
                "message": {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {
                            "id": call_id,
                            "type": "function",
                            "function": {
                                "name": name,
                                "arguments": arguments if isinstance(arguments, str) else json.dumps(arguments),
                            },
                        }
                        for call_id, name, arguments in calls
                    ],
                },
                "finish_reason": "tool_calls",
            }],
            "usage": {"prompt_tokens": 20, "completion_tokens": 9},
        }

    @staticmethod
    def chat_stream_text(*fragments: str, prompt_tokens: int = 5, completion_tokens: int = 2) -> List[Dict[str, Any]]:
        chunks = [{"choices": [{"index": 0, "delta": {"role": "assistant", "content": ""}, "finish_reason": None}]}]
        chunks += [
            {"choices": [{"index": 0, "delta": {"content": fragment}, "finish_reason": None}]}
            for fragment in fragments
        ]
        chunks.append({"choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}]})
        chunks.append({"choices": [], "usage": {"prompt_tokens": prompt_tokens, "completion_tokens": completion_tokens}})
        return chunks

    @staticmethod
    def chat_stream_tool_call(call_id: str, name: str, *argument_fragments: str) -> List[Dict[str, Any]]:
        chunks = [{
            "choices": [{
                "index": 0,
                "delta": {
                    "role": "assistant",
                    "tool_calls": [{"index": 0, "id": call_id, "type": "function",
                                    "function": {"name": name, "arguments": ""}}],
                },
                "finish_reason": None,
            }]
        }]
        chunks += [
            {"choices": [{"index": 0, "delta": {"tool_calls": [{"index": 0, "function": {"arguments": fragment}}]},
                          "finish_reason": None}]}
            for fragment in argument_fragments
        ]
        chunks.append({"choices": [{"index": 0, "delta": {}, "finish_reason": "tool_calls"}]})
        return chunks

    # Responses

    @staticmethod
    def response_message(response_id: str, text: str) -> Dict[str, Any]:
        return {
            "id": response_id,
            "object": "response",
            "output": [{
                "type": "message",
                "id": "msg_1",
                "role": "assistant",
                "status": "completed",
                "content": [{"type": "output_text", "text": text, "annotations": []}],
            }],
            "usage": {"input_tokens": 30, "output_tokens": 11},
        }

    @staticmethod
    def response_function_call(response_id: str, call_id: str, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": response_id,
            "object": "response",
            "output": [{
                "type": "function_call",
                "id": "fc_1",
                "call_id": call_id,
                "name": name,
                "arguments": json.dumps(arguments),
                "status": "completed",
            }],
            "usage": {"input_tokens": 25, "output_tokens": 8},
        }

    @staticmethod
    def response_stream_text(response_id: str, *fragments: str) -> List[Dict[str, Any]]:
        events = [
            {"type": "response.created", "response": {"id": response_id, "status": "in_progress"}},
            {"type": "response.output_item.added",
             "item": {"type": "message", "id": "msg_1", "role": "assistant", "status": "in_progress", "content": []}},
        ]
        events += [{"type": "response.output_text.delta", "item_id": "msg_1", "delta": f} for f in fragments]
        events.append({"type": "response.completed",
                       "response": {"id": response_id, "usage": {"input_tokens": 9, "output_tokens": 4}}})
        return events

    @staticmethod
    def response_stream_function_call(response_id: str, call_id: str, name: str, arguments: Dict[str, Any]) -> List[Dict[str, Any]]:
        item = {"type": "function_call", "id": "fc_1", "call_id": call_id, "name": name, "arguments": ""}
        return [
            {"type": "response.created", "response": {"id": response_id}},
            {"type": "response.output_item.added", "item": {**item, "status": "in_progress"}},
            {"type": "response.function_call_arguments.delta", "item_id": "fc_1", "delta": json.dumps(arguments)},
            {"type": "response.output_item.done",
             "item": {**item, "arguments": json.dumps(arguments), "status": "completed"}},
            {"type": "response.completed", "response": {"id": response_id}},
        ]


class GetCurrentWeatherTool(Tool):
    tool_description = "Get the current weather in a given location"

    location: Annotated[Optional[str], ToolParameter("The city and state, e.g. San Francisco, CA", required=True)] = None
    unit: Annotated[Optional[str], ToolParameter("Temperature unit", enum=["celsius", "fahrenheit"])] = None

    def run(self) -> str:
        return f"It is currently 20 degrees in {self.location}"


class FailingTool(Tool):
    tool_name = "failing_tool"

    async def run(self) -> str:
        raise HandleToolError("boom")


class Address(BaseModel):
    street: Annotated[Optional[str], ToolParameter("Street and number", required=True)] = None
    city: Annotated[Optional[str], ToolParameter("City")] = None


@pytest.fixture
def response_builder():
    return ResponseBuilder


@pytest.fixture
def fake_client() -> FakeTransportClient:
    return FakeTransportClient()


@pytest.fixture
def config() -> SDKConfig:
    return SDKConfig(tracing_enabled=False, api_key="test-key")


@pytest.fixture
def context(fake_client: FakeTransportClient, config: SDKConfig) -> RunContext:
    return RunContext(client=fake_client, config=config)


@pytest.fixture
def orchestrator(context: RunContext) -> Orchestrator:
    return Orchestrator("Test workflow", context=context)


@pytest.fixture
def weather_tool() -> GetCurrentWeatherTool:
    return GetCurrentWeatherTool()


@pytest.fixture
def weather_agent(weather_tool: GetCurrentWeatherTool) -> Agent:
    return Agent(
        name="Weather Agent",
        description="Answers weather questions",
        instruction="You answer weather questions.",
        tools=[weather_tool],
    )
