"""
Test cases for the Chat Completions and Responses transporters.
"""

import logging

import pytest

from baton.agents import Agent, ModelSettings, ToolCall, ToolOutput
from baton.agents.core.enums import MessageRole
from baton.agents.core.exceptions import TransportError
from baton.agents.core.models import Message
from baton.agents.transporters import ChatCompletionTransporter, ResponsesTransporter
from baton.agents.transporters.chat_completions import chat_message
from baton.agents.transporters.streaming import ChatCompletionStream, ResponsesStream, is_tool_call_item


async def replay(items):
    for item in items:
        yield item


@pytest.fixture
def responses_agent(weather_tool):
    return Agent(
        name="Weather Agent",
        instruction="You answer weather questions.",
        tools=[weather_tool],
        transporter=ResponsesTransporter(),
    )


class TestChatCompletionTransporter:
    """Test cases for Chat Completions requests."""

    async def test_model_settings_in_payload(self, context, weather_agent):
        settings = ModelSettings(model_name="gpt-4o-mini", temperature=0.2, max_tokens=50, extra_options={"top_p": 0.9})
        weather_agent.bind_context(context).with_model_settings(settings)
        context.add_user_message("Hi")

        payload = await ChatCompletionTransporter().build_request_payload(weather_agent, context)

        assert payload["model"] == "gpt-4o-mini"
        assert payload["temperature"] == 0.2
        assert payload["max_completion_tokens"] == 50
        assert payload["top_p"] == 0.9
        assert "stream_options" not in payload
        assert payload["tools"][0]["type"] == "function"

    def test_tool_call_without_arguments(self):
        message = chat_message(ToolCall(tool="ping", id="call_1"))
        assert message["tool_calls"][0]["function"]["arguments"] == "{}"

    def test_plain_message(self):
        assert chat_message(Message(role=MessageRole.USER, content="Hi")) == {"role": "user", "content": "Hi"}

    async def test_empty_stream_produces_no_message(self, orchestrator, fake_client, weather_agent):
        fake_client.queue([{"choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}]}])

        message = await orchestrator.with_user_instruction("Hi").run_streamed(weather_agent, lambda p, c: None)

        assert message is None
        assert orchestrator.context.last_message().role == MessageRole.USER


class TestResponsesTransporter:
    """Test cases for the Responses API."""

    async def test_tool_round_trip(self, orchestrator, fake_client, response_builder, responses_agent):
        fake_client.queue(
            response_builder.response_function_call("resp_1", "call_1", "get_current_weather", {"location": "Boston"}),
            response_builder.response_message("resp_2", "It is 20 degrees in Boston."),
        )

        message = await orchestrator.with_user_instruction("Weather?").run(responses_agent)

        first, second = [request["payload"] for request in fake_client.requests]
        assert first["previous_response_id"] is None
        assert first["input"] == [
            {"role": "system", "content": "You answer weather questions."},
            {"role": "user", "content": "Weather?"},
        ]
        assert first["tools"][0]["type"] == "function"
        assert first["tools"][0]["name"] == "get_current_weather"

        assert second["previous_response_id"] == "resp_1"
        assert second["input"] == [
            {"role": "system", "content": "You answer weather questions."},
            {"type": "function_call_output", "call_id": "call_1", "output": "It is currently 20 degrees in Boston"},
        ]

        assert message.content == "It is 20 degrees in Boston."
        assert message.usage() == {"input_tokens": 30, "output_tokens": 11}
        assert orchestrator.context.previous_response_id == "resp_2"

    def test_inputs_without_new_user_message(self, context):
        context.with_system_message("Instructions")
        context.add_user_message("Hi")
        context.add_agent_message("Hello")

        assert ResponsesTransporter.build_inputs(context) == [{"role": "system", "content": "Instructions"}]

    def test_inputs_include_every_trailing_output(self, context):
        context.add_user_message("Two cities")
        context.add_message(ToolCall(tool="get_current_weather", id="call_1", arguments_payload="{}"))
        context.add_message(ToolOutput(content="warm", tool_call_id="call_1"))
        context.add_message(ToolCall(tool="get_current_weather", id="call_2", arguments_payload="{}"))
        context.add_message(ToolOutput(content="cold", tool_call_id="call_2"))

        inputs = ResponsesTransporter.build_inputs(context)

        assert [item["call_id"] for item in inputs] == ["call_1", "call_2"]

    async def test_missing_response_id_is_retried(self, orchestrator, fake_client, response_builder, responses_agent):
        fake_client.queue({"output": []}, response_builder.response_message("resp_1", "Fine."))

        message = await orchestrator.with_user_instruction("Hi").run(responses_agent)

        assert message.content == "Fine."
        assert orchestrator.context.conversation()[2].role == MessageRole.USER

    async def test_streamed_text(self, orchestrator, fake_client, response_builder, responses_agent):
        fragments = []
        fake_client.queue(response_builder.response_stream_text("resp_9", "Hel", "lo"))

        message = await orchestrator.with_user_instruction("Hi").run_streamed(
            responses_agent, lambda payload, context: fragments.append(payload.content)
        )

        assert fragments == ["Hel", "lo"]
        assert message.content == "Hello"
        assert message.usage() == {"input_tokens": 9, "output_tokens": 4}
        assert orchestrator.context.previous_response_id == "resp_9"
        assert fake_client.requests[0]["endpoint"] == "responses_stream"

    async def test_streamed_function_call(self, orchestrator, fake_client, response_builder, responses_agent):
        fake_client.queue(
            response_builder.response_stream_function_call("resp_3", "call_1", "get_current_weather", {"location": "Oslo"}),
            response_builder.response_stream_text("resp_4", "Cold."),
        )

        message = await orchestrator.with_user_instruction("Oslo?").run_streamed(responses_agent, lambda p, c: None)

        tool_call = orchestrator.context.conversation()[2]
        assert isinstance(tool_call, ToolCall)
        assert tool_call.arguments == {"location": "Oslo"}
        assert fake_client.requests[1]["payload"]["previous_response_id"] == "resp_3"
        assert message.content == "Cold."

    async def test_failed_stream_is_fatal(self, orchestrator, fake_client, responses_agent):
        fake_client.queue([
            {"type": "response.created", "response": {"id": "resp_5"}},
            {"type": "response.failed", "response": {"id": "resp_5", "error": {"message": "overloaded"}}},
        ])

        with pytest.raises(TransportError, match="overloaded"):
            await orchestrator.with_user_instruction("Hi").run_streamed(responses_agent, lambda p, c: None)


class TestStreams:
    """Test cases for the stream wrappers."""

    async def test_chat_stream_accumulates_parallel_tool_calls(self):
        chunks = [
            {"choices": [{"index": 0, "delta": {"tool_calls": [
                {"index": 0, "id": "call_a", "function": {"name": "first", "arguments": ""}},
                {"index": 1, "id": "call_b", "function": {"name": "second", "arguments": ""}},
            ]}}]},
            {"choices": [{"index": 0, "delta": {"tool_calls": [{"index": 1, "function": {"arguments": '{"b": 2}'}}]}}]},
            {"choices": [{"index": 0, "delta": {"tool_calls": [{"index": 0, "function": {"arguments": '{"a": 1}'}}]}}]},
            {"choices": [{"index": 0, "delta": {}, "finish_reason": "tool_calls"}]},
        ]
        stream = ChatCompletionStream(replay(chunks))

        fragments = [fragment async for fragment in stream]

        assert fragments == []
        assert [(call.id, call.tool, call.arguments) for call in stream.tool_calls] == [
            ("call_a", "first", {"a": 1}),
            ("call_b", "second", {"b": 2}),
        ]

    async def test_chat_stream_discards_truncated_tool_calls(self, caplog):
        chunks = [
            {"choices": [{"index": 0, "delta": {"tool_calls": [
                {"index": 0, "id": "call_a", "function": {"name": "first", "arguments": '{"a": '}},
            ]}}]},
            {"choices": [{"index": 0, "delta": {}, "finish_reason": "length"}]},
        ]
        stream = ChatCompletionStream(replay(chunks))

        with caplog.at_level(logging.WARNING, logger="baton.agents.transporters.streaming"):
            assert [fragment async for fragment in stream] == []

        assert stream.tool_calls == []
        assert "Discarding 1 streamed tool calls, stream finished with reason length" in caplog.text

    async def test_chat_stream_usage(self, response_builder):
        stream = ChatCompletionStream(replay(response_builder.chat_stream_text("a", "b", prompt_tokens=8, completion_tokens=3)))

        assert [fragment.content async for fragment in stream] == ["a", "b"]
        assert (stream.input_tokens, stream.output_tokens) == (8, 3)
        assert stream.tool_calls == []

    async def test_responses_stream_reports_response_id(self, response_builder):
        seen = []
        stream = ResponsesStream(replay(response_builder.response_stream_text("resp_7", "x")), on_response_id=seen.append)

        assert [fragment.content async for fragment in stream] == ["x"]
        assert seen == ["resp_7"]
        assert stream.completed is True

    @pytest.mark.parametrize("item,expected", [
        ({"type": "function_call", "status": "completed"}, True),
        ({"type": "function_call"}, True),
        ({"type": "function_call", "status": "in_progress"}, False),
        ({"type": "web_search_call", "status": "completed"}, True),
        ({"type": "message", "status": "completed"}, False),
    ])
    def test_tool_call_items(self, item, expected):
        assert is_tool_call_item(item) is expected
