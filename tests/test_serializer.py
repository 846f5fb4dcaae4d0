"""
Test cases for conversation serialization.
"""

import pytest

from baton.agents import ConversationSerializer, Orchestrator, RunContext, ToolCall, ToolOutput
from baton.agents.core.enums import MessageRole
from baton.agents.core.exceptions import SerializationError


@pytest.fixture
async def finished_run(orchestrator, fake_client, response_builder, weather_agent):
    fake_client.queue(
        response_builder.chat_tool_calls(("call_1", "get_current_weather", {"location": "Boston, MA"})),
        response_builder.chat_message("It is 20 degrees in Boston."),
    )
    await orchestrator.with_user_instruction("Weather in Boston?").run(weather_agent)
    return orchestrator


class TestSerialize:
    """Test cases for serializing a conversation."""

    async def test_serialized_shape(self, finished_run):
        data = finished_run.serialize()

        assert data["metadata"]["version"] == "1.0"
        assert isinstance(data["metadata"]["serialized_at"], int)
        assert "previous_response_id" not in data["metadata"]

        entries = data["conversation"]
        assert [entry["role"] for entry in entries] == ["system", "user", "assistant", "tool", "assistant"]
        assert entries[2]["parameters"]["type"] == "function_call"
        assert entries[3]["parameters"] == {"tool_call_id": "call_1"}
        assert entries[4]["usage"] == {"input_tokens": 12, "output_tokens": 7}

    def test_previous_response_id_in_metadata(self, context):
        context.with_previous_response_id("resp_1")
        assert ConversationSerializer.serialize(context)["metadata"]["previous_response_id"] == "resp_1"


class TestDeserialize:
    """Test cases for restoring a conversation."""

    async def test_round_trip_preserves_message_kinds(self, finished_run):
        restored = ConversationSerializer.deserialize(finished_run.serialize())
        original = finished_run.context.conversation()
        conversation = restored.conversation()

        assert [type(m) for m in conversation] == [type(m) for m in original]
        assert [m.role for m in conversation] == [m.role for m in original]
        assert conversation[2].arguments == {"location": "Boston, MA"}
        assert conversation[3].tool_call_id == "call_1"
        assert conversation[4].usage() == original[4].usage()
        assert all(m.owner is None for m in conversation)

    async def test_resumed_run_continues_conversation(self, finished_run, fake_client, response_builder, weather_agent):
        data = finished_run.serialize()
        resumed = Orchestrator("Resumed", context=RunContext(client=fake_client, config=finished_run.context.config))
        resumed.with_context_from_data(data).with_user_instruction("And tomorrow?")
        fake_client.queue(response_builder.chat_message("Also 20 degrees."))

        message = await resumed.run(weather_agent)

        assert message.content == "Also 20 degrees."
        messages = fake_client.requests[-1]["payload"]["messages"]
        assert len(messages) == 6
        assert [m["role"] for m in messages].count("system") == 1

    def test_restores_previous_response_id(self):
        data = {"conversation": [], "metadata": {"previous_response_id": "resp_4"}}
        assert ConversationSerializer.deserialize(data).previous_response_id == "resp_4"

    def test_unparsable_tool_call_arguments_are_kept_raw(self):
        data = {"conversation": [{
            "role": "assistant",
            "content": None,
            "parameters": {"type": "function_call", "call_id": "call_1", "name": "noop", "arguments": "{oops"},
        }]}

        [call] = ConversationSerializer.deserialize(data).conversation()

        assert isinstance(call, ToolCall)
        assert call.arguments == {}
        assert call.arguments_payload == "{oops"

    def test_tool_output_restored(self):
        data = {"conversation": [{"role": "tool", "content": "warm", "parameters": {"tool_call_id": "call_9"}}]}

        [output] = ConversationSerializer.deserialize(data).conversation()

        assert isinstance(output, ToolOutput)
        assert output.role == MessageRole.TOOL
        assert output.tool_call_id == "call_9"

    @pytest.mark.parametrize("data", [
        {},
        {"conversation": "not a list"},
        {"conversation": [{"role": "user", "content": "Hi", "parameters": ["bad"]}]},
        {"conversation": [{"content": "Missing role"}]},
        {"conversation": [{"role": "narrator", "content": "Once"}]},
    ])
    def test_malformed_data(self, data):
        with pytest.raises(SerializationError):
            ConversationSerializer.deserialize(data)
