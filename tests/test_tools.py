"""
Test cases for tools: naming, argument binding, dynamic tools and handoffs.
"""

from typing import Annotated, Any, List, Optional
from unittest.mock import AsyncMock, Mock

import pytest

from baton.agents.core.exceptions import BuildToolError
from baton.agents.core.models import ToolCall
from baton.agents.tools import DynamicTool, Handoff, Tool, ToolParameter, build_tool
from baton.agents.tools.executor import stringify_tool_result

from .conftest import Address, FailingTool, GetCurrentWeatherTool


class ShipOrderTool(Tool):
    address: Annotated[Optional[Address], ToolParameter("Delivery address", required=True)] = None
    stops: Annotated[Optional[List[Address]], ToolParameter("Intermediate stops")] = None
    express: Annotated[Optional[bool], ToolParameter("Express delivery")] = None

    def run(self) -> str:
        return f"Shipping to {self.address.street}"


class WeatherReportTool(Tool):
    def run(self) -> str:
        return "sunny"


class EchoTool(DynamicTool):
    def run(self) -> Any:
        return self.values()


def tool_call(tool: str, arguments: str = "{}", call_id: str = "call_1") -> ToolCall:
    return ToolCall(tool=tool, id=call_id, arguments_payload=arguments)


class TestToolNaming:
    """Test cases for tool names and descriptions."""

    def test_name_derived_from_class(self):
        assert GetCurrentWeatherTool().name() == "get_current_weather"
        assert WeatherReportTool().name() == "weather_report"

    def test_explicit_name(self):
        assert FailingTool().name() == "failing_tool"

    def test_description(self):
        assert GetCurrentWeatherTool().description() == "Get the current weather in a given location"
        assert WeatherReportTool().description() is None

    async def test_sync_and_async_run(self):
        assert await GetCurrentWeatherTool(location="Paris")() == "It is currently 20 degrees in Paris"
        assert await EchoTool().with_name("echo")() == {}


class TestBuildTool:
    """Test cases for binding tool calls onto tools."""

    def test_binds_arguments_on_a_clone(self, weather_tool):
        tools = {"get_current_weather": weather_tool}

        tool = build_tool(tools, tool_call("get_current_weather", '{"location": "Boston, MA", "unit": "celsius"}'))

        assert tool is not weather_tool
        assert tool.location == "Boston, MA"
        assert tool.unit == "celsius"
        assert weather_tool.location is None

    def test_unknown_tool(self, weather_tool):
        with pytest.raises(BuildToolError) as exc_info:
            build_tool({"get_current_weather": weather_tool}, tool_call("get_forecast"))

        assert "Tool get_forecast does not exist" in exc_info.value.message
        assert exc_info.value.tool_call_id == "call_1"

    def test_unknown_arguments_are_ignored(self, weather_tool):
        tool = build_tool(
            {"get_current_weather": weather_tool},
            tool_call("get_current_weather", '{"location": "Oslo", "humidity": true}')
        )
        assert tool.location == "Oslo"
        assert not hasattr(tool, "humidity")

    def test_nested_objects_are_cast(self):
        arguments = (
            '{"address": {"street": "1 Main St", "city": "Springfield", "zip": "12345"},'
            ' "stops": [{"street": "2 Side St"}], "express": true}'
        )
        tool = build_tool({"ship_order": ShipOrderTool()}, tool_call("ship_order", arguments))

        assert isinstance(tool.address, Address)
        assert tool.address.street == "1 Main St"
        assert tool.address.city == "Springfield"
        assert not hasattr(tool.address, "zip")
        assert [type(stop) for stop in tool.stops] == [Address]
        assert tool.stops[0].street == "2 Side St"
        assert tool.express is True

    def test_invalid_object_value(self):
        with pytest.raises(BuildToolError) as exc_info:
            build_tool({"ship_order": ShipOrderTool()}, tool_call("ship_order", '{"address": "1 Main St"}'))

        assert "Invalid value for argument address" in exc_info.value.message

    def test_wrong_typed_scalar_value(self):
        prototype = ShipOrderTool()

        with pytest.raises(BuildToolError) as exc_info:
            build_tool({"ship_order": prototype}, tool_call("ship_order", '{"express": "sometimes"}', "call_7"))

        assert "Invalid value for argument express" in exc_info.value.message
        assert exc_info.value.tool_call_id == "call_7"
        assert prototype.express is None


class TestDynamicTool:
    """Test cases for runtime-declared tools."""

    @pytest.fixture
    def echo_tool(self):
        return (
            EchoTool()
            .with_name("echo")
            .add_property("text", required=True)
            .add_property("count", type="integer")
            .add_property("loud", type="boolean")
            .add_property("address", type="object", object_class=Address)
            .add_property("stops", type="array", object_class=Address)
        )

    def test_properties_replace_by_name(self, echo_tool):
        echo_tool.add_property("text", description="Text to echo")
        assert echo_tool.properties()["text"].description == "Text to echo"
        assert list(echo_tool.properties()) == ["text", "count", "loud", "address", "stops"]

    def test_typed_accessors(self, echo_tool):
        echo_tool.set_value("text", "hi")
        echo_tool.set_value("count", 3)
        echo_tool.set_value("loud", False)

        assert echo_tool.get_string("text") == "hi"
        assert echo_tool.get_number("count") == 3
        assert echo_tool.get_bool("loud") is False
        assert echo_tool.get_string("missing", "default") == "default"

    def test_typed_accessors_reject_wrong_types(self, echo_tool):
        echo_tool.set_value("text", 42)
        echo_tool.set_value("loud", True)

        with pytest.raises(TypeError):
            echo_tool.get_string("text")
        with pytest.raises(TypeError):
            echo_tool.get_number("loud")
        with pytest.raises(TypeError):
            echo_tool.get_array("text")

    def test_objects_are_cast(self, echo_tool):
        echo_tool.bind("address", {"street": "1 Main St"})
        echo_tool.bind("stops", [{"street": "2 Side St"}, {"street": "3 Low Rd"}])

        assert isinstance(echo_tool.get_object("address"), Address)
        assert [stop.street for stop in echo_tool.get_array("stops")] == ["2 Side St", "3 Low Rd"]

    def test_clone_is_independent(self, echo_tool):
        clone = build_tool({"echo": echo_tool}, tool_call("echo", '{"text": "hello"}'))

        assert clone.get_string("text") == "hello"
        assert echo_tool.get_string("text") is None
        assert clone.name() == "echo"
        assert list(clone.properties()) == list(echo_tool.properties())


class TestHandoff:
    """Test cases for handoff tools."""

    def test_default_name_and_description(self, weather_agent):
        handoff = Handoff(weather_agent)

        assert handoff.name() == "transfer_to_weather_agent"
        assert handoff.description() == "Handoff to the Weather Agent to handle the request."

    def test_custom_name_and_description(self, weather_agent):
        handoff = Handoff(weather_agent, name="ask_meteorologist", description="Weather questions")

        assert handoff.name() == "ask_meteorologist"
        assert handoff.description() == "Weather questions"

    async def test_run_invokes_target_agent(self):
        agent = Mock()
        agent.name.return_value = "Billing"
        agent.invoke = AsyncMock()
        handoff = Handoff(agent)

        assert handoff.name() == "transfer_to_billing"
        assert await handoff() is None
        agent.invoke.assert_awaited_once()

    def test_clone_shares_target_agent(self, weather_agent):
        handoff = Handoff(weather_agent)
        assert handoff.clone().agent is weather_agent


class TestToolResults:
    """Test cases for converting tool results to text."""

    @pytest.mark.parametrize("result,expected", [
        (None, ""),
        ("plain text", "plain text"),
        ({"temperature": 20}, '{"temperature": 20}'),
        ([1, 2], "[1, 2]"),
    ])
    def test_stringify(self, result, expected):
        assert stringify_tool_result(result) == expected
