#!/usr/bin/env python3
"""
Baton Agents SDK example.

This example demonstrates:
- A single agent answering with and without tools
- Handoffs from a triage agent to specialists
- Streaming responses
- MCP tools served by ``fastmcp_simple_server.py``
- Saving a conversation and resuming it later

It talks to the OpenAI API, so set ``OPENAI_API_KEY`` before running it.
"""

import asyncio
import logging
import sys
from typing import Annotated, Optional

from baton.agents import (
    Agent, InMemoryToolCache, McpConnection, ModelSettings, Orchestrator, SDKConfig,
    Tool, ToolParameter,
)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class GetCurrentWeatherTool(Tool):
    tool_description = "Get the current weather in a given location"

    location: Annotated[Optional[str], ToolParameter("The city and state, e.g. San Francisco, CA", required=True)] = None
    unit: Annotated[Optional[str], ToolParameter("Temperature unit", enum=["celsius", "fahrenheit"])] = None

    def run(self) -> str:
        degrees = 20 if self.unit != "fahrenheit" else 68
        return f"It is currently {degrees} degrees in {self.location}"


class WeatherExample:
    """Walks through the main SDK features."""

    def __init__(self):
        self.config = SDKConfig.from_env()
        self.weather_agent = Agent(
            name="Weather Agent",
            description="Answers questions about the current weather",
            instruction="You answer weather questions. Use the tools to look up the weather.",
            tools=[GetCurrentWeatherTool()],
            model_settings=ModelSettings(temperature=0.2),
        )
        self.forecast_connection = McpConnection.for_process(
            sys.executable, ["fastmcp_simple_server.py"]
        ).with_cache(InMemoryToolCache(), ttl=600)
        self.forecast_agent = Agent(
            name="Forecast Agent",
            instruction="You answer questions about the weather in the next days.",
            mcp_connections=[self.forecast_connection],
        )
        self.triage_agent = Agent(
            name="Triage Agent",
            instruction="Find out what the user needs and transfer them to the right agent.",
            handoffs=[self.weather_agent, self.forecast_agent],
        )

    async def example_single_agent(self):
        logger.info("Example 1: single agent with a tool")
        orchestrator = Orchestrator("Weather", config=self.config)
        message = await orchestrator.with_user_instruction("What's the weather in Boston?").run(self.weather_agent)
        logger.info(f"Answer: {message.content if message else None}")
        return orchestrator

    async def example_handoff(self):
        logger.info("Example 2: triage with handoffs")
        orchestrator = Orchestrator("Triage", config=self.config)
        message = await orchestrator.with_user_instruction("Will it snow in Denver this week?").run(self.triage_agent)
        logger.info(f"Answer from {message.owner.name() if message and message.owner else 'nobody'}: "
                    f"{message.content if message else None}")

    async def example_streaming(self):
        logger.info("Example 3: streaming")
        orchestrator = Orchestrator("Streaming", config=self.config)

        def on_response(payload, context):
            print(payload.content or "", end="", flush=True)

        await orchestrator.with_user_instruction("Describe the weather in Lima.").run_streamed(
            self.weather_agent, on_response
        )
        print()

    async def example_resume(self, previous: Orchestrator):
        logger.info("Example 4: resuming a saved conversation")
        data = previous.serialize()
        orchestrator = Orchestrator("Resumed", config=self.config).with_context_from_data(data)
        message = await orchestrator.with_user_instruction("And in Fahrenheit?").run(self.weather_agent)
        logger.info(f"Answer: {message.content if message else None}")

    async def run_all(self):
        try:
            first = await self.example_single_agent()
            await self.example_handoff()
            await self.example_streaming()
            await self.example_resume(first)
        finally:
            await self.forecast_connection.disconnect()


if __name__ == "__main__":
    asyncio.run(WeatherExample().run_all())
