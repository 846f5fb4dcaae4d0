"""
Baton Agents SDK

An asynchronous orchestration SDK for building multi-agent applications on top
of LLM chat-completion style APIs, with tool calling, agent handoffs, MCP tool
servers and streaming.

Example usage:
    from baton.agents import Agent, Orchestrator, Tool, ToolParameter

    agent = Agent(name="Weather Agent", instruction="You answer weather questions.")
    orchestrator = Orchestrator().with_user_instruction("What's the weather in Boston?")
    message = await orchestrator.run(agent)
"""

__version__ = "1.0.0"

from .agents import (
    Agent,
    Orchestrator,
    RunContext,
    Tool,
    ToolParameter,
    DynamicTool,
    Handoff,
    McpConnection,
    Message,
    ToolCall,
    ToolOutput,
    Payload,
    ModelSettings,
    SDKConfig,
)

__all__ = [
    "Agent",
    "Orchestrator",
    "RunContext",
    "Tool",
    "ToolParameter",
    "DynamicTool",
    "Handoff",
    "McpConnection",
    "Message",
    "ToolCall",
    "ToolOutput",
    "Payload",
    "ModelSettings",
    "SDKConfig",
]
