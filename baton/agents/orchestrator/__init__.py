"""
Run orchestration: the run context, observers and the orchestrator.
"""

from .run_context import RunContext
from .observers import AgentObserver, ToolObserver, ObserverInvoker, StreamedAgentObserver
from .orchestrator import Orchestrator

__all__ = [
    "RunContext",
    "AgentObserver",
    "ToolObserver",
    "ObserverInvoker",
    "StreamedAgentObserver",
    "Orchestrator",
]
