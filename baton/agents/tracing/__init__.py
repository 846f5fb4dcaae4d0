"""Run tracing: traces, spans, the processor and exporters."""

from .models import Trace, Span
from .span_factory import SpanFactory
from .processor import TracingProcessor
from .observer import TraceAgentObserver
from .exporters import InMemoryTracingExporter, LoggingTracingExporter

__all__ = [
    "Trace",
    "Span",
    "SpanFactory",
    "TracingProcessor",
    "TraceAgentObserver",
    "InMemoryTracingExporter",
    "LoggingTracingExporter",
]
