"""
Tracing processor.

Tracks the active trace and its spans for one run context and hands them to
an exporter when flushed.
"""

import logging
from typing import Any, Dict, Optional, Set, TYPE_CHECKING

from ..core.interfaces import TracingExporter
from .models import Span, Trace

if TYPE_CHECKING:
    from ..orchestrator.run_context import RunContext

logger = logging.getLogger(__name__)


class TracingProcessor:
    """Span bookkeeping for a run context.

    Spans form a tree through ``parent_id``; stopping a span makes its parent
    the current span again.
    """

    def __init__(self, exporter: TracingExporter, context: "RunContext"):
        self._exporter = exporter
        self._context = context
        self._trace: Optional[Trace] = None
        self._trace_exported = False
        self._spans: Dict[str, Span] = {}
        self._exported_span_ids: Set[str] = set()
        self._current_span: Optional[Span] = None
        self._previous_span_time: Optional[float] = None

    @property
    def exporter(self) -> TracingExporter:
        return self._exporter

    def start(
        self,
        workflow_name: str,
        trace_id: Optional[str] = None,
        group_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Trace:
        """Open a new trace and attach a tracing observer to the context."""
        from .observer import TraceAgentObserver

        trace_args: Dict[str, Any] = {"name": workflow_name, "group_id": group_id, "metadata": metadata or {}}
        if trace_id is not None:
            trace_args["id"] = trace_id
        self._trace = Trace(**trace_args)
        self._trace_exported = False
        self._spans = {}
        self._exported_span_ids = set()
        self._current_span = None
        self._previous_span_time = None

        self._context.remove_agent_observer(TraceAgentObserver).with_agent_observer(TraceAgentObserver(self))
        logger.debug(f"Started trace {self._trace.id} for workflow {workflow_name}")
        return self._trace

    def trace(self) -> Optional[Trace]:
        return self._trace

    def is_started(self) -> bool:
        return self._trace is not None

    @property
    def current_span(self) -> Optional[Span]:
        return self._current_span

    def start_span(self, span: Span) -> Span:
        self._spans[span.id] = span
        span.start()
        self._current_span = span
        return span

    def start_span_after_previous(self, span: Span) -> Span:
        """Start ``span`` at the moment the previously stopped span ended."""
        span = self.start_span(span)
        if self._previous_span_time is not None:
            span.started_at = self._previous_span_time
        return span

    def stop_span(self, span: Span) -> Span:
        span.stop()
        self._current_span = self._spans.get(span.parent_id) if span.parent_id else None
        return span

    def stop_current(self) -> Optional[Span]:
        if self._current_span is None:
            return None
        span = self.stop_span(self._current_span)
        self._previous_span_time = span.ended_at
        return span

    def flush(self) -> None:
        """Export the trace once and every span not exported yet."""
        if self._trace is None:
            return
        items = []
        if not self._trace_exported:
            items.append(self._trace)
            self._trace_exported = True
        for span_id, span in self._spans.items():
            if span_id in self._exported_span_ids:
                continue
            items.append(span.stop())
            self._exported_span_ids.add(span_id)
        if items:
            self._exporter.export(items)
            logger.debug(f"Exported {len(items)} tracing items for trace {self._trace.id}")
