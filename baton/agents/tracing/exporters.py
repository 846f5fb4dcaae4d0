"""Trace exporters."""

import json
import logging
from typing import List, Union

from ..core.interfaces import TracingExporter
from .models import Span, Trace

logger = logging.getLogger(__name__)


class InMemoryTracingExporter(TracingExporter):
    """Keeps exported items in memory, mostly useful in tests."""

    def __init__(self):
        self.items: List[Union[Trace, Span]] = []

    def export(self, items: List[Union[Trace, Span]]) -> None:
        self.items.extend(items)

    def traces(self) -> List[Trace]:
        return [item for item in self.items if isinstance(item, Trace)]

    def spans(self) -> List[Span]:
        return [item for item in self.items if isinstance(item, Span)]


class LoggingTracingExporter(TracingExporter):
    """Writes each exported item to the log at debug level."""

    def __init__(self, level: int = logging.DEBUG):
        self._level = level

    def export(self, items: List[Union[Trace, Span]]) -> None:
        for item in items:
            logger.log(self._level, json.dumps(item.to_dict(), default=str))
