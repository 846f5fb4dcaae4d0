"""Trace and span records."""

import uuid as uuid_lib
from datetime import datetime, timezone
from time import time
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


def _format_timestamp(value: Optional[float]) -> Optional[str]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class Trace(BaseModel):
    """One traced workflow run."""

    name: str = Field(..., description="Workflow name")
    id: str = Field(default_factory=lambda: f"trace_{uuid_lib.uuid4().hex}", description="Trace identifier")
    group_id: Optional[str] = Field(None, description="Groups traces of one conversation")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Free-form metadata")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "object": "trace",
            "id": self.id,
            "workflow_name": self.name,
            "group_id": self.group_id,
            "metadata": self.metadata or None,
        }


class Span(BaseModel):
    """A timed operation inside a trace."""

    trace_id: str = Field(..., description="Owning trace")
    parent_id: Optional[str] = Field(None, description="Enclosing span")
    id: str = Field(default_factory=lambda: f"span_{uuid_lib.uuid4().hex}", description="Span identifier")
    span_data: Dict[str, Any] = Field(default_factory=dict, description="Type specific payload")
    started_at: Optional[float] = Field(None, description="Start time, unix seconds")
    ended_at: Optional[float] = Field(None, description="End time, unix seconds")
    error: Optional[str] = Field(None, description="Error message when the operation failed")

    @property
    def is_finished(self) -> bool:
        return self.ended_at is not None

    def start(self) -> "Span":
        if self.started_at is None:
            self.started_at = time()
        return self

    def stop(self) -> "Span":
        if self.ended_at is None:
            self.ended_at = time()
        return self

    def set_error(self, error: Optional[str]) -> "Span":
        self.error = error
        return self

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "object": "trace.span",
            "id": self.id,
            "trace_id": self.trace_id,
            "parent_id": self.parent_id,
            "started_at": _format_timestamp(self.started_at),
            "ended_at": _format_timestamp(self.ended_at),
            "span_data": self.span_data or None,
        }
        if self.error:
            data["error"] = {"message": self.error}
        return data
