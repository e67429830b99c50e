"""
Trace Data Model - per-session append-only event log
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from .base import WireModel

TraceEventType = Literal["message", "routing", "tool", "decision", "escalation"]


class TraceEvent(WireModel):
    """A single event recorded during a runtime session."""

    timestamp: str
    type: TraceEventType
    agent: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class SessionTrace(WireModel):
    """Read handle over one session's recorded events."""

    session_id: str
    created_at: str
    timeline: List[TraceEvent] = Field(default_factory=list)

    def events_of(self, event_type: str) -> List[TraceEvent]:
        return [e for e in self.timeline if e.type == event_type]
