"""
Tracer - per-session append-only event log
"""
import logging
from typing import Any, Dict, List, Optional

from ..models.trace import SessionTrace, TraceEvent, TraceEventType
from ..utils.helpers import timestamp_now

logger = logging.getLogger(__name__)


class Tracer:
    """
    Records message, routing, tool and decision events per session.
    Readers get detached copies, so a trace handed out never changes
    under the caller.
    """

    def __init__(self):
        self._traces: Dict[str, SessionTrace] = {}

    def init_session(self, session_id: str) -> SessionTrace:
        """Open a trace for the session. Reopening an existing one is a no-op."""
        trace = self._traces.get(session_id)
        if trace is None:
            trace = SessionTrace(session_id=session_id, created_at=timestamp_now())
            self._traces[session_id] = trace
            logger.debug(f"Trace opened for {session_id}")
        return trace

    def has_session(self, session_id: str) -> bool:
        return session_id in self._traces

    def record(
        self,
        session_id: str,
        event_type: TraceEventType,
        agent: Optional[str] = None,
        **data: Any
    ) -> TraceEvent:
        """
        Append an event to a session trace.

        Args:
            session_id: Session the event belongs to
            event_type: message | routing | tool | decision | escalation
            agent: Agent responsible for the event, if any
            **data: Free-form event payload

        Returns:
            The recorded event
        """
        trace = self.init_session(session_id)
        event = TraceEvent(
            timestamp=timestamp_now(),
            type=event_type,
            agent=agent,
            data=data
        )
        trace.timeline.append(event)
        return event

    def get_trace(self, session_id: str) -> Optional[SessionTrace]:
        trace = self._traces.get(session_id)
        return trace.model_copy(deep=True) if trace else None

    def events_since(self, session_id: str, offset: int) -> List[TraceEvent]:
        """Events appended after the first `offset` ones."""
        trace = self._traces.get(session_id)
        if trace is None:
            return []
        return [e.model_copy(deep=True) for e in trace.timeline[offset:]]

    def event_count(self, session_id: str) -> int:
        trace = self._traces.get(session_id)
        return len(trace.timeline) if trace else 0

    def session_ids(self) -> List[str]:
        return list(self._traces)

    def clear(self):
        self._traces.clear()
