"""
Timeline Data Model
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from .base import WireModel

TimelineEventType = Literal["message", "routing", "tool", "decision", "escalation"]


class TimelineEvent(WireModel):
    """Event observed while replaying a scenario."""

    timestamp: int  # ms since the run started
    type: TimelineEventType
    agent: Optional[str] = None
    description: str
    data: Optional[Dict[str, Any]] = None


class TimelineFork(WireModel):
    """A point where the conversation could have taken another path."""

    at_event: int
    reason: str
    alternative_paths: List[str] = Field(default_factory=list)
    chosen_path: str


class FinalState(WireModel):
    """Summary of where a replay ended up."""

    resolved: bool
    escalated: bool
    customer_satisfied: Optional[bool] = None
    tools_used: List[str] = Field(default_factory=list)
    agents_involved: List[str] = Field(default_factory=list)
    total_duration: int = 0  # ms
    quality_score: int = Field(default=0, ge=0, le=100)


class Timeline(WireModel):
    """Ordered record of one scenario run."""

    scenario_id: str
    events: List[TimelineEvent] = Field(default_factory=list)
    forks: List[TimelineFork] = Field(default_factory=list)
    final_state: FinalState

    def count(self, event_type: str) -> int:
        return sum(1 for e in self.events if e.type == event_type)
