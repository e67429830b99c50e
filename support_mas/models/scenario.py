"""
Scenario Data Model
"""
from typing import List, Literal, Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from .base import WireModel
from .trace import SessionTrace

ScenarioStatus = Literal["pending", "running", "passed", "failed", "warning", "error"]


class ScenarioInput(WireModel):
    """One scripted customer turn."""

    step: int
    customer_message: str
    expected_intent: Optional[str] = None
    expected_agent: Optional[str] = None


class ExpectedOutcome(WireModel):
    """What a correct run of the scenario looks like."""

    escalated: bool
    agent_sequence: List[str] = Field(default_factory=list)
    tools_called: Optional[List[str]] = None
    final_message_contains: Optional[List[str]] = None


class ActualOutcome(WireModel):
    """What the runtime actually did. Frozen once produced."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    escalated: bool
    agent_sequence: List[str] = Field(default_factory=list)
    tools_called: List[str] = Field(default_factory=list)
    trace: SessionTrace
    final_message: str = ""


class Scenario(WireModel):
    """A scripted conversation with its expected outcome."""

    id: str
    name: str
    description: str = ""
    inputs: List[ScenarioInput] = Field(default_factory=list)
    expected_outcome: ExpectedOutcome
    actual_outcome: Optional[ActualOutcome] = None
    status: ScenarioStatus = "pending"
    executed_at: Optional[str] = None
    duration: Optional[int] = None  # ms
