"""
Judge Team Data Models
"""
from typing import List, Literal, Optional

from pydantic import Field

from .base import WireModel

JudgeRole = Literal["accuracy", "safety", "efficiency", "experience", "integration"]
Recommendation = Literal["SHIP", "IMPROVE", "BLOCK"]


class JudgeAgent(WireModel):
    """A member of the judge roster."""

    id: str
    name: str
    role: JudgeRole
    weight: float


class CriticalIssue(WireModel):
    severity: Literal["critical", "major", "minor"]
    category: str
    description: str
    affected_scenarios: List[str] = Field(default_factory=list)
    suggested_fix: str


class ImprovementArea(WireModel):
    area: str
    current_score: int
    target_score: int
    actions: List[str] = Field(default_factory=list)


class TrainingSignal(WireModel):
    """Labeled (input, expected, actual) triple derived from a failed scenario."""

    type: Literal["positive", "negative", "corrective"]
    scenario_id: str
    input: str
    expected_output: str
    actual_output: str
    correction: Optional[str] = None


class ConsensusVerdict(WireModel):
    """Aggregated ship/improve/block decision for one judge session."""

    overall_score: int = Field(ge=0, le=100)
    pass_rate: float = Field(ge=0, le=100)
    critical_issues: List[CriticalIssue] = Field(default_factory=list)
    improvement_areas: List[ImprovementArea] = Field(default_factory=list)
    training_signals: List[TrainingSignal] = Field(default_factory=list)
    recommendation: Recommendation


class JudgeSession(WireModel):
    id: str
    sequence: int
    started_at: str
    completed_at: Optional[str] = None
    status: Literal["active", "completed", "failed"] = "active"
    scenarios_judged: List[str] = Field(default_factory=list)
    consensus_reached: bool = False
    final_verdict: Optional[ConsensusVerdict] = None


class IntegrationCheck(WireModel):
    """Structural health probe result."""

    name: str
    status: Literal["pass", "fail", "warn"]
    message: str
    timestamp: str


class JudgeReport(WireModel):
    """Read-only snapshot for external consumers."""

    session_id: str
    timestamp: str
    integration_checks: List[IntegrationCheck] = Field(default_factory=list)
    verdict: Optional[ConsensusVerdict] = None
    judges: List[JudgeAgent] = Field(default_factory=list)
