"""
Verdict and Dashboard Data Models
"""
from typing import List, Optional

from pydantic import Field

from .base import WireModel


class VerdictDimensions(WireModel):
    """Per-dimension scores, each 0-100."""

    accuracy: int = Field(ge=0, le=100)
    efficiency: int = Field(ge=0, le=100)
    appropriateness: int = Field(ge=0, le=100)
    escalation_handling: int = Field(ge=0, le=100)


class JudgeVerdict(WireModel):
    """Scored assessment of one scenario run."""

    scenario_id: str
    overall_score: int
    dimensions: VerdictDimensions
    issues: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    timestamp: str


class RunResult(WireModel):
    """Outcome record for one scenario inside a run-all batch."""

    id: str
    status: str  # completed | error
    score: Optional[int] = None
    error: Optional[str] = None


class DashboardSummary(WireModel):
    total_scenarios: int
    passed: int
    failed: int
    pending: int
    average_quality_score: int


class DashboardScenario(WireModel):
    id: str
    name: str
    status: str
    duration: Optional[int] = None
    quality_score: Optional[int] = None


class DashboardData(WireModel):
    """Snapshot consumed by the local dashboard."""

    summary: DashboardSummary
    scenarios: List[DashboardScenario] = Field(default_factory=list)
    recent_verdicts: List[JudgeVerdict] = Field(default_factory=list)
    timestamp: str
