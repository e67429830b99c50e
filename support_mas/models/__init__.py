"""Models package"""
from .scenario import Scenario, ScenarioInput, ExpectedOutcome, ActualOutcome
from .timeline import Timeline, TimelineEvent, TimelineFork, FinalState
from .trace import TraceEvent, SessionTrace
from .verdict import JudgeVerdict, VerdictDimensions, RunResult, DashboardData
from .judge import (
    JudgeAgent,
    JudgeSession,
    ConsensusVerdict,
    CriticalIssue,
    ImprovementArea,
    TrainingSignal,
    IntegrationCheck,
    JudgeReport,
)
from .runtime import (
    CustomerContext,
    SessionState,
    TurnResult,
    RoutingDecision,
    ToolDefinition,
    ToolCall,
    AgentReply,
    AgentDefinition,
    MASConfig,
)

__all__ = [
    "Scenario",
    "ScenarioInput",
    "ExpectedOutcome",
    "ActualOutcome",
    "Timeline",
    "TimelineEvent",
    "TimelineFork",
    "FinalState",
    "TraceEvent",
    "SessionTrace",
    "JudgeVerdict",
    "VerdictDimensions",
    "RunResult",
    "DashboardData",
    "JudgeAgent",
    "JudgeSession",
    "ConsensusVerdict",
    "CriticalIssue",
    "ImprovementArea",
    "TrainingSignal",
    "IntegrationCheck",
    "JudgeReport",
    "CustomerContext",
    "SessionState",
    "TurnResult",
    "RoutingDecision",
    "ToolDefinition",
    "ToolCall",
    "AgentReply",
    "AgentDefinition",
    "MASConfig",
]
