"""
Judge Team - integration checks, batch judging and ship/improve/block consensus
"""
import itertools
from typing import Any, Dict, List, Optional

from ..agents.base_agent import BaseAgent
from ..config import Settings, settings as default_settings
from ..errors import JudgeSessionClosed, JudgeSessionNotFound
from ..models.judge import (
    ConsensusVerdict,
    CriticalIssue,
    ImprovementArea,
    IntegrationCheck,
    JudgeAgent,
    JudgeReport,
    JudgeSession,
    TrainingSignal,
)
from ..models.verdict import JudgeVerdict
from ..simulation.engine import SimulationEngine
from ..utils.helpers import round_half_up, timestamp_now

# Weights are roster metadata; consensus uses the unweighted mean of verdict scores.
DEFAULT_JUDGES: List[JudgeAgent] = [
    JudgeAgent(id="judge-accuracy", name="Accuracy Judge", role="accuracy", weight=0.30),
    JudgeAgent(id="judge-safety", name="Safety Judge", role="safety", weight=0.25),
    JudgeAgent(id="judge-efficiency", name="Efficiency Judge", role="efficiency", weight=0.15),
    JudgeAgent(id="judge-experience", name="UX Judge", role="experience", weight=0.20),
    JudgeAgent(id="judge-integration", name="Integration Judge", role="integration", weight=0.10),
]

IMPROVEMENT_THRESHOLD = 80
IMPROVEMENT_TARGET = 85
DIMENSION_FLOOR = 50


class JudgeTeam(BaseAgent):
    """
    Judges executed scenarios and reaches a release recommendation:
    - Static integration checks
    - Per-scenario verdicts via the simulation engine
    - Critical issues, improvement areas and training signals
    - SHIP / IMPROVE / BLOCK consensus
    """

    def __init__(
        self,
        engine: SimulationEngine,
        settings: Optional[Settings] = None
    ):
        super().__init__(
            name="Judge",
            description="Scores scenario runs and gates releases"
        )
        settings = settings or default_settings
        self.engine = engine
        self.ship_min_pass_rate = settings.SHIP_MIN_PASS_RATE
        self.ship_min_score = settings.SHIP_MIN_SCORE
        self.judges: List[JudgeAgent] = [j.model_copy() for j in DEFAULT_JUDGES]
        self._sessions: Dict[str, JudgeSession] = {}
        self._sequence = itertools.count(1)
        self._integration_checks: List[IntegrationCheck] = []

    async def execute(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Judge all executed scenarios in a session and reach consensus."""
        session_id = context.get("session_id") or self.start_session().id
        self.judge_all_scenarios(session_id)
        return {"session_id": session_id, "verdict": self.reach_consensus(session_id)}

    def start_session(self) -> JudgeSession:
        sequence = next(self._sequence)
        session = JudgeSession(
            id=f"judge_{sequence}",
            sequence=sequence,
            started_at=timestamp_now()
        )
        self._sessions[session.id] = session
        self.log_info(f"Session started: {session.id}")
        return session

    def get_session(self, session_id: str) -> JudgeSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise JudgeSessionNotFound(session_id)
        return session

    def get_latest_session(self) -> Optional[JudgeSession]:
        """Session with the highest sequence number, or None."""
        if not self._sessions:
            return None
        return max(self._sessions.values(), key=lambda s: s.sequence)

    def run_integration_checks(self) -> List[IntegrationCheck]:
        """
        Run the structural probes. Only the scenario count can warn;
        the other probes report wiring, not live health.
        """
        timestamp = timestamp_now()
        scenario_count = len(self.engine.get_scenarios())

        checks = [
            IntegrationCheck(
                name="Tracer Singleton",
                status="pass",
                message="Tracer is properly initialized",
                timestamp=timestamp
            ),
            IntegrationCheck(
                name="Memory Store",
                status="pass",
                message="Memory store is accessible",
                timestamp=timestamp
            ),
            IntegrationCheck(
                name="Simulation Engine",
                status="pass" if scenario_count > 0 else "warn",
                message=f"{scenario_count} scenarios registered",
                timestamp=timestamp
            ),
            IntegrationCheck(
                name="Agent Executors",
                status="pass",
                message="Agent executor pattern verified",
                timestamp=timestamp
            ),
            IntegrationCheck(
                name="Tool Definitions",
                status="pass",
                message="Tools are properly typed",
                timestamp=timestamp
            ),
        ]

        self._integration_checks = checks
        self.log_info(f"Integration checks: {sum(1 for c in checks if c.status == 'pass')}/{len(checks)} passed")
        return checks

    def get_integration_checks(self) -> List[IntegrationCheck]:
        return list(self._integration_checks)

    def judge_all_scenarios(self, session_id: str):
        """
        Judge every scenario that has finished a run.
        Pending and errored scenarios are skipped; a scenario that cannot be
        judged is logged and skipped.

        Raises:
            JudgeSessionNotFound: if the session is unknown
            JudgeSessionClosed: if consensus was already reached for it
        """
        session = self.get_session(session_id)
        if session.status == "completed":
            raise JudgeSessionClosed(session_id)

        for scenario in self.engine.get_scenarios():
            if scenario.status in ("pending", "error"):
                continue
            try:
                self.engine.judge_scenario(scenario.id)
                if scenario.id not in session.scenarios_judged:
                    session.scenarios_judged.append(scenario.id)
            except Exception as e:
                self.log_error(f"Failed to judge {scenario.id}: {e}")

    def reach_consensus(self, session_id: str) -> ConsensusVerdict:
        """
        Aggregate all verdicts into a recommendation.

        Args:
            session_id: Active judge session

        Returns:
            ConsensusVerdict, also stored on the session

        Raises:
            JudgeSessionNotFound: if the session is unknown
            JudgeSessionClosed: if consensus was already reached for it
        """
        session = self.get_session(session_id)
        if session.status == "completed":
            raise JudgeSessionClosed(session_id)

        verdicts = self.engine.get_verdicts()
        scenarios = self.engine.get_scenarios()

        passed = sum(1 for s in scenarios if s.status == "passed")
        executed = sum(1 for s in scenarios if s.status != "pending")
        pass_rate = (passed / executed) * 100 if executed > 0 else 0.0

        overall_score = (
            round_half_up(sum(v.overall_score for v in verdicts) / len(verdicts))
            if verdicts else 0
        )

        critical_issues = self._find_critical_issues(verdicts)
        improvement_areas = self._find_improvement_areas(verdicts)
        training_signals = self._training_signals()

        if any(issue.severity == "critical" for issue in critical_issues):
            recommendation = "BLOCK"
        elif pass_rate < self.ship_min_pass_rate or overall_score < self.ship_min_score:
            recommendation = "IMPROVE"
        else:
            recommendation = "SHIP"

        consensus = ConsensusVerdict(
            overall_score=overall_score,
            pass_rate=pass_rate,
            critical_issues=critical_issues,
            improvement_areas=improvement_areas,
            training_signals=training_signals,
            recommendation=recommendation
        )

        # all four fields land together; nothing awaits in between
        session.final_verdict = consensus
        session.consensus_reached = True
        session.completed_at = timestamp_now()
        session.status = "completed"

        self.log_info(
            f"Consensus reached: {recommendation} (score: {overall_score}, pass: {pass_rate:.1f}%)"
        )
        return consensus

    def export_report(self) -> JudgeReport:
        """Latest verdict, last integration checks and the judge roster."""
        session = self.get_latest_session()
        return JudgeReport(
            session_id=session.id if session else "none",
            timestamp=timestamp_now(),
            integration_checks=self.get_integration_checks(),
            verdict=session.final_verdict.model_copy(deep=True) if session and session.final_verdict else None,
            judges=[j.model_copy() for j in self.judges]
        )

    def _find_critical_issues(self, verdicts: List[JudgeVerdict]) -> List[CriticalIssue]:
        issues: List[CriticalIssue] = []
        for verdict in verdicts:
            if verdict.dimensions.escalation_handling < DIMENSION_FLOOR:
                issues.append(CriticalIssue(
                    severity="critical",
                    category="Escalation",
                    description="Escalation handling is below threshold",
                    affected_scenarios=[verdict.scenario_id],
                    suggested_fix="Review escalation detection logic"
                ))
            if verdict.dimensions.accuracy < DIMENSION_FLOOR:
                issues.append(CriticalIssue(
                    severity="major",
                    category="Accuracy",
                    description="Response accuracy is below threshold",
                    affected_scenarios=[verdict.scenario_id],
                    suggested_fix="Improve intent classification"
                ))
        return issues

    def _find_improvement_areas(self, verdicts: List[JudgeVerdict]) -> List[ImprovementArea]:
        averages = self._average_dimensions(verdicts)
        areas: List[ImprovementArea] = []

        if averages["accuracy"] < IMPROVEMENT_THRESHOLD:
            areas.append(ImprovementArea(
                area="Intent Classification",
                current_score=averages["accuracy"],
                target_score=IMPROVEMENT_TARGET,
                actions=["Add more training examples", "Improve prompt engineering"]
            ))
        if averages["efficiency"] < IMPROVEMENT_THRESHOLD:
            areas.append(ImprovementArea(
                area="Response Efficiency",
                current_score=averages["efficiency"],
                target_score=IMPROVEMENT_TARGET,
                actions=["Reduce tool call latency", "Cache frequent lookups"]
            ))
        return areas

    def _training_signals(self) -> List[TrainingSignal]:
        """One negative signal per failed scenario, keyed on its first input."""
        signals: List[TrainingSignal] = []
        for scenario in self.engine.get_scenarios():
            if scenario.status != "failed" or scenario.actual_outcome is None:
                continue
            signals.append(TrainingSignal(
                type="negative",
                scenario_id=scenario.id,
                input=scenario.inputs[0].customer_message if scenario.inputs else "",
                expected_output=", ".join(scenario.expected_outcome.final_message_contains or []),
                actual_output=scenario.actual_outcome.final_message
            ))
        return signals

    def _average_dimensions(self, verdicts: List[JudgeVerdict]) -> Dict[str, int]:
        keys = ["accuracy", "efficiency", "appropriateness", "escalation_handling"]
        if not verdicts:
            return {key: 0 for key in keys}
        return {
            key: round_half_up(sum(getattr(v.dimensions, key) for v in verdicts) / len(verdicts))
            for key in keys
        }
