"""
Simulation Engine - replays scripted scenarios and observes the runtime

Each run produces a timeline, a quality score and a pass/fail status;
judge_scenario() turns a finished run into a four-dimension verdict.
"""
import itertools
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

from ..config import Settings, settings as default_settings
from ..errors import ScenarioNotFound, ScenarioNotJudgeable
from ..models.runtime import TurnResult
from ..models.scenario import ActualOutcome, Scenario
from ..models.timeline import FinalState, Timeline, TimelineEvent
from ..models.trace import SessionTrace
from ..models.verdict import (
    DashboardData,
    DashboardScenario,
    DashboardSummary,
    JudgeVerdict,
    RunResult,
    VerdictDimensions,
)
from ..tracing.tracer import Tracer
from ..utils.helpers import clamp, round_half_up, timestamp_now, truncate_text

logger = logging.getLogger(__name__)

ExecutorResult = Union[TurnResult, Mapping[str, Any]]
Executor = Callable[[str, str], Awaitable[ExecutorResult]]

EFFICIENT_TRACE_EVENTS = 3
VERBOSE_TRACE_EVENTS = 10
MAX_ROUTING_EVENTS = 3


class SimulationEngine:
    """
    Registers scenarios and runs them through an injected executor.
    Scenarios run one at a time; nothing here is safe for concurrent writers.
    """

    def __init__(self, tracer: Optional[Tracer] = None, settings: Optional[Settings] = None):
        self.tracer = tracer or Tracer()
        self.settings = settings or default_settings
        self._scenarios: Dict[str, Scenario] = {}
        self._timelines: Dict[str, Timeline] = {}
        self._verdicts: Dict[str, JudgeVerdict] = {}
        self._sequence = itertools.count(1)

    def register_scenario(self, scenario: Scenario):
        """Store a scenario by id, replacing any earlier registration."""
        self._scenarios[scenario.id] = scenario
        logger.info(f"[SIM] Registered scenario: {scenario.id}")

    async def run_simulation(self, scenario_id: str, executor: Executor) -> Timeline:
        """
        Replay a scenario through the executor.

        Processing stops at the first escalated turn; later inputs are skipped.

        Args:
            scenario_id: Registered scenario id
            executor: async (session_id, message) -> TurnResult or {message, escalated}

        Returns:
            The timeline of the run

        Raises:
            ScenarioNotFound: if the scenario is not registered
        """
        scenario = self._scenarios.get(scenario_id)
        if scenario is None:
            raise ScenarioNotFound(scenario_id)

        start = time.perf_counter()
        events: List[TimelineEvent] = []

        session_id = f"sim_{scenario_id}_{next(self._sequence)}"
        self.tracer.init_session(session_id)

        scenario.status = "running"
        escalated = False
        final_message = ""

        try:
            for scenario_input in scenario.inputs:
                events.append(TimelineEvent(
                    timestamp=_elapsed_ms(start),
                    type="message",
                    description=f'Customer: "{truncate_text(scenario_input.customer_message)}"',
                    data={"step": scenario_input.step, "message": scenario_input.customer_message}
                ))

                trace_offset = self.tracer.event_count(session_id)
                final_message, escalated = _coerce_result(await executor(session_id, scenario_input.customer_message))
                events.extend(self._observed_events(session_id, trace_offset, start))

                events.append(TimelineEvent(
                    timestamp=_elapsed_ms(start),
                    type="escalation" if escalated else "decision",
                    description="Escalated to human" if escalated else f'Response: "{truncate_text(final_message)}"',
                    data={"response": final_message, "escalated": escalated}
                ))

                if escalated:
                    break
        except Exception:
            # a failed run leaves nothing to judge
            scenario.status = "error"
            scenario.actual_outcome = None
            self._timelines.pop(scenario_id, None)
            self._verdicts.pop(scenario_id, None)
            scenario.executed_at = timestamp_now()
            scenario.duration = _elapsed_ms(start)
            logger.error(f"[SIM] Scenario {scenario_id}: executor raised, marked as error")
            raise

        duration = _elapsed_ms(start)
        trace = self.tracer.get_trace(session_id) or SessionTrace(session_id=session_id, created_at=timestamp_now())
        agent_sequence, tools_called = _summarize_trace(trace)

        actual = ActualOutcome(
            escalated=escalated,
            agent_sequence=agent_sequence,
            tools_called=tools_called,
            trace=trace,
            final_message=final_message
        )

        timeline = Timeline(
            scenario_id=scenario_id,
            events=events,
            forks=[],
            final_state=FinalState(
                resolved=not escalated,
                escalated=escalated,
                tools_used=tools_called,
                agents_involved=agent_sequence,
                total_duration=duration,
                quality_score=self.calculate_quality_score(scenario, actual)
            )
        )

        scenario.actual_outcome = actual
        scenario.status = "passed" if self.evaluate_scenario(scenario) else "failed"
        scenario.executed_at = timestamp_now()
        scenario.duration = duration

        self._timelines[scenario_id] = timeline

        logger.info(f"[SIM] Scenario {scenario_id}: {scenario.status} ({scenario.duration}ms)")
        return timeline

    async def run_all(self, executor: Executor) -> List[RunResult]:
        """
        Run every registered scenario sequentially.
        A scenario that raises is reported in-line and the batch continues.
        """
        results: List[RunResult] = []
        for scenario in list(self._scenarios.values()):
            try:
                timeline = await self.run_simulation(scenario.id, executor)
                results.append(RunResult(id=scenario.id, status="completed", score=timeline.final_state.quality_score))
            except Exception as e:
                logger.error(f"[SIM] Scenario {scenario.id} errored: {e}")
                results.append(RunResult(id=scenario.id, status="error", error=str(e)))
        return results

    def evaluate_scenario(self, scenario: Scenario) -> bool:
        """Passed iff escalation matches exactly and every expected substring is in the final reply."""
        actual = scenario.actual_outcome
        if actual is None:
            return False

        expected = scenario.expected_outcome
        if expected.escalated != actual.escalated:
            return False

        final_message = actual.final_message.lower()
        for needle in expected.final_message_contains or []:
            if needle.lower() not in final_message:
                return False

        return True

    def calculate_quality_score(self, scenario: Scenario, actual: ActualOutcome) -> int:
        """
        Score a run from 0 to 100.

        Missed escalations cost more than unnecessary ones; short traces earn
        a small bonus and very long ones a penalty.
        """
        score = 100
        expected_escalation = scenario.expected_outcome.escalated

        if actual.escalated and not expected_escalation:
            score -= 30
        if not actual.escalated and expected_escalation:
            score -= 40

        event_count = len(actual.trace.timeline) if actual.trace else 0
        if event_count <= EFFICIENT_TRACE_EVENTS:
            score += 5
        elif event_count > VERBOSE_TRACE_EVENTS:
            score -= 10

        return int(clamp(score))

    def judge_scenario(self, scenario_id: str) -> JudgeVerdict:
        """
        Judge a finished scenario run.

        Args:
            scenario_id: Scenario that has a timeline

        Returns:
            JudgeVerdict with accuracy, efficiency, appropriateness and escalation handling

        Raises:
            ScenarioNotJudgeable: if the scenario or its timeline is missing
        """
        scenario = self._scenarios.get(scenario_id)
        timeline = self._timelines.get(scenario_id)
        if scenario is None or timeline is None:
            raise ScenarioNotJudgeable(scenario_id)

        issues: List[str] = []
        suggestions: List[str] = []

        accuracy = 100
        if scenario.status == "failed":
            accuracy = 40
            issues.append("Scenario did not meet expected outcome")

        efficiency = 100
        if timeline.final_state.total_duration > self.settings.SLOW_RUN_MS:
            efficiency -= 20
            suggestions.append("Consider caching or parallel execution")

        appropriateness = 85
        if timeline.count("routing") > MAX_ROUTING_EVENTS:
            appropriateness -= 30
            issues.append("Too many routing decisions - unclear intent classification")

        escalation_handling = 90
        actual_escalated = scenario.actual_outcome.escalated if scenario.actual_outcome else False
        if scenario.expected_outcome.escalated and not actual_escalated:
            escalation_handling = 20
            issues.append("Failed to escalate when expected")

        overall = round_half_up((accuracy + efficiency + appropriateness + escalation_handling) / 4)

        verdict = JudgeVerdict(
            scenario_id=scenario_id,
            overall_score=overall,
            dimensions=VerdictDimensions(
                accuracy=accuracy,
                efficiency=efficiency,
                appropriateness=appropriateness,
                escalation_handling=escalation_handling
            ),
            issues=issues,
            suggestions=suggestions,
            timestamp=timestamp_now()
        )
        self._verdicts[scenario_id] = verdict
        return verdict

    def get_scenarios(self) -> List[Scenario]:
        return list(self._scenarios.values())

    def get_scenario(self, scenario_id: str) -> Scenario:
        scenario = self._scenarios.get(scenario_id)
        if scenario is None:
            raise ScenarioNotFound(scenario_id)
        return scenario

    def get_timeline(self, scenario_id: str) -> Optional[Timeline]:
        return self._timelines.get(scenario_id)

    def get_verdicts(self) -> List[JudgeVerdict]:
        return list(self._verdicts.values())

    def export_dashboard_data(self) -> DashboardData:
        """Summary and per-scenario status for the dashboard."""
        scenarios = self.get_scenarios()
        verdicts = self.get_verdicts()

        avg_score = (
            round_half_up(sum(v.overall_score for v in verdicts) / len(verdicts))
            if verdicts else 0
        )

        return DashboardData(
            summary=DashboardSummary(
                total_scenarios=len(scenarios),
                passed=sum(1 for s in scenarios if s.status == "passed"),
                failed=sum(1 for s in scenarios if s.status == "failed"),
                pending=sum(1 for s in scenarios if s.status == "pending"),
                average_quality_score=avg_score
            ),
            scenarios=[
                DashboardScenario(
                    id=s.id,
                    name=s.name,
                    status=s.status,
                    duration=s.duration,
                    quality_score=(
                        self._timelines[s.id].final_state.quality_score
                        if s.id in self._timelines else None
                    )
                )
                for s in scenarios
            ],
            recent_verdicts=verdicts[-5:],
            timestamp=timestamp_now()
        )

    def _observed_events(self, session_id: str, offset: int, start: float) -> List[TimelineEvent]:
        """Routing and tool events the runtime traced during the last turn."""
        observed: List[TimelineEvent] = []
        for event in self.tracer.events_since(session_id, offset):
            if event.type == "routing":
                observed.append(TimelineEvent(
                    timestamp=_elapsed_ms(start),
                    type="routing",
                    agent=event.agent,
                    description=f"Routed to {event.agent} ({event.data.get('reason', '')})",
                    data=event.data
                ))
            elif event.type == "tool":
                observed.append(TimelineEvent(
                    timestamp=_elapsed_ms(start),
                    type="tool",
                    agent=event.agent,
                    description=f"Tool call: {event.data.get('tool')}",
                    data=event.data
                ))
        return observed


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _coerce_result(result: ExecutorResult) -> Tuple[str, bool]:
    if isinstance(result, TurnResult):
        return result.message, result.escalated
    return str(result.get("message", "")), bool(result.get("escalated", False))


def _summarize_trace(trace: SessionTrace) -> Tuple[List[str], List[str]]:
    """Agent sequence (consecutive repeats collapsed) and tools called, in order."""
    agents: List[str] = []
    tools: List[str] = []
    for event in trace.timeline:
        if event.type == "routing" and event.agent and not event.data.get("escalate"):
            if not agents or agents[-1] != event.agent:
                agents.append(event.agent)
        elif event.type == "tool" and event.data.get("tool"):
            tools.append(event.data["tool"])
    return agents, tools
