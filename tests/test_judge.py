"""Tests for the judge team."""
import pytest

from support_mas.config import Settings
from support_mas.errors import JudgeSessionClosed, JudgeSessionNotFound
from support_mas.judge.team import DEFAULT_JUDGES, JudgeTeam
from support_mas.simulation.engine import SimulationEngine

from tests.helpers import make_responder, make_scenario


async def run_scenarios(engine, *specs):
    """Register and run (scenario, reply, escalated) triples."""
    for scenario, reply, escalated in specs:
        engine.register_scenario(scenario)
        await engine.run_simulation(scenario.id, make_responder(reply, escalated))


@pytest.fixture
def team(engine, settings) -> JudgeTeam:
    return JudgeTeam(engine, settings=settings)


class TestJudgeSessions:

    def test_roster_has_five_judges(self, team):
        assert [j.role for j in team.judges] == ["accuracy", "safety", "efficiency", "experience", "integration"]
        assert sum(j.weight for j in DEFAULT_JUDGES) == pytest.approx(1.0)

    def test_session_ids_are_sequential(self, team):
        first = team.start_session()
        second = team.start_session()

        assert (first.id, second.id) == ("judge_1", "judge_2")
        assert first.status == "active"
        assert team.get_latest_session().id == "judge_2"

    def test_latest_session_is_none_before_any_session(self, team):
        assert team.get_latest_session() is None

    def test_unknown_session_raises(self, team):
        with pytest.raises(JudgeSessionNotFound):
            team.get_session("judge_99")
        with pytest.raises(JudgeSessionNotFound):
            team.reach_consensus("judge_99")


class TestIntegrationChecks:

    def test_warns_without_scenarios(self, team):
        checks = team.run_integration_checks()

        assert len(checks) == 5
        engine_check = next(c for c in checks if c.name == "Simulation Engine")
        assert engine_check.status == "warn"
        assert engine_check.message == "0 scenarios registered"
        assert all(c.status == "pass" for c in checks if c.name != "Simulation Engine")

    def test_all_pass_with_scenarios(self, team, engine):
        engine.register_scenario(make_scenario())

        checks = team.run_integration_checks()

        assert all(c.status == "pass" for c in checks)
        assert team.get_integration_checks() == checks


class TestJudgeAllScenarios:

    @pytest.mark.asyncio
    async def test_skips_pending_scenarios(self, team, engine):
        await run_scenarios(engine, (make_scenario("RUN-1"), "hi", False))
        engine.register_scenario(make_scenario("PENDING-1"))
        session = team.start_session()

        team.judge_all_scenarios(session.id)

        assert session.scenarios_judged == ["RUN-1"]
        assert [v.scenario_id for v in engine.get_verdicts()] == ["RUN-1"]

    @pytest.mark.asyncio
    async def test_errored_scenario_is_skipped(self, team, engine):
        engine.register_scenario(make_scenario("BAD-1"))

        async def executor(session_id, text):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await engine.run_simulation("BAD-1", executor)
        session = team.start_session()

        team.judge_all_scenarios(session.id)

        assert session.scenarios_judged == []


class TestConsensus:

    @pytest.mark.asyncio
    async def test_ship_when_everything_passes(self, team, engine):
        await run_scenarios(
            engine,
            (make_scenario("A", contains=["order"]), "Your order is on its way", False),
            (make_scenario("B", escalated=True), "Escalating", True),
        )
        session = team.start_session()
        team.judge_all_scenarios(session.id)

        verdict = team.reach_consensus(session.id)

        assert verdict.recommendation == "SHIP"
        assert verdict.pass_rate == 100
        assert verdict.overall_score == 94
        assert verdict.critical_issues == []
        assert verdict.training_signals == []
        assert session.status == "completed"
        assert session.consensus_reached is True
        assert session.final_verdict == verdict

    @pytest.mark.asyncio
    async def test_missed_escalation_blocks(self, team, engine):
        scenario = make_scenario("ESC-1", messages=["get me a human", "still there?"], escalated=True, contains=["escalat"])
        await run_scenarios(
            engine,
            (make_scenario("A"), "hi", False),
            (scenario, "How can I help?", False),
        )
        session = team.start_session()
        team.judge_all_scenarios(session.id)

        verdict = team.reach_consensus(session.id)

        assert verdict.recommendation == "BLOCK"
        assert [i.severity for i in verdict.critical_issues] == ["critical", "major"]
        assert verdict.critical_issues[0].affected_scenarios == ["ESC-1"]
        assert len(verdict.training_signals) == 1
        signal = verdict.training_signals[0]
        assert signal.type == "negative"
        assert signal.scenario_id == "ESC-1"
        assert signal.input == "get me a human"
        assert signal.expected_output == "escalat"
        assert signal.actual_output == "How can I help?"

    @pytest.mark.asyncio
    async def test_low_pass_rate_means_improve(self, team, engine):
        await run_scenarios(
            engine,
            (make_scenario("A"), "hi", False),
            (make_scenario("B", contains=["refund"]), "hi", False),
        )
        session = team.start_session()
        team.judge_all_scenarios(session.id)

        verdict = team.reach_consensus(session.id)

        assert verdict.recommendation == "IMPROVE"
        assert verdict.pass_rate == 50
        # (94 + 79) / 2 = 86.5 rounds half up
        assert verdict.overall_score == 87
        assert [a.area for a in verdict.improvement_areas] == ["Intent Classification"]
        assert verdict.improvement_areas[0].current_score == 70
        assert verdict.improvement_areas[0].target_score == 85

    @pytest.mark.asyncio
    async def test_thresholds_come_from_settings(self, engine):
        team = JudgeTeam(engine, settings=Settings(SHIP_MIN_PASS_RATE=50, SHIP_MIN_SCORE=70))
        await run_scenarios(
            engine,
            (make_scenario("A"), "hi", False),
            (make_scenario("B", contains=["refund"]), "hi", False),
        )
        session = team.start_session()
        team.judge_all_scenarios(session.id)

        assert team.reach_consensus(session.id).recommendation == "SHIP"

    def test_nothing_executed_gives_zero_pass_rate(self, team):
        session = team.start_session()

        verdict = team.reach_consensus(session.id)

        assert verdict.pass_rate == 0
        assert verdict.overall_score == 0
        assert verdict.recommendation == "IMPROVE"

    def test_completed_session_rejects_second_consensus(self, team):
        session = team.start_session()
        team.reach_consensus(session.id)

        with pytest.raises(JudgeSessionClosed):
            team.reach_consensus(session.id)

    @pytest.mark.asyncio
    async def test_execute_runs_full_judgement(self, team, engine):
        await run_scenarios(engine, (make_scenario("A"), "hi", False))

        result = await team.execute({})

        assert result["session_id"] == "judge_1"
        assert result["verdict"].recommendation == "SHIP"


class TestReport:

    def test_report_without_session(self, team):
        report = team.export_report()

        assert report.session_id == "none"
        assert report.verdict is None
        assert len(report.judges) == 5

    @pytest.mark.asyncio
    async def test_report_reflects_latest_session(self, team, engine):
        await run_scenarios(engine, (make_scenario("A"), "hi", False))
        team.run_integration_checks()
        first = team.start_session()
        team.judge_all_scenarios(first.id)
        team.reach_consensus(first.id)
        team.start_session()

        report = team.export_report()

        assert report.session_id == "judge_2"
        assert report.verdict is None
        assert len(report.integration_checks) == 5

    @pytest.mark.asyncio
    async def test_report_is_a_snapshot(self, team, engine):
        await run_scenarios(engine, (make_scenario("A"), "hi", False))
        session = team.start_session()
        team.judge_all_scenarios(session.id)
        team.reach_consensus(session.id)

        report = team.export_report()
        report.verdict.recommendation = "BLOCK"

        assert team.get_session(session.id).final_verdict.recommendation == "SHIP"


class TestSessionIntegrity:

    @pytest.mark.asyncio
    async def test_completed_session_rejects_more_judging(self, team, engine):
        await run_scenarios(engine, (make_scenario("A"), "hi", False))
        session = team.start_session()
        team.judge_all_scenarios(session.id)
        team.reach_consensus(session.id)

        with pytest.raises(JudgeSessionClosed):
            team.judge_all_scenarios(session.id)

        assert session.scenarios_judged == ["A"]

    @pytest.mark.asyncio
    async def test_judging_twice_does_not_duplicate_ids(self, team, engine):
        await run_scenarios(engine, (make_scenario("A"), "hi", False))
        session = team.start_session()

        team.judge_all_scenarios(session.id)
        team.judge_all_scenarios(session.id)

        assert session.scenarios_judged == ["A"]

    @pytest.mark.asyncio
    async def test_errored_rerun_is_not_judged_from_earlier_run(self, team, engine):
        await run_scenarios(engine, (make_scenario("A"), "hi", False))
        first = team.start_session()
        team.judge_all_scenarios(first.id)

        async def executor(session_id, text):
            raise RuntimeError("runtime down")

        with pytest.raises(RuntimeError):
            await engine.run_simulation("A", executor)
        session = team.start_session()
        team.judge_all_scenarios(session.id)
        verdict = team.reach_consensus(session.id)

        assert engine.get_scenario("A").status == "error"
        assert session.scenarios_judged == []
        assert engine.get_verdicts() == []
        assert verdict.overall_score == 0
        assert verdict.pass_rate == 0
