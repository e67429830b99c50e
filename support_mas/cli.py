"""
CLI entry point - run the simulation and judge loop in-process

`simulate` exits 1 only on BLOCK; `--strict` applies the /judge/gate rule
(anything but SHIP fails).
"""
import asyncio
import json
import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import settings
from .context import HarnessContext
from .models.judge import ConsensusVerdict
from .simulation.scenarios import get_all_scenarios, get_scenarios_by_category
from .utils.helpers import format_duration

app = typer.Typer(help="Support MAS self-simulation and judge gate")
console = Console()

STATUS_ICONS = {"passed": "[green]✓[/]", "failed": "[red]✗[/]"}


def exit_code_for(recommendation: str, strict: bool = False) -> int:
    """Exit status for a recommendation: BLOCK fails, and with strict anything but SHIP."""
    if strict:
        return 0 if recommendation == "SHIP" else 1
    return 1 if recommendation == "BLOCK" else 0


@app.command()
def simulate(
    strict: bool = typer.Option(False, "--strict", help="Fail unless the recommendation is SHIP"),
    provider: Optional[str] = typer.Option(None, "--provider", help="LLM provider: scripted or ollama"),
    save_report: bool = typer.Option(False, "--save-report", help="Write the judge report to REPORTS_DIR"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Register, run and judge every built-in scenario."""
    logging.basicConfig(level=logging.DEBUG if verbose else settings.LOG_LEVEL)

    run_settings = settings.model_copy(update={"LLM_PROVIDER": provider}) if provider else settings
    ctx = HarnessContext(settings=run_settings)

    console.print(Panel.fit("Self-Simulation Loop", style="bold cyan"))
    registered = ctx.register_builtin_scenarios()
    console.print(f"→ Registered {registered} scenarios")

    console.print("→ Running simulations...")
    asyncio.run(ctx.run_all())
    _print_results(ctx)

    console.print("→ Running judge session...")
    session = ctx.judge_team.start_session()
    ctx.judge_team.run_integration_checks()
    ctx.judge_team.judge_all_scenarios(session.id)
    verdict = ctx.judge_team.reach_consensus(session.id)
    _print_verdict(verdict)

    if save_report:
        run_settings.REPORTS_DIR.mkdir(parents=True, exist_ok=True)
        report_path = run_settings.REPORTS_DIR / f"{session.id}_report.json"
        report_path.write_text(
            json.dumps(ctx.judge_team.export_report().model_dump(mode="json", by_alias=True), indent=2),
            encoding="utf-8"
        )
        console.print(f"→ Report written to {report_path}")

    raise typer.Exit(code=exit_code_for(verdict.recommendation, strict=strict))


@app.command()
def scenarios(
    category: Optional[str] = typer.Argument(None, help="order, subscription, refund, escalation, product, multi-turn or edge"),
):
    """List built-in scenarios."""
    selected = get_scenarios_by_category(category) if category else get_all_scenarios()

    table = Table(title="Scenarios")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Turns", justify="right")
    table.add_column("Escalates", justify="center")

    for scenario in selected:
        table.add_row(
            scenario.id,
            scenario.name,
            str(len(scenario.inputs)),
            "yes" if scenario.expected_outcome.escalated else "no"
        )
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Serve the simulation and judge API."""
    import uvicorn

    logging.basicConfig(level=settings.LOG_LEVEL)
    uvicorn.run("support_mas.main:app", host=host, port=port)


def _print_results(ctx: HarnessContext):
    table = Table(title="Simulation Results")
    table.add_column("", justify="center")
    table.add_column("Scenario", style="cyan")
    table.add_column("Status")
    table.add_column("Score", justify="right")
    table.add_column("Duration", justify="right")

    statuses: List[str] = []
    for scenario in ctx.engine.get_scenarios():
        timeline = ctx.engine.get_timeline(scenario.id)
        score = str(timeline.final_state.quality_score) if timeline else "-"
        statuses.append(scenario.status)
        duration = format_duration(scenario.duration) if scenario.duration is not None else "-"
        table.add_row(STATUS_ICONS.get(scenario.status, "?"), scenario.id, scenario.status, score, duration)

    console.print(table)
    console.print(
        f"Total: {len(statuses)} | Passed: {statuses.count('passed')} | Failed: {statuses.count('failed')}"
    )


def _print_verdict(verdict: ConsensusVerdict):
    style = {"SHIP": "green", "IMPROVE": "yellow", "BLOCK": "red"}[verdict.recommendation]
    lines = [
        f"Recommendation: [bold {style}]{verdict.recommendation}[/]",
        f"Overall Score: {verdict.overall_score}",
        f"Pass Rate: {verdict.pass_rate:.1f}%",
    ]

    if verdict.critical_issues:
        lines.append("\nCritical Issues:")
        lines.extend(
            f"  - {i.severity.upper()}: {i.description} ({', '.join(i.affected_scenarios)})"
            for i in verdict.critical_issues
        )

    if verdict.improvement_areas:
        lines.append("\nImprovement Areas:")
        lines.extend(f"  - {a.area}: {a.current_score} → {a.target_score}" for a in verdict.improvement_areas)

    console.print(Panel("\n".join(lines), title="Judge Verdict"))


if __name__ == "__main__":
    app()
