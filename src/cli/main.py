"""
Typer CLI for the SkillNet progress engine.

Commands:
    skillnet record KIND            - Record one learning activity
    skillnet progress               - Show XP, streak, heatmap and insights
    skillnet history                - Show recently recorded activities
    skillnet reset                  - Wipe progress for a roadmap
    skillnet catalog                - Show milestone thresholds
    skillnet tests list             - List checkpoint tests
    skillnet tests evaluate ID JSON - Grade a checkpoint submission
    skillnet diagnostic list        - List diagnostics
    skillnet diagnostic run DOMAIN JSON - Score a diagnostic and build a learning plan

Usage:
    skillnet record lesson_completed --user u1 --roadmap web --xp 50 --minutes 30
    skillnet progress --user u1 --roadmap web
    skillnet tests evaluate css-layout-mcq '{"answers": {"1": 1, "2": 2, "3": 1}}' --user u1 --roadmap web
    skillnet diagnostic run programming answers.json
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, NoReturn

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import Settings, get_settings
from src.assessment.base import EvaluationResult, parse_submission
from src.assessment.evaluator import CheckpointEvaluator
from src.assessment.feedback import next_steps
from src.core.errors import EngineError, ValidationError
from src.core.models import ProgressRecord, parse_event
from src.delivery.progress_service import ProgressService
from src.delivery.progress_store import SQLiteProgressStore
from src.diagnostic.engine import DiagnosticEngine
from src.diagnostic.models import LearningPlan
from src.gamification.catalog import CATALOG_VERSION, THRESHOLDS
from src.gamification.heatmap import MAX_INTENSITY
from src.gamification.milestones import Milestone
from src.gamification.progress import ProgressTracker

app = typer.Typer(
    help="SkillNet CLI: learner progress, checkpoint tests and diagnostics",
    no_args_is_help=True,
)
tests_app = typer.Typer(help="Checkpoint tests", no_args_is_help=True)
diagnostic_app = typer.Typer(help="Diagnostic assessments", no_args_is_help=True)
app.add_typer(tests_app, name="tests")
app.add_typer(diagnostic_app, name="diagnostic")

console = Console()

HEAT_GLYPHS = ["·", "░", "▒", "▓", "█"]


# ========================================
# Context Builder (Dependency Injection)
# ========================================


class CLIContext:
    """
    Dependency injection container for CLI commands.

    Lazily builds the store and engines from settings.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._store: SQLiteProgressStore | None = None
        self._service: ProgressService | None = None
        self._evaluator: CheckpointEvaluator | None = None
        self._diagnostics: DiagnosticEngine | None = None

    @property
    def store(self) -> SQLiteProgressStore:
        if self._store is None:
            self._store = SQLiteProgressStore(self.settings.progress_db_path)
        return self._store

    @property
    def service(self) -> ProgressService:
        if self._service is None:
            tracker = ProgressTracker(
                retention_days=self.settings.heatmap_retention_days,
                max_intensity=self.settings.max_heatmap_intensity,
            )
            self._service = ProgressService(self.store, tracker=tracker)
        return self._service

    @property
    def evaluator(self) -> CheckpointEvaluator:
        if self._evaluator is None:
            self._evaluator = CheckpointEvaluator(default_passing_score=self.settings.default_passing_score)
        return self._evaluator

    @property
    def diagnostics(self) -> DiagnosticEngine:
        if self._diagnostics is None:
            self._diagnostics = DiagnosticEngine(
                skip_ahead_hours=self.settings.skip_ahead_hours,
                min_step_hours=self.settings.min_step_hours,
                focus_steps=self.settings.focus_roadmap_steps,
                focus_weeks=self.settings.focus_roadmap_weeks,
            )
        return self._diagnostics

    def close(self) -> None:
        if self._store is not None:
            self._store.close()


def configure_logging(settings: Settings) -> None:
    """Route loguru to stderr (and optionally a rotating file)."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB", retention=5)


def _fail(exc: EngineError) -> NoReturn:
    rprint(f"[red]✗[/red] {exc.message}")
    for detail in exc.details:
        rprint(f"  [dim]-[/dim] {detail}")
    raise typer.Exit(code=1)


def _load_json(source: str) -> dict[str, Any]:
    """Read a JSON object from a file path or an inline string."""
    try:
        text = source if source.lstrip().startswith("{") else Path(source).read_text(encoding="utf-8")
        data = json.loads(text)
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError("Could not read JSON input", [str(e)]) from e
    if not isinstance(data, dict):
        raise ValidationError("JSON input must be an object")
    return data


# ========================================
# Rendering
# ========================================


def _print_milestones(milestones: list[Milestone]) -> None:
    for m in milestones:
        console.print(Panel(
            f"{m.emoji}  [bold]{m.title}[/bold]\n{m.description}",
            title=f"[yellow]Milestone: {m.category.value}[/yellow]",
            border_style="yellow",
            expand=False,
        ))


def _print_record(record: ProgressRecord) -> None:
    table = Table(title=f"Progress: {record.user_id} / {record.roadmap_id}", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="bold")
    table.add_row("Total XP", str(record.total_xp))
    table.add_row("Current streak", f"{record.current_streak} day(s)")
    table.add_row("Longest streak", f"{record.longest_streak} day(s)")
    table.add_row("Badges", ", ".join(sorted(record.badges)) or "-")
    table.add_row("Completed steps", str(len(record.completed_steps)))
    table.add_row("Roadmaps completed", str(record.completed_roadmaps))
    average = record.average_test_score
    table.add_row("Average test score", f"{average:.1f}%" if average is not None else "-")
    console.print(table)


def _print_evaluation(result: EvaluationResult) -> None:
    status = "[green]PASSED[/green]" if result.passed else "[red]NOT PASSED[/red]"
    console.print(Panel(
        f"{status}  {result.percentage:.1f}% (pass bar {result.passing_score:.0f}%)\n"
        f"[dim]tier:[/dim] {result.feedback.tier.value}\n{result.feedback.overall}",
        title=f"[bold]{result.test_id}[/bold] ({result.kind.value})",
        expand=False,
    ))

    table = Table(title="Breakdown")
    table.add_column("Unit", style="cyan")
    table.add_column("Result")
    table.add_column("Points", justify="right")
    for unit in result.breakdown:
        mark = "[green]✓[/green]" if unit.correct else "[red]✗[/red]"
        table.add_row(unit.unit_id, mark, f"{unit.points:g}/{unit.max_points:g}")
    console.print(table)

    if result.category_breakdown:
        for category, pct in result.category_breakdown.items():
            rprint(f"  {category}: {pct:.0f}%")
    for rec in result.feedback.recommendations:
        rprint(f"  [yellow]→[/yellow] [{rec.kind.value}] {rec.message}")
    for step in next_steps(result):
        rprint(f"  [cyan]•[/cyan] {step.title}: {step.description}")


def _print_plan(plan: LearningPlan) -> None:
    analysis = plan.analysis
    console.print(Panel(
        f"{analysis.total_score}/{analysis.max_score} ({analysis.percentage:.0f}%)\n"
        f"[dim]overall level:[/dim] {analysis.overall_level.value}\n"
        f"[dim]recommended path:[/dim] {analysis.recommended_path}",
        title=f"[bold]{analysis.diagnostic_id}[/bold]",
        expand=False,
    ))

    skills = Table(title="Skill Profile")
    skills.add_column("Skill", style="cyan")
    skills.add_column("Accuracy", justify="right")
    skills.add_column("Level")
    skills.add_column("Flag")
    for skill, a in analysis.skill_profile.items():
        flag = "[red]needs work[/red]" if a.needs_improvement else ("[green]strength[/green]" if a.strength else "")
        skills.add_row(skill, f"{a.accuracy:.0%}", a.level.value, flag)
    console.print(skills)

    roadmaps = Table(title=f"Personalized Roadmaps (~{plan.estimated_weeks} weeks)")
    roadmaps.add_column("Roadmap", style="cyan")
    roadmaps.add_column("Tier")
    roadmaps.add_column("Weeks", justify="right")
    roadmaps.add_column("Unlocked", justify="right")
    for r in plan.roadmaps:
        title = f"{r.title} [magenta](focus)[/magenta]" if r.is_focus_area else r.title
        roadmaps.add_row(title, r.tier.value, str(r.estimated_weeks), f"{len(r.available_steps)}/{len(r.steps)}")
    console.print(roadmaps)

    for rec in plan.recommendations:
        rprint(f"  [yellow]→[/yellow] {rec.title}: {rec.description}")
    for step in plan.next_steps:
        rprint(f"  [cyan]•[/cyan] {step.action.value} {step.skill} ({step.estimated_time})")


# ========================================
# Progress Commands
# ========================================


@app.callback()
def main_callback(ctx: typer.Context) -> None:
    """SkillNet learner progress engine."""
    settings = get_settings()
    configure_logging(settings)
    ctx.obj = CLIContext(settings)
    ctx.call_on_close(ctx.obj.close)


@app.command("record")
def record_activity(
    ctx: typer.Context,
    kind: str = typer.Argument(..., help="Activity kind, e.g. lesson_completed"),
    user: str = typer.Option(..., "--user", "-u", help="Learner id"),
    roadmap: str = typer.Option(..., "--roadmap", "-r", help="Roadmap id"),
    step: str | None = typer.Option(None, "--step", help="Roadmap step id"),
    xp: int = typer.Option(0, "--xp", help="XP earned"),
    score: float | None = typer.Option(None, "--score", help="Test score percentage"),
    badge: str | None = typer.Option(None, "--badge", help="Badge id earned"),
    minutes: int | None = typer.Option(None, "--minutes", help="Time spent in minutes"),
    on: str | None = typer.Option(None, "--date", help="Activity date (YYYY-MM-DD, default today)"),
) -> None:
    """Record one learning activity and show any milestones."""
    cli: CLIContext = ctx.obj
    try:
        event = parse_event({
            "kind": kind,
            "roadmap_id": roadmap,
            "step_id": step,
            "xp_earned": xp,
            "test_score": score,
            "badge_earned": badge,
            "time_spent_minutes": minutes,
            "occurred_on": on or cli.service.clock.today().isoformat(),
        })
        update = cli.service.record_activity(user, event)
    except EngineError as exc:
        _fail(exc)

    rprint(f"[green]✓[/green] {update.activity.tooltip}")
    rprint(f"  XP: [bold]{update.record.total_xp}[/bold]  Streak: [bold]{update.record.current_streak}[/bold]")
    _print_milestones(update.milestones)


@app.command("progress")
def show_progress(
    ctx: typer.Context,
    user: str = typer.Option(..., "--user", "-u", help="Learner id"),
    roadmap: str = typer.Option(..., "--roadmap", "-r", help="Roadmap id"),
    days: int = typer.Option(14, "--days", help="Heatmap days to show"),
) -> None:
    """Show XP, streak, recent heatmap, insights and next milestones."""
    cli: CLIContext = ctx.obj
    try:
        summary = cli.service.summary(user, roadmap, calendar_days=days)
    except EngineError as exc:
        _fail(exc)

    _print_record(summary.record)

    max_intensity = cli.settings.max_heatmap_intensity or MAX_INTENSITY
    cells = "".join(
        HEAT_GLYPHS[min(len(HEAT_GLYPHS) - 1, round(e.intensity * (len(HEAT_GLYPHS) - 1) / max_intensity))]
        for e in summary.calendar
    )
    rprint(f"\n[bold]Last {days} days[/bold]  {cells}")
    rprint(
        f"  week: {summary.recent.weekly_total} pts over {summary.recent.active_days} active day(s), "
        f"month: {summary.recent.monthly_total} pts"
    )

    if summary.insights:
        rprint("\n[bold]Insights[/bold]")
        for insight in summary.insights:
            rprint(f"  {insight.icon} [bold]{insight.title}[/bold] - {insight.message}")

    if summary.next_milestones:
        table = Table(title="Next Milestones")
        table.add_column("Milestone", style="cyan")
        table.add_column("Progress", justify="right")
        table.add_column("Remaining", justify="right")
        for p in summary.next_milestones:
            table.add_row(f"{p.emoji} {p.title}", f"{p.progress:.0%}", f"{p.remaining} {p.category.value}")
        console.print(table)


@app.command("history")
def show_history(
    ctx: typer.Context,
    user: str = typer.Option(..., "--user", "-u", help="Learner id"),
    roadmap: str = typer.Option(..., "--roadmap", "-r", help="Roadmap id"),
    limit: int = typer.Option(20, "--limit", "-l", help="Max entries"),
) -> None:
    """Show recently recorded activities."""
    cli: CLIContext = ctx.obj
    entries = cli.store.history(user, roadmap, limit=limit)
    if not entries:
        rprint("[yellow]⚠[/yellow] No activity recorded yet")
        return

    table = Table(title=f"Activity: {user} / {roadmap}")
    table.add_column("Date", style="dim")
    table.add_column("Kind", style="cyan")
    table.add_column("XP", justify="right")
    table.add_column("Details")
    for entry in entries:
        table.add_row(entry.activity_date.isoformat(), entry.kind, str(entry.xp_earned), entry.tooltip)
    console.print(table)


@app.command("reset")
def reset_progress(
    ctx: typer.Context,
    user: str = typer.Option(..., "--user", "-u", help="Learner id"),
    roadmap: str = typer.Option(..., "--roadmap", "-r", help="Roadmap id"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Wipe progress for a roadmap."""
    cli: CLIContext = ctx.obj
    if not force and not typer.confirm(f"Reset all progress for {user}/{roadmap}?"):
        rprint("[yellow]Cancelled[/yellow]")
        raise typer.Exit(code=0)
    cli.service.reset(user, roadmap)
    rprint(f"[green]✓[/green] Progress reset for {user}/{roadmap}")


@app.command("catalog")
def show_catalog() -> None:
    """Show milestone thresholds."""
    table = Table(title=f"Milestone Catalog (v{CATALOG_VERSION})")
    table.add_column("Category", style="cyan")
    table.add_column("Threshold", justify="right")
    table.add_column("Milestone")
    for category, thresholds in THRESHOLDS.items():
        for t in thresholds:
            table.add_row(category.value, str(t.threshold), f"{t.emoji} {t.title}")
    console.print(table)


# ========================================
# Checkpoint Test Commands
# ========================================


@tests_app.command("list")
def list_tests(
    ctx: typer.Context,
    kind: str | None = typer.Option(None, "--kind", "-k", help="Filter by kind (mcq, coding, project)"),
) -> None:
    """List checkpoint tests."""
    cli: CLIContext = ctx.obj
    try:
        tests = cli.evaluator.tests_by_kind(kind) if kind else cli.evaluator.tests
    except ValueError:
        rprint(f"[red]✗[/red] Unknown test kind: {kind}")
        raise typer.Exit(code=1)

    table = Table(title="Checkpoint Tests")
    table.add_column("ID", style="cyan")
    table.add_column("Kind")
    table.add_column("Title")
    table.add_column("Units", justify="right")
    table.add_column("Pass", justify="right")
    for test in tests:
        table.add_row(test.id, test.kind.value, test.title, str(len(test.units)), f"{test.passing_score:.0f}%")
    console.print(table)


@tests_app.command("evaluate")
def evaluate_test(
    ctx: typer.Context,
    test_id: str = typer.Argument(..., help="Checkpoint test id"),
    submission: str = typer.Argument(..., help="Submission JSON (file path or inline)"),
    user: str | None = typer.Option(None, "--user", "-u", help="Record the result for this learner"),
    roadmap: str | None = typer.Option(None, "--roadmap", "-r", help="Roadmap to record against"),
    step: str | None = typer.Option(None, "--step", help="Roadmap step id"),
) -> None:
    """Grade a checkpoint submission (and optionally record it)."""
    cli: CLIContext = ctx.obj
    try:
        payload = _load_json(submission)
        payload.setdefault("test_id", test_id)
        result = cli.evaluator.evaluate_by_id(test_id, parse_submission(payload))
        _print_evaluation(result)
        if user and roadmap:
            update = cli.service.record_evaluation(user, result, roadmap, step)
            if update is not None:
                rprint(f"[green]✓[/green] Recorded: {update.activity.tooltip}")
                _print_milestones(update.milestones)
    except EngineError as exc:
        _fail(exc)


# ========================================
# Diagnostic Commands
# ========================================


@diagnostic_app.command("list")
def list_diagnostics(ctx: typer.Context) -> None:
    """List diagnostics."""
    cli: CLIContext = ctx.obj
    table = Table(title="Diagnostics")
    table.add_column("ID", style="cyan")
    table.add_column("Domain")
    table.add_column("Title")
    table.add_column("Questions", justify="right")
    for d in cli.diagnostics.diagnostics:
        table.add_row(d.id, d.domain, d.title, str(len(d.questions)))
    console.print(table)


@diagnostic_app.command("run")
def run_diagnostic(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Diagnostic id or domain"),
    answers: str = typer.Argument(..., help="Answers JSON {question_id: option_index} (file path or inline)"),
    user: str | None = typer.Option(None, "--user", "-u", help="Record completion for this learner"),
    roadmap: str | None = typer.Option(None, "--roadmap", "-r", help="Roadmap to record against"),
    as_json: bool = typer.Option(False, "--json", help="Print the analysis as JSON"),
) -> None:
    """Score a diagnostic and build a personalized learning plan."""
    cli: CLIContext = ctx.obj
    try:
        analysis = cli.diagnostics.score_by_id(domain, _load_json(answers))
        plan = cli.diagnostics.build_learning_plan(analysis)
        if user and roadmap:
            cli.service.record_diagnostic(user, analysis, roadmap)
    except EngineError as exc:
        _fail(exc)

    if as_json:
        print(json.dumps({
            "analysis": analysis.to_dict(),
            "roadmaps": [r.to_dict() for r in plan.roadmaps],
            "estimated_weeks": plan.estimated_weeks,
        }, indent=2))
        return
    _print_plan(plan)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
