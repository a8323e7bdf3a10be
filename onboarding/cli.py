"""Command-line front end for the onboarding simulator, built on Typer.

Usage:
    onboarding personas
    onboarding content p1
    onboarding grade "Stop eating solid food 6 hours before."
    onboarding demo --persona p1 --complete t1 --answer q1=1 --answer q2=2 --answer q3=1
    onboarding export-config --output onboarding-config.json --no-reminders
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from onboarding.exceptions import OnboardingError
from onboarding.logging import configure_logging, get_logger, log_exception
from onboarding.settings import Settings, get_settings

app = typer.Typer(
    name="onboarding",
    help="Digital patient onboarding: personas, tasks, quiz, dashboard and audit log",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()
logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from onboarding import __version__

        console.print(f"[bold blue]onboarding[/] version [green]{__version__}[/]")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-v", help="Show version and exit", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-V", help="Enable debug logging")] = False,
) -> None:
    """Digital Patient Onboarding prototype."""
    settings = get_settings()
    level = "DEBUG" if verbose else settings.app.log_level.value
    configure_logging(level=level, json_output=settings.app.json_logs)


def _apply_toggles(
    settings: Settings,
    grade_target: bool | None,
    reminders: bool | None,
    multilingual: bool | None,
) -> Settings:
    toggles = {
        name: value
        for name, value in (
            ("require_grade_target", grade_target),
            ("auto_reminders", reminders),
            ("multilingual", multilingual),
        )
        if value is not None
    }
    return settings.with_features(**toggles) if toggles else settings


def _parse_answers(values: list[str]) -> dict[str, int]:
    answers: dict[str, int] = {}
    for value in values:
        question_id, sep, index = value.partition("=")
        if not sep or not question_id or not index.strip().isdigit():
            raise typer.BadParameter(f"Expected QUESTION=INDEX, got {value!r}", param_hint="--answer")
        answers[question_id.strip()] = int(index)
    return answers


@app.command()
def personas() -> None:
    """List the simulated patient personas."""
    from onboarding.catalog import default_catalog

    table = Table(title="Personas")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Age", justify="right")
    table.add_column("Language")
    table.add_column("Literacy")
    table.add_column("Tech")
    table.add_column("Risk", justify="right")

    for p in default_catalog().personas:
        table.add_row(p.id, p.name, str(p.age), p.language_label, p.literacy.value, p.tech_access.value, str(p.risk))

    console.print(table)


@app.command()
def content(
    persona_id: Annotated[str, typer.Argument(help="Persona identifier, e.g. p1")],
    grade_target: Annotated[
        Optional[bool], typer.Option("--grade-target/--no-grade-target", help="Enforce the reading grade target")
    ] = None,
) -> None:
    """Show the instructional text a persona receives and its reading grade."""
    from onboarding.session import OnboardingSession

    settings = _apply_toggles(get_settings(), grade_target, None, None)
    try:
        view = OnboardingSession(settings=settings).content_for(persona_id)
    except OnboardingError as e:
        log_exception(logger, e)
        console.print(f"[bold red]Error:[/] {e.message}")
        raise typer.Exit(code=1)

    if view.target_grade is None:
        status = ""
    elif view.meets_target:
        status = f" [green]Meets <= {view.target_grade}[/]"
    else:
        status = f" [red]> {view.target_grade}, revise[/]"
    console.print(Panel(view.text, title=f"Instructional text ({view.variant.value})"))
    console.print(f"Estimated reading grade: [bold]{view.grade}[/]{status}")


@app.command()
def grade(
    text: Annotated[str, typer.Argument(help="Text to estimate")],
) -> None:
    """Estimate the reading grade of a piece of text."""
    from onboarding.readability import estimate_grade_level

    console.print(estimate_grade_level(text))


@app.command()
def demo(
    persona_id: Annotated[str, typer.Option("--persona", "-p", help="Persona to act as")] = "p1",
    complete: Annotated[
        Optional[list[str]], typer.Option("--complete", "-c", help="Task id to complete (repeatable)")
    ] = None,
    answer: Annotated[
        Optional[list[str]], typer.Option("--answer", "-a", help="Quiz answer as QUESTION=INDEX (repeatable)")
    ] = None,
    reminders: Annotated[
        Optional[bool], typer.Option("--reminders/--no-reminders", help="Send automatic reminders")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the audit log as JSON")] = False,
) -> None:
    """Run a scripted session, then print the dashboard and the audit log."""
    from onboarding.metrics import summarize_dashboard
    from onboarding.session import OnboardingSession

    settings = _apply_toggles(get_settings(), None, reminders, None)
    answers = _parse_answers(answer or [])
    session = OnboardingSession(settings=settings)

    try:
        for task_id in complete or []:
            session.complete_task(persona_id, task_id)
        if answers:
            result = session.submit_quiz(persona_id, answers)
            flag = "[red]needs support[/]" if result.comprehension_flag else "[green]ok[/]"
            console.print(f"Quiz score: [bold]{result.score}[/]/100 ({flag})")
    except OnboardingError as e:
        log_exception(logger, e)
        console.print(f"[bold red]Error:[/] {e.message}")
        raise typer.Exit(code=1)

    rows = session.dashboard()
    table = Table(title="Adherence & Comprehension Overview")
    table.add_column("Patient", style="bold")
    table.add_column("Adherence %", justify="right")
    table.add_column("Comprehension %", justify="right")
    table.add_column("Risk flags", justify="right")
    for row in rows:
        flags = f"[yellow]{row.risk_flags} flag(s)[/]" if row.flagged else "[green]OK[/]"
        table.add_row(row.name, str(row.adherence), str(row.comprehension), flags)
    console.print(table)

    summary = summarize_dashboard(rows)
    console.print(
        f"Mean adherence [bold]{summary.mean_adherence}[/]% · "
        f"mean comprehension [bold]{summary.mean_comprehension}[/]% · "
        f"{summary.flagged_personas}/{summary.personas} flagged"
    )

    if as_json:
        console.print_json(json.dumps(session.audit_log.to_list(), ensure_ascii=False))
        return

    if not session.audit_log:
        console.print("No events yet. Complete a task or submit a quiz to generate entries.")
        return
    for event in session.audit_log:
        console.print(
            Panel(
                json.dumps(event.to_dict()["payload"], indent=2, ensure_ascii=False),
                title=f"{event.when.isoformat()} · {event.type.value}",
                title_align="left",
            )
        )


@app.command("export-config")
def export_config_command(
    output: Annotated[Path, typer.Option("--output", "-o", help="Where to write the JSON document")] = Path(
        "onboarding-config.json"
    ),
    grade_target: Annotated[
        Optional[bool], typer.Option("--grade-target/--no-grade-target", help="Target reading grade policy")
    ] = None,
    reminders: Annotated[
        Optional[bool], typer.Option("--reminders/--no-reminders", help="Messaging flow status")
    ] = None,
    multilingual: Annotated[
        Optional[bool], typer.Option("--multilingual/--no-multilingual", help="Multi-language content status")
    ] = None,
) -> None:
    """Export the integration configuration document."""
    from onboarding.config_export import export_config

    settings = _apply_toggles(get_settings(), grade_target, reminders, multilingual)
    try:
        path = export_config(settings, output)
    except OnboardingError as e:
        log_exception(logger, e)
        console.print(f"[bold red]Export failed:[/] {e.message}")
        raise typer.Exit(code=1)

    console.print(f"[bold green]✓[/] Config written to [cyan]{path}[/]")


if __name__ == "__main__":
    app()
