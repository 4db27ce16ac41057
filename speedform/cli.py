"""Speed & Form command line.

Developer CLI over the same AppController a UI would drive: sign in, look at
the roster and weeks, log measurements, complete a week, export CSV.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from speedform.athletes.models import hrv_band_label
from speedform.athletes.repository import AthleteNotFound
from speedform.core.logger import setup_logger
from speedform.state.controller import AppController
from speedform.storage.base import Storage
from speedform.storage.errors import StorageFailure
from speedform.storage.postgrest import get_storage
from speedform.users.errors import AuthenticationFailed
from speedform.weeks.errors import (
    InvalidField,
    MissingRequiredFields,
    NoActiveWeek,
    PermissionDenied,
    WeekInvariantError,
    WeekLocked,
    WeekNotFound,
)

console = Console()

app = typer.Typer(
    name="speedform",
    help="Speed & Form - weekly training tracker",
    add_completion=False,
)

DOMAIN_ERRORS = (
    AuthenticationFailed,
    PermissionDenied,
    InvalidField,
    MissingRequiredFields,
    NoActiveWeek,
    WeekLocked,
    WeekNotFound,
    WeekInvariantError,
    AthleteNotFound,
    StorageFailure,
)

EmailOption = typer.Option(..., "--email", "-e", envvar="SPEEDFORM_EMAIL", help="Login email")
PasswordOption = typer.Option(
    ..., "--password", "-p", envvar="SPEEDFORM_PASSWORD", prompt=True, hide_input=True, help="Login password"
)


def _storage() -> Storage:
    return get_storage()


def _parse_id(value: str) -> int | str:
    return int(value) if value.isdigit() else value


@contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except DOMAIN_ERRORS as e:
        console.print(Panel(Text(str(e), style="bold red"), title=type(e).__name__, border_style="red"))
        raise typer.Exit(1) from e


def _signed_in(email: str, password: str) -> AppController:
    controller = AppController(_storage())
    controller.sign_in(email, password)
    return controller


def _open_athlete(controller: AppController, athlete_id: str) -> None:
    target = _parse_id(athlete_id)
    user = controller.state.current_user
    if user is not None and user.is_coach:
        controller.select_athlete(target)
    elif user is None or user.athlete_id != target:
        logger.warning(f"Not allowed to view athlete {athlete_id}")
        raise PermissionDenied(f"Not allowed to view athlete {athlete_id}")


def _fmt(value: object) -> str:
    return "" if value is None else str(value)


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")) -> None:
    setup_logger(level="DEBUG" if debug else None)


@app.command()
def roster(email: str = EmailOption, password: str = PasswordOption) -> None:
    """List athletes with their VO2 progress (coach)."""
    with _handle_errors():
        controller = _signed_in(email, password)
        athletes = controller.load_roster()

    table = Table(title="Roster")
    for column in ("ID", "Name", "Current VO2", "Target VO2", "Progress", "Public"):
        table.add_column(column)
    for athlete in athletes:
        progress = controller.progress_for(athlete)
        table.add_row(
            _fmt(athlete.id),
            athlete.name,
            _fmt(athlete.current_vo2),
            _fmt(athlete.target_vo2),
            f"{progress}%" if progress is not None else "-",
            "yes" if athlete.is_public else "no",
        )
    console.print(table)


@app.command()
def weeks(
    athlete_id: str = typer.Argument(..., help="Athlete ID"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Show an athlete's weeks, creating the active week if missing."""
    with _handle_errors():
        controller = _signed_in(email, password)
        _open_athlete(controller, athlete_id)
        collection = controller.state.require_weeks()

    athlete = controller.state.selected_athlete
    table = Table(title=f"Weeks for athlete {athlete_id}")
    for column in ("Week", "Dates", "Status", "VO2", "Resting HR", "HRV", "Volume"):
        table.add_column(column)
    for week in collection:
        hrv = _fmt(week.hrv)
        band = hrv_band_label(athlete, week.hrv) if athlete is not None else None
        if band:
            hrv = f"{hrv} ({band})"
        table.add_row(
            str(week.sequence),
            week.date_range,
            week.status.value,
            _fmt(week.vo2_max),
            _fmt(week.resting_hr),
            hrv,
            _fmt(week.total_volume),
        )
    console.print(table)


@app.command("set")
def set_measurement(
    athlete_id: str = typer.Argument(..., help="Athlete ID"),
    field: str = typer.Argument(..., help="Measurement field, e.g. vo2_max"),
    value: str = typer.Argument(..., help="New value (empty string clears a number)"),
    week: int | None = typer.Option(None, "--week", "-w", help="Week number (default: active week)"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Set one measurement on a week."""
    with _handle_errors():
        controller = _signed_in(email, password)
        _open_athlete(controller, athlete_id)
        collection = controller.state.require_weeks()
        if week is None:
            updated = controller.update_active_measurement(field, value)
        else:
            match = next((w for w in collection if w.sequence == week), None)
            if match is None:
                raise WeekNotFound(f"Week {week} not found for athlete {athlete_id}")
            updated = controller.update_measurement(match.id, field, value)

    console.print(f"[green]Week {updated.sequence}[/green]: {field} = {_fmt(getattr(updated, field))}")


@app.command()
def check(
    athlete_id: str = typer.Argument(..., help="Athlete ID"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Check whether the active week can be completed."""
    with _handle_errors():
        controller = _signed_in(email, password)
        _open_athlete(controller, athlete_id)
        result = controller.validate_active_week()

    if not result.valid:
        console.print(f"[red]Missing:[/red] {', '.join(result.missing)}")
        raise typer.Exit(1)
    console.print("[green]Ready to complete[/green]")
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


@app.command()
def complete(
    athlete_id: str = typer.Argument(..., help="Athlete ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Complete without confirming warnings"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Complete the active week and start the next one."""
    with _handle_errors():
        controller = _signed_in(email, password)
        _open_athlete(controller, athlete_id)
        result = controller.validate_active_week()
        if not result.valid:
            raise MissingRequiredFields(result.missing)
        for warning in result.warnings:
            console.print(f"[yellow]Warning:[/yellow] {warning}")
        if result.warnings and not yes and not typer.confirm("Complete this week anyway?"):
            logger.info("Week completion cancelled by user")
            raise typer.Exit(0)
        outcome = controller.complete_active_week()

    console.print(
        f"[green]Week {outcome.completed_week.sequence} completed.[/green] "
        f"Week {outcome.next_week.sequence} is now active ({outcome.next_week.date_range})."
    )


@app.command()
def export(
    athlete_id: str = typer.Argument(..., help="Athlete ID"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output path (default: <slug>_data.csv)"),
    email: str = EmailOption,
    password: str = PasswordOption,
) -> None:
    """Export an athlete's weeks as CSV."""
    with _handle_errors():
        controller = _signed_in(email, password)
        _open_athlete(controller, athlete_id)
        filename, content = controller.export_csv()

    path = output or Path(filename)
    path.write_text(content, encoding="utf-8")
    console.print(f"Wrote {path}")


if __name__ == "__main__":
    app()
