"""CLI entry point.

Usage:
    python -m time_tracker add --date 2026-01-29 --project "Client A" \
        --hours 7.5 --description "Sprint planning"
    python -m time_tracker list --year 2026 --month 01
    python -m time_tracker delete 3
    python -m time_tracker export --out History.xlsx --json History.json

The store is taken from TIME_TRACKER_DATABASE_URL (default: sqlite:///time_tracker.db).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from time_tracker.config import configure_logging, load_settings
from time_tracker.models import MAX_HOURS_PER_DAY, History, Project, TimeTrackerError
from time_tracker.service import EntryService
from time_tracker.storage import create_store

app = typer.Typer(help="Log daily work hours and review the history.", no_args_is_help=True)


def _service() -> EntryService:
    settings = load_settings()
    configure_logging(settings.log_level)
    return EntryService(create_store(settings.database_url))


def _fail(e: TimeTrackerError) -> None:
    for error in e.errors:
        typer.echo(f"ERROR: {error}", err=True)
    raise typer.Exit(1)


@app.command()
def add(
    date: str = typer.Option(..., "--date", help="Day worked, YYYY-MM-DD"),
    project: str = typer.Option(..., "--project", help="One of: " + ", ".join(Project.labels())),
    hours: float = typer.Option(..., "--hours", help="Hours worked, e.g. 1.5"),
    description: str = typer.Option(..., "--description", help="What you worked on"),
) -> None:
    """Log a new time entry."""
    service = _service()
    try:
        entry = service.create_entry({
            "date": date,
            "project": project,
            "hours": hours,
            "description": description,
        })
    except TimeTrackerError as e:
        _fail(e)

    typer.echo(
        f"Saved entry #{entry.id}: {entry.day.isoformat()} {entry.project.value} {entry.hours}h"
    )
    typer.echo(f"  Remaining for {entry.day.isoformat()}: {service.remaining_hours(entry.day)}h")


@app.command("list")
def list_entries(
    year: Optional[int] = typer.Option(None, "--year", help="Filter by year (with --month)"),
    month: Optional[str] = typer.Option(None, "--month", help="Filter by two-digit month (with --year)"),
) -> None:
    """Show entries grouped by day with per-day and grand totals."""
    service = _service()
    try:
        history = service.history(year, month)
    except TimeTrackerError as e:
        _fail(e)
    _echo_history(history)


@app.command()
def delete(entry_id: str = typer.Argument(..., help="Id of the entry to delete")) -> None:
    """Delete an entry by id."""
    try:
        _service().delete_entry(entry_id)
    except TimeTrackerError as e:
        _fail(e)
    typer.echo(f"Deleted entry #{entry_id}")


@app.command()
def projects() -> None:
    """List the projects entries can be logged against."""
    for label in Project.labels():
        typer.echo(label)
    typer.echo(f"\nMax hours per day: {MAX_HOURS_PER_DAY}")


@app.command()
def export(
    out: str = typer.Option("History.xlsx", "--out", help="Output Excel file path"),
    json_out: Optional[str] = typer.Option(None, "--json", help="Also write the history as JSON"),
    year: Optional[int] = typer.Option(None, "--year"),
    month: Optional[str] = typer.Option(None, "--month"),
) -> None:
    """Export the (optionally month-filtered) history to Excel and JSON."""
    from time_tracker.excel import generate_history_workbook
    from time_tracker.report import write_history_json

    service = _service()
    try:
        history = service.history(year, month)
    except TimeTrackerError as e:
        _fail(e)

    path = generate_history_workbook(history, Path(out))
    typer.echo(f"Excel report saved to: {path}")
    if json_out:
        json_path = write_history_json(history, Path(json_out))
        typer.echo(f"JSON history saved to: {json_path}")


def _echo_history(history: History) -> None:
    if not history.buckets:
        typer.echo("No entries yet.")
        return

    for bucket in history.buckets:
        typer.echo(f"{bucket.date.isoformat()}  total {bucket.total:.2f}h")
        for entry in bucket.entries:
            typer.echo(
                f"  #{entry.id:<4} {entry.project.value:<22} {entry.hours:>6.2f}h  {entry.description}"
            )
    typer.echo(f"\nGrand total: {history.grand_total:.2f}h")


if __name__ == "__main__":
    app()
