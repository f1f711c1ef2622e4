from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Optional

import typer

from cli import render
from cli.session import Session
from logging_config import configure_logging
from models.errors import (
    Co2InfoError,
    MalformedHeaderError,
    MalformedRecordError,
    SourceNotFoundError,
    SourceReadError,
)
from models.reports import ReportKind, build_report
from services.loader import build_default_loader
from settings import get_settings, is_log_level

app = typer.Typer(
    help="Explore CO2 readings recorded by a set of meters.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


def _fail(message: str, error: Co2InfoError) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=error.exit_code)


def _resolve_path(csv_path: Optional[Path]) -> Path:
    if csv_path is not None:
        return csv_path
    configured = get_settings().csv_path
    if configured:
        return Path(configured)
    return Path(typer.prompt("Enter input file name").strip())


@app.command()
def main(
    csv_path: Optional[Path] = typer.Argument(
        None,
        help="CSV file of meter readings (prompted for when omitted and CO2INFO_CSV_PATH is unset).",
    ),
    report: Optional[ReportKind] = typer.Option(
        None,
        "--report",
        "-r",
        case_sensitive=False,
        help="Print a single report and exit instead of opening the menu.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit the report as JSON (requires --report).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or WARNING).",
    ),
) -> None:
    """Load a meter CSV and query averages, unhealthy and broken readings."""
    if json_output and report is None:
        raise typer.BadParameter("--json requires --report.", param_hint="--json")
    if log_level is not None and not is_log_level(log_level):
        raise typer.BadParameter(f"Unknown logging level {log_level!r}.", param_hint="--log-level")

    configure_logging(log_level.strip().upper() if log_level else None)
    path = _resolve_path(csv_path)
    loader = build_default_loader()

    try:
        result = loader.load(path)
    except SourceNotFoundError as exc:
        _fail("Failed to load meters: File not found.", exc)
    except SourceReadError as exc:
        _fail("Failed to load meters: An I/O error occurred.", exc)
    except (MalformedHeaderError, MalformedRecordError) as exc:
        _fail(f"Failed to load meters: Malformed CSV ({exc}).", exc)

    database = result.database
    typer.echo(f"Successfully loaded {database.size()} meters.", err=json_output)

    if report is None:
        Session(database=database).run()
        return

    if json_output:
        render.render_report_json(build_report(database, report))
    elif report is ReportKind.averages:
        render.render_averages(database)
    elif report is ReportKind.unhealthy:
        render.render_unhealthy(database)
    else:
        render.render_broken(database)
