from __future__ import annotations

from typing import Callable, Iterable, List, Optional

import typer

from datastore.meter_database import MeterData, MeterDatabase
from models.records import Reading, ReadingStatus
from models.reports import DatabaseReport
from services.classifier import ReadingClassifier

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def format_average(average: Optional[float]) -> str:
    if average is None:
        return "no valid readings"
    return f"{average:.1f} ppm"


def format_reading(reading: Reading, classifier: ReadingClassifier) -> str:
    stamp = reading.timestamp.strftime(TIMESTAMP_FORMAT)
    status = classifier.classify(reading)
    if status is ReadingStatus.broken:
        return f"{stamp}  {reading.raw or '<empty>'} (broken)"
    line = f"{stamp}  {reading.value:.1f} ppm"
    if status is ReadingStatus.unhealthy:
        line += " (unhealthy)"
    return line


def format_meter(meter: MeterData) -> List[str]:
    lines = [
        f"Meter: {meter.meter_name}",
        f"Average: {format_average(meter.average())}",
        f"Readings: {len(meter)}",
    ]
    lines.extend(f"  {format_reading(r, meter.classifier)}" for r in meter.readings)
    return lines


def render_averages(database: MeterDatabase) -> None:
    echo_heading("Average ppm readings")
    for name, average in database.averages():
        typer.echo(f"  {name}: {format_average(average)}")


def render_selected_readings(
    title: str,
    database: MeterDatabase,
    select: Callable[[MeterData], Iterable[Reading]],
) -> None:
    echo_heading(title)
    for meter in database:
        readings = list(select(meter))
        typer.echo(f"{meter.meter_name} ({len(readings)})")
        for reading in readings:
            typer.echo(f"  {format_reading(reading, meter.classifier)}")


def render_unhealthy(database: MeterDatabase) -> None:
    render_selected_readings("Unhealthy ppm readings", database, MeterData.unhealthy_readings)


def render_broken(database: MeterDatabase) -> None:
    render_selected_readings("Broken ppm readings", database, MeterData.broken_readings)


def render_meter(meter: MeterData) -> None:
    lines = format_meter(meter)
    echo_heading(lines[0])
    for line in lines[1:]:
        typer.echo(line)


def render_report_json(report: DatabaseReport) -> None:
    typer.echo(report.model_dump_json(indent=2))
