"""Pydantic schemas for reports rendered by the CLI."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from datastore.meter_database import MeterData, MeterDatabase
from models.records import Reading, ReadingStatus
from services.classifier import ReadingClassifier


class ReportKind(str, Enum):
    """Reports that can be produced for a whole database."""

    averages = "averages"
    unhealthy = "unhealthy"
    broken = "broken"


class ReadingOut(BaseModel):
    """A reading as shown to users."""

    timestamp: datetime
    value: Optional[float] = None
    raw: str
    status: ReadingStatus


class MeterAverage(BaseModel):
    meter_name: str
    average: Optional[float] = Field(
        default=None, description="Mean of non-broken readings; null when there are none."
    )
    reading_count: int = Field(..., ge=0)
    unhealthy_count: int = Field(..., ge=0)
    broken_count: int = Field(..., ge=0)


class MeterReadings(BaseModel):
    meter_name: str
    readings: List[ReadingOut] = Field(default_factory=list)


class DatabaseReport(BaseModel):
    """Full-database report for one :class:`ReportKind`."""

    kind: ReportKind
    meter_count: int = Field(..., ge=0)
    averages: List[MeterAverage] = Field(default_factory=list)
    meters: List[MeterReadings] = Field(default_factory=list)


def reading_out(reading: Reading, classifier: ReadingClassifier) -> ReadingOut:
    return ReadingOut(
        timestamp=reading.timestamp,
        value=reading.value,
        raw=reading.raw,
        status=classifier.classify(reading),
    )


def meter_average(meter: MeterData) -> MeterAverage:
    return MeterAverage(
        meter_name=meter.meter_name,
        average=meter.average(),
        reading_count=len(meter),
        unhealthy_count=len(meter.unhealthy_readings()),
        broken_count=len(meter.broken_readings()),
    )


def meter_readings(meter: MeterData, readings: Optional[List[Reading]] = None) -> MeterReadings:
    selected = list(meter.readings) if readings is None else readings
    return MeterReadings(
        meter_name=meter.meter_name,
        readings=[reading_out(reading, meter.classifier) for reading in selected],
    )


def build_report(database: MeterDatabase, kind: ReportKind) -> DatabaseReport:
    report = DatabaseReport(kind=kind, meter_count=database.size())
    if kind is ReportKind.averages:
        report.averages = [meter_average(meter) for meter in database]
    elif kind is ReportKind.unhealthy:
        report.meters = [meter_readings(m, m.unhealthy_readings()) for m in database]
    else:
        report.meters = [meter_readings(m, m.broken_readings()) for m in database]
    return report
