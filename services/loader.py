"""Load a meter CSV file into a :class:`MeterDatabase`."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import List, Optional, Sequence

from datastore.meter_database import MeterDatabase
from models.errors import (
    MalformedHeaderError,
    MalformedRecordError,
    SourceNotFoundError,
    SourceReadError,
)
from services.classifier import ReadingClassifier
from settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Database built from a file plus counters gathered while reading it."""

    database: MeterDatabase
    row_count: int = 0
    broken_count: int = 0


def parse_timestamp(value: str) -> datetime:
    """Parse ``YYYY-MM-DD HH:MM:SS`` into a naive datetime."""
    parts = (value or "").split()
    if len(parts) != 2:
        raise ValueError(f"Expected date and time separated by a space, got {value!r}.")
    date_part, time_part = parts
    try:
        return datetime.combine(date.fromisoformat(date_part), time.fromisoformat(time_part))
    except ValueError as exc:
        raise ValueError(f"Invalid timestamp {value!r}.") from exc


class MeterCsvLoader:
    """Reads the header and data rows of a meter CSV in a single pass.

    Column 0 holds the timestamp and the following ``skip_columns`` columns
    (ambient temperature) are ignored; every remaining column is a meter.
    """

    def __init__(
        self,
        classifier: Optional[ReadingClassifier] = None,
        skip_columns: int = 1,
    ) -> None:
        if skip_columns < 0:
            raise ValueError("skip_columns must be zero or positive.")
        self.classifier = classifier or ReadingClassifier()
        self.skip_columns = skip_columns

    @property
    def _first_meter_column(self) -> int:
        return 1 + self.skip_columns

    def load(self, path: Path | str) -> LoadResult:
        source = Path(path)
        if not source.exists():
            logger.warning("Input file not found", extra={"path": str(source)})
            raise SourceNotFoundError(str(source))

        logger.info("Loading meter readings", extra={"path": str(source)})
        try:
            with source.open("r", newline="", encoding="utf-8-sig") as handle:
                result = self._read(csv.reader(handle))
        except FileNotFoundError as exc:
            raise SourceNotFoundError(str(source)) from exc
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(
                "Failed reading input file", extra={"path": str(source), "reason": str(exc)}
            )
            raise SourceReadError(f"Could not read {source}: {exc}") from exc
        except csv.Error as exc:
            logger.warning(
                "Malformed CSV content", extra={"path": str(source), "reason": str(exc)}
            )
            raise MalformedRecordError(str(exc)) from exc

        logger.info(
            "Loaded meter readings",
            extra={
                "path": str(source),
                "meter_count": result.database.size(),
                "row_count": result.row_count,
                "broken_count": result.broken_count,
            },
        )
        return result

    def _read(self, reader) -> LoadResult:
        header = next(reader, None)
        if not header or not any(cell.strip() for cell in header):
            raise MalformedHeaderError("CSV file is missing a header row.")

        database = self._build_database(header)
        result = LoadResult(database=database)

        for row_number, row in enumerate(reader, start=2):
            if not any(cell.strip() for cell in row):
                continue

            if len(row) != len(header):
                reason = f"expected {len(header)} columns, found {len(row)}"
                logger.warning("Rejecting row", extra={"row_number": row_number, "reason": reason})
                raise MalformedRecordError(reason, row_number=row_number)

            try:
                timestamp = parse_timestamp(row[0])
            except ValueError as exc:
                logger.warning(
                    "Rejecting row", extra={"row_number": row_number, "reason": "invalid timestamp"}
                )
                raise MalformedRecordError("invalid timestamp", row_number=row_number) from exc

            readings = database.add_all(timestamp, row[self._first_meter_column:])
            result.row_count += 1
            for meter_name, reading in zip(database.meter_names, readings):
                if self.classifier.is_broken(reading):
                    result.broken_count += 1
                    logger.debug(
                        "Broken reading",
                        extra={
                            "meter_name": meter_name,
                            "row_number": row_number,
                            "raw_value": reading.raw,
                        },
                    )

        return result

    def _build_database(self, header: Sequence[str]) -> MeterDatabase:
        names: List[str] = [cell.strip() for cell in header[self._first_meter_column:]]
        return MeterDatabase(names, classifier=self.classifier)


def build_default_loader() -> MeterCsvLoader:
    """Factory that wires the loader from environment settings."""
    settings = get_settings()
    classifier = ReadingClassifier(
        unhealthy_threshold=settings.unhealthy_ppm,
        min_ppm=settings.min_ppm,
        max_ppm=settings.max_ppm,
    )
    return MeterCsvLoader(classifier=classifier, skip_columns=settings.skip_columns)
