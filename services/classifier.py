"""Per-cell value parsing and reading classification."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from models.records import Reading, ReadingStatus

DEFAULT_UNHEALTHY_PPM = 1000.0
DEFAULT_MIN_PPM = 0.0
DEFAULT_MAX_PPM = 10000.0


@dataclass(frozen=True)
class ParsedValue:
    """Outcome of parsing a raw cell; ``value`` is ``None`` when ``error`` is set."""

    value: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_ppm(raw: str) -> ParsedValue:
    """Parse a raw ppm cell without raising."""
    candidate = (raw or "").strip()
    if not candidate:
        return ParsedValue(error="empty value")
    try:
        value = float(candidate)
    except ValueError:
        return ParsedValue(error="invalid numeric value")
    return ParsedValue(value=value)


class ReadingClassifier:
    """Decides whether a reading is healthy, unhealthy or broken."""

    def __init__(
        self,
        unhealthy_threshold: float = DEFAULT_UNHEALTHY_PPM,
        min_ppm: float = DEFAULT_MIN_PPM,
        max_ppm: float = DEFAULT_MAX_PPM,
    ) -> None:
        if min_ppm > max_ppm:
            raise ValueError("min_ppm must not exceed max_ppm.")
        self.unhealthy_threshold = unhealthy_threshold
        self.min_ppm = min_ppm
        self.max_ppm = max_ppm

    def classify(self, reading: Reading) -> ReadingStatus:
        value = reading.value
        if value is None or not math.isfinite(value):
            return ReadingStatus.broken
        if value < self.min_ppm or value > self.max_ppm:
            return ReadingStatus.broken
        if value > self.unhealthy_threshold:
            return ReadingStatus.unhealthy
        return ReadingStatus.healthy

    def is_broken(self, reading: Reading) -> bool:
        return self.classify(reading) is ReadingStatus.broken

    def is_unhealthy(self, reading: Reading) -> bool:
        return self.classify(reading) is ReadingStatus.unhealthy

    def __repr__(self) -> str:
        return (
            f"ReadingClassifier(unhealthy_threshold={self.unhealthy_threshold}, "
            f"min_ppm={self.min_ppm}, max_ppm={self.max_ppm})"
        )
