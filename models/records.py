"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ReadingStatus(str, Enum):
    """Classification of a single reading, computed on demand."""

    healthy = "healthy"
    unhealthy = "unhealthy"
    broken = "broken"


@dataclass(frozen=True, slots=True)
class Reading:
    """A single meter reading parsed from one CSV cell."""

    timestamp: datetime
    value: Optional[float]
    raw: str = ""
