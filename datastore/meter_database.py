from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from models.errors import MalformedHeaderError, MalformedRecordError
from models.records import Reading
from services.classifier import ReadingClassifier, parse_ppm

MeterKey = Union[int, str]


class MeterData:
    """Ordered readings for a single meter."""

    def __init__(self, meter_name: str, classifier: Optional[ReadingClassifier] = None) -> None:
        if not meter_name:
            raise ValueError("meter_name must be non-empty.")
        self.meter_name = meter_name
        self.classifier = classifier or ReadingClassifier()
        self._readings: List[Reading] = []

    @property
    def readings(self) -> Tuple[Reading, ...]:
        return tuple(self._readings)

    def add_reading(self, timestamp: datetime, raw_value: str) -> Reading:
        """Parse ``raw_value`` and append it; malformed values become broken readings."""
        parsed = parse_ppm(raw_value)
        reading = Reading(timestamp=timestamp, value=parsed.value, raw=(raw_value or "").strip())
        self._readings.append(reading)
        return reading

    def average(self) -> Optional[float]:
        """Mean of the non-broken readings, or ``None`` when there are none."""
        values = [
            reading.value
            for reading in self._readings
            if not self.classifier.is_broken(reading)
        ]
        if not values:
            return None
        return math.fsum(values) / len(values)

    def unhealthy_readings(self) -> List[Reading]:
        return [r for r in self._readings if self.classifier.is_unhealthy(r)]

    def broken_readings(self) -> List[Reading]:
        return [r for r in self._readings if self.classifier.is_broken(r)]

    def matches_name(self, query: str) -> bool:
        return query.casefold() in self.meter_name.casefold()

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[Reading]:
        return iter(tuple(self._readings))

    def __repr__(self) -> str:
        return f"MeterData(meter_name={self.meter_name!r}, readings={len(self._readings)})"


class MeterDatabase:
    """Meters keyed by name, kept in header column order."""

    def __init__(
        self,
        meter_names: Iterable[str],
        classifier: Optional[ReadingClassifier] = None,
    ) -> None:
        names = list(meter_names)
        if not names:
            raise MalformedHeaderError("Header does not name any meters.")

        self.classifier = classifier or ReadingClassifier()
        self._meters: Dict[str, MeterData] = {}
        for position, name in enumerate(names):
            if not name:
                raise MalformedHeaderError(f"Meter column {position + 1} has no name.")
            if name in self._meters:
                raise MalformedHeaderError(f"Duplicate meter name {name!r} in header.")
            self._meters[name] = MeterData(name, classifier=self.classifier)
        self._order: Tuple[MeterData, ...] = tuple(self._meters.values())

    def add_all(self, timestamp: datetime, values: Sequence[str]) -> List[Reading]:
        """Append one reading per meter; ``values`` must align with the meters."""
        if len(values) != len(self._order):
            raise MalformedRecordError(
                f"expected {len(self._order)} meter values, found {len(values)}"
            )
        return [
            meter.add_reading(timestamp, raw)
            for meter, raw in zip(self._order, values)
        ]

    def size(self) -> int:
        return len(self._order)

    def meter(self, key: MeterKey) -> MeterData:
        """Look up a meter by exact name or by 0-based column index."""
        if isinstance(key, bool):
            raise IndexError(f"Meter index must be an integer, got {key!r}.")
        if isinstance(key, int):
            if not 0 <= key < len(self._order):
                raise IndexError(f"Meter index {key} out of range.")
            return self._order[key]
        return self._meters[key]

    def average(self, key: MeterKey) -> Optional[float]:
        return self.meter(key).average()

    def unhealthy(self, key: MeterKey) -> List[Reading]:
        return self.meter(key).unhealthy_readings()

    def broken(self, key: MeterKey) -> List[Reading]:
        return self.meter(key).broken_readings()

    def averages(self) -> List[Tuple[str, Optional[float]]]:
        return [(meter.meter_name, meter.average()) for meter in self._order]

    def match_meter_name(self, query: str) -> List[MeterData]:
        return [meter for meter in self._order if meter.matches_name(query)]

    @property
    def meter_names(self) -> List[str]:
        return list(self._meters)

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[MeterData]:
        return iter(self._order)

    def __contains__(self, name: object) -> bool:
        return name in self._meters
