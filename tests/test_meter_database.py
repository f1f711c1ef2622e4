"""Unit tests for the in-memory meter database."""

from __future__ import annotations

import math
from datetime import datetime, timedelta

import pytest

from datastore.meter_database import MeterData, MeterDatabase
from models.errors import MalformedHeaderError, MalformedRecordError

T0 = datetime(2024, 1, 1, 8, 0, 0)


def _at(minutes: int) -> datetime:
    return T0 + timedelta(minutes=minutes)


def test_add_reading_never_raises_on_bad_values() -> None:
    meter = MeterData("Room A")

    meter.add_reading(_at(0), "450")
    broken = meter.add_reading(_at(1), "N/A")
    meter.add_reading(_at(2), "")

    assert len(meter) == 3
    assert broken.value is None
    assert broken.raw == "N/A"
    assert [r.raw for r in meter.broken_readings()] == ["N/A", ""]


def test_average_ignores_broken_readings() -> None:
    meter = MeterData("Room A")
    for minute, raw in enumerate(["400", "abc", "600", "-5"]):
        meter.add_reading(_at(minute), raw)

    assert meter.average() == 500.0


def test_average_is_none_when_every_reading_is_broken() -> None:
    meter = MeterData("Room A")
    meter.add_reading(_at(0), "abc")
    meter.add_reading(_at(1), "-5")

    assert meter.average() is None


def test_average_is_none_without_readings() -> None:
    assert MeterData("Room A").average() is None


def test_average_is_independent_of_row_order() -> None:
    values = ["0.1", "0.2", "0.3", "410", "520.7", "1330.3"]

    first, second = MeterData("a"), MeterData("b")
    for minute, raw in enumerate(values):
        first.add_reading(_at(minute), raw)
    for minute, raw in enumerate(reversed(values)):
        second.add_reading(_at(minute), raw)

    assert first.average() == second.average()
    assert first.average() == math.fsum(map(float, values)) / len(values)


def test_average_of_small_values_is_exact_in_any_order() -> None:
    first, second = MeterData("a"), MeterData("b")
    for minute, raw in enumerate(["0.1", "0.2", "0.3"]):
        first.add_reading(_at(minute), raw)
    for minute, raw in enumerate(["0.3", "0.2", "0.1"]):
        second.add_reading(_at(minute), raw)

    assert first.average() == second.average()


def test_views_are_chronological_and_idempotent() -> None:
    meter = MeterData("Room B")
    for minute, raw in enumerate(["1500", "450", "1200", "oops", "2000"]):
        meter.add_reading(_at(minute), raw)

    unhealthy = meter.unhealthy_readings()

    assert [r.value for r in unhealthy] == [1500.0, 1200.0, 2000.0]
    assert [r.timestamp for r in unhealthy] == sorted(r.timestamp for r in unhealthy)
    assert meter.unhealthy_readings() == unhealthy
    assert meter.broken_readings() == meter.broken_readings()
    assert meter.average() == meter.average()


@pytest.mark.parametrize("query", ["room", "A", "ROOM A", "om a", ""])
def test_matches_name_is_case_insensitive_substring(query: str) -> None:
    assert MeterData("Room A").matches_name(query)


def test_matches_name_rejects_other_names() -> None:
    assert not MeterData("Room A").matches_name("Lab")


def test_database_preserves_header_order() -> None:
    database = MeterDatabase(["Room B", "Room A", "Hall"])

    assert database.size() == 3
    assert len(database) == 3
    assert [meter.meter_name for meter in database] == ["Room B", "Room A", "Hall"]
    assert database.meter(1).meter_name == "Room A"
    assert database.meter("Hall").meter_name == "Hall"
    assert "Room A" in database


@pytest.mark.parametrize("names", [[], ["Room A", "Room A"], ["Room A", ""]])
def test_database_rejects_bad_headers(names) -> None:
    with pytest.raises(MalformedHeaderError):
        MeterDatabase(names)


def test_add_all_aligns_values_with_meters() -> None:
    database = MeterDatabase(["Room A", "Room B"])

    database.add_all(_at(0), ["450", "1500"])
    database.add_all(_at(1), ["N/A", "900"])

    assert database.average("Room A") == 450.0
    assert database.average(1) == 1200.0
    assert len(database.unhealthy("Room B")) == 1
    assert len(database.broken("Room A")) == 1
    assert database.broken("Room B") == []


@pytest.mark.parametrize("values", [["450"], ["450", "500", "600"]])
def test_add_all_rejects_mismatched_rows(values) -> None:
    database = MeterDatabase(["Room A", "Room B"])

    with pytest.raises(MalformedRecordError):
        database.add_all(_at(0), values)

    assert all(len(meter) == 0 for meter in database)


def test_match_meter_name_returns_database_order() -> None:
    database = MeterDatabase(["Room B", "Lab", "room a"])

    matches = database.match_meter_name("ROOM")

    assert [meter.meter_name for meter in matches] == ["Room B", "room a"]
    assert database.match_meter_name("kitchen") == []


def test_averages_report_covers_every_meter() -> None:
    database = MeterDatabase(["Room A", "Room B"])
    database.add_all(_at(0), ["450", "broken"])

    assert database.averages() == [("Room A", 450.0), ("Room B", None)]


@pytest.mark.parametrize("key", [-1, 2, True, False])
def test_meter_rejects_unknown_indices(key) -> None:
    database = MeterDatabase(["Room A", "Room B"])

    with pytest.raises(IndexError):
        database.meter(key)


def test_meter_rejects_unknown_names() -> None:
    database = MeterDatabase(["Room A", "Room B"])

    with pytest.raises(KeyError):
        database.average("Room C")
