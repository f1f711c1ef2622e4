from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

import pytest

from settings import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch) -> Iterator[None]:
    for name in (
        "CO2_UNHEALTHY_PPM",
        "CO2_MIN_PPM",
        "CO2_MAX_PPM",
        "CO2_SKIP_COLUMNS",
        "CO2INFO_CSV_PATH",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def write_csv(tmp_path) -> Callable[[str, str], Path]:
    def _write(contents: str, filename: str = "readings.csv") -> Path:
        path = tmp_path / filename
        path.write_text(contents, encoding="utf-8")
        return path

    return _write
