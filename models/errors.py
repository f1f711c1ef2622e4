"""Structural errors raised while loading a meter CSV."""

from __future__ import annotations

from typing import Optional


class Co2InfoError(Exception):
    """Base class for errors that abort loading."""

    exit_code = 1


class SourceNotFoundError(Co2InfoError):
    exit_code = 3

    def __init__(self, path: str) -> None:
        super().__init__(f"Input file {path!r} does not exist.")
        self.path = path


class SourceReadError(Co2InfoError):
    exit_code = 4


class MalformedRecordError(Co2InfoError):
    """A data row has the wrong shape or an unparsable timestamp."""

    exit_code = 5

    def __init__(self, reason: str, row_number: Optional[int] = None) -> None:
        message = reason if row_number is None else f"row {row_number}: {reason}"
        super().__init__(message)
        self.reason = reason
        self.row_number = row_number


class MalformedHeaderError(Co2InfoError):
    exit_code = 6
