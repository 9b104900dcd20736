"""Errors raised while turning uploaded files into validated records.

Every error aborts processing of the file it was raised for. Messages are
meant to be shown to the end user verbatim.
"""
from __future__ import annotations

from typing import Sequence


class ReconciliationError(ValueError):
    """Base class for all ingestion and validation failures."""


class UnsupportedFormatError(ReconciliationError):
    def __init__(self, extension: str, supported: Sequence[str] = ()) -> None:
        self.extension = extension
        self.supported = tuple(supported)
        message = f"Unsupported file format: {extension or '<none>'!r}."
        if self.supported:
            message += f" Please upload one of: {', '.join(self.supported)}."
        super().__init__(message)


class EmptyDatasetError(ReconciliationError):
    def __init__(self, source: str | None = None) -> None:
        self.source = source
        where = f" {source}" if source else ""
        super().__init__(f"The file{where} contains no data.")


class SchemaValidationError(ReconciliationError):
    def __init__(self, missing_columns: Sequence[str], source: str | None = None) -> None:
        self.missing_columns = tuple(missing_columns)
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Missing required columns{where}: {', '.join(self.missing_columns)}")


class _RowError(ReconciliationError):
    row_index: int | None

    @property
    def line_number(self) -> int | None:
        """Human-facing line number; the header occupies line 1."""
        if self.row_index is None:
            return None
        return self.row_index + 1


def _location(source: str | None, line_number: int | None) -> str:
    parts = []
    if source:
        parts.append(f"in {source}")
    if line_number is not None:
        parts.append(f"line {line_number}")
    return (" " + ", ".join(parts)) if parts else ""


class RecordValidationError(_RowError):
    def __init__(self, column: str, row_index: int | None, source: str | None = None, value: object = None) -> None:
        self.column = column
        self.row_index = row_index
        self.source = source
        self.value = value
        super().__init__(f"Invalid {column}{_location(source, self.line_number)}")


class InvalidAmountError(_RowError):
    def __init__(
        self,
        raw_value: object,
        row_index: int | None = None,
        column: str | None = None,
        source: str | None = None,
    ) -> None:
        self.raw_value = raw_value
        self.row_index = row_index
        self.column = column
        self.source = source
        label = column or "amount"
        super().__init__(f'Invalid {label}{_location(source, self.line_number)}: "{raw_value}"')


class UnreadableFileError(ReconciliationError):
    def __init__(self, source: str | None = None, reason: str = "") -> None:
        self.source = source
        self.reason = reason
        where = f" {source}" if source else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to parse file{where}{detail}")
