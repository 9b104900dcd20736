"""Tabular ingestion of uploaded CSV, TSV and Excel files."""
from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path, PurePath
from typing import Iterator

import pandas as pd

from loan_recon.config import SETTINGS
from loan_recon.domain.errors import EmptyDatasetError, UnreadableFileError
from loan_recon.infrastructure.parsing.utils import compute_file_hash, ensure_bytes, resolve_extension

logger = logging.getLogger(__name__)

RawRow = dict[str, object]


@dataclass(frozen=True)
class RawTable:
    """Header row plus one mapping per data row, in file order."""

    source: str
    headers: tuple[str, ...]
    rows: tuple[RawRow, ...]
    file_hash: str = ""

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[RawRow]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> RawRow:
        return self.rows[index]


def _strip_cell(value: object) -> object:
    return value.strip() if isinstance(value, str) else value


def _cell_text(value: object) -> str:
    return value if isinstance(value, str) else ""


def read_delimited(data: bytes, delimiter: str, source: str = "") -> pd.DataFrame:
    options = dict(
        sep=delimiter,
        keep_default_na=False,
        encoding=SETTINGS.text_encoding,
        engine="python",
        index_col=False,
    )
    try:
        header = pd.read_csv(BytesIO(data), nrows=0, **options)
    except pd.errors.EmptyDataError as exc:
        raise EmptyDatasetError(source) from exc
    except ValueError as exc:
        raise UnreadableFileError(source, str(exc)) from exc
    width = len(header.columns)

    try:
        # Cells stay text; padding for short lines becomes "".
        frame = pd.read_csv(
            BytesIO(data),
            converters=dict.fromkeys(range(width), _cell_text),
            skip_blank_lines=True,
            on_bad_lines=lambda fields: fields[:width],
            **options,
        )
    except ValueError as exc:
        raise UnreadableFileError(source, str(exc)) from exc
    return frame


def read_workbook(data: bytes, engine: str, source: str = "") -> pd.DataFrame:
    try:
        frame = pd.read_excel(BytesIO(data), sheet_name=0, engine=engine, dtype=object)
    except (ValueError, OSError, zipfile.BadZipFile) as exc:
        raise UnreadableFileError(source, str(exc)) from exc
    if frame.columns.empty:
        raise EmptyDatasetError(source)
    return frame.where(frame.notna(), "")


def frame_to_table(frame: pd.DataFrame, source: str, file_hash: str = "") -> RawTable:
    work = frame.copy()
    work.columns = [str(col).strip() for col in work.columns]
    for col in work.columns:
        work[col] = work[col].map(_strip_cell)
    rows = tuple(work.to_dict(orient="records"))
    return RawTable(source=source, headers=tuple(work.columns), rows=rows, file_hash=file_hash)


def ingest(source: BytesIO | Path | bytes, format_hint: str) -> RawTable:
    """Read the first table of an uploaded file into raw rows.

    ``format_hint`` is the uploaded file name or its extension; it selects the
    reader and names the file in error messages.
    """
    extension = resolve_extension(format_hint)
    data = ensure_bytes(source)
    name = format_hint.strip() if PurePath(format_hint.strip()).suffix else f"{extension} upload"

    if extension in SETTINGS.delimiters:
        frame = read_delimited(data, SETTINGS.delimiters[extension], source=name)
    else:
        frame = read_workbook(data, SETTINGS.excel_engines[extension], source=name)

    table = frame_to_table(frame, source=name, file_hash=compute_file_hash(data))
    logger.info(
        "Ingested %s: %d rows, columns=%s, sha256=%s",
        name,
        len(table),
        list(table.headers),
        table.file_hash[:12],
    )
    return table
