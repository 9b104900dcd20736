"""Schema profiles and row validation for uploaded record files."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

from loan_recon.config import SETTINGS
from loan_recon.domain.errors import EmptyDatasetError, RecordValidationError, SchemaValidationError
from loan_recon.domain.models import LendingRecord, SettlementRecord
from loan_recon.infrastructure.parsing.amounts import AmountNormalizer
from loan_recon.infrastructure.parsing.tabular import RawRow, RawTable

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

IDENTIFIER_COLUMN = "counterparty_id"


@dataclass(frozen=True)
class RecordSchema(Generic[RecordT]):
    name: str
    required_columns: tuple[str, ...]
    identifier_column: str
    factory: Callable[..., RecordT]

    def missing_columns(self, headers: Iterable[str]) -> list[str]:
        present = set(headers)
        return [column for column in self.required_columns if column not in present]

    def is_amount_column(self, column: str) -> bool:
        return SETTINGS.amount_marker in column.lower()


LENDING_SCHEMA: RecordSchema[LendingRecord] = RecordSchema(
    name="lendings",
    required_columns=(IDENTIFIER_COLUMN, "loan_amount"),
    identifier_column=IDENTIFIER_COLUMN,
    factory=LendingRecord,
)

SETTLEMENT_SCHEMA: RecordSchema[SettlementRecord] = RecordSchema(
    name="settlements",
    required_columns=(IDENTIFIER_COLUMN, "payment_amount"),
    identifier_column=IDENTIFIER_COLUMN,
    factory=SettlementRecord,
)


def check_columns(table: RawTable, schema: RecordSchema) -> None:
    missing = schema.missing_columns(table.headers)
    if missing:
        raise SchemaValidationError(missing, source=table.source)
    if not len(table):
        raise EmptyDatasetError(table.source)


def _validate_identifier(value: object, column: str, row_index: int, source: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise RecordValidationError(column, row_index, source=source, value=value)
    return value.strip()


def validate_row(
    row: RawRow,
    row_index: int,
    schema: RecordSchema[RecordT],
    normalizer: AmountNormalizer,
    source: str = "",
) -> RecordT:
    """Build one record from the required columns of ``row``.

    ``row_index`` is 1-based over data rows. Columns outside the schema are
    dropped.
    """
    fields: dict[str, object] = {}
    for column in schema.required_columns:
        value = row.get(column, "")
        if schema.is_amount_column(column):
            fields[column] = normalizer.normalize(value, row_index=row_index, column=column, source=source)
        elif column == schema.identifier_column:
            fields[column] = _validate_identifier(value, column, row_index, source)
        else:
            fields[column] = value
    return schema.factory(**fields)


def validate_table(
    table: RawTable,
    schema: RecordSchema[RecordT],
    normalizer: AmountNormalizer | None = None,
) -> list[RecordT]:
    normalizer = normalizer or AmountNormalizer()
    check_columns(table, schema)

    before = normalizer.substitutions
    records = [
        validate_row(row, index, schema, normalizer, source=table.source)
        for index, row in enumerate(table, start=1)
    ]
    substituted = normalizer.substitutions - before
    if substituted:
        logger.warning("%s: %d invalid amounts replaced with 0", table.source, substituted)
    logger.info("Validated %d %s records from %s", len(records), schema.name, table.source)
    return records
