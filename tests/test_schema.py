from decimal import Decimal

import pytest

from loan_recon.config import AmountPolicy
from loan_recon.domain.errors import (
    EmptyDatasetError,
    InvalidAmountError,
    RecordValidationError,
    SchemaValidationError,
)
from loan_recon.domain.models import LendingRecord, SettlementRecord
from loan_recon.infrastructure.parsing.amounts import AmountNormalizer
from loan_recon.infrastructure.parsing.schema import LENDING_SCHEMA, SETTLEMENT_SCHEMA, validate_table
from loan_recon.infrastructure.parsing.tabular import RawTable, ingest


def make_table(headers, rows, source="upload.csv") -> RawTable:
    return RawTable(source=source, headers=tuple(headers), rows=tuple(dict(zip(headers, row)) for row in rows))


def test_valid_lendings_become_records():
    table = ingest(b"counterparty_id,loan_amount,branch\nA,\"1,000\",north\n B ,25.5 INR,south\n", "lendings.csv")

    records = validate_table(table, LENDING_SCHEMA)

    assert records == [
        LendingRecord(counterparty_id="A", loan_amount=Decimal("1000")),
        LendingRecord(counterparty_id="B", loan_amount=Decimal("25.5")),
    ]


def test_settlements_profile():
    table = make_table(["counterparty_id", "payment_amount"], [["A", 10], ["A", "₹5"]])

    records = validate_table(table, SETTLEMENT_SCHEMA)

    assert records == [
        SettlementRecord(counterparty_id="A", payment_amount=Decimal("10")),
        SettlementRecord(counterparty_id="A", payment_amount=Decimal("5")),
    ]


def test_schema_rejection_names_every_missing_column():
    table = ingest(b"firm,amount\nA,100\n", "lendings.csv")

    with pytest.raises(SchemaValidationError) as excinfo:
        validate_table(table, LENDING_SCHEMA)

    assert excinfo.value.missing_columns == ("counterparty_id", "loan_amount")
    assert "counterparty_id" in str(excinfo.value)
    assert "loan_amount" in str(excinfo.value)


def test_partial_schema_names_only_the_missing_column():
    table = make_table(["counterparty_id", "loan_amount"], [["A", 1]])

    with pytest.raises(SchemaValidationError) as excinfo:
        validate_table(table, SETTLEMENT_SCHEMA)

    assert excinfo.value.missing_columns == ("payment_amount",)


def test_header_only_file_is_empty_dataset():
    table = ingest(b"counterparty_id,loan_amount\n", "lendings.csv")

    with pytest.raises(EmptyDatasetError):
        validate_table(table, LENDING_SCHEMA)


def test_blank_identifier_reports_line_number():
    table = ingest(b"counterparty_id,loan_amount\nA,1\n  ,2\n", "lendings.csv")

    with pytest.raises(RecordValidationError) as excinfo:
        validate_table(table, LENDING_SCHEMA)

    assert excinfo.value.row_index == 2
    assert excinfo.value.line_number == 3
    assert str(excinfo.value) == "Invalid counterparty_id in lendings.csv, line 3"


def test_non_text_identifier_is_rejected():
    table = make_table(["counterparty_id", "loan_amount"], [[1001, 5]])

    with pytest.raises(RecordValidationError):
        validate_table(table, LENDING_SCHEMA)


def test_invalid_amount_aborts_file_under_strict_policy():
    table = ingest(b"counterparty_id,loan_amount\nA,1\nB,abc\n", "lendings.csv")

    with pytest.raises(InvalidAmountError) as excinfo:
        validate_table(table, LENDING_SCHEMA, AmountNormalizer(AmountPolicy.STRICT))

    assert excinfo.value.line_number == 3
    assert excinfo.value.raw_value == "abc"
    assert excinfo.value.source == "lendings.csv"


def test_invalid_amount_becomes_zero_under_zero_policy():
    table = ingest(b"counterparty_id,loan_amount\nA,1\nB,abc\nC,\n", "lendings.csv")
    normalizer = AmountNormalizer(AmountPolicy.ZERO)

    records = validate_table(table, LENDING_SCHEMA, normalizer)

    assert [r.loan_amount for r in records] == [Decimal("1"), Decimal("0"), Decimal("0")]
    assert normalizer.substitutions == 2


def test_blank_lines_do_not_count_toward_reported_line():
    table = ingest(b"counterparty_id,loan_amount\nA,1\n\nB,abc\n", "lendings.csv")

    with pytest.raises(InvalidAmountError) as excinfo:
        validate_table(table, LENDING_SCHEMA)

    assert excinfo.value.row_index == 2
    assert excinfo.value.line_number == 3
    assert "lendings.csv, line 3" in str(excinfo.value)
