from decimal import Decimal
from io import BytesIO
from pathlib import Path

import pandas as pd
import pytest

from loan_recon import (
    AmountNormalizer,
    LoanReconciler,
    ReconcileLoansUseCase,
    ReconciliationContext,
    UploadedLendingRepository,
    UploadedSettlementRepository,
)
from loan_recon.config import AmountPolicy
from loan_recon.domain.errors import InvalidAmountError, SchemaValidationError
from loan_recon.domain.models import Status


class ExplodingReconciler(LoanReconciler):
    def build_report(self, lendings, settlements):  # pragma: no cover - must not run
        raise AssertionError("reconciler should not run when ingestion fails")


def make_context(lendings: bytes, lendings_name: str, settlements: bytes, settlements_name: str, **kwargs):
    normalizer = kwargs.pop("normalizer", None) or AmountNormalizer()
    reconciler = kwargs.pop("reconciler", None) or LoanReconciler()
    return ReconciliationContext(
        lending_repository=UploadedLendingRepository(lendings, lendings_name, normalizer),
        settlement_repository=UploadedSettlementRepository(settlements, settlements_name, normalizer),
        reconciler=reconciler,
    )


def test_csv_and_workbook_are_reconciled_together():
    buffer = BytesIO()
    pd.DataFrame(
        {"counterparty_id": ["A", "C"], "payment_amount": [150, "30.00 INR"], "memo": ["x", "y"]}
    ).to_excel(buffer, index=False, engine="openpyxl")
    lendings = "counterparty_id,loan_amount\nA,\"₹1,00\"\nA,100\n".encode("utf-8")

    response = ReconcileLoansUseCase(
        make_context(lendings, "lendings.csv", buffer.getvalue(), "settlements.xlsx")
    ).execute()

    assert len(response.lendings) == 2
    assert len(response.settlements) == 2
    results = {r.counterparty_id: r for r in response.results}
    assert results["A"].total_lent == Decimal("200")
    assert results["A"].net_balance == Decimal("-50")
    assert results["A"].status is Status.UNDERPAID
    assert results["C"].status is Status.OVERPAID
    assert response.report.summary.total_counterparties == 2


def test_schema_failure_stops_before_reconciling():
    context = make_context(
        b"firm,amount\nA,1\n",
        "lendings.csv",
        b"counterparty_id,payment_amount\nA,1\n",
        "settlements.csv",
        reconciler=ExplodingReconciler(),
    )

    with pytest.raises(SchemaValidationError):
        ReconcileLoansUseCase(context).execute()


def test_strict_policy_rejects_either_file():
    context = make_context(
        b"counterparty_id,loan_amount\nA,1\n",
        "lendings.csv",
        b"counterparty_id,payment_amount\nA,unknown\n",
        "settlements.csv",
        reconciler=ExplodingReconciler(),
    )

    with pytest.raises(InvalidAmountError) as excinfo:
        ReconcileLoansUseCase(context).execute()

    assert excinfo.value.source == "settlements.csv"


def test_zero_policy_applies_to_both_files():
    normalizer = AmountNormalizer(AmountPolicy.ZERO)
    context = make_context(
        b"counterparty_id,loan_amount\nA,bad\nB,10\n",
        "lendings.csv",
        b"counterparty_id,payment_amount\nA,5\nB,\n",
        "settlements.csv",
        normalizer=normalizer,
    )

    response = ReconcileLoansUseCase(context).execute()

    results = {r.counterparty_id: r for r in response.results}
    assert results["A"].total_lent == Decimal("0")
    assert results["A"].status is Status.OVERPAID
    assert results["B"].total_paid == Decimal("0")
    assert results["B"].status is Status.UNDERPAID
    assert normalizer.substitutions == 2


def test_repository_reads_paths(tmp_path: Path):
    lendings_path = tmp_path / "lendings.tsv"
    lendings_path.write_text("counterparty_id\tloan_amount\nA\t10\n", encoding="utf-8")

    records = UploadedLendingRepository(lendings_path).list_records()

    assert [r.counterparty_id for r in records] == ["A"]


def test_repository_requires_name_for_raw_bytes():
    with pytest.raises(ValueError):
        UploadedLendingRepository(b"counterparty_id,loan_amount\nA,1\n")
