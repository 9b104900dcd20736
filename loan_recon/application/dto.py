"""Application-level DTOs for loan reconciliation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from loan_recon.domain.models import LendingRecord, ReconciliationResult, SettlementRecord
from loan_recon.domain.results import ReconciliationReport


@dataclass(slots=True, frozen=True)
class ReconciliationResponse:
    report: ReconciliationReport
    lendings: Sequence[LendingRecord]
    settlements: Sequence[SettlementRecord]

    @property
    def results(self) -> Sequence[ReconciliationResult]:
        return self.report.results
