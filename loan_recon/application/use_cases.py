"""Application services orchestrating the reconciliation workflow."""
from __future__ import annotations

from dataclasses import dataclass

from loan_recon.application.dto import ReconciliationResponse
from loan_recon.domain.repositories import LendingRepository, SettlementRepository
from loan_recon.domain.services import LoanReconciler


@dataclass(slots=True)
class ReconciliationContext:
    lending_repository: LendingRepository
    settlement_repository: SettlementRepository
    reconciler: LoanReconciler


class ReconcileLoansUseCase:
    def __init__(self, context: ReconciliationContext) -> None:
        self._context = context

    def execute(self) -> ReconciliationResponse:
        # Both files are fully validated before anything is summed.
        lendings = self._context.lending_repository.list_records()
        settlements = self._context.settlement_repository.list_records()
        report = self._context.reconciler.build_report(lendings, settlements)
        return ReconciliationResponse(report=report, lendings=lendings, settlements=settlements)
