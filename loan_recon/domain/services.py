"""Domain services implementing the reconciliation rules."""
from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Context, Decimal, localcontext
from typing import Iterable, Mapping

from loan_recon.config import SETTINGS

from .models import LendingRecord, ReconciliationResult, SettlementRecord, classify_status
from .results import ReconciliationReport, summarize

logger = logging.getLogger(__name__)

__all__ = ["LoanReconciler", "classify_status"]


class LoanReconciler:
    """Sums both sides per counterparty and classifies the net position.

    Results are ordered by counterparty identifier so that repeated runs over
    the same records, in any row order, produce identical output.
    """

    def __init__(self, decimal_context: Context | None = None) -> None:
        self._context = decimal_context or SETTINGS.decimal_context

    def reconcile(
        self,
        lendings: Iterable[LendingRecord],
        settlements: Iterable[SettlementRecord],
    ) -> list[ReconciliationResult]:
        with localcontext(self._context):
            lent_totals = self._sum_by_counterparty((r.counterparty_id, r.loan_amount) for r in lendings)
            paid_totals = self._sum_by_counterparty((r.counterparty_id, r.payment_amount) for r in settlements)

            results = [
                ReconciliationResult.from_totals(
                    counterparty_id,
                    lent_totals.get(counterparty_id, Decimal("0")),
                    paid_totals.get(counterparty_id, Decimal("0")),
                )
                for counterparty_id in sorted(lent_totals.keys() | paid_totals.keys())
            ]

        logger.debug(
            "Reconciled %d counterparties (%d lending, %d settlement)",
            len(results),
            len(lent_totals),
            len(paid_totals),
        )
        return results

    def build_report(
        self,
        lendings: Iterable[LendingRecord],
        settlements: Iterable[SettlementRecord],
    ) -> ReconciliationReport:
        results = self.reconcile(lendings, settlements)
        return ReconciliationReport(summary=summarize(results), results=tuple(results))

    @staticmethod
    def _sum_by_counterparty(pairs: Iterable[tuple[str, Decimal]]) -> Mapping[str, Decimal]:
        totals: dict[str, Decimal] = defaultdict(Decimal)
        for counterparty_id, amount in pairs:
            totals[counterparty_id] += amount
        return dict(totals)
