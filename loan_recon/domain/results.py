"""Domain-level results for loan reconciliation."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, localcontext
from typing import Iterable, Sequence

from loan_recon.config import SETTINGS

from .models import ReconciliationResult, Status


@dataclass(frozen=True)
class ReconciliationSummary:
    total_counterparties: int
    balanced: int
    overpaid: int
    underpaid: int
    total_lent: Decimal
    total_paid: Decimal
    net_balance: Decimal

    def count_for(self, status: Status) -> int:
        return {
            Status.BALANCED: self.balanced,
            Status.OVERPAID: self.overpaid,
            Status.UNDERPAID: self.underpaid,
        }[status]


@dataclass(frozen=True)
class ReconciliationReport:
    summary: ReconciliationSummary
    results: Sequence[ReconciliationResult] = field(default_factory=tuple)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def has_issues(self) -> bool:
        return bool(self.summary.overpaid or self.summary.underpaid)

    def iter_unbalanced(self) -> Iterable[ReconciliationResult]:
        for result in self.results:
            if result.status is not Status.BALANCED:
                yield result


def summarize(results: Iterable[ReconciliationResult]) -> ReconciliationSummary:
    counts: Counter[Status] = Counter()
    total_lent = Decimal("0")
    total_paid = Decimal("0")
    net_balance = Decimal("0")
    with localcontext(SETTINGS.decimal_context):
        for result in results:
            counts[result.status] += 1
            total_lent += result.total_lent
            total_paid += result.total_paid
            net_balance += result.net_balance
    return ReconciliationSummary(
        total_counterparties=sum(counts.values()),
        balanced=counts[Status.BALANCED],
        overpaid=counts[Status.OVERPAID],
        underpaid=counts[Status.UNDERPAID],
        total_lent=total_lent,
        total_paid=total_paid,
        net_balance=net_balance,
    )
