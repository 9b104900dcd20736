"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol, Sequence

from .models import LendingRecord, SettlementRecord


class LendingRepository(Protocol):
    """Provides validated disbursement records."""

    def list_records(self) -> Sequence[LendingRecord]:
        ...


class SettlementRepository(Protocol):
    """Provides validated repayment records."""

    def list_records(self) -> Sequence[SettlementRecord]:
        ...
