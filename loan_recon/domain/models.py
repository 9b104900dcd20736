"""Domain models for the loan reconciliation pipeline.

These dataclasses capture the canonical shape of validated lending and
settlement records and of the per-counterparty position built from them.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union

RawAmount = Union[str, int, float, Decimal]


class Status(str, Enum):
    BALANCED = "Balanced"
    OVERPAID = "Overpaid"
    UNDERPAID = "Underpaid"

    def __str__(self) -> str:
        return self.value


def classify_status(net_balance: Decimal) -> Status:
    if net_balance == 0:
        return Status.BALANCED
    if net_balance > 0:
        return Status.OVERPAID
    return Status.UNDERPAID


@dataclass(frozen=True)
class LendingRecord:
    """A single disbursement made to a counterparty."""

    counterparty_id: str
    loan_amount: Decimal


@dataclass(frozen=True)
class SettlementRecord:
    """A single repayment received from a counterparty."""

    counterparty_id: str
    payment_amount: Decimal


@dataclass(frozen=True)
class ReconciliationResult:
    """Position of one counterparty after both sides have been summed."""

    counterparty_id: str
    total_lent: Decimal
    total_paid: Decimal
    net_balance: Decimal
    status: Status

    @classmethod
    def from_totals(cls, counterparty_id: str, total_lent: Decimal, total_paid: Decimal) -> "ReconciliationResult":
        net_balance = total_paid - total_lent
        return cls(
            counterparty_id=counterparty_id,
            total_lent=total_lent,
            total_paid=total_paid,
            net_balance=net_balance,
            status=classify_status(net_balance),
        )
