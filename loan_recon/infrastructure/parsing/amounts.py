"""Normalization of currency-formatted amounts into Decimals."""
from __future__ import annotations

import logging
import math
import numbers
import re
from decimal import Decimal, InvalidOperation

from loan_recon.config import SETTINGS, AmountPolicy
from loan_recon.domain.errors import InvalidAmountError
from loan_recon.domain.models import RawAmount

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^0-9.]")


def parse_amount(value: RawAmount) -> Decimal:
    """Convert a number or formatted text such as ``"₹1,200.50"`` to a Decimal.

    Currency symbols, currency codes and thousands separators are dropped.
    Raises :class:`InvalidAmountError` when nothing numeric remains.
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidAmountError(value)
        return value
    if isinstance(value, bool):
        raise InvalidAmountError(value)
    if isinstance(value, numbers.Integral):
        return Decimal(int(value))
    if isinstance(value, numbers.Real):
        as_float = float(value)
        if not math.isfinite(as_float):
            raise InvalidAmountError(value)
        return Decimal(repr(as_float))
    if not isinstance(value, str):
        raise InvalidAmountError(value)

    text = value.strip()
    digits = _NON_NUMERIC.sub("", text)
    if not digits:
        raise InvalidAmountError(value)
    # Only a minus in first position is a sign.
    cleaned = "-" + digits if text.startswith("-") else digits
    try:
        return Decimal(cleaned)
    except InvalidOperation as exc:
        raise InvalidAmountError(value) from exc


class AmountNormalizer:
    """Applies one invalid-amount policy to every amount it sees."""

    def __init__(self, policy: AmountPolicy | None = None) -> None:
        self.policy = AmountPolicy(policy or SETTINGS.amount_policy)
        self.substitutions = 0

    def normalize(
        self,
        value: RawAmount,
        *,
        row_index: int | None = None,
        column: str | None = None,
        source: str | None = None,
    ) -> Decimal:
        try:
            return parse_amount(value)
        except InvalidAmountError as exc:
            if self.policy is AmountPolicy.STRICT:
                raise InvalidAmountError(value, row_index=row_index, column=column, source=source) from exc
            self.substitutions += 1
            logger.warning(
                "Substituting 0 for invalid %s %r (source=%s, row=%s)",
                column or "amount",
                value,
                source,
                row_index,
            )
            return Decimal("0")
