"""Central configuration for the loan reconciliation package."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import MAX_PREC, Context
from enum import Enum


class AmountPolicy(str, Enum):
    """What to do with an amount cell that cannot be read as a number."""

    STRICT = "strict"
    ZERO = "zero"


DELIMITERS = {"csv": ",", "tsv": "\t"}
EXCEL_ENGINES = {"xlsx": "openpyxl", "xls": "xlrd"}


@dataclass(slots=True, frozen=True)
class Settings:
    decimal_context: Context
    amount_policy: AmountPolicy
    amount_marker: str
    text_encoding: str
    delimiters: dict[str, str] = field(default_factory=dict)
    excel_engines: dict[str, str] = field(default_factory=dict)

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return tuple(self.delimiters) + tuple(self.excel_engines)


SETTINGS = Settings(
    decimal_context=Context(prec=MAX_PREC),
    amount_policy=AmountPolicy.STRICT,
    amount_marker="amount",
    text_encoding="utf-8-sig",
    delimiters=dict(DELIMITERS),
    excel_engines=dict(EXCEL_ENGINES),
)
