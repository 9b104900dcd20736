"""Repositories backed by uploaded lending and settlement files."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Sequence

from loan_recon.domain.models import LendingRecord, SettlementRecord
from loan_recon.domain.repositories import LendingRepository, SettlementRepository
from loan_recon.infrastructure.parsing.amounts import AmountNormalizer
from loan_recon.infrastructure.parsing.schema import LENDING_SCHEMA, SETTLEMENT_SCHEMA, validate_table
from loan_recon.infrastructure.parsing.tabular import ingest
from loan_recon.infrastructure.parsing.utils import ensure_bytes


def _file_name(source: BytesIO | Path | bytes, file_name: str | None) -> str:
    if file_name:
        return file_name
    if isinstance(source, Path):
        return source.name
    raise ValueError("file_name is required when uploading raw bytes")


class UploadedLendingRepository(LendingRepository):
    def __init__(
        self,
        source: BytesIO | Path | bytes,
        file_name: str | None = None,
        normalizer: AmountNormalizer | None = None,
    ) -> None:
        self._file_name = _file_name(source, file_name)
        self._source = ensure_bytes(source)
        self._normalizer = normalizer or AmountNormalizer()

    def list_records(self) -> Sequence[LendingRecord]:
        table = ingest(BytesIO(self._source), self._file_name)
        return validate_table(table, LENDING_SCHEMA, self._normalizer)


class UploadedSettlementRepository(SettlementRepository):
    def __init__(
        self,
        source: BytesIO | Path | bytes,
        file_name: str | None = None,
        normalizer: AmountNormalizer | None = None,
    ) -> None:
        self._file_name = _file_name(source, file_name)
        self._source = ensure_bytes(source)
        self._normalizer = normalizer or AmountNormalizer()

    def list_records(self) -> Sequence[SettlementRecord]:
        table = ingest(BytesIO(self._source), self._file_name)
        return validate_table(table, SETTLEMENT_SCHEMA, self._normalizer)
