"""Lending and settlement reconciliation toolkit."""
from loan_recon.application.use_cases import ReconcileLoansUseCase, ReconciliationContext
from loan_recon.domain.services import LoanReconciler
from loan_recon.infrastructure.parsing.amounts import AmountNormalizer
from loan_recon.infrastructure.repositories.upload_repositories import (
    UploadedLendingRepository,
    UploadedSettlementRepository,
)

__all__ = [
    "ReconcileLoansUseCase",
    "ReconciliationContext",
    "LoanReconciler",
    "AmountNormalizer",
    "UploadedLendingRepository",
    "UploadedSettlementRepository",
]
