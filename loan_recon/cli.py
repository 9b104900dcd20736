"""Command-line entrypoint for loan reconciliation."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from loan_recon.application.use_cases import ReconcileLoansUseCase, ReconciliationContext
from loan_recon.config import AmountPolicy
from loan_recon.domain.errors import ReconciliationError
from loan_recon.domain.services import LoanReconciler
from loan_recon.infrastructure.parsing.amounts import AmountNormalizer
from loan_recon.infrastructure.repositories.upload_repositories import (
    UploadedLendingRepository,
    UploadedSettlementRepository,
)
from loan_recon.presentation.report import SORT_KEYS, render_csv, sort_results

logger = logging.getLogger(__name__)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile lending records against settlement records")
    parser.add_argument("lendings", type=Path, help="Path to lendings file (csv, tsv, xlsx or xls)")
    parser.add_argument("settlements", type=Path, help="Path to settlements file (csv, tsv, xlsx or xls)")
    parser.add_argument("--sort-by", choices=SORT_KEYS, default="counterparty_id")
    parser.add_argument("--descending", action="store_true", help="Reverse the sort order")
    parser.add_argument("--output", type=Path, help="Write the results as CSV to this path")
    parser.add_argument(
        "--lenient-amounts",
        action="store_true",
        help="Treat unreadable amounts as 0 instead of rejecting the file",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    policy = AmountPolicy.ZERO if args.lenient_amounts else AmountPolicy.STRICT
    normalizer = AmountNormalizer(policy)
    try:
        context = ReconciliationContext(
            lending_repository=UploadedLendingRepository(args.lendings, normalizer=normalizer),
            settlement_repository=UploadedSettlementRepository(args.settlements, normalizer=normalizer),
            reconciler=LoanReconciler(),
        )
        response = ReconcileLoansUseCase(context).execute()
    except (ReconciliationError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    report = response.report
    summary = report.summary
    print("Reconciliation Summary")
    print("======================")
    print(f"Lending records: {len(response.lendings)}")
    print(f"Settlement records: {len(response.settlements)}")
    print(f"Counterparties: {summary.total_counterparties}")
    print(f"Balanced: {summary.balanced}")
    print(f"Overpaid: {summary.overpaid}")
    print(f"Underpaid: {summary.underpaid}")
    print(f"Total lent: {summary.total_lent}")
    print(f"Total paid: {summary.total_paid}")
    print(f"Net balance: {summary.net_balance}")

    ordered = sort_results(report.results, by=args.sort_by, descending=args.descending)
    if ordered:
        print()
        for result in ordered:
            print(
                f"- {result.counterparty_id}: lent {result.total_lent}, paid {result.total_paid}, "
                f"net {result.net_balance} ({result.status.value})"
            )

    if args.output:
        args.output.write_bytes(render_csv(ordered))
        logger.info("Wrote %d results to %s", len(ordered), args.output)

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
