"""Report generators for reconciliation results."""
from __future__ import annotations

import csv
import html
import io
from datetime import date
from typing import Iterable, Sequence

from loan_recon.domain.models import ReconciliationResult
from loan_recon.domain.results import ReconciliationReport

CSV_COLUMNS = ("counterparty_id", "total_lent", "total_paid", "net_balance", "status")
SORT_KEYS = ("counterparty_id", "net_balance")


def sort_results(
    results: Iterable[ReconciliationResult],
    by: str = "counterparty_id",
    descending: bool = False,
) -> list[ReconciliationResult]:
    if by not in SORT_KEYS:
        raise ValueError(f"Cannot sort by {by!r}; expected one of {', '.join(SORT_KEYS)}")
    if by == "net_balance":
        # Ties on balance keep a stable identifier order.
        ordered = sorted(results, key=lambda r: r.counterparty_id)
        return sorted(ordered, key=lambda r: r.net_balance, reverse=descending)
    return sorted(results, key=lambda r: r.counterparty_id, reverse=descending)


def results_to_rows(results: Sequence[ReconciliationResult]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for item in results:
        rows.append(
            {
                "counterparty_id": item.counterparty_id,
                "total_lent": str(item.total_lent),
                "total_paid": str(item.total_paid),
                "net_balance": str(item.net_balance),
                "status": item.status.value,
            }
        )
    return rows


def render_csv(results: Sequence[ReconciliationResult]) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(CSV_COLUMNS), lineterminator="\n")
    writer.writeheader()
    writer.writerows(results_to_rows(results))
    return buffer.getvalue().encode("utf-8")


def render_html(report: ReconciliationReport) -> str:
    rows = results_to_rows(report.results)
    if not rows:
        return "<p>No counterparties to reconcile.</p>"
    header = "".join(f"<th>{col}</th>" for col in CSV_COLUMNS)
    body_parts = []
    for row in rows:
        body_parts.append("<tr>" + "".join(f"<td>{html.escape(row[col])}</td>" for col in CSV_COLUMNS) + "</tr>")
    body_html = "".join(body_parts)
    return f"<table><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>"


def render_prompt_context(report: ReconciliationReport) -> str:
    """Plain-text digest of a report for the conversational assistant."""
    summary = report.summary
    lines = [
        "Current reconciliation data:",
        f"- Total counterparties: {summary.total_counterparties}",
        f"- Balanced: {summary.balanced}",
        f"- Overpaid: {summary.overpaid}",
        f"- Underpaid: {summary.underpaid}",
        f"- Total lent: {summary.total_lent}",
        f"- Total paid: {summary.total_paid}",
        f"- Net balance: {summary.net_balance}",
    ]
    if report.results:
        lines.append("")
        lines.append("Counterparty details:")
        for r in report.results:
            lines.append(
                f"{r.counterparty_id}: lent {r.total_lent}, paid {r.total_paid}, "
                f"balance {r.net_balance} ({r.status.value})"
            )
    return "\n".join(lines)


def export_file_name(today: date | None = None) -> str:
    today = today or date.today()
    return f"reconciliation_results_{today.isoformat()}.csv"
