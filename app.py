"""Streamlit front-end for the loan reconciliation pipeline."""
from __future__ import annotations

from typing import Sequence

import pandas as pd
import streamlit as st

from loan_recon import (
    AmountNormalizer,
    LoanReconciler,
    ReconcileLoansUseCase,
    ReconciliationContext,
    UploadedLendingRepository,
    UploadedSettlementRepository,
)
from loan_recon.application.dto import ReconciliationResponse
from loan_recon.config import AmountPolicy
from loan_recon.domain.errors import ReconciliationError
from loan_recon.domain.models import ReconciliationResult
from loan_recon.presentation.report import (
    export_file_name,
    render_csv,
    render_html,
    render_prompt_context,
    results_to_rows,
    sort_results,
)

UPLOAD_TYPES = ["csv", "tsv", "xlsx", "xls"]

st.set_page_config(page_title="Loan Reconciliation", layout="wide")
st.title("Loan Reconciliation System")


def results_to_dataframe(results: Sequence[ReconciliationResult]) -> pd.DataFrame:
    return pd.DataFrame(
        results_to_rows(results),
        columns=["counterparty_id", "total_lent", "total_paid", "net_balance", "status"],
    )


def run_reconciliation(
    lendings_bytes: bytes,
    lendings_name: str,
    settlements_bytes: bytes,
    settlements_name: str,
    policy: AmountPolicy,
) -> ReconciliationResponse:
    normalizer = AmountNormalizer(policy)
    context = ReconciliationContext(
        lending_repository=UploadedLendingRepository(lendings_bytes, lendings_name, normalizer),
        settlement_repository=UploadedSettlementRepository(settlements_bytes, settlements_name, normalizer),
        reconciler=LoanReconciler(),
    )
    return ReconcileLoansUseCase(context).execute()


if "view" not in st.session_state:
    st.session_state["view"] = "upload"
if "result" not in st.session_state:
    st.session_state["result"] = None


if st.session_state["view"] == "upload":
    col1, col2 = st.columns(2)
    with col1:
        lendings_file = st.file_uploader(
            "Upload lendings file",
            type=UPLOAD_TYPES,
            help="Needs 'counterparty_id' and 'loan_amount' columns",
        )
    with col2:
        settlements_file = st.file_uploader(
            "Upload settlements file",
            type=UPLOAD_TYPES,
            help="Needs 'counterparty_id' and 'payment_amount' columns",
        )

    lenient = st.checkbox("Treat unreadable amounts as 0", value=False)

    run_btn = st.button("Run Reconciliation", disabled=not (lendings_file and settlements_file))
    if run_btn and lendings_file and settlements_file:
        policy = AmountPolicy.ZERO if lenient else AmountPolicy.STRICT
        try:
            with st.spinner("Reconciling..."):
                response = run_reconciliation(
                    lendings_file.read(),
                    lendings_file.name,
                    settlements_file.read(),
                    settlements_file.name,
                    policy,
                )
        except ReconciliationError as exc:
            st.error(f"File parsing error: {exc}")
        else:
            st.session_state["result"] = response
            st.session_state["view"] = "results"
            st.rerun()
else:
    back_clicked = st.button("← Back", key="back_to_upload")
    if back_clicked:
        st.session_state["view"] = "upload"
        st.session_state["result"] = None
        st.rerun()

    response: ReconciliationResponse | None = st.session_state.get("result")
    if not response:
        st.info("No results available. Upload both files and run reconciliation first.")
    else:
        report = response.report
        summary = report.summary

        st.subheader("Summary")
        cols = st.columns(4)
        cols[0].metric("Counterparties", summary.total_counterparties)
        cols[1].metric("Total lent", f"{summary.total_lent:,}")
        cols[2].metric("Total paid", f"{summary.total_paid:,}")
        cols[3].metric("Balanced", f"{summary.balanced}/{summary.total_counterparties}")

        sort_col, order_col = st.columns(2)
        with sort_col:
            sort_by = st.selectbox("Sort by", ["counterparty_id", "net_balance"])
        with order_col:
            descending = st.toggle("Descending", value=False)
        ordered = sort_results(report.results, by=sort_by, descending=descending)

        tabs = st.tabs(["Results", "Lendings", "Settlements", "Assistant context"])
        with tabs[0]:
            st.dataframe(results_to_dataframe(ordered), use_container_width=True)
            st.download_button(
                "Export CSV",
                data=render_csv(ordered),
                file_name=export_file_name(),
                mime="text/csv",
            )
            st.download_button(
                "Export HTML",
                data=render_html(report).encode("utf-8"),
                file_name="reconciliation_results.html",
                mime="text/html",
            )
        with tabs[1]:
            st.dataframe(pd.DataFrame([vars(r) for r in response.lendings]))
        with tabs[2]:
            st.dataframe(pd.DataFrame([vars(r) for r in response.settlements]))
        with tabs[3]:
            st.code(render_prompt_context(report), language="text")
