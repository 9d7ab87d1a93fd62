from __future__ import annotations
import html
import streamlit as st
from claimlens.utils.config import AppConfig
from claimlens.utils.types import AnalysisResult, APPROVED, REJECTED
from claimlens.utils.exceptions import (
    ClaimLensError,
    UnsupportedMediaKind,
    UnreadableDocument,
    InvalidRequest,
    ServiceCommunicationError,
    MalformedResponse,
)

PRIMARY_COLOR = "#0284C7"  # sky
DECISION_COLORS = {
    APPROVED: ("#DCFCE7", "#166534"),
    REJECTED: ("#FEE2E2", "#991B1B"),
}
REVIEW_COLORS = ("#FEF9C3", "#854D0E")
CURRENCY_SYMBOLS = {"INR": "₹", "USD": "$", "EUR": "€", "GBP": "£"}

GLOBAL_CSS = """
<style>
html, body, [class*="css"]  { font-family: 'Inter', 'Segoe UI', sans-serif; }
.metric { background:#f8fafc; border:1px solid #e2e8f0; border-radius:10px; padding:0.9rem 1rem; }
.metric h4 { font-size:0.75rem; color:#64748b; margin:0 0 6px 0; font-weight:500; }
.metric p { font-weight:700; font-size:1.5rem; margin:0; color:#1e293b; }
.decision-badge { padding:4px 12px; border-radius:999px; font-size:.9rem; font-weight:600; display:inline-block; }
.just-card { border:1px solid #e2e8f0; background:#f8fafc; border-radius:10px; padding:.8rem 1rem; margin-bottom:.7rem; }
.just-clause { font-weight:600; color:__PRIMARY__; margin-bottom:.4rem; }
.just-quote { border-left:4px solid #cbd5e1; padding-left:.8rem; font-style:italic; color:#475569; margin-bottom:.5rem; }
.just-reason { font-size:.85rem; color:#334155; }
</style>
""".replace("__PRIMARY__", PRIMARY_COLOR)


def error_message(exc: ClaimLensError, filename: str = "") -> str:
    """User-facing text for each error class."""
    if isinstance(exc, UnsupportedMediaKind):
        return "Please upload a valid .txt or .pdf file."
    if isinstance(exc, UnreadableDocument):
        return f"Failed to process file: {filename}. It might be corrupted or password-protected."
    if isinstance(exc, InvalidRequest):
        return exc.message
    if isinstance(exc, MalformedResponse):
        return "Failed to parse the analysis from the AI. The AI may have returned an invalid format."
    if isinstance(exc, ServiceCommunicationError):
        return "An error occurred while communicating with the AI analysis service."
    return "An unknown error occurred during analysis."


def format_amount(amount, currency: str = "INR") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    return f"{symbol}{amount:,.2f}"


def sidebar(config: AppConfig):
    st.markdown(GLOBAL_CSS, unsafe_allow_html=True)
    st.sidebar.markdown("### ClaimLens")
    st.sidebar.caption("Policy-grounded claim decisions")
    st.sidebar.markdown(f"**Model:** `{config.model_name}`")
    st.sidebar.markdown(f"**Temperature:** {config.temperature}")
    st.sidebar.markdown(f"**Currency:** {config.currency}")
    st.sidebar.markdown("<hr>", unsafe_allow_html=True)
    st.sidebar.caption("Decisions are generated by an AI model. Not a substitute for a claims officer.")


def decision_badge(decision: str) -> str:
    bg, fg = DECISION_COLORS.get(decision, REVIEW_COLORS)
    label = decision if decision in DECISION_COLORS else "Further Review"
    return f"<span class='decision-badge' style='background:{bg};color:{fg};'>{label}</span>"


def result_view(result: AnalysisResult, currency: str = "INR"):
    left, right = st.columns(2)
    with left:
        st.markdown(f"<div class='metric'><h4>Decision</h4><p>{decision_badge(result.decision)}</p></div>", unsafe_allow_html=True)
    with right:
        st.markdown(f"<div class='metric'><h4>Payout Amount</h4><p>{format_amount(result.amount, currency)}</p></div>", unsafe_allow_html=True)
    st.markdown("#### Justification")
    if not result.justification:
        st.info("The model returned no clause citations.")
    for item in result.justification:
        st.markdown(
            f"""
            <div class='just-card'>
              <div class='just-clause'>{html.escape(item.clause)}</div>
              <div class='just-quote'>"{html.escape(item.text)}"</div>
              <div class='just-reason'><strong>Reasoning:</strong> {html.escape(item.reasoning)}</div>
            </div>
            """,
            unsafe_allow_html=True,
        )
