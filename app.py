import streamlit as st
from dotenv import load_dotenv
from claimlens.utils.config import AppConfig
from claimlens.utils.logger import setup_logging, logger
from claimlens.utils.exceptions import ClaimLensError
from claimlens.utils.types import AnalysisRequest
from claimlens.ingest.pdf_loader import source_from_upload, extract_text
from claimlens.llm.gemini import GeminiClient
from claimlens.analysis.claims import ClaimAnalyzer, PROMPT_VERSION
from claimlens.report.json_export import build_result_json
from claimlens.ui.components import sidebar, result_view, error_message
from claimlens.utils.health import run_health_check

APP_VERSION = "0.1.0"
SAMPLE_QUERY = "46-year-old male, knee surgery in Pune, 3-month-old insurance policy"

load_dotenv()
config = AppConfig.from_env()
setup_logging(config.log_level)

st.set_page_config(page_title="ClaimLens", layout="wide", page_icon="📄")
sidebar(config)
health = run_health_check(config)
if not health["ok"]:
    missing = ", ".join(c["component"] for c in health["components"] if not c["ok"])
    st.sidebar.warning(f"Not ready: {missing}")


@st.cache_resource
def get_analyzer(cfg: AppConfig) -> ClaimAnalyzer:
    return ClaimAnalyzer(GeminiClient(cfg).configure())


for key, default in (("document_text", ""), ("file_name", ""), ("result", None), ("error", None), ("uploader_key", 0)):
    if key not in st.session_state:
        st.session_state[key] = default

st.markdown("## Insurance Claim Analyzer")
st.caption("Upload a policy document, describe the claim, and get a clause-by-clause decision.")

left, right = st.columns([1, 1])

with left:
    query = st.text_area(
        "Claim query",
        value=SAMPLE_QUERY,
        placeholder="e.g., '52-year-old female, heart surgery in Mumbai, 6-month-old policy'",
        height=120,
    )
    if not st.session_state.file_name:
        uploaded = st.file_uploader(
            "Policy document",
            type=["txt", "pdf"],
            key=f"uploader{st.session_state.uploader_key}",
            help="Plain text or PDF",
        )
        if uploaded is not None:
            with st.spinner("Reading document..."):
                try:
                    source = source_from_upload(uploaded, config.max_upload_mb)
                    st.session_state.document_text = extract_text(source)
                    st.session_state.file_name = uploaded.name
                    st.session_state.error = None
                    st.rerun()
                except ClaimLensError as e:
                    logger.warning("Upload rejected: %s", e)
                    st.session_state.document_text = ""
                    st.session_state.error = error_message(e, uploaded.name)
    else:
        doc_col, clear_col = st.columns([4, 1])
        with doc_col:
            st.success(f"📄 {st.session_state.file_name} ({len(st.session_state.document_text):,} chars)")
        with clear_col:
            if st.button("Clear", use_container_width=True):
                st.session_state.document_text = ""
                st.session_state.file_name = ""
                st.session_state.uploader_key += 1
                st.rerun()

    ready = bool(query.strip()) and bool(st.session_state.document_text)
    analyze_clicked = st.button(
        "Analyze Claim",
        type="primary",
        use_container_width=True,
        disabled=not ready,
        help=None if ready else "Upload a document to enable analysis",
    )

if analyze_clicked:
    st.session_state.result = None
    st.session_state.error = None
    with st.spinner("Analyzing..."):
        try:
            analyzer = get_analyzer(config)
            st.session_state.result = analyzer.analyze(
                AnalysisRequest(query=query, document=st.session_state.document_text)
            )
        except ClaimLensError as e:
            st.session_state.error = error_message(e, st.session_state.file_name)

with right:
    if st.session_state.error:
        st.error(st.session_state.error)
    result = st.session_state.result
    if result is not None:
        result_view(result, config.currency)
        meta = {
            "app": "ClaimLens",
            "version": APP_VERSION,
            "model": config.model_name,
            "prompt_version": PROMPT_VERSION,
            "document": st.session_state.file_name,
        }
        st.download_button(
            "Download JSON",
            data=build_result_json(result, meta),
            file_name="claim_decision.json",
            mime="application/json",
        )
    elif not st.session_state.error:
        st.info("Results will appear here.")
