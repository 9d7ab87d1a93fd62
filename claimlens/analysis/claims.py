from __future__ import annotations
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List
import json
from claimlens.utils.types import AnalysisRequest, AnalysisResult, JustificationItem, DECISIONS, APPROVED, REJECTED, FURTHER_REVIEW
from claimlens.utils.exceptions import InvalidRequest, MalformedResponse
from claimlens.utils.logger import logger
from claimlens.llm.gemini import Prompt, StructuredGenerator

PROMPT_VERSION = "v1"
PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"

SYSTEM_INSTRUCTION = (PROMPT_DIR / f"claims_system_{PROMPT_VERSION}.txt").read_text(encoding="utf-8")
USER_TEMPLATE = (PROMPT_DIR / "claims_user.txt").read_text(encoding="utf-8")

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "decision": {
            "type": "STRING",
            "description": "The final decision: 'Approved', 'Rejected', or 'Further Review Required'.",
            "enum": [APPROVED, REJECTED, FURTHER_REVIEW],
        },
        "amount": {
            "type": "NUMBER",
            "description": "The approved payout amount in INR. Should be 0 if the claim is rejected.",
        },
        "justification": {
            "type": "ARRAY",
            "description": "A list of reasons for the decision, mapping back to specific clauses from the document.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "clause": {"type": "STRING", "description": "The identifier of the clause, e.g., 'Clause 3.1'."},
                    "text": {"type": "STRING", "description": "The full text of the relevant clause from the document."},
                    "reasoning": {
                        "type": "STRING",
                        "description": "A clear explanation of how this clause applies to the user's query and supports the overall decision.",
                    },
                },
                "required": ["clause", "text", "reasoning"],
            },
        },
    },
    "required": ["decision", "amount", "justification"],
}


class AnalysisState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def build_request(query: str, document: str) -> AnalysisRequest:
    """Validate raw inputs; the query is trimmed, the document is kept as extracted."""
    query = (query or "").strip()
    if not query:
        raise InvalidRequest("Query cannot be empty.", {"field": "query"})
    if not document or not document.strip():
        raise InvalidRequest("Please upload a policy document.", {"field": "document"})
    return AnalysisRequest(query=query, document=document)


def build_prompt(request: AnalysisRequest) -> Prompt:
    return Prompt(
        system=SYSTEM_INSTRUCTION,
        user=USER_TEMPLATE.format(query=request.query, document=request.document),
    )


def _parse_justification(raw: Any) -> List[JustificationItem]:
    if not isinstance(raw, list):
        raise MalformedResponse("Malformed response from AI. 'justification' must be a list.")
    items: List[JustificationItem] = []
    for idx, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise MalformedResponse("Malformed response from AI. Justification entries must be objects.", {"index": idx})
        missing = [k for k in ("clause", "text", "reasoning") if not isinstance(entry.get(k), str)]
        if missing:
            raise MalformedResponse("Malformed response from AI. Justification entry incomplete.", {"index": idx, "missing": missing})
        items.append(JustificationItem(clause=entry["clause"], text=entry["text"], reasoning=entry["reasoning"]))
    return items


def parse_response(text: str) -> AnalysisResult:
    """Turn the model's JSON text into an AnalysisResult.

    No repair is attempted. `amount` is passed through untouched (int stays
    int, float stays float).
    """
    try:
        payload = json.loads((text or "").strip())
    except json.JSONDecodeError as exc:
        raise MalformedResponse(
            "Failed to parse the analysis from the AI. The AI may have returned an invalid format."
        ) from exc
    if not isinstance(payload, dict):
        raise MalformedResponse("Malformed response from AI. Expected a JSON object.")
    decision = payload.get("decision")
    if not decision or "justification" not in payload:
        raise MalformedResponse("Malformed response from AI. Missing required fields.")
    if decision not in DECISIONS:
        raise MalformedResponse("Malformed response from AI. Unknown decision.", {"decision": decision})
    amount = payload.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise MalformedResponse("Malformed response from AI. 'amount' must be a number.", {"amount": amount})
    return AnalysisResult(decision=decision, amount=amount, justification=_parse_justification(payload["justification"]))


class ClaimAnalyzer:
    """Adjudicates a claim query against policy text through one structured call."""

    def __init__(self, generator: StructuredGenerator, schema: Dict[str, Any] | None = None):
        self.generator = generator
        self.schema = schema or RESPONSE_SCHEMA

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        request = build_request(request.query, request.document)
        logger.info("Claim analysis %s (prompt %s, %d chars of policy text)", AnalysisState.REQUESTING.value, PROMPT_VERSION, len(request.document))
        try:
            raw = self.generator.generate_structured(build_prompt(request), self.schema)
            result = parse_response(raw)
        except Exception as e:
            logger.error("Claim analysis %s: %s", AnalysisState.FAILED.value, type(e).__name__)
            raise
        if not result.is_consistent:
            logger.warning("Rejected claim returned non-zero amount %s; passing through unchanged", result.amount)
        logger.info("Claim analysis %s: %s", AnalysisState.SUCCEEDED.value, result.decision)
        return result


def analyze_claim(generator: StructuredGenerator, query: str, document: str) -> AnalysisResult:
    return ClaimAnalyzer(generator).analyze(AnalysisRequest(query=query, document=document))
