"""Quick smoke test for the extract -> analyze pipeline (no network).

Run with:  python smoke_test.py
"""
from __future__ import annotations
import json
from claimlens.utils.types import SourceDocument, PLAIN_TEXT
from claimlens.ingest.pdf_loader import extract_text
from claimlens.analysis.claims import analyze_claim


POLICY = (
    "Clause 4.2: Orthopedic procedures covered after 90-day waiting period.\n"
    "Clause 7.1: Maximum payout per procedure is INR 1,50,000."
)


class StubGenerator:
    def generate_structured(self, prompt, schema):  # noqa: D401
        return json.dumps({
            "decision": "Approved",
            "amount": 150000,
            "justification": [{
                "clause": "Clause 4.2",
                "text": "Orthopedic procedures covered after 90-day waiting period.",
                "reasoning": "Policy is 3 months old, so the waiting period has elapsed.",
            }],
        })


def main():
    text = extract_text(SourceDocument(data=POLICY.encode("utf-8"), media_kind=PLAIN_TEXT, name="policy.txt"))
    result = analyze_claim(StubGenerator(), "46-year-old male, knee surgery in Pune, 3-month-old insurance policy", text)
    print("Decision:", result.decision)
    print("Amount:", result.amount)
    print("Clauses:", [j.clause for j in result.justification])
    assert result.decision == "Approved" and result.amount > 0, "Pipeline did not yield the stubbed decision"
    print("Smoke test passed.")


if __name__ == "__main__":
    main()
