import json
import logging
import pytest
from claimlens.utils.types import AnalysisRequest, AnalysisResult, JustificationItem
from claimlens.utils.exceptions import InvalidRequest, MalformedResponse, ServiceCommunicationError
from claimlens.analysis.claims import (
    ClaimAnalyzer,
    RESPONSE_SCHEMA,
    SYSTEM_INSTRUCTION,
    analyze_claim,
    build_prompt,
    build_request,
    parse_response,
)

QUERY = "46-year-old male, knee surgery in Pune, 3-month-old insurance policy"
WAITING_POLICY = "Clause 4.2: Orthopedic procedures covered after 90-day waiting period."
EXCLUSION_POLICY = "Clause 9.3: Knee replacement and all orthopedic surgery are permanently excluded."


class StubGenerator:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def generate_structured(self, prompt, schema):
        self.calls.append((prompt, schema))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def approved_payload():
    return {
        "decision": "Approved",
        "amount": 125000.5,
        "justification": [
            {
                "clause": "Clause 4.2",
                "text": "Orthopedic procedures covered after 90-day waiting period.",
                "reasoning": "Policy age of 3 months satisfies the 90-day waiting period for knee surgery.",
            }
        ],
    }


@pytest.mark.parametrize("query,document", [("", WAITING_POLICY), ("   ", WAITING_POLICY), (QUERY, ""), (QUERY, "  \n ")])
def test_empty_inputs_never_reach_service(query, document):
    gen = StubGenerator("{}")
    with pytest.raises(InvalidRequest):
        ClaimAnalyzer(gen).analyze(AnalysisRequest(query=query, document=document))
    assert gen.calls == []


def test_build_request_trims_query_only():
    req = build_request("  knee surgery  ", "  policy text ")
    assert req.query == "knee surgery"
    assert req.document == "  policy text "


def test_prompt_embeds_query_and_document():
    prompt = build_prompt(AnalysisRequest(query=QUERY, document=WAITING_POLICY))
    assert prompt.system == SYSTEM_INSTRUCTION
    assert f'"{QUERY}"' in prompt.user
    assert f"---\n{WAITING_POLICY}\n---" in prompt.user
    assert "If rejected, the amount must be 0" in prompt.system


def test_one_request_with_declared_schema():
    gen = StubGenerator(json.dumps(approved_payload()))
    analyze_claim(gen, QUERY, WAITING_POLICY)
    assert len(gen.calls) == 1
    _, schema = gen.calls[0]
    assert schema is RESPONSE_SCHEMA
    assert schema["properties"]["decision"]["enum"] == ["Approved", "Rejected", "Further Review Required"]
    assert schema["properties"]["justification"]["items"]["required"] == ["clause", "text", "reasoning"]


def test_invalid_json_is_malformed():
    with pytest.raises(MalformedResponse):
        analyze_claim(StubGenerator("Sure! Here is the decision: Approved"), QUERY, WAITING_POLICY)


def test_missing_decision_is_malformed():
    payload = approved_payload()
    del payload["decision"]
    with pytest.raises(MalformedResponse):
        analyze_claim(StubGenerator(json.dumps(payload)), QUERY, WAITING_POLICY)


@pytest.mark.parametrize("mutate", [
    lambda p: p.pop("justification"),
    lambda p: p.update(justification="Clause 4.2"),
    lambda p: p.update(decision="Maybe"),
    lambda p: p.update(amount="1000"),
    lambda p: p["justification"][0].pop("reasoning"),
])
def test_structural_violations_are_malformed(mutate):
    payload = approved_payload()
    mutate(payload)
    with pytest.raises(MalformedResponse):
        parse_response(json.dumps(payload))


def test_json_array_is_malformed():
    with pytest.raises(MalformedResponse):
        parse_response("[]")


def test_empty_justification_is_allowed():
    result = parse_response('{"decision": "Further Review Required", "amount": 0, "justification": []}')
    assert result.justification == []


def test_service_failure_propagates_without_retry():
    gen = StubGenerator(ServiceCommunicationError("timeout"))
    with pytest.raises(ServiceCommunicationError):
        analyze_claim(gen, QUERY, WAITING_POLICY)
    assert len(gen.calls) == 1


def test_scenario_waiting_period_approved():
    result = analyze_claim(StubGenerator(json.dumps(approved_payload())), QUERY, WAITING_POLICY)
    assert result.decision == "Approved"
    assert result.amount > 0
    assert any("4.2" in j.clause for j in result.justification)


def test_scenario_exclusion_rejected():
    body = {
        "decision": "Rejected",
        "amount": 0,
        "justification": [{"clause": "Clause 9.3", "text": EXCLUSION_POLICY, "reasoning": "Knee surgery is excluded."}],
    }
    result = analyze_claim(StubGenerator(json.dumps(body)), QUERY, EXCLUSION_POLICY)
    assert result.decision == "Rejected"
    assert result.amount == 0
    assert result.is_consistent


def test_round_trip_preserves_fields_exactly():
    payload = approved_payload()
    wire = "\n  " + json.dumps(payload) + "  \n"
    result = analyze_claim(StubGenerator(wire), QUERY, WAITING_POLICY)
    assert result == AnalysisResult(
        decision="Approved",
        amount=125000.5,
        justification=[JustificationItem(**payload["justification"][0])],
    )
    assert result.as_dict() == payload


def test_rejected_with_amount_passes_through_with_warning(caplog):
    body = {"decision": "Rejected", "amount": 5000, "justification": []}
    with caplog.at_level(logging.WARNING, logger="claimlens"):
        result = analyze_claim(StubGenerator(json.dumps(body)), QUERY, EXCLUSION_POLICY)
    assert result.amount == 5000
    assert not result.is_consistent
    assert "non-zero amount" in caplog.text
