from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Any, Union

PLAIN_TEXT = "plain-text"
PAGED_BINARY = "paged-binary"
MEDIA_KINDS = (PLAIN_TEXT, PAGED_BINARY)

APPROVED = "Approved"
REJECTED = "Rejected"
FURTHER_REVIEW = "Further Review Required"
DECISIONS = (APPROVED, REJECTED, FURTHER_REVIEW)


@dataclass(frozen=True)
class SourceDocument:
    data: bytes
    media_kind: str
    name: str = ""


@dataclass(frozen=True)
class AnalysisRequest:
    query: str
    document: str


@dataclass
class JustificationItem:
    clause: str
    text: str
    reasoning: str

    def as_dict(self) -> Dict[str, str]:
        return {"clause": self.clause, "text": self.text, "reasoning": self.reasoning}


@dataclass
class AnalysisResult:
    decision: str
    amount: Union[int, float]
    justification: List[JustificationItem] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        """False when a rejected claim still carries a payout."""
        return not (self.decision == REJECTED and self.amount != 0)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "decision": self.decision,
            "amount": self.amount,
            "justification": [j.as_dict() for j in self.justification],
        }
