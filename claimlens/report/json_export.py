from __future__ import annotations
import json
from typing import Any, Dict
from claimlens.utils.types import AnalysisResult

def build_result_json(result: AnalysisResult, meta: Dict[str, Any]) -> str:
    """Return a JSON snapshot of one claim decision.

    meta can include app version, model name, prompt version, source file name, etc.
    """
    payload = {"meta": meta}
    payload.update(result.as_dict())
    return json.dumps(payload, ensure_ascii=False, indent=2)
