"""Readiness check: runtime dependencies import and a Gemini credential is set.

No network calls are made.
"""
from __future__ import annotations

import importlib
from dataclasses import dataclass, asdict
from typing import Dict, Any, List

from claimlens.utils.config import AppConfig

RUNTIME_MODULES = ["streamlit", "google.generativeai", "pypdf", "dotenv"]


@dataclass
class ComponentStatus:
    component: str
    ok: bool
    detail: str


def _probe_module(name: str) -> ComponentStatus:
    try:
        importlib.import_module(name)
    except ImportError as e:  # pragma: no cover - broken install
        return ComponentStatus(name, False, f"missing: {e}")
    return ComponentStatus(name, True, "available")


def run_health_check(config: AppConfig | None = None) -> Dict[str, Any]:
    config = config or AppConfig.from_env()
    statuses: List[ComponentStatus] = [_probe_module(m) for m in RUNTIME_MODULES]
    has_key = bool(config.api_key())
    statuses.append(ComponentStatus("credential", has_key, f"{config.api_key_env} {'set' if has_key else 'missing'}"))
    return {"ok": all(s.ok for s in statuses), "components": [asdict(s) for s in statuses]}
