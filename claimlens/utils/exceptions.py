"""Error taxonomy shared by the extractor, the analyzer and the UI."""
from __future__ import annotations
from typing import Any, Dict, Optional


class ClaimLensError(Exception):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class UnsupportedMediaKind(ClaimLensError):
    """Declared file type is neither plain text nor PDF."""


class UnreadableDocument(ClaimLensError):
    """Corrupt, encrypted, truncated or undecodable input."""


class InvalidRequest(ClaimLensError):
    """Caller-correctable input problem (empty query, empty document, oversized upload)."""


class ServiceCommunicationError(ClaimLensError):
    """The outbound generation call could not be completed."""


class MalformedResponse(ClaimLensError):
    """The service answered, but not with a usable JSON decision."""
