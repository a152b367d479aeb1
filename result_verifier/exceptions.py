"""
Custom exception hierarchy for result verification.

Only genuine failures live here. "Not an academic document", "no match" and
"tampering above threshold" are verdicts, not errors — they travel inside
VerificationResult.
"""

from __future__ import annotations


class VerificationError(Exception):
    """Base exception for all verification failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class ExtractionError(VerificationError):
    """The AI collaborator was unreachable or returned unusable data."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("EXTRACTION_FAILED", message, details)
