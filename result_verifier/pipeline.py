"""
Verification pipeline — orchestrates one upload from image to verdict.

Flow:
  ┌────────────┐
  │   Image    │
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │ AI Extract │   ← the only network call; failure raises ExtractionError
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │ Academic?  │── no ──► verdict: not genuine, confidence 0
  └─────┬──────┘
        │ yes
  ┌─────▼──────┐
  │  Registry  │   ← normalized id + lenient name, first match wins
  │   Lookup   │
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │  Decision  │   ← match + tampering threshold → VerificationResult
  └────────────┘

Design principles:
  - Each request is one sequential pass; nothing is cached or retried.
  - The registry is read once per request as a snapshot and never mutated.
  - The image is SHA-256 hashed and logged for audit trail.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable

from .decision import decide
from .extractor_llm import analyze_image
from .matching import find_match
from .models import ExtractedDocument, VerificationResult
from .registry import RegistryStore

logger = logging.getLogger(__name__)

Extractor = Callable[[bytes], ExtractedDocument]


class VerificationPipeline:
    """Verifies uploaded result sheets against a registry.

    Usage:
        pipeline = VerificationPipeline(registry)
        result = pipeline.run(image_bytes)   # may raise ExtractionError
        if not result.is_genuine:
            print(result.analysis_notes)
    """

    def __init__(
        self,
        registry: RegistryStore,
        extractor: Extractor | None = None,
        exclude_revoked: bool = False,
    ):
        self.registry = registry
        self.extractor = extractor or analyze_image
        self.exclude_revoked = exclude_revoked

    def run(self, image_bytes: bytes) -> VerificationResult:
        """Extract, look up and decide for one image.

        Raises:
            ExtractionError: if the AI call fails. No verdict is produced.
        """
        image_hash = hashlib.sha256(image_bytes).hexdigest()
        logger.info("Analyzing image %s (%d bytes)", image_hash[:16], len(image_bytes))

        extracted = self.extractor(image_bytes)
        result = self.verify(extracted)

        logger.info(
            "Verdict for %s: genuine=%s confidence=%d",
            image_hash[:16],
            result.is_genuine,
            result.confidence_score,
        )
        return result

    def verify(self, extracted: ExtractedDocument) -> VerificationResult:
        """Decide for an already-extracted document (no network)."""
        if not extracted.is_academic_certificate:
            return decide(extracted, None)

        matched = find_match(
            self.registry.list(),
            extracted.certificate_id,
            extracted.student_name,
            exclude_revoked=self.exclude_revoked,
        )
        if matched is None:
            logger.info("No registry match for id '%s'", extracted.certificate_id)
        return decide(extracted, matched)
