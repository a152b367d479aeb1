"""
Trust decision — turn an extraction and a lookup result into a verdict.

Pure function, no I/O. The outcomes:

  not an academic document  → not genuine, confidence 0
  no registry match         → not genuine, confidence 0
  match + tampering ≥ 30    → not genuine, confidence 45 ("found but untrusted")
  match, no real tampering  → genuine, confidence 100
"""

from __future__ import annotations

from .models import CertificateRecord, ExtractedDocument, VerificationResult

# Tampering reports below this severity are ignored. Inclusive.
TAMPERING_THRESHOLD = 30

CONFIDENCE_GENUINE = 100
CONFIDENCE_TAMPERED_MATCH = 45
CONFIDENCE_NONE = 0

NOT_ACADEMIC_NOTES = (
    "This document does not appear to be an academic certificate or result "
    "sheet. It was identified as an unrelated document (e.g., ID card, "
    "personal document)."
)
MATCH_FOUND_NOTES = "Record found in registry."
NO_MATCH_NOTES = "No matching record found in university database."


def is_tampered(extracted: ExtractedDocument) -> bool:
    """The AI flagged tampering AND rated it at or above the threshold."""
    return (
        extracted.tampering_detected
        and extracted.tampering_score >= TAMPERING_THRESHOLD
    )


def decide(
    extracted: ExtractedDocument, matched: CertificateRecord | None
) -> VerificationResult:
    """Combine the extraction and the registry match into a VerificationResult."""
    if not extracted.is_academic_certificate:
        return VerificationResult(
            is_genuine=False,
            confidence_score=CONFIDENCE_NONE,
            detected_data=extracted,
            matched_record=None,
            tampering_detected=False,
            analysis_notes=NOT_ACADEMIC_NOTES,
        )

    tampered = is_tampered(extracted)
    is_genuine = matched is not None and not tampered

    if is_genuine:
        confidence = CONFIDENCE_GENUINE
    elif matched is not None:
        confidence = CONFIDENCE_TAMPERED_MATCH
    else:
        confidence = CONFIDENCE_NONE

    notes = extracted.forensic_notes or (
        MATCH_FOUND_NOTES if matched is not None else NO_MATCH_NOTES
    )

    return VerificationResult(
        is_genuine=is_genuine,
        confidence_score=confidence,
        detected_data=extracted,
        matched_record=matched,
        tampering_detected=tampered,
        analysis_notes=notes,
    )
