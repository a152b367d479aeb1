"""
Registry lookup — find the record an extracted document claims to be.

Matching policy:
  - The certificate id is the primary key: normalized ids must be equal, and
    an empty extracted id never matches anything.
  - The name is a secondary check, lenient on purpose: either normalized name
    may contain the other, so OCR truncation ("Mohammed") or expansion
    ("Mohammed Ali Khan") still matches. An empty extracted name is contained
    in every name, so a readable id alone is enough when the AI missed the name.
  - A registry record whose id or name normalizes to "" never matches.
  - First match in registry order wins. Duplicate ids are not reported.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import CertificateRecord, RecordStatus
from .normalizer import normalize


def find_match(
    records: Iterable[CertificateRecord],
    extracted_id: str | None,
    extracted_name: str | None,
    *,
    exclude_revoked: bool = False,
) -> CertificateRecord | None:
    """Return the first record whose id and name match the extracted values.

    Args:
        records: Registry snapshot, scanned in order.
        extracted_id: Certificate id read from the document.
        extracted_name: Student name read from the document.
        exclude_revoked: Skip revoked records. Off by default, so a revoked
            record still verifies unless the caller opts in.
    """
    detected_id = normalize(extracted_id)
    if not detected_id:
        return None
    detected_name = normalize(extracted_name)

    for record in records:
        if exclude_revoked and record.status == RecordStatus.REVOKED:
            continue
        if normalize(record.certificate_id) != detected_id:
            continue
        record_name = normalize(record.student_name)
        if not record_name:
            continue
        if detected_name in record_name or record_name in detected_name:
            return record

    return None


def search_records(
    records: Sequence[CertificateRecord], term: str | None
) -> list[CertificateRecord]:
    """Case-insensitive substring search over student name and certificate id."""
    if not term:
        return list(records)
    needle = term.lower()
    return [
        r
        for r in records
        if needle in r.student_name.lower() or needle in r.certificate_id.lower()
    ]
