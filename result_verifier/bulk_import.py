"""
Bulk import of result records from a comma-separated export.

Expected header (case-insensitive, any column order):

    register_number,student_name,semester,exam_month_year,total_marks,class_or_result,college

`usn` is accepted in place of `register_number`. Only the id and the name are
required; rows missing either are skipped, not rejected.
"""

from __future__ import annotations

import csv
import logging
import re
from datetime import date

from .models import CertificateRecord, RecordStatus

logger = logging.getLogger(__name__)

TEMPLATE_HEADER = (
    "register_number,student_name,semester,exam_month_year,"
    "total_marks,class_or_result,college"
)
TEMPLATE_ROWS = (
    "4MW22CS183,VINYAS,6,JUL-2025,,PASS,VTU",
    "4MW22CS145,Mohammed Ali,6,JUL-2025,,PASS,VTU",
)

_YEAR = re.compile(r"\d{4}")


def csv_template() -> str:
    """A ready-to-fill CSV with the header and two sample rows."""
    return "\n".join((TEMPLATE_HEADER, *TEMPLATE_ROWS))


def parse_results_csv(text: str) -> list[CertificateRecord]:
    """Turn CSV text into new registry records, in file order.

    Returns an empty list for input without at least a header and one row.
    """
    lines = text.splitlines()
    if len(lines) < 2:
        return []

    reader = csv.reader(lines)
    headers = [h.strip().lower() for h in next(reader)]

    records: list[CertificateRecord] = []
    for line_no, values in enumerate(reader, start=2):
        if not any(v.strip() for v in values):
            continue
        row = {h: (values[i].strip() if i < len(values) else "") for i, h in enumerate(headers)}

        cert_id = row.get("register_number") or row.get("usn")
        name = row.get("student_name")
        if not cert_id or not name:
            logger.warning("Skipping CSV line %d: missing register number or name", line_no)
            continue

        records.append(_row_to_record(cert_id, name, row))

    logger.info("Parsed %d records from CSV", len(records))
    return records


def _row_to_record(cert_id: str, name: str, row: dict[str, str]) -> CertificateRecord:
    semester = row.get("semester") or None
    exam_date = row.get("exam_month_year") or ""

    return CertificateRecord(
        certificate_id=cert_id,
        student_name=name,
        degree_name=f"Semester {semester}" if semester else "University Result",
        institution=row.get("college") or "University",
        graduation_year=_extract_year(exam_date),
        issue_date=exam_date,
        status=RecordStatus.ACTIVE,
        semester=semester,
        total_marks=row.get("total_marks") or None,
        result_status=row.get("class_or_result") or None,
    )


def _extract_year(exam_date: str) -> int:
    """First 4-digit run in 'JUL-2025' style dates; current year if none."""
    match = _YEAR.search(exam_date)
    return int(match.group(0)) if match else date.today().year
