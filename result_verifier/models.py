"""
Pydantic models for registry records and verification results.

Fields are snake_case in Python and camelCase on the wire (certificate_id ↔
certificateId) so the JSON shape matches what the AI returns and what the
frontend consumes. Models accept either spelling on input.
"""

from __future__ import annotations

import math
import re
import uuid
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _new_record_id() -> str:
    return uuid.uuid4().hex[:12]


def _current_year() -> int:
    return date.today().year


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Registry ───────────────────────────────────────────────────────


class RecordStatus(str, Enum):
    """Lifecycle status of a registry record."""

    ACTIVE = "active"
    REVOKED = "revoked"


class CertificateRecord(_CamelModel):
    """A registry entry for one student result.

    Only certificate_id and student_name take part in matching; the rest is
    descriptive. A record with either of those empty is stored but can never
    match.
    """

    id: str = Field(default_factory=_new_record_id)
    certificate_id: str  # Register number / USN / roll number
    student_name: str
    degree_name: str = ""
    institution: str = ""
    graduation_year: int = Field(default_factory=_current_year)
    issue_date: str = ""
    status: RecordStatus = RecordStatus.ACTIVE

    # Populated by bulk import
    semester: Optional[str] = None
    total_marks: Optional[str] = None
    result_status: Optional[str] = None  # class_or_result column


class NewRecordRequest(_CamelModel):
    """Manual entry form for a single record. id, issue date and status are assigned."""

    certificate_id: str = Field(..., min_length=1)
    student_name: str = Field(..., min_length=1)
    degree_name: str = ""
    institution: str = ""
    graduation_year: int = Field(default_factory=_current_year)
    semester: Optional[str] = None
    total_marks: Optional[str] = None
    result_status: Optional[str] = None

    def to_record(self) -> CertificateRecord:
        return CertificateRecord(
            **self.model_dump(),
            issue_date=date.today().isoformat(),
            status=RecordStatus.ACTIVE,
        )


# ─── Extraction ─────────────────────────────────────────────────────


class ExtractedDocument(_CamelModel):
    """What the AI vision call reads off the uploaded image.

    is_academic_certificate, student_name and certificate_id are required —
    a payload without them is an extraction failure. They may still be empty
    strings when the AI could not read them.
    """

    is_academic_certificate: bool
    student_name: str
    certificate_id: str
    institution: Optional[str] = None
    degree_name: Optional[str] = None
    graduation_year: Optional[int] = None
    tampering_detected: bool = False
    tampering_score: float = 0  # 0-100 severity
    forensic_notes: str = ""

    @field_validator("tampering_detected", mode="before")
    @classmethod
    def _null_flag(cls, v: object) -> object:
        return False if v is None else v

    @field_validator("tampering_score", mode="before")
    @classmethod
    def _null_score(cls, v: object) -> object:
        return 0 if v is None else v

    @field_validator("tampering_score")
    @classmethod
    def _clamp_score(cls, v: float) -> float:
        if math.isnan(v):
            return 0.0
        return min(max(v, 0.0), 100.0)

    @field_validator("forensic_notes", mode="before")
    @classmethod
    def _null_notes(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("graduation_year", mode="before")
    @classmethod
    def _loose_year(cls, v: object) -> object:
        """Accept 2025, 2025.0, "2025" or "JUL-2025"; anything else reads as unknown."""
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, float) and not math.isfinite(v):
            return None
        if isinstance(v, (int, float)):
            return int(v)
        match = re.search(r"\d{4}", str(v))
        return int(match.group(0)) if match else None


# ─── Verdict ────────────────────────────────────────────────────────


class VerificationResult(_CamelModel):
    """The final verdict for one uploaded document."""

    is_genuine: bool
    confidence_score: int = Field(ge=0, le=100)
    detected_data: ExtractedDocument
    matched_record: Optional[CertificateRecord] = None
    tampering_detected: bool  # After the severity threshold is applied
    analysis_notes: str
