"""
AI extraction from a photographed result sheet using OpenAI vision + JSON output.

The model reads the sheet and reports what it sees: is this an academic
document, who is it for, which register number, and does anything look
edited. It does NOT decide whether the sheet is genuine — that is the
registry lookup and decision code's job.

Design:
  - JSON mode enforced (structured output, not free text)
  - Image sent inline as a base64 data URL; MIME type sniffed from magic bytes
  - Client timeout from settings; no automatic retries
  - Any failure (no key, network, timeout, bad JSON, missing required field)
    raises ExtractionError — there is no partial result
"""

from __future__ import annotations

import base64
import json
import logging

import openai
from openai import OpenAI
from pydantic import ValidationError

from .config import Settings, get_settings
from .exceptions import ExtractionError
from .models import ExtractedDocument

logger = logging.getLogger(__name__)


# ─── System Prompt ───────────────────────────────────────────────────

SYSTEM_PROMPT = """\
You are a forensic document expert. Analyze the attached image to determine
whether it is an academic result sheet, degree certificate, or marks card.

1. Document type:
   - If it is an ID card (Aadhaar, PAN, etc.), a personal letter, or anything
     other than an academic credential, set isAcademicCertificate to false.

2. OCR extraction (STRICT RULES):
   - studentName: full name exactly as printed.
   - certificateId: the unique identifier (USN, Register Number, or Roll No).
     Return ONLY the alphanumeric code. Do NOT include labels like "USN:" or
     "Reg No:", and no spaces. Example: "4MW22CS183".
   - institution: the university or college name.
   - graduationYear: the 4-digit year of examination or issue.
   - Do not infer or hallucinate values. Use "" for text you cannot read.

3. Forensic check:
   - Evaluate text alignment, font consistency, and signs of image
     manipulation around the student name and register number.
   - tamperingScore is 0 (clean) to 100 (certainly edited).

Return a JSON object with these exact keys:
{
    "isAcademicCertificate": boolean,
    "studentName": "string",
    "certificateId": "string",
    "institution": "string or null",
    "degreeName": "string or null",
    "graduationYear": number or null,
    "tamperingDetected": boolean,
    "tamperingScore": number,
    "forensicNotes": "string"
}
"""

USER_PROMPT = "Analyze this document and return the JSON object."

REQUIRED_FIELDS = ("isAcademicCertificate", "studentName", "certificateId")


def analyze_image(
    image_bytes: bytes, settings: Settings | None = None
) -> ExtractedDocument:
    """Send the image to the vision model and parse its answer.

    Raises:
        ExtractionError: if no verdict-ready extraction could be produced.
    """
    settings = settings or get_settings()
    if not image_bytes:
        raise ExtractionError("Empty image")
    if not settings.openai_api_key:
        raise ExtractionError("OPENAI_API_KEY is not configured")

    client = OpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.extraction_timeout,
        max_retries=0,
    )
    mime_type = sniff_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("ascii")

    try:
        response = client.chat.completions.create(
            model=settings.openai_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": USER_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                        },
                    ],
                },
            ],
            response_format={"type": "json_object"},
        )
    except openai.OpenAIError as e:
        logger.error("Vision call failed: %s", e)
        raise ExtractionError(
            "AI service unavailable", {"reason": type(e).__name__}
        ) from e

    content = response.choices[0].message.content
    if not content:
        logger.error("Vision model returned empty content")
        raise ExtractionError("No response from AI")

    document = parse_extraction(content)
    logger.info(
        "Extraction succeeded (academic=%s, tampering=%s/%s)",
        document.is_academic_certificate,
        document.tampering_detected,
        document.tampering_score,
    )
    return document


def parse_extraction(content: str | dict) -> ExtractedDocument:
    """Validate the model's JSON payload into an ExtractedDocument.

    Raises:
        ExtractionError: on non-JSON text, a non-object payload, or a missing
            required field.
    """
    if isinstance(content, str):
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ExtractionError("AI response is not valid JSON") from e
    else:
        data = content

    if not isinstance(data, dict):
        raise ExtractionError("AI response is not a JSON object")

    missing = [f for f in REQUIRED_FIELDS if data.get(f) is None]
    if missing:
        raise ExtractionError(
            f"AI response is missing required field(s): {', '.join(missing)}",
            {"missing": missing},
        )

    try:
        return ExtractedDocument.model_validate(data)
    except ValidationError as e:
        raise ExtractionError(
            "AI response has invalid field values", {"errors": e.errors()}
        ) from e


# ─── Image Helpers ───────────────────────────────────────────────────

_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


def sniff_mime_type(image_bytes: bytes) -> str:
    """Guess the image MIME type from its leading bytes. Defaults to JPEG."""
    for signature, mime in _SIGNATURES:
        if image_bytes.startswith(signature):
            return mime
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
