"""
Result Sheet Verifier — FastAPI Server
=======================================

RESTful API for the result registry and for verifying uploaded result sheets.

Endpoints:
    POST   /api/verify              Upload a result-sheet image for verification
    GET    /api/records             List registry records (?q= to search)
    POST   /api/records             Add one record
    DELETE /api/records/{id}        Remove a record
    POST   /api/records/import      Bulk import records from a CSV upload
    GET    /api/records/template    Download the CSV import template
    POST   /api/auth/login          Admin login
    GET    /health                  Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from result_verifier import __version__
from result_verifier.bulk_import import csv_template, parse_results_csv
from result_verifier.config import get_settings
from result_verifier.exceptions import ExtractionError
from result_verifier.matching import search_records
from result_verifier.models import CertificateRecord, NewRecordRequest, VerificationResult
from result_verifier.pipeline import VerificationPipeline
from result_verifier.registry import InMemoryRegistry, load_seed_records

load_dotenv()

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = (
    "Analysis failed. Please ensure the Register Number (USN) is clear."
)


# ─── Application Lifespan (seed registry, build pipeline) ───────────

_registry: InMemoryRegistry | None = None
_pipeline: VerificationPipeline | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Seed the in-memory registry and build the pipeline on startup."""
    global _registry, _pipeline  # noqa: PLW0603
    settings = get_settings()
    seed = load_seed_records(settings.seed_path) if settings.seed_path else []
    _registry = InMemoryRegistry(seed)
    _pipeline = VerificationPipeline(_registry, exclude_revoked=settings.exclude_revoked)
    yield
    _registry = None
    _pipeline = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="Result Sheet Verifier API",
    description=(
        "Register university result records and verify photographed result "
        "sheets against them. AI vision extraction, deterministic registry "
        "matching, tampering threshold."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Request / Response Schemas ─────────────────────────────────────


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    success: bool
    token: Optional[str] = None
    message: Optional[str] = None


class ImportResponse(BaseModel):
    """Outcome of a bulk CSV import."""

    count: int
    msg: str
    records: list[CertificateRecord]


class HealthResponse(BaseModel):
    status: str
    version: str
    records_loaded: int


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_registry() -> InMemoryRegistry:
    if _registry is None:
        raise HTTPException(status_code=503, detail="Registry not initialised")
    return _registry


def _get_pipeline() -> VerificationPipeline:
    if _pipeline is None:
        raise HTTPException(status_code=503, detail="Pipeline not initialised")
    return _pipeline


async def _read_upload(file: UploadFile) -> bytes:
    """Read an upload, enforcing the size limit and rejecting empty files."""
    limit = get_settings().max_upload_bytes
    if file.size and file.size > limit:
        raise HTTPException(status_code=413, detail=f"File too large (max {limit} bytes)")

    content = await file.read()
    if len(content) > limit:
        raise HTTPException(status_code=413, detail=f"File too large (max {limit} bytes)")
    if not content:
        raise HTTPException(status_code=422, detail="Uploaded file is empty")
    return content


# ─── Verification ────────────────────────────────────────────────────


@app.post(
    "/api/verify",
    summary="Verify a photographed result sheet",
    tags=["Verification"],
    responses={
        413: {"description": "File too large"},
        422: {"description": "Empty upload"},
        502: {"description": "AI extraction failed — resubmit the image"},
        503: {"description": "Pipeline not yet initialised"},
    },
)
async def verify_document(file: UploadFile) -> VerificationResult:
    """Extract fields from the image with AI and check them against the registry.

    Returns a verdict with:
    - **isGenuine**: `true` only if a registry record matched and no significant tampering was found
    - **confidenceScore**: 100 genuine, 45 matched but tampered, 0 otherwise
    - **matchedRecord**: the registry record, when one matched
    - **analysisNotes**: forensic notes or a summary of the lookup
    """
    image = await _read_upload(file)
    pipeline = _get_pipeline()
    try:
        return await asyncio.to_thread(pipeline.run, image)
    except ExtractionError as e:
        logger.error("Verification aborted: %s", e)
        raise HTTPException(
            status_code=502,
            detail={"code": e.code, "message": ANALYSIS_FAILED_MESSAGE},
        ) from e


# ─── Registry ────────────────────────────────────────────────────────


@app.get("/api/records", summary="List registry records", tags=["Registry"])
def list_records(q: Optional[str] = None) -> list[CertificateRecord]:
    """All records, newest first. `q` filters by student name or register number."""
    return search_records(_get_registry().list(), q)


@app.post(
    "/api/records",
    status_code=201,
    summary="Add a registry record",
    tags=["Registry"],
)
def create_record(request: NewRecordRequest) -> CertificateRecord:
    """Register a single result. Id, issue date and active status are assigned here."""
    return _get_registry().create(request.to_record())


@app.delete(
    "/api/records/{record_id}",
    status_code=204,
    summary="Delete a registry record",
    tags=["Registry"],
    response_class=Response,
)
def delete_record(record_id: str) -> Response:
    """Remove a record. Deleting an unknown id is not an error."""
    _get_registry().delete(record_id)
    return Response(status_code=204)


@app.post(
    "/api/records/import",
    summary="Bulk import records from CSV",
    tags=["Registry"],
    responses={
        400: {"description": "File is not valid UTF-8 text"},
        413: {"description": "File too large"},
    },
)
async def import_records(file: UploadFile) -> ImportResponse:
    """Upload a CSV export. Rows without a register number or name are skipped."""
    content = await _read_upload(file)
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded text")

    records = parse_results_csv(text)
    if records:
        _get_registry().extend(records)
        msg = f"Imported {len(records)} student records successfully."
    else:
        msg = "No valid rows found."
    return ImportResponse(count=len(records), msg=msg, records=records)


@app.get(
    "/api/records/template",
    summary="Download the CSV import template",
    tags=["Registry"],
    response_class=Response,
)
def download_template() -> Response:
    return Response(
        content=csv_template(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="vericert_template.csv"'},
    )


# ─── Auth ────────────────────────────────────────────────────────────


@app.post("/api/auth/login", summary="Admin login", tags=["Auth"])
def login(request: LoginRequest) -> LoginResponse:
    settings = get_settings()
    valid = secrets.compare_digest(
        request.username.encode(), settings.admin_username.encode()
    ) and secrets.compare_digest(
        request.password.encode(), settings.admin_password.encode()
    )
    if not valid:
        return JSONResponse(  # type: ignore[return-value]
            status_code=401,
            content={"success": False, "message": "Invalid credentials"},
        )
    return LoginResponse(success=True, token=secrets.token_urlsafe(24))


# ─── System ──────────────────────────────────────────────────────────


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Registry not yet initialised"}},
)
def health_check() -> HealthResponse:
    """Returns service status and registry size."""
    registry = _get_registry()
    return HealthResponse(
        status="healthy",
        version=__version__,
        records_loaded=len(registry),
    )
