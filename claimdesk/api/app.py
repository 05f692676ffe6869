"""
FastAPI application for the claims dashboard.

Provides:
- Claim tracking endpoints (list/search, detail, update, delete)
- Claim filing endpoint running the processing simulator
- Risk preview and dashboard summary
- Health check
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from ..claims.exceptions import ImmutableFieldError, SubmissionInProgressError
from ..claims.processing import ClaimProcessor
from ..claims.profile import AgentProfile, format_role_type, format_specialty, greeting
from ..claims.risk import determine_risk_level, get_risk_multiplier, parse_amount
from ..claims.schema import Claim, ClaimResult, ClaimStatus, RiskLevel
from ..claims.tracking import ClaimSummary, search_claims, summarize_claims
from ..storage import ClaimStore, get_claim_store
from ..utils.config import get_settings
from ..utils.log import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    setup_logging(settings.debug, settings.log_level)
    logger.info("Starting claimdesk API...")
    logger.info(f"Storage: {settings.storage_path} [{settings.storage_key}]")
    yield
    logger.info("Shutting down claimdesk API...")


app = FastAPI(
    title="claimdesk",
    description="Claim filing and tracking for the insurance agent dashboard",
    version="1.0.0",
    lifespan=lifespan,
)


def get_store() -> ClaimStore:
    """Store dependency; overridden in tests."""
    return get_claim_store()


def get_processor() -> ClaimProcessor:
    """A fresh claim form per request."""
    return ClaimProcessor()


# =============================================================================
# Request / Response Models
# =============================================================================


class ClaimSubmission(BaseModel):
    """Claim form as posted by the filing page."""
    policy_number: str
    claim_type: str
    incident_date: str = ""
    description: str = ""
    estimated_amount: str = ""
    contact_phone: str = ""
    contact_email: str = ""
    documents: List[str] = Field(default_factory=list, description="Uploaded file names")


class SubmissionResponse(BaseModel):
    result: ClaimResult
    claim: Claim


class RiskRequest(BaseModel):
    estimated_amount: str
    claim_type: str = ""


class RiskResponse(BaseModel):
    risk_level: RiskLevel
    multiplier: str
    adjusted_amount: str


# =============================================================================
# Health Check Endpoints
# =============================================================================


@app.get("/")
def root(store: ClaimStore = Depends(get_store)):
    """Root endpoint - basic health check."""
    return {
        "service": "claimdesk",
        "status": "running",
        "claims": len(store),
    }


@app.get("/health")
async def health_check():
    """Detailed health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "config": {
            "storage_key": settings.storage_key,
            "processing_delay_seconds": settings.processing_delay_seconds,
            "approval_rate": settings.approval_rate,
        },
    }


@app.post("/dashboard/greeting")
async def dashboard_greeting(profile: AgentProfile):
    """Greeting text for the signed-in agent."""
    return {
        "greeting": greeting(profile),
        "role": format_role_type(profile.role_type),
        "territory": format_specialty(profile.specialty),
    }


# =============================================================================
# Claim Endpoints
# =============================================================================


@app.get("/claims", response_model=List[Claim], response_model_by_alias=True)
def list_claims(
    q: str = "",
    status: Optional[ClaimStatus] = None,
    store: ClaimStore = Depends(get_store),
):
    """List claims, optionally filtered by status and a search term."""
    return search_claims(store.list_claims(status=status), q)


@app.get("/claims/summary", response_model=ClaimSummary)
def claims_summary(store: ClaimStore = Depends(get_store)):
    """Dashboard totals over the whole collection."""
    return summarize_claims(store.claims)


@app.get("/claims/{reference_number}", response_model=Claim, response_model_by_alias=True)
def get_claim(reference_number: str, store: ClaimStore = Depends(get_store)):
    """Get a claim by reference number."""
    claim = store.get_claim(reference_number)
    if claim is None:
        raise HTTPException(status_code=404, detail=f"Claim not found: {reference_number}")
    return claim


@app.patch("/claims/{reference_number}", response_model=Claim, response_model_by_alias=True)
def update_claim(
    reference_number: str,
    fields: Dict[str, Any],
    store: ClaimStore = Depends(get_store),
):
    """Partially update a claim."""
    try:
        updated = store.update_claim(reference_number, fields)
    except ImmutableFieldError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not updated:
        raise HTTPException(status_code=404, detail=f"Claim not found: {reference_number}")
    return store.get_claim(reference_number)


@app.delete("/claims/{reference_number}")
def delete_claim(reference_number: str, store: ClaimStore = Depends(get_store)):
    """Delete every claim with this reference number."""
    removed = store.delete_claim(reference_number)
    if not removed:
        raise HTTPException(status_code=404, detail=f"Claim not found: {reference_number}")
    return {"deleted": removed}


@app.post("/claims", response_model=SubmissionResponse, response_model_by_alias=True)
async def file_claim(
    submission: ClaimSubmission,
    store: ClaimStore = Depends(get_store),
    processor: ClaimProcessor = Depends(get_processor),
):
    """
    File a claim.

    Runs the submission through the processing simulator (including its
    simulated latency), stores the resulting claim and returns both.
    """
    for name, value in submission.model_dump(exclude={"documents"}).items():
        processor.update_field(name, value)
    processor.add_files(submission.documents)

    missing = [
        field_name
        for step in (1, 2, 3)
        for field_name in processor.get_missing_fields(step)
    ]
    if missing:
        raise HTTPException(status_code=422, detail=f"Missing required fields: {', '.join(missing)}")

    try:
        result = await processor.submit()
        claim = processor.build_claim(result)
    except SubmissionInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    # Storage writes are blocking
    await run_in_threadpool(store.add_claim, claim)

    return SubmissionResponse(result=result, claim=claim)


@app.post("/risk", response_model=RiskResponse)
async def preview_risk(request: RiskRequest):
    """Classify an amount/type pair without filing a claim."""
    multiplier = get_risk_multiplier(request.claim_type)
    return RiskResponse(
        risk_level=determine_risk_level(request.estimated_amount, request.claim_type),
        multiplier=str(multiplier),
        adjusted_amount=str(parse_amount(request.estimated_amount) * multiplier),
    )
