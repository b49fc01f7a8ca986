"""
API Endpoints for the SEO Audit

Handles:
1. Run a new audit and store it
2. Get one audit, the latest audit, or the recent audit list
3. Mark a recommendation resolved / reopened
"""

import logging
import secrets
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from seo_audit.config import Settings, get_settings
from seo_audit.database import (
    get_audit,
    get_latest_audit,
    list_audits,
    resolve_recommendation,
    store_audit,
)
from seo_audit.orchestrator import run_audit

logger = logging.getLogger(__name__)

# HTTP Bearer token extraction
security = HTTPBearer(auto_error=False)

LOCAL_DEV_IDENTITY = "local-dev"
ADMIN_IDENTITY = "admin-token"


async def require_admin_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Check the bearer token against ADMIN_API_TOKEN.

    Open (local dev) when auth is disabled or no token is configured.

    Returns:
        Identity recorded as the audit's trigger

    Raises:
        HTTPException 401: Missing or wrong token
    """
    if not settings.AUTH_ENABLED or not settings.ADMIN_API_TOKEN:
        return LOCAL_DEV_IDENTITY

    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not secrets.compare_digest(credentials.credentials, settings.ADMIN_API_TOKEN):
        logger.warning("Rejected SEO audit request with invalid token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return ADMIN_IDENTITY


router = APIRouter(
    prefix="/api/admin/seo-audit",
    tags=["SEO Audit"],
    dependencies=[Depends(require_admin_token)],
)


# =============================================================================
# REQUEST / RESPONSE MODELS
# =============================================================================

class AuditResponse(BaseModel):
    """Single audit (with page scores and recommendations), or null."""
    success: bool = True
    audit: Optional[Dict[str, Any]] = None


class AuditListResponse(BaseModel):
    """Recent audits, summary only."""
    success: bool = True
    audits: List[Dict[str, Any]]


class ResolveRecommendationRequest(BaseModel):
    """Request to change a recommendation's resolution state."""
    is_resolved: bool = True


class RecommendationResponse(BaseModel):
    """Updated recommendation."""
    success: bool = True
    recommendation: Dict[str, Any]


def _parse_uuid(value: str, not_found: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise HTTPException(status_code=404, detail=not_found)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/run", response_model=AuditResponse)
async def run_seo_audit(
    identity: str = Depends(require_admin_token),
    settings: Settings = Depends(get_settings),
):
    """Crawl the site, score it, generate recommendations and store the run."""
    result = await run_audit(settings=settings)

    try:
        audit_id = store_audit(result, triggered_by=identity)
    except SQLAlchemyError as e:
        logger.error(f"Failed to save audit: {e}")
        raise HTTPException(status_code=500, detail="Failed to save audit")

    return AuditResponse(audit=get_audit(audit_id))


@router.get("")
async def get_seo_audits(
    audit_id: Optional[str] = Query(None, description="Return one audit by id"),
    latest: bool = Query(False, description="Return the most recent audit"),
    limit: int = Query(20, ge=1, le=100),
):
    """
    Audit history.

    - `?audit_id=...`: one audit with page scores and recommendations (404 if unknown)
    - `?latest=true`: the most recent audit, or null
    - otherwise: recent audits, newest first
    """
    try:
        if audit_id:
            audit = get_audit(_parse_uuid(audit_id, "Audit not found"))
            if audit is None:
                raise HTTPException(status_code=404, detail="Audit not found")
            return AuditResponse(audit=audit)

        if latest:
            return AuditResponse(audit=get_latest_audit())

        return AuditListResponse(audits=list_audits(limit=limit))

    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch audits: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch audits")


@router.patch("/recommendations/{recommendation_id}", response_model=RecommendationResponse)
async def update_recommendation(recommendation_id: str, request: ResolveRecommendationRequest):
    """Mark a recommendation resolved, or reopen it."""
    rec_id = _parse_uuid(recommendation_id, "Recommendation not found")
    try:
        recommendation = resolve_recommendation(rec_id, resolved=request.is_resolved)
    except SQLAlchemyError as e:
        logger.error(f"Failed to update recommendation {recommendation_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update recommendation")

    if recommendation is None:
        raise HTTPException(status_code=404, detail="Recommendation not found")
    return RecommendationResponse(recommendation=recommendation)
