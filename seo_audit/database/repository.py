"""
Repository Layer - Clean Interface for Audit History

Provides simple functions to store and retrieve audit runs.
Handles all SQLAlchemy complexity internally; callers only see UUIDs and
plain dicts.
"""

import logging
from datetime import datetime
from typing import List, Dict, Any, Optional
from uuid import UUID

from ..models import AuditResult, PageAnalysis, SeoRecommendation
from .models import SeoAudit, SeoPageScore, SeoAuditRecommendation
from .session import get_db_context

logger = logging.getLogger(__name__)


# =============================================================================
# WRITE
# =============================================================================

def _page_score_row(page: PageAnalysis, position: int) -> SeoPageScore:
    return SeoPageScore(
        position=position,
        page_path=page.path,
        page_url=page.url,
        overall_score=page.geo_average,
        status_code=page.status_code,
        response_time_ms=page.response_time_ms,
        has_title=bool(page.title),
        title_length=page.title_length,
        title_value=page.title,
        has_description=bool(page.description),
        description_length=page.description_length,
        description_value=page.description,
        has_og_title=bool(page.og_title),
        has_og_description=bool(page.og_description),
        has_og_image=bool(page.og_image),
        has_twitter_card=bool(page.twitter_card),
        has_canonical=bool(page.canonical),
        canonical_value=page.canonical,
        word_count=page.word_count,
        h1_count=page.h1_count,
        h2_count=page.h2_count,
        h3_count=page.h3_count,
        h1_values=list(page.h1_values),
        img_count=page.img_count,
        img_with_alt=page.img_with_alt,
        internal_links=page.internal_links,
        external_links=page.external_links,
        has_json_ld=page.has_json_ld,
        json_ld_types=list(page.json_ld_types),
        has_faq_schema=page.has_faq_schema,
        has_breadcrumb_schema=page.has_breadcrumb_schema,
        has_product_schema=page.has_product_schema,
        content_clarity_score=page.content_clarity_score,
        answerability_score=page.answerability_score,
        citation_worthiness_score=page.citation_worthiness_score,
        aeo_score=page.aeo_score,
        cro_score=page.cro_score,
        cta_count=page.cta_count,
        form_count=page.form_count,
    )


def _recommendation_row(rec: SeoRecommendation, position: int) -> SeoAuditRecommendation:
    return SeoAuditRecommendation(
        position=position,
        page_path=rec.page_path,
        severity=rec.severity,
        category=rec.category,
        title=rec.title,
        description=rec.description,
        current_value=rec.current_value,
        recommended_value=rec.recommended_value,
        estimated_impact=rec.estimated_impact,
        is_auto_fixable=rec.is_auto_fixable,
        fix_type=rec.fix_type,
        is_resolved=False,
    )


def store_audit(result: AuditResult, triggered_by: Optional[str] = None) -> UUID:
    """
    Persist a finished audit with its page scores and recommendations.

    Returns:
        UUID of the stored audit
    """
    counts = result.issue_counts()
    validation = result.validation

    with get_db_context() as db:
        audit = SeoAudit(
            overall_score=result.scores.overall,
            technical_score=result.scores.technical,
            content_score=result.scores.content,
            structured_data_score=result.scores.structured_data,
            performance_score=result.scores.performance,
            geo_score=result.scores.geo,
            aeo_score=result.scores.aeo,
            cro_score=result.scores.cro,
            total_issues=result.total_issues,
            critical_issues=counts["critical"],
            high_issues=counts["high"],
            medium_issues=counts["medium"],
            low_issues=counts["low"],
            robots_txt_valid=validation.robots_txt_valid,
            sitemap_page_count=validation.sitemap_page_count,
            sitemap_missing_pages=list(validation.sitemap_missing_pages),
            og_image_exists=validation.og_image_exists,
            manifest_exists=validation.manifest_exists,
            pages_audited=result.pages_audited,
            audit_duration_ms=result.audit_duration_ms,
            triggered_by=triggered_by,
            created_at=datetime.utcnow(),
        )
        audit.page_scores = [_page_score_row(page, i) for i, page in enumerate(result.pages)]
        audit.recommendations = [_recommendation_row(rec, i) for i, rec in enumerate(result.recommendations)]
        db.add(audit)
        db.flush()

        audit_id = audit.id
        logger.info(
            f"Stored audit {audit_id}: {len(result.pages)} pages, {len(result.recommendations)} recommendations"
        )
        return audit_id


def resolve_recommendation(recommendation_id: UUID, resolved: bool = True) -> Optional[Dict[str, Any]]:
    """Mark a recommendation resolved (or reopen it). Returns None if not found."""
    with get_db_context() as db:
        rec = db.get(SeoAuditRecommendation, recommendation_id)
        if not rec:
            return None
        rec.is_resolved = resolved
        rec.resolved_at = datetime.utcnow() if resolved else None
        db.flush()
        logger.info(f"Recommendation {recommendation_id} {'resolved' if resolved else 'reopened'}")
        return _recommendation_to_dict(rec)


# =============================================================================
# READ
# =============================================================================

def get_audit(audit_id: UUID) -> Optional[Dict[str, Any]]:
    """Full audit with page scores and recommendations, or None."""
    with get_db_context() as db:
        audit = db.get(SeoAudit, audit_id)
        if not audit:
            return None
        return _audit_to_dict(audit, include_children=True)


def get_latest_audit() -> Optional[Dict[str, Any]]:
    """Most recent audit with children, or None when nothing has run yet."""
    with get_db_context() as db:
        audit = db.query(SeoAudit).order_by(SeoAudit.created_at.desc()).first()
        if not audit:
            return None
        return _audit_to_dict(audit, include_children=True)


def list_audits(limit: int = 20) -> List[Dict[str, Any]]:
    """Most recent audits, newest first (summary only)."""
    with get_db_context() as db:
        audits = db.query(SeoAudit).order_by(SeoAudit.created_at.desc()).limit(limit).all()
        return [_audit_to_dict(a) for a in audits]


def _audit_to_dict(a: SeoAudit, include_children: bool = False) -> Dict[str, Any]:
    data = {
        "id": str(a.id),
        "overall_score": a.overall_score,
        "technical_score": a.technical_score,
        "content_score": a.content_score,
        "structured_data_score": a.structured_data_score,
        "performance_score": a.performance_score,
        "geo_score": a.geo_score,
        "aeo_score": a.aeo_score,
        "cro_score": a.cro_score,
        "total_issues": a.total_issues,
        "critical_issues": a.critical_issues,
        "high_issues": a.high_issues,
        "medium_issues": a.medium_issues,
        "low_issues": a.low_issues,
        "robots_txt_valid": a.robots_txt_valid,
        "sitemap_page_count": a.sitemap_page_count,
        "sitemap_missing_pages": a.sitemap_missing_pages or [],
        "og_image_exists": a.og_image_exists,
        "manifest_exists": a.manifest_exists,
        "pages_audited": a.pages_audited,
        "audit_duration_ms": a.audit_duration_ms,
        "triggered_by": a.triggered_by,
        "created_at": a.created_at.isoformat() if a.created_at else None,
    }
    if include_children:
        data["page_scores"] = [_page_score_to_dict(p) for p in a.page_scores]
        data["recommendations"] = [_recommendation_to_dict(r) for r in a.recommendations]
    return data


def _page_score_to_dict(p: SeoPageScore) -> Dict[str, Any]:
    return {
        "id": str(p.id),
        "page_path": p.page_path,
        "page_url": p.page_url,
        "overall_score": p.overall_score,
        "status_code": p.status_code,
        "response_time_ms": p.response_time_ms,
        "has_title": p.has_title,
        "title_length": p.title_length,
        "title_value": p.title_value,
        "has_description": p.has_description,
        "description_length": p.description_length,
        "description_value": p.description_value,
        "has_og_title": p.has_og_title,
        "has_og_description": p.has_og_description,
        "has_og_image": p.has_og_image,
        "has_twitter_card": p.has_twitter_card,
        "has_canonical": p.has_canonical,
        "canonical_value": p.canonical_value,
        "word_count": p.word_count,
        "h1_count": p.h1_count,
        "h2_count": p.h2_count,
        "h3_count": p.h3_count,
        "h1_values": p.h1_values or [],
        "img_count": p.img_count,
        "img_with_alt": p.img_with_alt,
        "internal_links": p.internal_links,
        "external_links": p.external_links,
        "has_json_ld": p.has_json_ld,
        "json_ld_types": p.json_ld_types or [],
        "has_faq_schema": p.has_faq_schema,
        "has_breadcrumb_schema": p.has_breadcrumb_schema,
        "has_product_schema": p.has_product_schema,
        "content_clarity_score": p.content_clarity_score,
        "answerability_score": p.answerability_score,
        "citation_worthiness_score": p.citation_worthiness_score,
        "aeo_score": p.aeo_score,
        "cro_score": p.cro_score,
        "cta_count": p.cta_count,
        "form_count": p.form_count,
    }


def _recommendation_to_dict(r: SeoAuditRecommendation) -> Dict[str, Any]:
    return {
        "id": str(r.id),
        "audit_id": str(r.audit_id),
        "page_path": r.page_path,
        "severity": r.severity.value if r.severity else None,
        "category": r.category.value if r.category else None,
        "title": r.title,
        "description": r.description,
        "current_value": r.current_value,
        "recommended_value": r.recommended_value,
        "estimated_impact": r.estimated_impact.value if r.estimated_impact else None,
        "is_auto_fixable": r.is_auto_fixable,
        "fix_type": r.fix_type,
        "is_resolved": r.is_resolved,
        "resolved_at": r.resolved_at.isoformat() if r.resolved_at else None,
    }
