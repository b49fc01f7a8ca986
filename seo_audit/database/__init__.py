"""
Database Package

Persistence of audit runs:
- seo_audits: scores, issue counts and site checks per run
- seo_page_scores: one row per audited page
- seo_recommendations: findings, with resolution tracking

Usage:
    from seo_audit.database import init_db, store_audit, get_latest_audit

    init_db()
    audit_id = store_audit(result, triggered_by="admin@julyu.com")
"""

from .models import Base, SeoAudit, SeoPageScore, SeoAuditRecommendation
from .session import (
    get_database_url,
    get_engine,
    get_db_context,
    init_db,
    check_db_connection,
    reset_engine,
)
from .repository import (
    store_audit,
    get_audit,
    get_latest_audit,
    list_audits,
    resolve_recommendation,
)

__all__ = [
    "Base",
    "SeoAudit",
    "SeoPageScore",
    "SeoAuditRecommendation",
    "get_database_url",
    "get_engine",
    "get_db_context",
    "init_db",
    "check_db_connection",
    "reset_engine",
    "store_audit",
    "get_audit",
    "get_latest_audit",
    "list_audits",
    "resolve_recommendation",
]
