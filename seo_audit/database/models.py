"""
SQLAlchemy Models for SEO Audit History

One row per audit run, with its per-page scores and recommendations as
children. Audits are append-only; the only mutation after insert is marking
a recommendation resolved.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Column, String, Integer, Boolean, DateTime, Text,
    ForeignKey, Enum, Index, JSON, Uuid,
)
from sqlalchemy.orm import declarative_base, relationship

from ..models import Category, Impact, Severity

Base = declarative_base()


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# =============================================================================
# AUDIT RUNS
# =============================================================================

class SeoAudit(Base):
    """One audit run - scores, issue counts and site-level checks"""
    __tablename__ = "seo_audits"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Scores (0-100)
    overall_score = Column(Integer, nullable=False)
    technical_score = Column(Integer, nullable=False)
    content_score = Column(Integer, nullable=False)
    structured_data_score = Column(Integer, nullable=False)
    performance_score = Column(Integer, nullable=False)
    geo_score = Column(Integer, nullable=False)
    aeo_score = Column(Integer, nullable=False, default=0)
    cro_score = Column(Integer, nullable=False, default=0)

    # Issue counts
    total_issues = Column(Integer, default=0)
    critical_issues = Column(Integer, default=0)
    high_issues = Column(Integer, default=0)
    medium_issues = Column(Integer, default=0)
    low_issues = Column(Integer, default=0)

    # Site validation
    robots_txt_valid = Column(Boolean, default=False)
    sitemap_page_count = Column(Integer, default=0)
    sitemap_missing_pages = Column(JSON, default=list)
    og_image_exists = Column(Boolean, default=False)
    manifest_exists = Column(Boolean, default=False)

    # Run metadata
    pages_audited = Column(Integer, default=0)
    audit_duration_ms = Column(Integer, default=0)
    triggered_by = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    page_scores = relationship(
        "SeoPageScore", back_populates="audit", cascade="all, delete-orphan", order_by="SeoPageScore.position"
    )
    recommendations = relationship(
        "SeoAuditRecommendation",
        back_populates="audit",
        cascade="all, delete-orphan",
        order_by="SeoAuditRecommendation.position",
    )

    __table_args__ = (
        Index("idx_seo_audits_created", "created_at"),
    )


# =============================================================================
# PAGE SCORES
# =============================================================================

class SeoPageScore(Base):
    """Stored analysis of one page within an audit"""
    __tablename__ = "seo_page_scores"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    audit_id = Column(Uuid(as_uuid=True), ForeignKey("seo_audits.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, default=0)  # Crawl order

    page_path = Column(String(500), nullable=False)
    page_url = Column(String(2000), nullable=False)
    overall_score = Column(Integer, default=0)  # Mean of the three GEO scores
    status_code = Column(Integer, default=0)
    response_time_ms = Column(Integer, default=0)

    # Meta
    has_title = Column(Boolean, default=False)
    title_length = Column(Integer, default=0)
    title_value = Column(Text)
    has_description = Column(Boolean, default=False)
    description_length = Column(Integer, default=0)
    description_value = Column(Text)
    has_og_title = Column(Boolean, default=False)
    has_og_description = Column(Boolean, default=False)
    has_og_image = Column(Boolean, default=False)
    has_twitter_card = Column(Boolean, default=False)
    has_canonical = Column(Boolean, default=False)
    canonical_value = Column(String(2000))

    # Content shape
    word_count = Column(Integer, default=0)
    h1_count = Column(Integer, default=0)
    h2_count = Column(Integer, default=0)
    h3_count = Column(Integer, default=0)
    h1_values = Column(JSON, default=list)
    img_count = Column(Integer, default=0)
    img_with_alt = Column(Integer, default=0)
    internal_links = Column(Integer, default=0)
    external_links = Column(Integer, default=0)

    # Structured data
    has_json_ld = Column(Boolean, default=False)
    json_ld_types = Column(JSON, default=list)
    has_faq_schema = Column(Boolean, default=False)
    has_breadcrumb_schema = Column(Boolean, default=False)
    has_product_schema = Column(Boolean, default=False)

    # GEO / AEO / CRO
    content_clarity_score = Column(Integer, default=0)
    answerability_score = Column(Integer, default=0)
    citation_worthiness_score = Column(Integer, default=0)
    aeo_score = Column(Integer, default=0)
    cro_score = Column(Integer, default=0)
    cta_count = Column(Integer, default=0)
    form_count = Column(Integer, default=0)

    audit = relationship("SeoAudit", back_populates="page_scores")

    __table_args__ = (
        Index("idx_seo_page_scores_audit", "audit_id"),
    )


# =============================================================================
# RECOMMENDATIONS
# =============================================================================

class SeoAuditRecommendation(Base):
    """Stored finding; the only audit child that changes after insert"""
    __tablename__ = "seo_recommendations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    audit_id = Column(Uuid(as_uuid=True), ForeignKey("seo_audits.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, default=0)  # Severity-sorted order

    page_path = Column(String(500))  # NULL = site-wide
    severity = Column(Enum(Severity, name="seo_severity", values_callable=_enum_values), nullable=False)
    category = Column(Enum(Category, name="seo_category", values_callable=_enum_values), nullable=False)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    current_value = Column(Text)
    recommended_value = Column(Text)
    estimated_impact = Column(Enum(Impact, name="seo_impact", values_callable=_enum_values))
    is_auto_fixable = Column(Boolean, default=False)
    fix_type = Column(String(100))

    # Resolution tracking
    is_resolved = Column(Boolean, default=False, nullable=False)
    resolved_at = Column(DateTime)

    audit = relationship("SeoAudit", back_populates="recommendations")

    __table_args__ = (
        Index("idx_seo_recommendations_audit", "audit_id"),
        Index("idx_seo_recommendations_severity", "severity"),
    )
