"""
Audit Data Models

Value records produced by a single audit run:
- PageAnalysis: one per crawled page (Page Analyzer output)
- SiteValidation: site-level resource checks (robots, sitemap, OG image, manifest)
- SeoScores: weighted 0-100 dimension scores plus the overall score
- SeoRecommendation: one actionable finding
- AuditResult: everything above, handed to persistence / presentation

All records are frozen. Nothing is shared across runs.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .constants import LEGAL_PAGES, SEVERITY_ORDER, THRESHOLDS
from .utils import round_half_up


# =============================================================================
# ENUMS
# =============================================================================


class Severity(str, Enum):
    """How urgently a finding should be addressed."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank: critical=0 ... low=3."""
        return SEVERITY_ORDER[self.value]


class Category(str, Enum):
    """Audit dimension a finding belongs to."""
    TECHNICAL = "technical"
    CONTENT = "content"
    STRUCTURED_DATA = "structured_data"
    PERFORMANCE = "performance"
    GEO = "geo"
    AEO = "aeo"
    CRO = "cro"


class Impact(str, Enum):
    """Estimated effect of fixing a finding."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _serialize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [_serialize(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class _Record:
    """Mixin giving frozen dataclasses a camelCase dict form."""

    def to_dict(self) -> Dict[str, Any]:
        return {_camel(f.name): _serialize(getattr(self, f.name)) for f in fields(self)}


# =============================================================================
# PAGE ANALYSIS
# =============================================================================


@dataclass(frozen=True)
class PageAnalysis(_Record):
    """
    Normalized analysis of one page.

    Every field is always present. An unreachable page (status 0) carries
    zeroed counts, empty strings/tuples and False flags.
    """
    # Identity
    path: str
    url: str
    status_code: int = 0
    response_time_ms: int = 0

    # Meta tags
    title: Optional[str] = None
    title_length: int = 0
    description: Optional[str] = None
    description_length: int = 0
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    twitter_card: Optional[str] = None
    canonical: Optional[str] = None
    viewport: bool = False

    # Content shape
    word_count: int = 0
    h1_count: int = 0
    h2_count: int = 0
    h3_count: int = 0
    h1_values: Tuple[str, ...] = ()
    img_count: int = 0
    img_with_alt: int = 0
    internal_links: int = 0
    external_links: int = 0

    # Structured data (json_ld_types is deduplicated, first-seen order)
    has_json_ld: bool = False
    json_ld_types: Tuple[str, ...] = ()
    has_faq_schema: bool = False
    has_breadcrumb_schema: bool = False
    has_product_schema: bool = False

    # GEO scores
    content_clarity_score: int = 0
    answerability_score: int = 0
    citation_worthiness_score: int = 0

    # AEO scores
    aeo_score: int = 0
    schema_richness_score: int = 0
    faq_coverage_score: int = 0
    direct_answer_readiness_score: int = 0
    entity_markup_score: int = 0
    speakable_content_score: int = 0
    ai_snippet_compatibility_score: int = 0

    # CRO scores and signals
    cro_score: int = 0
    cta_presence_score: int = 0
    form_accessibility_score: int = 0
    load_speed_impact_score: int = 0
    trust_signals_score: int = 0
    social_proof_score: int = 0
    value_proposition_score: int = 0
    mobile_cro_score: int = 0
    cta_count: int = 0
    cta_texts: Tuple[str, ...] = ()
    form_count: int = 0
    has_trust_badges: bool = False
    has_testimonials: bool = False
    has_social_proof: bool = False
    has_value_prop: bool = False

    @property
    def is_legal_page(self) -> bool:
        return self.path in LEGAL_PAGES

    @property
    def is_client_rendered(self) -> bool:
        """
        A 200 page with almost no words and no H1 is a JS shell whose
        content is not in the fetched markup.
        """
        return (
            self.status_code == 200
            and self.word_count < THRESHOLDS["client_rendered_max_words"]
            and self.h1_count == 0
        )

    @property
    def geo_average(self) -> int:
        """Per-page overall used when storing page scores."""
        total = self.content_clarity_score + self.answerability_score + self.citation_worthiness_score
        return round_half_up(total / 3)


# =============================================================================
# SITE VALIDATION
# =============================================================================


@dataclass(frozen=True)
class SiteValidation(_Record):
    """Outcome of the site-level resource checks."""
    robots_txt_valid: bool = False
    sitemap_page_count: int = 0
    sitemap_missing_pages: Tuple[str, ...] = ()
    og_image_exists: bool = False
    manifest_exists: bool = False


# =============================================================================
# SCORES & RECOMMENDATIONS
# =============================================================================


@dataclass(frozen=True)
class SeoScores(_Record):
    """Per-dimension scores and the weighted overall score (all 0-100)."""
    overall: int = 0
    technical: int = 0
    content: int = 0
    structured_data: int = 0
    performance: int = 0
    geo: int = 0
    aeo: int = 0
    cro: int = 0


@dataclass(frozen=True)
class SeoRecommendation(_Record):
    """A single actionable finding. page_path None means site-wide."""
    page_path: Optional[str]
    severity: Severity
    category: Category
    title: str
    description: str
    current_value: Optional[str] = None
    recommended_value: Optional[str] = None
    estimated_impact: Impact = Impact.MEDIUM
    is_auto_fixable: bool = False
    fix_type: Optional[str] = None


@dataclass(frozen=True)
class AuditResult(_Record):
    """Combined output of one audit run."""
    scores: SeoScores
    pages: Tuple[PageAnalysis, ...]
    validation: SiteValidation
    recommendations: Tuple[SeoRecommendation, ...]
    pages_audited: int = 0
    audit_duration_ms: int = 0

    def issue_counts(self) -> Dict[str, int]:
        """Number of recommendations per severity."""
        counts = {severity.value: 0 for severity in Severity}
        for rec in self.recommendations:
            counts[rec.severity.value] += 1
        return counts

    @property
    def total_issues(self) -> int:
        return len(self.recommendations)
