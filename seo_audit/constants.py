"""
Audit Constants

Static configuration consumed by the crawler, analyzer, scoring engine and
recommendation generator: the audited page list, scoring weights and
numeric thresholds.
"""

from typing import Dict, List


# ============================================================================
# PAGES
# ============================================================================

PUBLIC_PAGES: List[str] = [
    "/",
    "/features",
    "/pricing",
    "/about",
    "/contact",
    "/privacy",
    "/terms",
    "/careers",
    "/for-stores",
    "/blog",
]

# Legal pages are exempt from most content-marketing checks
LEGAL_PAGES = ("/privacy", "/terms")

# Pages where load time and CTAs directly affect conversion
CONVERSION_PAGES = ("/", "/pricing", "/for-stores", "/contact", "/features")

# Site-level resources checked alongside the page crawl
ROBOTS_PATH = "/robots.txt"
SITEMAP_PATH = "/sitemap.xml"
OG_IMAGE_PATH = "/opengraph-image"
MANIFEST_PATH = "/manifest.webmanifest"


# ============================================================================
# SCORING WEIGHTS (must sum to 1.0)
# ============================================================================

SCORING_WEIGHTS: Dict[str, float] = {
    "technical": 0.20,
    "content": 0.20,
    "structured_data": 0.15,
    "performance": 0.10,
    "geo": 0.15,
    "aeo": 0.10,
    "cro": 0.10,
}

AEO_WEIGHTS: Dict[str, float] = {
    "schema_richness": 0.20,
    "faq_coverage": 0.15,
    "direct_answer_readiness": 0.20,
    "entity_markup": 0.15,
    "speakable_content": 0.10,
    "ai_snippet_compatibility": 0.20,
}

CRO_WEIGHTS: Dict[str, float] = {
    "cta_presence": 0.20,
    "form_accessibility": 0.10,
    "load_speed_impact": 0.15,
    "trust_signals": 0.15,
    "social_proof": 0.15,
    "value_proposition": 0.15,
    "mobile_cro": 0.10,
}


# ============================================================================
# THRESHOLDS
# ============================================================================

THRESHOLDS: Dict[str, int] = {
    "title_min_length": 30,
    "title_max_length": 60,
    "description_min_length": 120,
    "description_max_length": 160,
    "min_word_count": 300,
    "max_response_time_ms": 500,
    "fetch_timeout_ms": 10000,
    "resource_timeout_ms": 5000,
    # Pages below this word count with no H1 are treated as JS shells
    "client_rendered_max_words": 50,
    # Regex body extraction only kicks in for markup longer than this
    "regex_fallback_min_html_length": 1000,
}

SEVERITY_ORDER: Dict[str, int] = {
    "critical": 0,
    "high": 1,
    "medium": 2,
    "low": 3,
}

# schema.org types a fully described site is expected to expose
DESIRED_SCHEMA_TYPES = (
    "WebApplication",
    "Organization",
    "WebSite",
    "FAQPage",
    "BreadcrumbList",
    "Product",
)
