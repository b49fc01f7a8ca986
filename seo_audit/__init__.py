"""
Julyu SEO Audit Engine

Crawls the public marketing pages of the site and scores them for
classic SEO, GEO (generative engine optimization), AEO (answer engine
optimization) and CRO (conversion rate optimization).

Usage:
    from seo_audit import run_audit

    result = await run_audit()
    print(result.scores.overall, result.total_issues)
"""

__version__ = "1.0.0"

from .config import Settings, get_settings
from .models import (
    Severity,
    Category,
    Impact,
    PageAnalysis,
    SiteValidation,
    SeoScores,
    SeoRecommendation,
    AuditResult,
)
from .analyzer import analyze_html, empty_page_analysis
from .crawler import FetchError, PageFetcher, SiteCrawler, crawl_site
from .scoring import calculate_scores
from .recommendations import generate_recommendations
from .orchestrator import run_audit

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "Severity",
    "Category",
    "Impact",
    "PageAnalysis",
    "SiteValidation",
    "SeoScores",
    "SeoRecommendation",
    "AuditResult",
    "analyze_html",
    "empty_page_analysis",
    "FetchError",
    "PageFetcher",
    "SiteCrawler",
    "crawl_site",
    "calculate_scores",
    "generate_recommendations",
    "run_audit",
]
