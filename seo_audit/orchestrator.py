"""
Audit Orchestrator

Runs one complete audit: crawl, score, recommend.

Usage:
    from seo_audit import run_audit

    result = await run_audit()
    print(result.scores.overall, result.issue_counts())
"""

import logging
import time
from typing import Optional

from .config import Settings, get_settings
from .crawler import PageFetcher, crawl_site
from .models import AuditResult
from .recommendations import generate_recommendations
from .scoring import calculate_scores
from .utils import round_half_up

logger = logging.getLogger(__name__)


async def run_audit(
    settings: Optional[Settings] = None,
    fetcher: Optional[PageFetcher] = None,
) -> AuditResult:
    """
    Audit the configured site.

    Args:
        settings: Defaults to the cached environment settings
        fetcher: Optional shared fetcher (tests inject one backed by a mock transport)

    Returns:
        AuditResult owning this run's pages, validation, scores and findings
    """
    settings = settings or get_settings()
    start = time.perf_counter()
    logger.info(f"Starting SEO audit of {settings.base_url}")

    pages, validation = await crawl_site(settings=settings, fetcher=fetcher)
    scores = calculate_scores(pages, validation)
    recommendations = generate_recommendations(pages, validation)

    result = AuditResult(
        scores=scores,
        pages=tuple(pages),
        validation=validation,
        recommendations=tuple(recommendations),
        pages_audited=len(pages),
        audit_duration_ms=round_half_up((time.perf_counter() - start) * 1000),
    )

    counts = result.issue_counts()
    logger.info(
        f"Audit complete in {result.audit_duration_ms}ms: overall={scores.overall}, "
        f"{result.total_issues} issues ({counts['critical']} critical, {counts['high']} high, "
        f"{counts['medium']} medium, {counts['low']} low)"
    )
    return result
