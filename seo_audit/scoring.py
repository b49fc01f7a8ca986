"""
Scoring Engine

Seven independent 0-100 dimension scores computed over the crawled page set,
combined into a weighted overall score:

    overall = round(sum(weight[d] * score[d] for d in dimensions))

Pure and deterministic. Every dimension is 0 for an empty page set.

Client-rendered pages (JS shells whose content is not in the fetched markup)
are left out of the content-structure checks (single H1, H1+H2 hierarchy,
minimum word count) and of the GEO score means. When no page is eligible for
one of those checks it awards full credit.
"""

import logging
from typing import Callable, List, Sequence

from .constants import DESIRED_SCHEMA_TYPES, PUBLIC_PAGES, SCORING_WEIGHTS, THRESHOLDS
from .models import PageAnalysis, SeoScores, SiteValidation
from .utils import clamp_score, ratio_points, round_half_up

logger = logging.getLogger(__name__)


def _count(pages: Sequence[PageAnalysis], predicate: Callable[[PageAnalysis], bool]) -> int:
    return sum(1 for page in pages if predicate(page))


def _eligible(pages: Sequence[PageAnalysis]) -> List[PageAnalysis]:
    return [page for page in pages if not page.is_client_rendered]


def _eligible_points(
    pages: Sequence[PageAnalysis],
    predicate: Callable[[PageAnalysis], bool],
    points: int,
) -> int:
    """Ratio points over non-client-rendered pages; full credit when none qualify."""
    eligible = _eligible(pages)
    if not eligible:
        return points
    return ratio_points(_count(eligible, predicate), len(eligible), points)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# =============================================================================
# DIMENSIONS
# =============================================================================


def calculate_technical_score(pages: Sequence[PageAnalysis], validation: SiteValidation) -> int:
    total = len(pages)
    if total == 0:
        return 0

    score = 0
    if validation.robots_txt_valid:
        score += 10

    # Sitemap completeness
    coverage = min(1.0, validation.sitemap_page_count / len(PUBLIC_PAGES))
    score += round_half_up(coverage * 15)

    score += ratio_points(_count(pages, lambda p: bool(p.canonical)), total, 10)
    score += ratio_points(_count(pages, lambda p: p.status_code == 200), total, 15)
    score += ratio_points(_count(pages, lambda p: p.viewport), total, 10)

    if validation.og_image_exists:
        score += 10
    if validation.manifest_exists:
        score += 10

    score += ratio_points(_count(pages, lambda p: bool(p.og_title and p.og_description)), total, 10)

    if not validation.sitemap_missing_pages:
        score += 10

    return clamp_score(score)


def calculate_content_score(pages: Sequence[PageAnalysis]) -> int:
    total = len(pages)
    if total == 0:
        return 0

    score = 0

    # Title and description checks apply to every page
    score += ratio_points(_count(pages, lambda p: bool(p.title)), total, 15)
    score += ratio_points(
        _count(
            pages,
            lambda p: THRESHOLDS["title_min_length"] <= p.title_length <= THRESHOLDS["title_max_length"],
        ),
        total,
        10,
    )
    score += ratio_points(_count(pages, lambda p: bool(p.description)), total, 15)
    score += ratio_points(
        _count(
            pages,
            lambda p: THRESHOLDS["description_min_length"]
            <= p.description_length
            <= THRESHOLDS["description_max_length"],
        ),
        total,
        10,
    )

    # Structure checks skip client-rendered shells
    score += _eligible_points(pages, lambda p: p.h1_count == 1, 15)
    score += _eligible_points(pages, lambda p: p.h1_count >= 1 and p.h2_count >= 1, 10)
    score += _eligible_points(pages, lambda p: p.word_count >= THRESHOLDS["min_word_count"], 10)

    # Alt text coverage; no images means nothing to fix
    total_images = sum(p.img_count for p in pages)
    images_with_alt = sum(p.img_with_alt for p in pages)
    score += 15 if total_images == 0 else ratio_points(images_with_alt, total_images, 15)

    return clamp_score(score)


def calculate_structured_data_score(pages: Sequence[PageAnalysis]) -> int:
    total = len(pages)
    if total == 0:
        return 0

    score = 0
    homepage = next((p for p in pages if p.path == "/"), None)
    if homepage is not None and homepage.has_json_ld:
        score += 20

    if any("Organization" in p.json_ld_types for p in pages):
        score += 15
    if any("WebSite" in p.json_ld_types for p in pages):
        score += 15

    score += ratio_points(_count(pages, lambda p: p.has_json_ld), total, 20)

    if any(p.has_faq_schema for p in pages):
        score += 15
    if any(p.has_breadcrumb_schema for p in pages):
        score += 15

    return clamp_score(score)


def calculate_performance_score(pages: Sequence[PageAnalysis]) -> int:
    total = len(pages)
    if total == 0:
        return 0

    score = 0
    avg_response_time = _mean([p.response_time_ms for p in pages])
    if avg_response_time < 200:
        score += 40
    elif avg_response_time < 500:
        score += 30
    elif avg_response_time < 1000:
        score += 20
    elif avg_response_time < 2000:
        score += 10

    score += ratio_points(_count(pages, lambda p: p.status_code == 200), total, 30)
    score += ratio_points(
        _count(pages, lambda p: p.response_time_ms < THRESHOLDS["max_response_time_ms"]), total, 30
    )

    return clamp_score(score)


def calculate_geo_score(pages: Sequence[PageAnalysis]) -> int:
    total = len(pages)
    if total == 0:
        return 0

    score = ratio_points(_count(pages, lambda p: p.has_json_ld), total, 20)

    eligible = _eligible(pages)
    for attr in ("content_clarity_score", "answerability_score", "citation_worthiness_score"):
        if eligible:
            score += round_half_up(_mean([getattr(p, attr) for p in eligible]) / 100 * 20)
        else:
            score += 20

    # Schema completeness
    all_types = {t for p in pages for t in p.json_ld_types}
    covered = sum(1 for t in DESIRED_SCHEMA_TYPES if t in all_types)
    score += ratio_points(covered, len(DESIRED_SCHEMA_TYPES), 20)

    return clamp_score(score)


def calculate_aeo_score(pages: Sequence[PageAnalysis]) -> int:
    if not pages:
        return 0
    return clamp_score(round_half_up(_mean([p.aeo_score for p in pages])))


def calculate_cro_score(pages: Sequence[PageAnalysis]) -> int:
    if not pages:
        return 0
    return clamp_score(round_half_up(_mean([p.cro_score for p in pages])))


# =============================================================================
# OVERALL
# =============================================================================


def calculate_scores(pages: Sequence[PageAnalysis], validation: SiteValidation) -> SeoScores:
    """
    Score an audited page set.

    Args:
        pages: One PageAnalysis per configured page
        validation: Site-level resource checks

    Returns:
        SeoScores with every dimension and the weighted overall
    """
    dimensions = {
        "technical": calculate_technical_score(pages, validation),
        "content": calculate_content_score(pages),
        "structured_data": calculate_structured_data_score(pages),
        "performance": calculate_performance_score(pages),
        "geo": calculate_geo_score(pages),
        "aeo": calculate_aeo_score(pages),
        "cro": calculate_cro_score(pages),
    }
    overall = round_half_up(sum(dimensions[key] * weight for key, weight in SCORING_WEIGHTS.items()))

    logger.debug(f"Scores: overall={overall}, " + ", ".join(f"{k}={v}" for k, v in dimensions.items()))
    return SeoScores(overall=clamp_score(overall), **dimensions)
