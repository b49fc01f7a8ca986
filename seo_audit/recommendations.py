"""
Recommendation Generator

Turns an audited page set into an ordered list of actionable findings:

1. Site-wide checks against SiteValidation (robots, sitemap, OG image, manifest)
2. Per-page checks, in a fixed rule order: status, title, description,
   OpenGraph, H1, word count, alt text, canonical, structured data, GEO,
   response time, then AEO and CRO findings

Every rule is independent, so one page may produce several findings. The
output is stably sorted by severity (critical, high, medium, low), which keeps
evaluation order within a severity.
"""

import logging
from typing import List, Sequence

from .constants import CONVERSION_PAGES, THRESHOLDS
from .models import Category, Impact, PageAnalysis, SeoRecommendation, Severity, SiteValidation

logger = logging.getLogger(__name__)

TITLE_RANGE = f"{THRESHOLDS['title_min_length']}-{THRESHOLDS['title_max_length']} characters"
DESCRIPTION_RANGE = f"{THRESHOLDS['description_min_length']}-{THRESHOLDS['description_max_length']} characters"

# CRO-specific page groups
ENTITY_PAGES = ("/", "/about")
FORM_PAGES = ("/contact", "/for-stores")
TRUST_PAGES = ("/", "/pricing", "/for-stores")
SOCIAL_PROOF_PAGES = ("/", "/pricing")
NO_CTA_EXEMPT_PAGES = ("/careers",)
CONVERSION_SLOW_MS = 1000


# =============================================================================
# SITE-WIDE
# =============================================================================


def site_recommendations(validation: SiteValidation) -> List[SeoRecommendation]:
    """At most one finding per site-level resource."""
    recs = []

    if not validation.robots_txt_valid:
        recs.append(SeoRecommendation(
            page_path=None,
            severity=Severity.CRITICAL,
            category=Category.TECHNICAL,
            title="robots.txt is missing or invalid",
            description=(
                "The robots.txt file is either missing or does not contain the expected structure. "
                "Search engines need this file to understand which pages to crawl."
            ),
            current_value="Missing or invalid",
            recommended_value="Valid robots.txt with User-agent, Disallow, and Sitemap directives",
            estimated_impact=Impact.HIGH,
        ))

    missing = validation.sitemap_missing_pages
    if missing:
        recs.append(SeoRecommendation(
            page_path=None,
            severity=Severity.HIGH,
            category=Category.TECHNICAL,
            title=f"Sitemap missing {len(missing)} page(s)",
            description=(
                f"The following pages are not listed in the sitemap: {', '.join(missing)}. "
                "Pages not in the sitemap may be discovered more slowly by search engines."
            ),
            current_value=f"{len(missing)} pages missing",
            recommended_value="All public pages included in sitemap.xml",
            estimated_impact=Impact.MEDIUM,
        ))

    if not validation.og_image_exists:
        recs.append(SeoRecommendation(
            page_path=None,
            severity=Severity.HIGH,
            category=Category.TECHNICAL,
            title="OpenGraph image not found",
            description=(
                "The OG image referenced in the site metadata does not exist. This causes broken social "
                "media previews when the site is shared on Facebook, Twitter, LinkedIn, etc."
            ),
            current_value="Image not found",
            recommended_value="A 1200x630px branded image accessible at the OG image URL",
            estimated_impact=Impact.HIGH,
        ))

    if not validation.manifest_exists:
        recs.append(SeoRecommendation(
            page_path=None,
            severity=Severity.MEDIUM,
            category=Category.TECHNICAL,
            title="Web manifest not found",
            description=(
                "The web manifest file referenced in the site metadata does not exist. "
                "This is needed for PWA support and installability."
            ),
            current_value="File not found",
            recommended_value="A valid manifest.webmanifest with app name, icons, and theme colors",
            estimated_impact=Impact.LOW,
        ))

    return recs


# =============================================================================
# PER-PAGE: SEO / GEO
# =============================================================================


def _status_recommendations(page: PageAnalysis) -> List[SeoRecommendation]:
    if page.status_code == 0:
        return [SeoRecommendation(
            page_path=page.path,
            severity=Severity.CRITICAL,
            category=Category.TECHNICAL,
            title="Page is unreachable",
            description=f"{page.path} could not be fetched. The page may be timing out or returning an error.",
            current_value="Unreachable",
            recommended_value="Page loads successfully with HTTP 200",
            estimated_impact=Impact.HIGH,
        )]
    if page.status_code != 200:
        return [SeoRecommendation(
            page_path=page.path,
            severity=Severity.CRITICAL,
            category=Category.TECHNICAL,
            title=f"Page returns {page.status_code} status",
            description=(
                f"{page.path} returns HTTP {page.status_code} instead of 200. "
                "This page will not be indexed by search engines."
            ),
            current_value=f"HTTP {page.status_code}",
            recommended_value="HTTP 200",
            estimated_impact=Impact.HIGH,
        )]
    return []


def _meta_recommendations(page: PageAnalysis) -> List[SeoRecommendation]:
    recs = []

    if not page.title:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.CRITICAL,
            category=Category.CONTENT,
            title="Missing page title",
            description=(
                f"{page.path} has no <title> tag. Page titles are one of the most important "
                "on-page SEO factors."
            ),
            current_value="No title",
            recommended_value="A unique, descriptive title between 30-60 characters",
            estimated_impact=Impact.HIGH,
            is_auto_fixable=True,
            fix_type="add_meta_title",
        ))
    elif page.title_length < THRESHOLDS["title_min_length"]:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.CONTENT,
            title="Title too short",
            description=(
                f"{page.path} title is {page.title_length} characters. Titles under "
                f"{THRESHOLDS['title_min_length']} characters may not effectively communicate the page's "
                "content to search engines."
            ),
            current_value=f'{page.title_length} chars: "{page.title}"',
            recommended_value=TITLE_RANGE,
            estimated_impact=Impact.MEDIUM,
        ))
    elif page.title_length > THRESHOLDS["title_max_length"]:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.LOW,
            category=Category.CONTENT,
            title="Title may be truncated",
            description=(
                f"{page.path} title is {page.title_length} characters. Titles over "
                f"{THRESHOLDS['title_max_length']} characters may be truncated in search results."
            ),
            current_value=f"{page.title_length} chars",
            recommended_value=TITLE_RANGE,
            estimated_impact=Impact.LOW,
        ))

    if not page.description:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.HIGH,
            category=Category.CONTENT,
            title="Missing meta description",
            description=(
                f"{page.path} has no meta description. Meta descriptions help search engines understand "
                "page content and appear as snippets in search results."
            ),
            current_value="No description",
            recommended_value="A unique, compelling description between 120-160 characters",
            estimated_impact=Impact.HIGH,
            is_auto_fixable=True,
            fix_type="add_meta_description",
        ))
    elif page.description_length < THRESHOLDS["description_min_length"]:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.CONTENT,
            title="Meta description too short",
            description=(
                f"{page.path} description is {page.description_length} characters. Short descriptions "
                "miss the opportunity to provide context to searchers."
            ),
            current_value=f"{page.description_length} chars",
            recommended_value=DESCRIPTION_RANGE,
            estimated_impact=Impact.MEDIUM,
        ))

    if not page.og_title or not page.og_description:
        missing = " and ".join(
            tag for tag, value in (("og:title", page.og_title), ("og:description", page.og_description))
            if not value
        )
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.HIGH,
            category=Category.CONTENT,
            title="Missing OpenGraph tags",
            description=f"{page.path} is missing {missing}. These are needed for proper social media sharing.",
            current_value=(
                f"og:title: {'set' if page.og_title else 'missing'}, "
                f"og:description: {'set' if page.og_description else 'missing'}"
            ),
            recommended_value="Both og:title and og:description set",
            estimated_impact=Impact.MEDIUM,
        ))

    return recs


def _structure_recommendations(page: PageAnalysis) -> List[SeoRecommendation]:
    recs = []
    client_rendered = page.is_client_rendered

    # H1 is injected client-side on JS shells
    if page.h1_count == 0 and not client_rendered:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.HIGH,
            category=Category.CONTENT,
            title="Missing H1 heading",
            description=(
                f"{page.path} has no H1 heading. Every page should have exactly one H1 that describes "
                "its main topic."
            ),
            current_value="0 H1 headings",
            recommended_value="Exactly 1 H1 heading",
            estimated_impact=Impact.HIGH,
        ))
    elif page.h1_count > 1:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.CONTENT,
            title="Multiple H1 headings",
            description=(
                f"{page.path} has {page.h1_count} H1 headings ({', '.join(page.h1_values)}). "
                "Best practice is to have exactly one H1 per page."
            ),
            current_value=f"{page.h1_count} H1 headings",
            recommended_value="Exactly 1 H1 heading",
            estimated_impact=Impact.MEDIUM,
        ))

    min_words = THRESHOLDS["min_word_count"]
    if page.word_count < min_words and page.status_code == 200 and not client_rendered:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.CONTENT,
            title="Thin content",
            description=(
                f"{page.path} has only {page.word_count} words. Pages with fewer than {min_words} words "
                "may be considered thin content by search engines."
            ),
            current_value=f"{page.word_count} words",
            recommended_value=f"At least {min_words} words",
            estimated_impact=Impact.MEDIUM,
        ))

    if page.img_count > 0 and page.img_with_alt < page.img_count:
        missing = page.img_count - page.img_with_alt
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.CONTENT,
            title=f"{missing} image(s) missing alt text",
            description=(
                f"{page.path} has {missing} out of {page.img_count} images without alt text. Alt text "
                "improves accessibility and helps search engines understand images."
            ),
            current_value=f"{page.img_with_alt}/{page.img_count} images have alt text",
            recommended_value="All images should have descriptive alt text",
            estimated_impact=Impact.MEDIUM,
        ))

    if not page.canonical:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.TECHNICAL,
            title="Missing canonical URL",
            description=f"{page.path} has no canonical link tag. Canonical URLs prevent duplicate content issues.",
            current_value="No canonical URL",
            recommended_value="Self-referencing canonical URL",
            estimated_impact=Impact.MEDIUM,
        ))

    if not page.has_json_ld and not page.is_legal_page:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.STRUCTURED_DATA,
            title="No structured data",
            description=(
                f"{page.path} has no JSON-LD structured data. Structured data helps search engines and AI "
                "understand your content better."
            ),
            current_value="No JSON-LD found",
            recommended_value="Add relevant schema.org markup (FAQ, HowTo, Product, etc.)",
            estimated_impact=Impact.MEDIUM,
        ))

    return recs


def _geo_recommendations(page: PageAnalysis) -> List[SeoRecommendation]:
    recs = []
    if page.is_client_rendered:
        return recs

    if page.content_clarity_score < 50:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.LOW,
            category=Category.GEO,
            title="Low content clarity for AI",
            description=(
                f"{page.path} has a content clarity score of {page.content_clarity_score}/100. Improve by "
                "using clear headings, shorter sentences, and structured lists."
            ),
            current_value=f"{page.content_clarity_score}/100",
            recommended_value="70+/100",
            estimated_impact=Impact.MEDIUM,
        ))

    if page.answerability_score < 30 and not page.is_legal_page:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.LOW,
            category=Category.GEO,
            title="Low answerability score",
            description=(
                f"{page.path} scores {page.answerability_score}/100 for answerability. Add FAQ sections, "
                "question-style headings, and direct answer patterns to improve AI citation potential."
            ),
            current_value=f"{page.answerability_score}/100",
            recommended_value="50+/100",
            estimated_impact=Impact.MEDIUM,
        ))

    return recs


def _performance_recommendations(page: PageAnalysis) -> List[SeoRecommendation]:
    ceiling = THRESHOLDS["max_response_time_ms"]
    if page.response_time_ms <= ceiling:
        return []
    return [SeoRecommendation(
        page_path=page.path,
        severity=Severity.MEDIUM,
        category=Category.PERFORMANCE,
        title="Slow page response",
        description=(
            f"{page.path} took {page.response_time_ms}ms to respond. Pages should load under {ceiling}ms "
            "for optimal SEO and user experience."
        ),
        current_value=f"{page.response_time_ms}ms",
        recommended_value=f"Under {ceiling}ms",
        estimated_impact=Impact.MEDIUM,
    )]


# =============================================================================
# PER-PAGE: AEO / CRO
# =============================================================================


def _aeo_recommendations(page: PageAnalysis) -> List[SeoRecommendation]:
    recs = []
    if page.is_client_rendered:
        return recs
    content_page = not page.is_legal_page

    if page.speakable_content_score < 20 and content_page:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.AEO,
            title="Missing speakable content markup",
            description=(
                f"{page.path} has a speakable content score of {page.speakable_content_score}/100. Add "
                "SpeakableSpecification schema and use short, natural sentences to improve voice assistant "
                "readiness."
            ),
            current_value=f"{page.speakable_content_score}/100",
            recommended_value="50+/100 with SpeakableSpecification schema",
            estimated_impact=Impact.MEDIUM,
        ))

    if page.faq_coverage_score < 30 and page.word_count >= THRESHOLDS["min_word_count"]:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.AEO,
            title="Low FAQ coverage for answer engines",
            description=(
                f"{page.path} has a FAQ coverage score of {page.faq_coverage_score}/100. Add FAQPage schema "
                "with question-answer pairs to increase chances of being cited by AI answer engines."
            ),
            current_value=f"{page.faq_coverage_score}/100",
            recommended_value="60+/100 with FAQPage schema",
            estimated_impact=Impact.HIGH,
        ))

    if page.direct_answer_readiness_score < 30 and content_page:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.LOW,
            category=Category.AEO,
            title="Poor direct answer readiness",
            description=(
                f"{page.path} scores {page.direct_answer_readiness_score}/100 for direct answer readiness. "
                "Use definition sentences, concise answer paragraphs, and bulleted lists to help AI extract "
                "direct answers."
            ),
            current_value=f"{page.direct_answer_readiness_score}/100",
            recommended_value="50+/100",
            estimated_impact=Impact.MEDIUM,
        ))

    if page.schema_richness_score < 40 and page.has_json_ld:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.AEO,
            title="Schema markup lacks depth",
            description=(
                f"{page.path} has JSON-LD but schema richness is only {page.schema_richness_score}/100. Add "
                "more schema types (BreadcrumbList, HowTo, Product) and include detailed properties."
            ),
            current_value=f"{page.schema_richness_score}/100",
            recommended_value="60+/100 with diverse, detailed schema types",
            estimated_impact=Impact.MEDIUM,
        ))

    if page.entity_markup_score < 20 and page.path in ENTITY_PAGES:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.LOW,
            category=Category.AEO,
            title="Missing entity markup on key page",
            description=(
                f"{page.path} has an entity markup score of {page.entity_markup_score}/100. Add detailed "
                "Organization, Person, or Product schema with @id and sameAs links for entity recognition."
            ),
            current_value=f"{page.entity_markup_score}/100",
            recommended_value="50+/100 with Organization + sameAs links",
            estimated_impact=Impact.MEDIUM,
        ))

    if page.ai_snippet_compatibility_score < 40 and content_page:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.AEO,
            title="Low AI snippet compatibility",
            description=(
                f"{page.path} scores {page.ai_snippet_compatibility_score}/100 for AI snippet compatibility. "
                "Structure content with clear headings, concise paragraphs, tables, and Q&A patterns."
            ),
            current_value=f"{page.ai_snippet_compatibility_score}/100",
            recommended_value="60+/100",
            estimated_impact=Impact.MEDIUM,
        ))

    return recs


def _cro_recommendations(page: PageAnalysis) -> List[SeoRecommendation]:
    recs = []

    if page.cta_count == 0 and not page.is_legal_page and page.path not in NO_CTA_EXEMPT_PAGES:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.HIGH,
            category=Category.CRO,
            title="No call-to-action found",
            description=(
                f"{page.path} has no detectable CTA buttons. Every non-legal page should have at least one "
                "clear call-to-action to guide visitors toward conversion."
            ),
            current_value="0 CTAs",
            recommended_value="2-4 CTAs with action-oriented text",
            estimated_impact=Impact.HIGH,
        ))
    elif page.cta_presence_score < 40 and page.cta_count > 0 and not page.is_legal_page:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.CRO,
            title="CTA quality needs improvement",
            description=(
                f"{page.path} has CTAs but scores {page.cta_presence_score}/100 for CTA quality. Place CTAs "
                "above the fold, use specific action-oriented text, and ensure visual contrast."
            ),
            current_value=f"{page.cta_presence_score}/100 ({page.cta_count} CTAs)",
            recommended_value="70+/100 with specific, visible CTAs",
            estimated_impact=Impact.MEDIUM,
        ))

    if page.form_count == 0 and page.path in FORM_PAGES:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.CRO,
            title="Missing form on conversion page",
            description=(
                f"{page.path} is a key conversion page but has no detectable form. Add a contact or inquiry "
                "form to capture leads directly."
            ),
            current_value="0 forms",
            recommended_value="At least 1 accessible form with labeled inputs",
            estimated_impact=Impact.HIGH,
        ))

    if page.trust_signals_score < 30 and page.path in TRUST_PAGES:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.CRO,
            title="Weak trust signals",
            description=(
                f"{page.path} has a trust signals score of {page.trust_signals_score}/100. Add trust badges, "
                "security indicators, privacy links, and visible contact information to build visitor "
                "confidence."
            ),
            current_value=f"{page.trust_signals_score}/100",
            recommended_value="60+/100 with visible trust indicators",
            estimated_impact=Impact.MEDIUM,
        ))

    if page.social_proof_score < 30 and page.path in SOCIAL_PROOF_PAGES:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.LOW,
            category=Category.CRO,
            title="Missing social proof",
            description=(
                f"{page.path} scores {page.social_proof_score}/100 for social proof. Add testimonials, user "
                "counts, ratings, or partner logos to leverage social proof for conversions."
            ),
            current_value=f"{page.social_proof_score}/100",
            recommended_value="50+/100 with testimonials or user counts",
            estimated_impact=Impact.MEDIUM,
        ))

    if page.value_proposition_score < 40 and page.path == "/":
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.CRO,
            title="Weak value proposition on homepage",
            description=(
                f"Homepage value proposition score is {page.value_proposition_score}/100. Use benefit-oriented "
                "H1, clear value statements in the first 100 words, and differentiation language."
            ),
            current_value=f"{page.value_proposition_score}/100",
            recommended_value="70+/100 with clear benefits above the fold",
            estimated_impact=Impact.HIGH,
        ))

    if page.response_time_ms > CONVERSION_SLOW_MS and page.path in CONVERSION_PAGES:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.HIGH,
            category=Category.CRO,
            title="Slow load time hurting conversions",
            description=(
                f"{page.path} takes {page.response_time_ms}ms to load. On key conversion pages, every 100ms "
                "of added latency can reduce conversions by up to 7%."
            ),
            current_value=f"{page.response_time_ms}ms",
            recommended_value="Under 500ms for conversion-critical pages",
            estimated_impact=Impact.HIGH,
        ))

    if page.mobile_cro_score < 50 and not page.is_legal_page:
        recs.append(SeoRecommendation(
            page_path=page.path,
            severity=Severity.MEDIUM,
            category=Category.CRO,
            title="Low mobile conversion readiness",
            description=(
                f"{page.path} scores {page.mobile_cro_score}/100 for mobile CRO. Ensure viewport meta, "
                "responsive design, touch-friendly buttons, and no horizontal overflow."
            ),
            current_value=f"{page.mobile_cro_score}/100",
            recommended_value="70+/100 with mobile-optimized CTAs and layout",
            estimated_impact=Impact.MEDIUM,
        ))

    return recs


PAGE_RULES = (
    _status_recommendations,
    _meta_recommendations,
    _structure_recommendations,
    _geo_recommendations,
    _performance_recommendations,
    _aeo_recommendations,
    _cro_recommendations,
)


def page_recommendations(page: PageAnalysis) -> List[SeoRecommendation]:
    """Every per-page rule, in evaluation order."""
    recs = []
    for rule in PAGE_RULES:
        recs.extend(rule(page))
    return recs


def sort_by_severity(recommendations: Sequence[SeoRecommendation]) -> List[SeoRecommendation]:
    """Stable sort: critical first, evaluation order kept within a severity."""
    return sorted(recommendations, key=lambda rec: rec.severity.rank)


def generate_recommendations(
    pages: Sequence[PageAnalysis],
    validation: SiteValidation,
) -> List[SeoRecommendation]:
    """
    Generate every finding for an audit.

    Args:
        pages: Analyzed pages, in crawl order
        validation: Site-level resource checks

    Returns:
        Findings sorted by severity
    """
    recs = site_recommendations(validation)
    for page in pages:
        recs.extend(page_recommendations(page))

    logger.debug(f"Generated {len(recs)} recommendations across {len(pages)} pages")
    return sort_by_severity(recs)
