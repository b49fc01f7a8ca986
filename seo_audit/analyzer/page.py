"""
Page Analyzer

Turns the raw markup of one fetched page into a fully populated PageAnalysis.
Pure and total: malformed or empty markup degrades to zeroed fields, it never
raises.
"""

import logging

from ..models import PageAnalysis
from ..utils import words
from .aeo import score_aeo
from .cro import score_cro
from .extraction import (
    extract_body_text,
    extract_headings,
    extract_images,
    extract_json_ld,
    extract_links,
    extract_meta,
    flatten_schemas,
    parse_markup,
    schema_types,
)
from .geo import calculate_answerability, calculate_citation_worthiness, calculate_content_clarity

logger = logging.getLogger(__name__)


def analyze_html(markup: str, path: str, url: str, status_code: int, response_time_ms: int) -> PageAnalysis:
    """
    Analyze one page.

    Args:
        markup: Raw server-delivered HTML
        path: Configured route, e.g. "/pricing"
        url: Fully-qualified URL the markup was fetched from
        status_code: HTTP status of the fetch
        response_time_ms: Fetch duration

    Returns:
        PageAnalysis with every field populated
    """
    markup = markup or ""
    logger.debug(f"{path}: starting analysis, html length={len(markup)}")

    soup = parse_markup(markup)

    meta = extract_meta(soup, markup)
    headings = extract_headings(soup, markup, path)
    body_text = extract_body_text(soup, markup, path)
    word_count = len(words(body_text))
    img_count, img_with_alt = extract_images(soup, markup)
    internal_links, external_links = extract_links(soup, markup, url)

    documents = extract_json_ld(soup, markup, path)
    json_ld_types = schema_types(documents)
    has_faq_schema = "FAQPage" in json_ld_types

    logger.debug(
        f"{path}: words={word_count}, h1={headings.h1_count}, h2={headings.h2_count}, "
        f"schema types=[{', '.join(json_ld_types)}]"
    )

    aeo = score_aeo(
        markup,
        body_text,
        json_ld_types,
        documents,
        flatten_schemas(documents),
        has_faq_schema,
        headings.h1_count,
        headings.h2_count,
    )
    cro = score_cro(markup, body_text, headings.h1_values, response_time_ms)

    analysis = PageAnalysis(
        path=path,
        url=url,
        status_code=status_code,
        response_time_ms=response_time_ms,
        title=meta.title,
        title_length=len(meta.title or ""),
        description=meta.description,
        description_length=len(meta.description or ""),
        og_title=meta.og_title,
        og_description=meta.og_description,
        og_image=meta.og_image,
        twitter_card=meta.twitter_card,
        canonical=meta.canonical,
        viewport=meta.viewport,
        word_count=word_count,
        h1_count=headings.h1_count,
        h2_count=headings.h2_count,
        h3_count=headings.h3_count,
        h1_values=headings.h1_values,
        img_count=img_count,
        img_with_alt=img_with_alt,
        internal_links=internal_links,
        external_links=external_links,
        has_json_ld=len(json_ld_types) > 0,
        json_ld_types=json_ld_types,
        has_faq_schema=has_faq_schema,
        has_breadcrumb_schema="BreadcrumbList" in json_ld_types,
        has_product_schema="Product" in json_ld_types,
        content_clarity_score=calculate_content_clarity(
            body_text, headings.h1_count, headings.h2_count, headings.h3_count
        ),
        answerability_score=calculate_answerability(markup, body_text, has_faq_schema),
        citation_worthiness_score=calculate_citation_worthiness(body_text),
        aeo_score=aeo.overall,
        schema_richness_score=aeo.schema_richness,
        faq_coverage_score=aeo.faq_coverage,
        direct_answer_readiness_score=aeo.direct_answer_readiness,
        entity_markup_score=aeo.entity_markup,
        speakable_content_score=aeo.speakable_content,
        ai_snippet_compatibility_score=aeo.ai_snippet_compatibility,
        cro_score=cro.overall,
        cta_presence_score=cro.cta.score,
        form_accessibility_score=cro.form.score,
        load_speed_impact_score=cro.load_speed_impact,
        trust_signals_score=cro.trust.score,
        social_proof_score=cro.social_proof.score,
        value_proposition_score=cro.value_proposition.score,
        mobile_cro_score=cro.mobile_cro,
        cta_count=cro.cta.count,
        cta_texts=cro.cta.texts,
        form_count=cro.form.form_count,
        has_trust_badges=cro.trust.has_badges,
        has_testimonials=cro.social_proof.has_testimonials,
        has_social_proof=cro.social_proof.has_social_proof,
        has_value_prop=cro.value_proposition.has_value_prop,
    )

    logger.debug(
        f"{path}: GEO clarity={analysis.content_clarity_score}, answer={analysis.answerability_score}, "
        f"citation={analysis.citation_worthiness_score}; AEO={analysis.aeo_score}; CRO={analysis.cro_score}"
    )
    return analysis


def empty_page_analysis(path: str, url: str, response_time_ms: int = 0) -> PageAnalysis:
    """Record for a page whose fetch failed at the transport level (status 0)."""
    return PageAnalysis(path=path, url=url, status_code=0, response_time_ms=response_time_ms)

