"""
Recommendation Generator Tests

Site-wide and per-page findings, exemptions and severity ordering.
"""

from dataclasses import replace

import pytest

from seo_audit.analyzer import analyze_html
from seo_audit.constants import SEVERITY_ORDER
from seo_audit.models import Category, Severity, SeoRecommendation, SiteValidation
from seo_audit.recommendations import (
    generate_recommendations,
    page_recommendations,
    site_recommendations,
    sort_by_severity,
)


FAQ_SCHEMA = {
    "@context": "https://schema.org",
    "@type": "FAQPage",
    "mainEntity": [{"@type": "Question", "name": "How does Julyu work?"}],
}


def titles(recs):
    return [rec.title for rec in recs]


def find(recs, title) -> SeoRecommendation:
    matches = [rec for rec in recs if rec.title == title]
    assert len(matches) == 1, f"expected exactly one {title!r}, got {titles(recs)}"
    return matches[0]


class TestSiteWide:
    """One finding per failing site-level resource."""

    def test_healthy_site_has_no_findings(self, valid_site):
        assert site_recommendations(valid_site) == []

    def test_invalid_robots(self, valid_site):
        validation = replace(valid_site, robots_txt_valid=False)
        recs = site_recommendations(validation)

        assert len(recs) == 1
        assert recs[0].title == "robots.txt is missing or invalid"
        assert recs[0].severity == Severity.CRITICAL
        assert recs[0].page_path is None

    def test_sitemap_gaps_name_every_missing_page(self, valid_site):
        validation = replace(valid_site, sitemap_page_count=8, sitemap_missing_pages=("/careers", "/blog"))
        recs = site_recommendations(validation)

        assert len(recs) == 1
        rec = recs[0]
        assert rec.severity == Severity.HIGH
        assert rec.title == "Sitemap missing 2 page(s)"
        assert "/careers" in rec.description
        assert "/blog" in rec.description

    def test_missing_resources(self):
        recs = site_recommendations(SiteValidation(robots_txt_valid=True))
        assert titles(recs) == ["OpenGraph image not found", "Web manifest not found"]
        assert [r.severity for r in recs] == [Severity.HIGH, Severity.MEDIUM]


class TestPageFindings:
    """Per-page SEO and GEO rules."""

    def test_healthy_page_has_no_findings(self, make_page):
        assert page_recommendations(make_page()) == []

    def test_missing_title_and_description_on_real_markup(self, page_html):
        markup = page_html(title=None, description=None, word_count=400, json_ld=FAQ_SCHEMA)
        page = analyze_html(markup, "/features", "https://julyu.com/features", 200, 120)
        recs = page_recommendations(page)

        missing_title = find(recs, "Missing page title")
        assert missing_title.severity == Severity.CRITICAL
        assert missing_title.is_auto_fixable is True
        assert missing_title.fix_type == "add_meta_title"

        missing_description = find(recs, "Missing meta description")
        assert missing_description.severity == Severity.HIGH
        assert missing_description.is_auto_fixable is True

        for absent in ("Thin content", "Missing H1 heading", "No structured data"):
            assert absent not in titles(recs)

    def test_unreachable_page(self, make_page):
        page = make_page(status_code=0)
        rec = find(page_recommendations(page), "Page is unreachable")
        assert rec.severity == Severity.CRITICAL

    def test_error_status(self, make_page):
        rec = find(page_recommendations(make_page(status_code=404)), "Page returns 404 status")
        assert rec.current_value == "HTTP 404"

    @pytest.mark.parametrize("title_length,expected,severity", [
        (12, "Title too short", Severity.MEDIUM),
        (75, "Title may be truncated", Severity.LOW),
    ])
    def test_title_length(self, make_page, title_length, expected, severity):
        page = make_page(title="t" * title_length, title_length=title_length)
        assert find(page_recommendations(page), expected).severity == severity

    def test_short_description(self, make_page):
        page = make_page(description="Cheap groceries", description_length=15)
        assert find(page_recommendations(page), "Meta description too short").severity == Severity.MEDIUM

    def test_missing_og_tags(self, make_page):
        rec = find(page_recommendations(make_page(og_description=None)), "Missing OpenGraph tags")
        assert rec.severity == Severity.HIGH

    def test_multiple_h1(self, make_page):
        page = make_page(h1_count=2, h1_values=("Deals", "Prices"))
        rec = find(page_recommendations(page), "Multiple H1 headings")
        assert "Deals, Prices" in rec.description

    def test_images_missing_alt(self, make_page):
        page = make_page(img_count=5, img_with_alt=3)
        assert find(page_recommendations(page), "2 image(s) missing alt text").severity == Severity.MEDIUM

    def test_missing_canonical(self, make_page):
        assert "Missing canonical URL" in titles(page_recommendations(make_page(canonical=None)))

    def test_slow_response(self, make_page):
        rec = find(page_recommendations(make_page(response_time_ms=800)), "Slow page response")
        assert rec.category == Category.PERFORMANCE
        assert rec.current_value == "800ms"

    def test_low_geo_scores(self, make_page):
        page = make_page(content_clarity_score=20, answerability_score=10)
        recs = page_recommendations(page)
        assert "Low content clarity for AI" in titles(recs)
        assert "Low answerability score" in titles(recs)


class TestExemptions:
    """Legal pages, client-rendered shells and CTA-exempt pages."""

    def test_legal_page_skips_structured_data_and_answerability(self, make_page):
        page = make_page(path="/privacy", has_json_ld=False, json_ld_types=(), answerability_score=0)
        recs = titles(page_recommendations(page))
        assert "No structured data" not in recs
        assert "Low answerability score" not in recs

    def test_client_rendered_page_skips_structure_and_geo(self, client_rendered_page):
        page = replace(client_rendered_page, content_clarity_score=0, answerability_score=0)
        recs = titles(page_recommendations(page))
        for absent in ("Missing H1 heading", "Thin content", "Low content clarity for AI", "Low answerability score"):
            assert absent not in recs

    def test_careers_page_needs_no_cta(self, make_page):
        assert "No call-to-action found" not in titles(page_recommendations(make_page(path="/careers", cta_count=0)))
        assert "No call-to-action found" in titles(page_recommendations(make_page(path="/pricing", cta_count=0)))


class TestCroFindings:

    def test_contact_page_without_form(self, make_page):
        recs = page_recommendations(make_page(path="/contact", form_count=0))
        assert find(recs, "Missing form on conversion page").category == Category.CRO

    def test_slow_conversion_page(self, make_page):
        recs = titles(page_recommendations(make_page(path="/pricing", response_time_ms=1500)))
        assert "Slow load time hurting conversions" in recs
        assert "Slow page response" in recs

    def test_weak_homepage_value_proposition(self, make_page):
        recs = page_recommendations(make_page(path="/", value_proposition_score=10))
        assert "Weak value proposition on homepage" in titles(recs)


class TestOrdering:
    """Severity sort and rule order."""

    def test_sort_is_stable_by_severity(self):
        def rec(title, severity):
            return SeoRecommendation(page_path=None, severity=severity, category=Category.TECHNICAL,
                                     title=title, description="")

        recs = [
            rec("low-1", Severity.LOW),
            rec("critical-1", Severity.CRITICAL),
            rec("medium-1", Severity.MEDIUM),
            rec("critical-2", Severity.CRITICAL),
            rec("high-1", Severity.HIGH),
            rec("low-2", Severity.LOW),
        ]
        assert titles(sort_by_severity(recs)) == [
            "critical-1", "critical-2", "high-1", "medium-1", "low-1", "low-2",
        ]

    def test_generated_output_is_non_decreasing(self, make_page):
        pages = [
            make_page(path="/", title=None, title_length=0, response_time_ms=900),
            make_page(path="/pricing", status_code=500, canonical=None),
            make_page(path="/blog", img_count=2, img_with_alt=0, cta_count=0),
        ]
        recs = generate_recommendations(pages, SiteValidation(robots_txt_valid=False))
        ranks = [SEVERITY_ORDER[rec.severity.value] for rec in recs]

        assert ranks == sorted(ranks)
        assert recs[0].title == "robots.txt is missing or invalid"

    def test_site_wide_precede_page_findings_within_severity(self, make_page, valid_site):
        validation = replace(valid_site, sitemap_missing_pages=("/blog",))
        recs = generate_recommendations([make_page(og_title=None)], validation)
        high = [r for r in recs if r.severity == Severity.HIGH]
        assert titles(high) == ["Sitemap missing 1 page(s)", "Missing OpenGraph tags"]

    def test_generation_is_deterministic(self, make_page, valid_site):
        pages = [make_page(canonical=None), make_page(path="/", cta_count=0)]
        assert generate_recommendations(pages, valid_site) == generate_recommendations(pages, valid_site)
