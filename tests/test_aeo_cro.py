"""
AEO and CRO Rubric Tests

Answer-engine readiness and conversion signals.
"""

import pytest

from seo_audit.analyzer.aeo import (
    AeoScores,
    calculate_ai_snippet_compatibility,
    calculate_direct_answer_readiness,
    calculate_entity_markup,
    calculate_faq_coverage,
    calculate_schema_richness,
    calculate_speakable_content,
    measure_schema_depth,
)
from seo_audit.analyzer.cro import (
    CroScores,
    CtaResult,
    calculate_cta_presence,
    calculate_form_accessibility,
    calculate_load_speed_impact,
    calculate_mobile_cro,
    calculate_social_proof,
    calculate_trust_signals,
    calculate_value_proposition,
)


# =============================================================================
# AEO
# =============================================================================

class TestSchemaDepth:
    """Nesting depth of JSON-LD values."""

    def test_flat_object(self):
        assert measure_schema_depth({"@type": "Organization", "name": "Julyu"}) == 1

    def test_nested_object(self):
        assert measure_schema_depth({"address": {"streetAddress": "1 Main St"}}) == 2

    def test_at_keywords_are_ignored(self):
        assert measure_schema_depth({"@graph": [{"name": "Julyu"}]}) == 0

    def test_scalar(self):
        assert measure_schema_depth("Julyu") == 0


class TestAeoRubrics:
    """Schema richness, FAQ coverage and entity markup."""

    def test_schema_richness(self):
        documents = [{"@type": "Organization", "name": "Julyu", "address": {"streetAddress": "1 Main St"}}]
        # 3 types (15) + 3 essential types (15) + depth 2 (12)
        assert calculate_schema_richness(("Organization", "WebSite", "FAQPage"), documents) == 42

    def test_schema_richness_without_schema(self):
        assert calculate_schema_richness((), []) == 0

    def test_faq_coverage_accordion(self):
        markup = '<details class="faq-item"><summary>Delivery</summary></details>'
        assert calculate_faq_coverage(markup, False, "") == 15

    def test_faq_coverage_empty(self):
        assert calculate_faq_coverage("", False, "") == 0

    def test_entity_markup_for_complete_organization(self):
        org = {
            "@type": "Organization",
            "@id": "https://julyu.com/#org",
            "name": "Julyu",
            "url": "https://julyu.com",
            "logo": "https://julyu.com/logo.png",
            "sameAs": ["https://twitter.com/julyu"],
        }
        # organization (30) + @id (8) + sameAs (7)
        assert calculate_entity_markup([org], ("Organization",)) == 45

    def test_weighted_overall(self):
        assert AeoScores(100, 100, 100, 100, 100, 100).overall == 100
        assert AeoScores().overall == 0


TWO_PARAGRAPHS = (
    "Julyu is a grocery price comparison tool for busy families.\n\n"
    "It compares weekly prices across stores near you. Save money on every trip."
)
SHORT_SENTENCES = "Julyu compares grocery prices across every store near you each week. Prices update daily."


class TestAnswerRubrics:
    """Direct answers, speakable content and snippet structure."""

    def test_direct_answer_readiness(self):
        markup = "<ol><li>Search</li></ol><strong>Save</strong>"
        # leading definition (8) + 2/2 concise paragraphs (25) + ordered list (10) + one bold (8)
        assert calculate_direct_answer_readiness(TWO_PARAGRAPHS, markup) == 51

    def test_direct_answer_readiness_empty(self):
        assert calculate_direct_answer_readiness("", "") == 0

    def test_speakable_content(self):
        # speakable markup (30) + all sentences short (25) + natural text (25) + 11-word opener (20)
        assert calculate_speakable_content('<div class="speakable"></div>', SHORT_SENTENCES) == 100

    def test_speakable_content_penalizes_code_and_tables(self):
        markup = "<code>x</code>" * 4 + "<table></table>" * 3
        # short sentences (25) + natural text 25 - 10 - 10 (5) + 11-word opener (20)
        assert calculate_speakable_content(markup, SHORT_SENTENCES) == 50

    def test_ai_snippet_compatibility(self):
        markup = (
            '<table></table><ul><li>Milk</li></ul><h2>How does Julyu work?</h2>'
            '<section></section><section></section><div id="deals"></div>'
        )
        # short paragraphs (20) + table (8) + list (6) + one h1 with 2 h2s (20)
        # + question heading over short body (10) + 3 segments (12)
        assert calculate_ai_snippet_compatibility(markup, TWO_PARAGRAPHS, 1, 2) == 76

    def test_ai_snippet_compatibility_headings_only(self):
        assert calculate_ai_snippet_compatibility("", "", 0, 3) == 8


# =============================================================================
# CRO
# =============================================================================

class TestCallsToAction:
    """CTA detection and quality."""

    def test_styled_specific_ctas(self):
        markup = (
            '<a class="bg-green-500 px-6" href="/signup">Get started</a>'
            '<button type="button">Learn more</button>'
        )
        result = calculate_cta_presence(markup)

        assert result.count == 2
        assert result.texts == ("Get started", "Learn more")
        assert result.score == 100

    def test_only_generic_cta(self):
        result = calculate_cta_presence('<button type="button">Learn more</button>')
        # present (30) + above the fold (20) + single CTA (8)
        assert result.score == 58

    def test_no_cta(self):
        assert calculate_cta_presence("<p>Weekly deals</p>") == CtaResult()

    def test_duplicate_texts_counted_once(self):
        markup = '<a href="/a">Sign up</a><a href="/b">Sign up</a>'
        assert calculate_cta_presence(markup).count == 1


class TestForms:

    def test_no_form(self):
        result = calculate_form_accessibility("<p>No form here</p>")
        assert result.form_count == 0
        assert result.score == 0

    def test_accessible_form(self):
        markup = (
            '<form><label for="e">Email</label>'
            '<input id="e" type="email" placeholder="you@example.com" autocomplete="email">'
            '<button type="submit">Join</button></form>'
        )
        result = calculate_form_accessibility(markup)
        assert result.form_count == 1
        assert result.score == 85


class TestLoadSpeed:

    @pytest.mark.parametrize("response_time_ms,expected", [
        (150, 100),
        (499, 80),
        (999, 60),
        (1500, 40),
        (2500, 20),
        (5000, 0),
    ])
    def test_tiers(self, response_time_ms, expected):
        assert calculate_load_speed_impact(response_time_ms) == expected


class TestTrustAndSocialProof:

    def test_trust_signals(self):
        result = calculate_trust_signals(
            '<a href="/privacy">Privacy</a>',
            "Your data is secure and encrypted. Email support@julyu.com",
        )
        assert result.score == 62
        assert result.has_badges is False

    def test_trust_badge(self):
        result = calculate_trust_signals('<img src="/b.png" alt="Verified partner badge">', "")
        assert result.has_badges is True
        assert result.score == 25

    def test_social_proof(self):
        result = calculate_social_proof("", "Trusted by 10,000+ shoppers. Rated 4.8 out of 5.")
        assert result.score == 40
        assert result.has_social_proof is True
        assert result.has_testimonials is False

    def test_testimonial_block(self):
        result = calculate_social_proof("<blockquote>Great app</blockquote>", "")
        assert result.has_testimonials is True
        assert result.score == 30


class TestValueAndMobile:

    def test_value_proposition(self):
        result = calculate_value_proposition("Compare prices fast and free", ("Save on every grocery trip",))
        # benefit H1 (30) + compare, fast, free (18)
        assert result.score == 48
        assert result.has_value_prop is True

    def test_no_value_proposition(self):
        result = calculate_value_proposition("", ())
        assert result.score == 0
        assert result.has_value_prop is False

    def test_mobile_ready_markup(self):
        markup = '<meta name="viewport" content="width=device-width"><div class="md:flex px-6">Deals</div>'
        assert calculate_mobile_cro(markup) == 95

    def test_fixed_width_layout(self):
        assert calculate_mobile_cro('<div style="width: 1200px">Deals</div>') == 0

    def test_empty_markup(self):
        assert calculate_mobile_cro("") == 25

    def test_weighted_overall(self):
        assert CroScores().overall == 0
        assert CroScores(load_speed_impact=100).overall == 15
