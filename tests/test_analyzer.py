"""
Page Analyzer Tests

Tests extraction of meta tags, headings, body text, images, links and
JSON-LD, including the regex fallbacks for markup the parser cannot see.
"""

from dataclasses import fields

import pytest

from seo_audit.analyzer import analyze_html, empty_page_analysis
from seo_audit.analyzer.extraction import (
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


URL = "https://julyu.com/"


def analyze(markup: str, path: str = "/", status_code: int = 200, response_time_ms: int = 120):
    return analyze_html(markup, path, f"https://julyu.com{path}", status_code, response_time_ms)


class TestMetaExtraction:
    """Title, description and social tags."""

    def test_full_head(self, rich_homepage_html):
        page = analyze(rich_homepage_html)

        assert page.title == "Julyu - Compare Grocery Prices Near You"
        assert page.title_length == len(page.title)
        assert page.description.startswith("Julyu compares grocery prices")
        assert page.description_length == len(page.description)
        assert page.og_title == "Julyu"
        assert page.og_description == "Compare grocery prices"
        assert page.og_image == "https://julyu.com/opengraph-image"
        assert page.twitter_card == "summary_large_image"
        assert page.canonical == "https://julyu.com/"
        assert page.viewport is True

    def test_missing_head_tags(self, page_html):
        page = analyze(page_html(title=None, description=None))

        assert page.title is None
        assert page.title_length == 0
        assert page.description is None
        assert page.description_length == 0

    def test_entities_in_title_are_decoded(self):
        page = analyze("<html><head><title>Fruit &amp; Veg Deals</title></head><body></body></html>")
        assert page.title == "Fruit & Veg Deals"

    def test_lengths_count_raw_text(self):
        markup = (
            '<html><head><title>  Julyu  </title>'
            '<meta name="description" content=" Weekly grocery deals "></head><body></body></html>'
        )
        page = analyze(markup)
        assert page.title == "  Julyu  "
        assert page.title_length == 9
        assert page.description_length == 22

    def test_description_only_present_as_literal_markup(self):
        markup = (
            "<html><head><title>Julyu</title></head><body>"
            "<script>self.__next_f.push('<meta name=\"description\" content=\"Weekly grocery deals\">')</script>"
            "</body></html>"
        )
        meta = extract_meta(parse_markup(markup), markup)
        assert meta.description == "Weekly grocery deals"


class TestHeadings:
    """Heading counts and the regex fallback."""

    def test_counts_and_values(self, rich_homepage_html):
        page = analyze(rich_homepage_html)

        assert page.h1_count == 1
        assert page.h1_values == ("Save on every grocery trip",)
        assert page.h2_count == 2
        assert page.h3_count == 1

    def test_h1_only_present_as_literal_markup(self):
        """An h1 the tree never sees (inside a script payload) is still counted."""
        markup = (
            "<html><head><title>Julyu</title></head><body><div id=\"__next\"></div>"
            "<script>self.__next_f.push('<h1 class=\"hero\">Compare grocery prices</h1>')</script>"
            "</body></html>"
        )
        soup = parse_markup(markup)
        headings = extract_headings(soup, markup)

        assert headings.h1_count >= 1
        assert headings.h1_values[0] == "Compare grocery prices"

    def test_multiple_h1(self):
        page = analyze("<html><body><h1>One</h1><h1>Two</h1></body></html>")
        assert page.h1_count == 2
        assert page.h1_values == ("One", "Two")


class TestBodyText:
    """Visible text and word counts."""

    def test_navigation_and_footer_are_excluded(self, page_html):
        page = analyze(page_html(word_count=400))
        assert page.word_count == 400

    def test_regex_wins_when_tree_text_is_short(self):
        """Tree strips <header>, regex keeps it; the longer extraction is used."""
        hero = " ".join(["grocery"] * 150)
        markup = (
            "<html><head><title>Julyu</title></head><body>"
            f"<header><p>{hero}</p></header><main><p>Loading</p></main>"
            "</body></html>"
        )
        assert len(markup) > 1000

        text = extract_body_text(parse_markup(markup), markup)
        assert len(text.split()) == 151

    def test_short_markup_never_uses_regex(self):
        markup = "<html><body><header><p>Fresh deals weekly</p></header><p>Loading</p></body></html>"
        page = analyze(markup)
        assert page.word_count == 1

    def test_scroll_focus_boundary_is_excluded(self):
        markup = (
            "<html><body><div data-nextjs-scroll-focus-boundary>skip these words</div>"
            "<p>Compare grocery prices</p></body></html>"
        )
        page = analyze(markup)
        assert page.word_count == 3

    def test_document_without_body_tag(self):
        markup = (
            "<html><head><title>Julyu</title></head>\n"
            "<h1>Deals</h1>\n<p>Compare grocery prices near you today</p></html>"
        )
        page = analyze(markup)
        assert page.h1_count == 1
        assert page.word_count == 7
        assert page.is_client_rendered is False

    def test_empty_body_in_short_markup(self):
        assert analyze("<html><head><title>Julyu</title></head><body></body></html>").word_count == 0


class TestImagesAndLinks:
    """Alt coverage and link classification."""

    def test_alt_coverage(self, rich_homepage_html):
        page = analyze(rich_homepage_html)
        assert page.img_count == 3
        assert page.img_with_alt == 2

    def test_internal_and_external_links(self, rich_homepage_html):
        page = analyze(rich_homepage_html)
        # /pricing, /features, https://julyu.com/about, /signup; mailto ignored
        assert page.internal_links == 4
        assert page.external_links == 1

    def test_no_images(self, page_html):
        page = analyze(page_html())
        assert page.img_count == 0
        assert page.img_with_alt == 0

    def test_images_only_present_as_literal_markup(self):
        markup = (
            "<html><body><div id=\"__next\"></div><script>self.__next_f.push("
            "'<img src=\"/cart.png\" alt=\"Cart\"><img src=\"/banner.png\">')</script></body></html>"
        )
        assert extract_images(parse_markup(markup), markup) == (2, 1)

    def test_links_only_present_as_literal_markup(self):
        markup = (
            "<html><body><script>self.__next_f.push("
            "'<a href=\"/pricing\">Pricing</a><a href=\"https://julyu.com/about\">About</a>"
            "<a href=\"https://example.com\">Partner</a>')</script></body></html>"
        )
        assert extract_links(parse_markup(markup), markup, URL) == (2, 1)


class TestStructuredData:
    """JSON-LD parsing and type collection."""

    def test_graph_types(self, rich_homepage_html):
        page = analyze(rich_homepage_html)
        assert page.has_json_ld is True
        assert page.json_ld_types == ("Organization", "WebSite")
        assert page.has_faq_schema is False

    def test_types_are_deduplicated_across_blocks(self):
        markup = (
            '<html><head><script type="application/ld+json">{"@type": "Organization"}</script>'
            '<script type="application/ld+json">{"@graph": [{"@type": "Organization"}, '
            '{"@type": ["WebSite", "Organization"]}]}</script></head><body></body></html>'
        )
        documents = extract_json_ld(parse_markup(markup), markup)
        assert schema_types(documents) == ("Organization", "WebSite")

    def test_invalid_block_is_skipped(self):
        markup = (
            '<html><head><script type="application/ld+json">{not json</script>'
            '<script type="application/ld+json">{"@type": "FAQPage"}</script></head><body></body></html>'
        )
        page = analyze(markup)
        assert page.json_ld_types == ("FAQPage",)
        assert page.has_faq_schema is True

    def test_deeply_nested_block_is_skipped(self):
        nested = "[" * 5000 + "]" * 5000
        markup = (
            f'<html><head><script type="application/ld+json">{nested}</script>'
            '<script type="application/ld+json">{"@type": "FAQPage"}</script></head>'
            "<body><p>Compare grocery prices</p></body></html>"
        )
        page = analyze(markup)
        assert page.status_code == 200
        assert page.json_ld_types == ("FAQPage",)
        assert page.word_count == 3

    def test_flatten_unwraps_graph_and_arrays(self):
        documents = [
            {"@graph": [{"@type": "Organization"}, {"@type": "WebSite"}]},
            [{"@type": "Product"}],
            {"@type": "BreadcrumbList"},
        ]
        assert [s["@type"] for s in flatten_schemas(documents)] == [
            "Organization", "WebSite", "Product", "BreadcrumbList",
        ]


class TestAnalysisRecord:
    """Whole-record properties."""

    def test_empty_markup_degrades_to_defaults(self):
        page = analyze("")
        assert page.word_count == 0
        assert page.title is None
        assert page.has_json_ld is False
        assert page.json_ld_types == ()

    def test_analysis_is_deterministic(self, rich_homepage_html):
        assert analyze(rich_homepage_html) == analyze(rich_homepage_html)

    @pytest.mark.parametrize("markup_fixture", ["rich_homepage_html"])
    def test_scores_within_range(self, request, markup_fixture):
        page = analyze(request.getfixturevalue(markup_fixture))
        for f in fields(page):
            value = getattr(page, f.name)
            if f.name.endswith("_score"):
                assert 0 <= value <= 100, f.name
            elif isinstance(value, int) and not isinstance(value, bool):
                assert value >= 0, f.name

    def test_empty_page_analysis(self):
        page = empty_page_analysis("/blog", "https://julyu.com/blog", 10000)
        assert page.status_code == 0
        assert page.response_time_ms == 10000
        assert page.word_count == 0
        assert page.is_client_rendered is False

    def test_to_dict_uses_camel_case(self, rich_homepage_html):
        data = analyze(rich_homepage_html).to_dict()
        assert data["statusCode"] == 200
        assert data["jsonLdTypes"] == ["Organization", "WebSite"]
        assert "contentClarityScore" in data
