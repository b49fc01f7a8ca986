"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

import json
from dataclasses import replace
from typing import Callable, Dict, Optional

import httpx
import pytest

from seo_audit.config import Settings
from seo_audit.constants import PUBLIC_PAGES
from seo_audit.models import PageAnalysis, SiteValidation


BASE_URL = "https://julyu.com"


# ============================================================================
# Markup Fixtures
# ============================================================================

def build_page_html(
    title: Optional[str] = "Julyu - Compare Grocery Prices Near You",
    description: Optional[str] = (
        "Julyu compares grocery prices across local stores so you can save on every trip. "
        "See weekly deals, build a list, and find the cheapest basket."
    ),
    h1: str = "Save on every grocery trip",
    word_count: int = 400,
    json_ld: Optional[Dict] = None,
    extra_body: str = "",
) -> str:
    """Server-rendered page with configurable head tags and body length."""
    head = ['<meta charset="utf-8">', '<meta name="viewport" content="width=device-width, initial-scale=1">']
    if title is not None:
        head.append(f"<title>{title}</title>")
    if description is not None:
        head.append(f'<meta name="description" content="{description}">')
    head.extend([
        '<meta property="og:title" content="Julyu">',
        '<meta property="og:description" content="Compare grocery prices">',
        '<meta property="og:image" content="https://julyu.com/opengraph-image">',
        '<meta name="twitter:card" content="summary_large_image">',
        '<link rel="canonical" href="https://julyu.com/">',
    ])
    if json_ld is not None:
        head.append(f'<script type="application/ld+json">{json.dumps(json_ld)}</script>')

    filler = " ".join(["groceries"] * (word_count - len(h1.split())))
    return (
        "<!DOCTYPE html><html><head>"
        + "".join(head)
        + "</head><body>"
        + "<nav><a href=\"/pricing\">Pricing</a></nav>"
        + f"<main>\n<h1>{h1}</h1>\n<p>{filler}</p>\n{extra_body}\n</main>"
        + "<footer>Julyu Inc.</footer>"
        + "</body></html>"
    )


FAQ_SCHEMA = {
    "@context": "https://schema.org",
    "@type": "FAQPage",
    "mainEntity": [
        {
            "@type": "Question",
            "name": "How does Julyu work?",
            "acceptedAnswer": {"@type": "Answer", "text": "It compares store prices."},
        }
    ],
}


@pytest.fixture
def page_html() -> Callable[..., str]:
    """Factory for page markup."""
    return build_page_html


@pytest.fixture
def rich_homepage_html() -> str:
    """Homepage with full meta tags, headings, images, links and schema."""
    graph = {
        "@context": "https://schema.org",
        "@graph": [
            {
                "@type": "Organization",
                "@id": "https://julyu.com/#org",
                "name": "Julyu",
                "url": "https://julyu.com",
                "logo": "https://julyu.com/logo.png",
                "sameAs": ["https://twitter.com/julyu"],
            },
            {"@type": "WebSite", "name": "Julyu", "url": "https://julyu.com"},
        ],
    }
    extra = (
        "<h2>How does Julyu work?</h2><p>Julyu is a price comparison tool that provides weekly savings.</p>"
        "<h2>What stores are covered?</h2><ol><li>Step 1: add items</li></ol>"
        "<h3>Why compare?</h3>"
        '<img src="/a.png" alt="Basket"><img src="/b.png" alt="Store shelf"><img src="/c.png" alt="">'
        '<a href="/features">Features</a><a href="https://julyu.com/about">About</a>'
        '<a href="https://example.com/partner">Partner</a><a href="mailto:hi@julyu.com">Mail</a>'
        '<a class="bg-green-600 px-6 py-3" href="/signup">Get started</a>'
    )
    return build_page_html(json_ld=graph, extra_body=extra)


# ============================================================================
# Model Fixtures
# ============================================================================

HEALTHY_PAGE = PageAnalysis(
    path="/features",
    url=f"{BASE_URL}/features",
    status_code=200,
    response_time_ms=150,
    title="Julyu Features - Compare Grocery Prices",
    title_length=39,
    description="d" * 140,
    description_length=140,
    og_title="Julyu",
    og_description="Compare grocery prices",
    og_image=f"{BASE_URL}/opengraph-image",
    twitter_card="summary_large_image",
    canonical=f"{BASE_URL}/features",
    viewport=True,
    word_count=400,
    h1_count=1,
    h2_count=3,
    h3_count=1,
    h1_values=("Compare grocery prices",),
    internal_links=5,
    has_json_ld=True,
    json_ld_types=("WebPage",),
    content_clarity_score=80,
    answerability_score=60,
    citation_worthiness_score=50,
    aeo_score=80,
    schema_richness_score=80,
    faq_coverage_score=80,
    direct_answer_readiness_score=80,
    entity_markup_score=80,
    speakable_content_score=80,
    ai_snippet_compatibility_score=80,
    cro_score=80,
    cta_presence_score=80,
    form_accessibility_score=80,
    load_speed_impact_score=100,
    trust_signals_score=80,
    social_proof_score=80,
    value_proposition_score=80,
    mobile_cro_score=80,
    cta_count=2,
    cta_texts=("Get started", "See pricing"),
    form_count=1,
)


@pytest.fixture
def make_page() -> Callable[..., PageAnalysis]:
    """Factory for a healthy page record with selected fields overridden."""
    def _make(**overrides) -> PageAnalysis:
        if "path" in overrides and "url" not in overrides:
            overrides["url"] = f"{BASE_URL}{overrides['path']}"
        return replace(HEALTHY_PAGE, **overrides)
    return _make


@pytest.fixture
def client_rendered_page(make_page) -> PageAnalysis:
    """JS shell: 200 with almost no words and no H1."""
    return make_page(word_count=12, h1_count=0, h1_values=(), h2_count=0, h3_count=0)


@pytest.fixture
def valid_site() -> SiteValidation:
    """Every site-level check passes."""
    return SiteValidation(
        robots_txt_valid=True,
        sitemap_page_count=len(PUBLIC_PAGES),
        sitemap_missing_pages=(),
        og_image_exists=True,
        manifest_exists=True,
    )


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the production origin with short timeouts."""
    return Settings(SITE_URL=BASE_URL, PAGE_TIMEOUT=2.0, RESOURCE_TIMEOUT=1.0)


# ============================================================================
# HTTP Fixtures
# ============================================================================

def sitemap_xml(paths) -> str:
    entries = "".join(f"<url><loc>{BASE_URL}{path}</loc></url>" for path in paths)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset>{entries}</urlset>'


ROBOTS_TXT = f"User-agent: *\nAllow: /\nDisallow: /admin\nSitemap: {BASE_URL}/sitemap.xml\n"


@pytest.fixture
def site_handler(page_html) -> Callable[[httpx.Request], httpx.Response]:
    """Mock transport handler for a fully healthy site."""
    def _handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/robots.txt":
            return httpx.Response(200, text=ROBOTS_TXT)
        if path == "/sitemap.xml":
            return httpx.Response(200, text=sitemap_xml(PUBLIC_PAGES))
        if path in ("/opengraph-image", "/manifest.webmanifest"):
            return httpx.Response(200)
        if path in PUBLIC_PAGES:
            return httpx.Response(200, text=page_html(json_ld=FAQ_SCHEMA))
        return httpx.Response(404, text="Not found")
    return _handler


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
