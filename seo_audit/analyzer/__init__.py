"""
Page Analyzer Package

Parses one page's server-delivered markup into a PageAnalysis:
- Tree-then-regex extraction of meta tags, headings, body text, images,
  links and JSON-LD
- GEO rubrics (content clarity, answerability, citation-worthiness)
- AEO rubrics (schema richness, FAQ coverage, direct answers, entities,
  speakable content, AI snippets)
- CRO rubrics (CTAs, forms, load speed, trust, social proof, value
  proposition, mobile)

Usage:
    from seo_audit.analyzer import analyze_html

    page = analyze_html(markup, "/pricing", "https://julyu.com/pricing", 200, 180)
    print(page.word_count, page.content_clarity_score, page.aeo_score)
"""

from .page import analyze_html, empty_page_analysis

from .geo import (
    calculate_answerability,
    calculate_citation_worthiness,
    calculate_content_clarity,
)

from .aeo import AeoScores, score_aeo
from .cro import CroScores, score_cro

__all__ = [
    "analyze_html",
    "empty_page_analysis",
    "calculate_answerability",
    "calculate_citation_worthiness",
    "calculate_content_clarity",
    "AeoScores",
    "score_aeo",
    "CroScores",
    "score_cro",
]
