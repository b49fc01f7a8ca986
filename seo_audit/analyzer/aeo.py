"""
AEO (Answer Engine Optimization) Rubrics

Six point-additive sub-scores (each capped at 100) describing how readily
answer engines and voice assistants can lift content from a page, combined
into a weighted ``aeo_score``.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Sequence

from ..constants import AEO_WEIGHTS
from ..utils import WHITESPACE_RE, clamp_score, round_half_up, strip_tags, words
from .geo import count_patterns, sentences

QUESTION_TYPE_RE = re.compile(r"\"@type\"\s*:\s*\"Question\"", re.IGNORECASE)
H2_H3_RE = re.compile(r"<h[2-3][^>]*>([\s\S]*?)</h[2-3]>", re.IGNORECASE)
QUESTION_H2_H3_RE = re.compile(r"<h[2-3][^>]*>[^<]*\?[^<]*</h[2-3]>", re.IGNORECASE)
DETAILS_RE = re.compile(r"<details[\s>]", re.IGNORECASE)
ACCORDION_RE = re.compile(r"accordion|collapsible|expandable|faq-item", re.IGNORECASE)
OL_RE = re.compile(r"<ol[\s>]", re.IGNORECASE)
UL_RE = re.compile(r"<ul[\s>]", re.IGNORECASE)
LIST_RE = re.compile(r"<[ou]l[\s>]", re.IGNORECASE)
BOLD_RE = re.compile(r"<(strong|b)[\s>]", re.IGNORECASE)
SPEAKABLE_RE = re.compile(r"speakable", re.IGNORECASE)
CODE_RE = re.compile(r"<code[\s>]", re.IGNORECASE)
TABLE_RE = re.compile(r"<table[\s>]", re.IGNORECASE)
DL_RE = re.compile(r"<dl[\s>]", re.IGNORECASE)
SECTION_RE = re.compile(r"<section[\s>]", re.IGNORECASE)
ARTICLE_RE = re.compile(r"<article[\s>]", re.IGNORECASE)
DIV_WITH_ID_RE = re.compile(r"<div\s+id=", re.IGNORECASE)
PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
FIRST_SENTENCE_RE = re.compile(r"^[\s\S]{0,200}?[.!?]")

ESSENTIAL_TYPES = ("Organization", "WebSite", "FAQPage", "BreadcrumbList")
ADVANCED_TYPES = ("HowTo", "Product", "Review", "AggregateRating", "SpeakableSpecification")
PLACE_TYPES = ("LocalBusiness", "Place", "Store")
QUESTION_WORDS = ["how ", "what ", "why ", "when ", "where ", "who "]
LEADING_DEFINITIONS = [" is a ", " is an ", " is the ", " are the ", " refers to ", " means "]
SUMMARY_PHRASES = ("summary", "in short", "tl;dr", "key takeaway")

MAX_SCHEMA_DEPTH = 5


@dataclass(frozen=True)
class AeoScores:
    schema_richness: int = 0
    faq_coverage: int = 0
    direct_answer_readiness: int = 0
    entity_markup: int = 0
    speakable_content: int = 0
    ai_snippet_compatibility: int = 0

    @property
    def overall(self) -> int:
        return round_half_up(sum(getattr(self, key) * weight for key, weight in AEO_WEIGHTS.items()))


def measure_schema_depth(obj: Any, depth: int = 0) -> int:
    """Deepest property nesting in a JSON-LD value, ignoring @-keywords."""
    if not isinstance(obj, (dict, list)) or depth > MAX_SCHEMA_DEPTH:
        return depth
    if isinstance(obj, list):
        return max([depth] + [measure_schema_depth(item, depth) for item in obj])

    max_depth = depth
    for key, value in obj.items():
        if key.startswith("@"):
            continue
        if isinstance(value, (dict, list)):
            max_depth = max(max_depth, measure_schema_depth(value, depth + 1))
        else:
            max_depth = max(max_depth, depth + 1)
    return max_depth


def _paragraphs(body_text: str) -> List[str]:
    return [p for p in PARAGRAPH_SPLIT_RE.split(body_text) if len(p.strip()) > 20]


def calculate_schema_richness(json_ld_types: Sequence[str], documents: List[Any]) -> int:
    score = min(30, len(json_ld_types) * 5)
    score += sum(5 for t in ESSENTIAL_TYPES if t in json_ld_types)
    score += sum(4 for t in ADVANCED_TYPES if t in json_ld_types)

    depth = max([0] + [measure_schema_depth(document) for document in documents])
    score += min(30, depth * 6)

    return clamp_score(score)


def calculate_faq_coverage(markup: str, has_faq_schema: bool, body_text: str) -> int:
    score = 0
    if has_faq_schema:
        score += 30

    # Q&A pairs declared in schema
    score += min(20, len(QUESTION_TYPE_RE.findall(markup)) * 5)

    question_headings = sum(1 for inner in H2_H3_RE.findall(markup) if strip_tags(inner).endswith("?"))
    score += min(20, question_headings * 5)

    # Expandable/accordion patterns
    if DETAILS_RE.search(markup):
        score += 10
    if ACCORDION_RE.search(markup):
        score += 5

    score += min(15, count_patterns(body_text, QUESTION_WORDS) * 3)

    return clamp_score(score)


def calculate_direct_answer_readiness(body_text: str, markup: str) -> int:
    score = 0
    lower = body_text.lower()
    first_200 = " ".join(words(body_text)[:200]).lower()

    # Definition sentences up front
    score += min(25, sum(1 for p in LEADING_DEFINITIONS if p in first_200) * 8)

    # Concise answer paragraphs
    paragraphs = _paragraphs(body_text)
    if paragraphs:
        concise = [p for p in paragraphs if 1 <= len(sentences(p, min_length=5)) <= 3]
        score += round_half_up(len(concise) / len(paragraphs) * 25)

    if OL_RE.search(markup):
        score += 10
    if UL_RE.search(markup):
        score += 10
    if "•" in lower or "✓" in lower:
        score += 5

    bold_count = len(BOLD_RE.findall(markup))
    if bold_count >= 3:
        score += 15
    elif bold_count >= 1:
        score += 8
    if any(phrase in lower for phrase in SUMMARY_PHRASES):
        score += 10

    return clamp_score(score)


def _first_of_type(schemas: List[dict], schema_type: str):
    return next((s for s in schemas if s.get("@type") == schema_type), None)


def calculate_entity_markup(schemas: List[dict], json_ld_types: Sequence[str]) -> int:
    score = 0

    if "Organization" in json_ld_types:
        org = _first_of_type(schemas, "Organization")
        if org:
            org_score = 10 + sum(5 for key in ("name", "url", "logo", "sameAs") if org.get(key))
            score += min(30, org_score)

    if "Person" in json_ld_types or any(s.get("author") for s in schemas):
        score += 20

    if "Product" in json_ld_types:
        product = _first_of_type(schemas, "Product")
        if product:
            product_score = 8 + sum(4 for key in ("name", "description", "offers") if product.get(key))
            score += min(20, product_score)

    if any(t in json_ld_types for t in PLACE_TYPES):
        score += 15

    if any(s.get("@id") for s in schemas):
        score += 8
    if any(s.get("sameAs") for s in schemas):
        score += 7

    return clamp_score(score)


def calculate_speakable_content(markup: str, body_text: str) -> int:
    score = 0
    if SPEAKABLE_RE.search(markup):
        score += 30

    fragments = sentences(body_text)
    if fragments:
        short = [s for s in fragments if len(WHITESPACE_RE.split(s.strip())) <= 15]
        score += round_half_up(len(short) / len(fragments) * 25)

    # Natural reading content, not dominated by code or tables
    natural = 25
    if len(CODE_RE.findall(markup)) > 3:
        natural -= 10
    if len(TABLE_RE.findall(markup)) > 2:
        natural -= 10
    score += max(0, natural)

    match = FIRST_SENTENCE_RE.search(body_text)
    if match:
        first_words = len(WHITESPACE_RE.split(match.group(0)))
        if 10 <= first_words <= 40:
            score += 20
        elif first_words >= 5:
            score += 10

    return clamp_score(score)


def calculate_ai_snippet_compatibility(markup: str, body_text: str, h1_count: int, h2_count: int) -> int:
    score = 0

    paragraphs = _paragraphs(body_text)
    if paragraphs:
        avg_sentences = sum(len(sentences(p, min_length=5)) for p in paragraphs) / len(paragraphs)
        if avg_sentences <= 3:
            score += 20
        elif avg_sentences <= 5:
            score += 12

    if TABLE_RE.search(markup):
        score += 8
    if DL_RE.search(markup):
        score += 6
    if LIST_RE.search(markup):
        score += 6

    # Heading-to-content mapping
    if h1_count == 1 and h2_count >= 2:
        score += 20
    elif h1_count == 1:
        score += 10
    elif h2_count >= 2:
        score += 8

    # Q&A patterns
    if QUESTION_H2_H3_RE.search(markup):
        score += 20 if len(body_text) > 200 else 10

    segments = (
        len(SECTION_RE.findall(markup))
        + len(ARTICLE_RE.findall(markup))
        + min(3, len(DIV_WITH_ID_RE.findall(markup)))
    )
    score += min(20, segments * 4)

    return clamp_score(score)


def score_aeo(
    markup: str,
    body_text: str,
    json_ld_types: Sequence[str],
    documents: List[Any],
    schemas: List[dict],
    has_faq_schema: bool,
    h1_count: int,
    h2_count: int,
) -> AeoScores:
    """All six AEO sub-scores for one page."""
    return AeoScores(
        schema_richness=calculate_schema_richness(json_ld_types, documents),
        faq_coverage=calculate_faq_coverage(markup, has_faq_schema, body_text),
        direct_answer_readiness=calculate_direct_answer_readiness(body_text, markup),
        entity_markup=calculate_entity_markup(schemas, json_ld_types),
        speakable_content=calculate_speakable_content(markup, body_text),
        ai_snippet_compatibility=calculate_ai_snippet_compatibility(markup, body_text, h1_count, h2_count),
    )
