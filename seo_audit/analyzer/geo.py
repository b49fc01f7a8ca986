"""
GEO (Generative Engine Optimization) Rubrics

Three independent point-additive scores estimating how well a page can be
understood, answered from, and cited by AI answer engines:

1. **Content clarity** - length, heading structure, sentence length, lists
2. **Answerability** - FAQ schema, question headings, definitions, steps
3. **Citation-worthiness** - statistics, data/authority language, quotes

Each score is capped at 100.
"""

import re
from typing import Sequence

from ..utils import WHITESPACE_RE, clamp_score, strip_tags, words

SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
HEADING_RE = re.compile(r"<h[1-3][^>]*>([\s\S]*?)</h[1-3]>", re.IGNORECASE)
ORDERED_LIST_RE = re.compile(r"<ol[\s>]", re.IGNORECASE)
NUMBER_RE = re.compile(r"\d+[%$,.]?\d*")
QUOTE_RE = re.compile("[\"“].*?[\"”]|['‘].*?['’]")

BULLET_GLYPHS = ("•", "✓", "✔")
QUESTION_PREFIXES = ("how", "what", "why", "when", "where")
DEFINITION_PATTERNS = [" is a ", " is an ", " are ", " means ", " refers to ", " provides "]
DATA_PATTERNS = ["average", "according to", "research", "study", "survey", "report", "data shows"]
AUTHORITY_PATTERNS = ["founded", "established", "certified", "award", "recognition", "partner"]


def sentences(text: str, min_length: int = 10) -> list:
    """Fragments between sentence terminators longer than ``min_length``."""
    return [s for s in SENTENCE_SPLIT_RE.split(text) if len(s.strip()) > min_length]


def count_patterns(text: str, patterns: Sequence[str]) -> int:
    """How many of ``patterns`` occur at least once in lowercased text."""
    lower = text.lower()
    return sum(1 for pattern in patterns if pattern in lower)


def calculate_content_clarity(text: str, h1_count: int, h2_count: int, h3_count: int) -> int:
    score = 0
    word_count = len(words(text))

    # Meaningful content (up to 30 points)
    if word_count >= 100:
        score += 15
    if word_count >= 300:
        score += 15

    # Heading structure (up to 30 points)
    if h1_count == 1:
        score += 15
    if h2_count >= 2:
        score += 10
    if h3_count >= 1:
        score += 5

    # Shorter sentences read clearer (up to 20 points)
    fragments = sentences(text)
    if fragments:
        avg_words_per_sentence = word_count / len(fragments)
        if avg_words_per_sentence <= 20:
            score += 20
        elif avg_words_per_sentence <= 30:
            score += 10

    # Lists or structured content (up to 20 points)
    if any(glyph in text for glyph in BULLET_GLYPHS):
        score += 10
    if h2_count >= 3:
        score += 10

    return clamp_score(score)


def count_question_headings(markup: str) -> int:
    """h1-h3 headings phrased as questions, scanned on the raw markup."""
    count = 0
    for inner in HEADING_RE.findall(markup):
        text = strip_tags(inner).lower()
        if text.endswith("?") or text.startswith(QUESTION_PREFIXES):
            count += 1
    return count


def calculate_answerability(markup: str, body_text: str, has_faq_schema: bool) -> int:
    score = 0

    # FAQ schema (30 points)
    if has_faq_schema:
        score += 30

    # Question-style headings (up to 30 points)
    score += min(30, count_question_headings(markup) * 10)

    # Definitional phrasing (up to 20 points)
    score += min(20, count_patterns(body_text, DEFINITION_PATTERNS) * 5)

    # Numbered lists or step-by-step content (20 points)
    lower = body_text.lower()
    if ORDERED_LIST_RE.search(markup) or "step 1" in lower or "step one" in lower:
        score += 20

    return clamp_score(score)


def calculate_citation_worthiness(text: str) -> int:
    score = 0

    # Numbers and statistics (up to 30 points)
    score += min(30, len(NUMBER_RE.findall(text)) * 3)

    # Data language (up to 20 points)
    score += min(20, count_patterns(text, DATA_PATTERNS) * 5)

    # Authority claims (up to 20 points)
    score += min(20, count_patterns(text, AUTHORITY_PATTERNS) * 5)

    # Length (up to 15 points); raw split, empty leading token included
    token_count = len(WHITESPACE_RE.split(text))
    if token_count >= 500:
        score += 15
    elif token_count >= 300:
        score += 10
    elif token_count >= 100:
        score += 5

    # Quoted spans (up to 15 points)
    score += min(15, len(QUOTE_RE.findall(text)) * 5)

    return clamp_score(score)
