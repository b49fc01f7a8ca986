"""Small numeric and text helpers shared by the analyzer and scoring engine."""

import math
import re
from typing import List

WHITESPACE_RE = re.compile(r"\s+")
TAG_RE = re.compile(r"<[^>]*>")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Clamp a point total into the 0-100 score range."""
    return int(max(0, min(100, value)))


def words(text: str) -> List[str]:
    """Whitespace tokenization, empty tokens dropped."""
    return [w for w in WHITESPACE_RE.split(text) if w]


def strip_tags(markup: str) -> str:
    """Remove every tag from a markup fragment and trim it."""
    return TAG_RE.sub("", markup).strip()


def ratio_points(count: int, total: int, points: int) -> int:
    """Award a share of ``points`` proportional to count/total."""
    if total <= 0:
        return 0
    return round_half_up(count / total * points)
