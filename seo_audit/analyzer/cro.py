"""
CRO (Conversion Rate Optimization) Rubrics

Seven sub-scores (each capped at 100) that look for calls-to-action, forms,
trust and social proof, value messaging and mobile readiness. Several rubrics
also report the signals they found so the recommendation generator can
phrase findings without re-scanning markup.
"""

import re
from dataclasses import dataclass, field
from typing import Sequence, Tuple

from ..constants import CRO_WEIGHTS
from ..utils import clamp_score, round_half_up, strip_tags, words
from .geo import count_patterns

CTA_RE = re.compile(
    r"get\s+started|sign\s+up|try\s+(free|now|it|demo)|request\s+(demo|access|a\s+demo)|subscribe"
    r"|join\s+(now|free|us)|apply\s+(now|to)|contact\s+us|start\s+(free|now|saving)"
    r"|get\s+(early\s+)?access|buy\s+now|learn\s+more|see\s+(pricing|plans|demo)"
    r"|book\s+a?\s*(call|demo|meeting)",
    re.IGNORECASE,
)
CLICKABLE_RE = re.compile(r"<(button|a)\s[^>]*>([\s\S]*?)</\1>", re.IGNORECASE)
STYLED_CTA_RE = re.compile(
    r"<(button|a)\s[^>]*(bg-green|bg-blue|bg-primary|btn-primary|bg-gradient)[^>]*>", re.IGNORECASE
)
GENERIC_CTA_RE = re.compile(r"^(learn\s+more|click\s+here)$", re.IGNORECASE)

FORM_RE = re.compile(r"<form[\s>]", re.IGNORECASE)
LABEL_RE = re.compile(r"<label[\s>]", re.IGNORECASE)
INPUT_RE = re.compile(r"<input[\s>]", re.IGNORECASE)
FIELD_HINT_RE = re.compile(r"placeholder\s*=|aria-label\s*=", re.IGNORECASE)
SUBMIT_TYPE_RE = re.compile(r"type\s*=\s*[\"']submit[\"']", re.IGNORECASE)
SUBMIT_BUTTON_RE = re.compile(
    r"<button[^>]*>([\s\S]*?(submit|send|save|sign up|request|apply|get)[\s\S]*?)</button>", re.IGNORECASE
)
FORM_ERROR_RE = re.compile(r"aria-invalid|role\s*=\s*[\"']alert[\"']|error-message|form-error", re.IGNORECASE)
AUTOCOMPLETE_RE = re.compile(r"autocomplete\s*=", re.IGNORECASE)

BADGE_ALT_RE = re.compile(
    r"alt\s*=\s*[\"'][^\"']*(partner|certified|badge|secure|trust|verified|award)[^\"']*[\"']", re.IGNORECASE
)
PRIVACY_LINK_RE = re.compile(r"href\s*=\s*[\"'][^\"']*privac[^\"']*[\"']", re.IGNORECASE)
EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.]+")
PHONE_RE = re.compile(r"\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}")
STREET_RE = re.compile(r"\d{1,5}\s\w+\s(st|ave|rd|blvd|dr|way|ln)", re.IGNORECASE)

BLOCKQUOTE_RE = re.compile(r"<blockquote[\s>]", re.IGNORECASE)
LONG_QUOTE_RE = re.compile("[\"“][^\"”]{20,}[\"”]")
TESTIMONIAL_CLASS_RE = re.compile(r"testimonial|review-quote|customer-quote", re.IGNORECASE)
USER_COUNT_RE = re.compile(
    r"\d[\d,]*\+?\s*(users|customers|shoppers|partners|stores|members|people|businesses)", re.IGNORECASE
)
TRUSTED_BY_RE = re.compile(r"trusted\s+by|used\s+by|chosen\s+by|loved\s+by", re.IGNORECASE)
RATING_RE = re.compile(r"\d+\.?\d*\s*(out of|/)\s*\d+", re.IGNORECASE)
STAR_RATING_RE = re.compile(r"\d+\.?\d*\s*star", re.IGNORECASE)
REVIEW_COUNT_RE = re.compile(r"\d[\d,]*\+?\s*review", re.IGNORECASE)
LOGO_SECTION_RE = re.compile(
    r"partner-logo|company-logo|trusted-by|as-seen|logo-grid|client-logo", re.IGNORECASE
)

VIEWPORT_META_RE = re.compile(r"<meta\s[^>]*name\s*=\s*[\"']viewport[\"']", re.IGNORECASE)
RESPONSIVE_CLASS_RE = re.compile(r"class\s*=\s*[\"'][^\"']*(sm:|md:|lg:|xl:)", re.IGNORECASE)
MEDIA_QUERY_RE = re.compile(r"@media\s*\(", re.IGNORECASE)
PADDED_BUTTON_RE = re.compile(
    r"class\s*=\s*[\"'][^\"']*(px-[4-9]|py-[3-9]|p-[4-9]|btn-lg|btn-md)", re.IGNORECASE
)
MIN_HEIGHT_RE = re.compile(r"min-h-|min-height", re.IGNORECASE)
FIXED_WIDTH_RE = re.compile(r"style\s*=\s*[\"'][^\"']*width\s*:\s*\d{4,}px", re.IGNORECASE)

TRUST_PATTERNS = ["secure", "encrypted", "ssl", "guarantee", "money-back", "protected", "verified", "safe"]
BENEFIT_WORDS = [
    "save", "compare", "find", "discover", "get", "earn",
    "boost", "grow", "reduce", "optimize", "simplify", "transform",
]
VALUE_PATTERNS = ["save", "free", "easy", "fast", "simple", "affordable", "best", "compare", "no cost", "instant"]
FEATURE_BENEFIT_PATTERNS = [
    "so you can", "which means", "to help you", "allowing you", "enabling you", "giving you", "helping you",
]
DIFFERENTIATION_PATTERNS = ["only", "first", "best", "unique", "unlike", "exclusive", "#1", "number one", "leading"]

ABOVE_THE_FOLD_CHARS = 3000
MAX_CTA_TEXTS = 10


# =============================================================================
# RESULT TYPES
# =============================================================================


@dataclass(frozen=True)
class CtaResult:
    score: int = 0
    count: int = 0
    texts: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FormResult:
    score: int = 0
    form_count: int = 0


@dataclass(frozen=True)
class TrustResult:
    score: int = 0
    has_badges: bool = False


@dataclass(frozen=True)
class SocialProofResult:
    score: int = 0
    has_testimonials: bool = False
    has_social_proof: bool = False


@dataclass(frozen=True)
class ValuePropResult:
    score: int = 0
    has_value_prop: bool = False


@dataclass(frozen=True)
class CroScores:
    cta: CtaResult = field(default_factory=CtaResult)
    form: FormResult = field(default_factory=FormResult)
    load_speed_impact: int = 0
    trust: TrustResult = field(default_factory=TrustResult)
    social_proof: SocialProofResult = field(default_factory=SocialProofResult)
    value_proposition: ValuePropResult = field(default_factory=ValuePropResult)
    mobile_cro: int = 0

    @property
    def overall(self) -> int:
        parts = {
            "cta_presence": self.cta.score,
            "form_accessibility": self.form.score,
            "load_speed_impact": self.load_speed_impact,
            "trust_signals": self.trust.score,
            "social_proof": self.social_proof.score,
            "value_proposition": self.value_proposition.score,
            "mobile_cro": self.mobile_cro,
        }
        return round_half_up(sum(parts[key] * weight for key, weight in CRO_WEIGHTS.items()))


# =============================================================================
# RUBRICS
# =============================================================================


def calculate_cta_presence(markup: str) -> CtaResult:
    texts = []
    for _, inner in CLICKABLE_RE.findall(markup):
        text = strip_tags(inner)
        if 0 < len(text) < 50 and CTA_RE.search(text) and text not in texts:
            texts.append(text)

    count = len(texts)
    score = 0
    if count >= 1:
        score += 30

    if CTA_RE.search(markup[:ABOVE_THE_FOLD_CHARS]):
        score += 20
    if STYLED_CTA_RE.search(markup):
        score += 20

    # Something more specific than "learn more"
    if any(not GENERIC_CTA_RE.match(text) for text in texts):
        score += 15

    if 2 <= count <= 4:
        score += 15
    elif count == 1:
        score += 8
    elif count > 4:
        score += 5

    return CtaResult(score=clamp_score(score), count=count, texts=tuple(texts[:MAX_CTA_TEXTS]))


def calculate_form_accessibility(markup: str) -> FormResult:
    form_count = len(FORM_RE.findall(markup))
    if form_count == 0:
        return FormResult()

    score = 0
    has_inputs = INPUT_RE.search(markup) is not None
    if has_inputs and LABEL_RE.search(markup):
        score += 30
    elif has_inputs:
        score += 15

    if FIELD_HINT_RE.search(markup):
        score += 25
    if SUBMIT_TYPE_RE.search(markup) or SUBMIT_BUTTON_RE.search(markup):
        score += 20
    if FORM_ERROR_RE.search(markup):
        score += 15
    if AUTOCOMPLETE_RE.search(markup):
        score += 10

    return FormResult(score=clamp_score(score), form_count=form_count)


def calculate_load_speed_impact(response_time_ms: int) -> int:
    for limit, score in ((200, 100), (500, 80), (1000, 60), (2000, 40), (3000, 20)):
        if response_time_ms < limit:
            return score
    return 0


def calculate_trust_signals(markup: str, body_text: str) -> TrustResult:
    score = min(25, count_patterns(body_text, TRUST_PATTERNS) * 6)

    has_badges = BADGE_ALT_RE.search(markup) is not None
    if has_badges:
        score += 25
    if PRIVACY_LINK_RE.search(markup):
        score += 25

    # Visible contact details
    has_address = "address" in body_text.lower() or STREET_RE.search(body_text) is not None
    if EMAIL_RE.search(body_text) or PHONE_RE.search(body_text) or has_address:
        score += 25

    return TrustResult(score=clamp_score(score), has_badges=has_badges)


def calculate_social_proof(markup: str, body_text: str) -> SocialProofResult:
    score = 0

    has_testimonials = bool(
        BLOCKQUOTE_RE.search(markup) or LONG_QUOTE_RE.search(body_text) or TESTIMONIAL_CLASS_RE.search(markup)
    )
    if has_testimonials:
        score += 30

    has_user_count = USER_COUNT_RE.search(body_text) is not None
    has_trusted_by = TRUSTED_BY_RE.search(body_text) is not None
    if has_user_count:
        score += 15
    if has_trusted_by:
        score += 10

    if RATING_RE.search(body_text) or STAR_RATING_RE.search(body_text):
        score += 15
    if REVIEW_COUNT_RE.search(body_text):
        score += 10

    has_logo_section = LOGO_SECTION_RE.search(markup) is not None
    if has_logo_section:
        score += 20

    return SocialProofResult(
        score=clamp_score(score),
        has_testimonials=has_testimonials,
        has_social_proof=has_logo_section or has_user_count or has_trusted_by,
    )


def calculate_value_proposition(body_text: str, h1_values: Sequence[str]) -> ValuePropResult:
    score = 0
    first_100 = " ".join(words(body_text)[:100])

    if any(benefit in h1.lower() for h1 in h1_values for benefit in BENEFIT_WORDS):
        score += 30

    score += min(25, count_patterns(first_100, VALUE_PATTERNS) * 6)
    score += min(25, count_patterns(body_text, FEATURE_BENEFIT_PATTERNS) * 8)
    score += min(20, count_patterns(body_text, DIFFERENTIATION_PATTERNS) * 5)

    return ValuePropResult(score=clamp_score(score), has_value_prop=score >= 30)


def calculate_mobile_cro(markup: str) -> int:
    score = 0
    if VIEWPORT_META_RE.search(markup):
        score += 25
    if RESPONSIVE_CLASS_RE.search(markup) or MEDIA_QUERY_RE.search(markup):
        score += 25

    # Touch-friendly targets
    if PADDED_BUTTON_RE.search(markup):
        score += 20
    if MIN_HEIGHT_RE.search(markup):
        score += 5

    if not FIXED_WIDTH_RE.search(markup):
        score += 25

    return clamp_score(score)


def score_cro(markup: str, body_text: str, h1_values: Sequence[str], response_time_ms: int) -> CroScores:
    """All seven CRO sub-scores plus the signals they detected."""
    return CroScores(
        cta=calculate_cta_presence(markup),
        form=calculate_form_accessibility(markup),
        load_speed_impact=calculate_load_speed_impact(response_time_ms),
        trust=calculate_trust_signals(markup, body_text),
        social_proof=calculate_social_proof(markup, body_text),
        value_proposition=calculate_value_proposition(body_text, h1_values),
        mobile_cro=calculate_mobile_cro(markup),
    )
