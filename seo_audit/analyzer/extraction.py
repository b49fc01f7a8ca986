"""
Markup Extraction

Two independent strategies per field group:
1. Document tree (BeautifulSoup) - the primary source
2. Regex over the raw markup - used only when the tree strategy comes back
   empty for that group (or, for body text, suspiciously short)

Framework-generated or malformed markup can leave the tree without nodes
that still exist literally in the markup, so each group decides its own
fallback independently.
"""

import html as html_lib
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ..constants import THRESHOLDS
from ..utils import WHITESPACE_RE, strip_tags, words

logger = logging.getLogger(__name__)


# =============================================================================
# REGEX PATTERNS (fallback strategy)
# =============================================================================

TITLE_RE = re.compile(r"<title[^>]*>([\s\S]*?)</title>", re.IGNORECASE)
META_DESCRIPTION_RE = re.compile(
    r"<meta\s[^>]*name\s*=\s*[\"']description[\"'][^>]*content\s*=\s*[\"']([^\"']*)[\"']",
    re.IGNORECASE,
)
H1_RE = re.compile(r"<h1[^>]*>([\s\S]*?)</h1>", re.IGNORECASE)
H2_OPEN_RE = re.compile(r"<h2[^>]*>", re.IGNORECASE)
H3_OPEN_RE = re.compile(r"<h3[^>]*>", re.IGNORECASE)
IMG_RE = re.compile(r"<img\s[^>]*>", re.IGNORECASE)
IMG_ALT_RE = re.compile(r"alt\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE)
LINK_RE = re.compile(r"<a\s[^>]*href\s*=\s*[\"']([^\"']*)[\"'][^>]*>", re.IGNORECASE)
JSON_LD_RE = re.compile(
    r"<script\s+type\s*=\s*[\"']application/ld\+json[\"'][^>]*>([\s\S]*?)</script>",
    re.IGNORECASE,
)

# Blocks dropped before regex body-text extraction
STRIP_BLOCK_RES = [
    re.compile(rf"<{tag}[\s\S]*?</{tag}>", re.IGNORECASE)
    for tag in ("head", "script", "style", "noscript", "nav", "footer", "svg")
]
NAMED_ENTITY_RE = re.compile(r"&[a-z]+;", re.IGNORECASE)
NUMERIC_ENTITY_RE = re.compile(r"&#\d+;", re.IGNORECASE)

# Subtrees dropped from the body clone before tree text extraction
NON_CONTENT_TAGS = ["nav", "footer", "script", "style", "header", "noscript", "svg"]
NON_CONTENT_SELECTOR = "[data-nextjs-scroll-focus-boundary]"


def parse_markup(markup: str) -> BeautifulSoup:
    """Build the document tree. The stdlib parser backend never raises on bad markup."""
    return BeautifulSoup(markup or "", "html.parser")


# =============================================================================
# META TAGS
# =============================================================================


@dataclass(frozen=True)
class MetaTags:
    title: Optional[str] = None
    description: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    twitter_card: Optional[str] = None
    canonical: Optional[str] = None
    viewport: bool = False


def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = tag.get("content")
    return content or None if isinstance(content, str) else None


def _canonical_href(soup: BeautifulSoup) -> Optional[str]:
    for link in soup.find_all("link", href=True):
        rel = link.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        if "canonical" in [r.lower() for r in rel]:
            return link["href"].strip() or None
    return None


def extract_meta(soup: BeautifulSoup, markup: str) -> MetaTags:
    """Title, description, social tags, canonical and viewport presence."""
    title = None
    if soup.title is not None:
        title = soup.title.get_text() or None
    if title is None:
        match = TITLE_RE.search(markup)
        if match:
            title = html_lib.unescape(strip_tags(match.group(1))) or None

    description = _meta_content(soup, name="description")
    if description is None:
        match = META_DESCRIPTION_RE.search(markup)
        if match:
            description = html_lib.unescape(match.group(1)) or None

    return MetaTags(
        title=title,
        description=description,
        og_title=_meta_content(soup, property="og:title"),
        og_description=_meta_content(soup, property="og:description"),
        og_image=_meta_content(soup, property="og:image"),
        twitter_card=_meta_content(soup, name="twitter:card"),
        canonical=_canonical_href(soup),
        viewport=soup.find("meta", attrs={"name": "viewport"}) is not None,
    )


# =============================================================================
# HEADINGS
# =============================================================================


@dataclass(frozen=True)
class Headings:
    h1_values: Tuple[str, ...] = ()
    h2_count: int = 0
    h3_count: int = 0

    @property
    def h1_count(self) -> int:
        return len(self.h1_values)


def extract_headings(soup: BeautifulSoup, markup: str, path: str = "") -> Headings:
    """Heading texts/counts; each level falls back to regex on its own."""
    h1_values = [text for text in (h.get_text().strip() for h in soup.find_all("h1")) if text]
    h2_count = len(soup.find_all("h2"))
    h3_count = len(soup.find_all("h3"))

    if not h1_values:
        h1_values = [text for text in (strip_tags(m) for m in H1_RE.findall(markup)) if text]
        if h1_values:
            logger.debug(f"{path}: regex found {len(h1_values)} h1(s)")
    if h2_count == 0:
        h2_count = len(H2_OPEN_RE.findall(markup))
    if h3_count == 0:
        h3_count = len(H3_OPEN_RE.findall(markup))

    return Headings(h1_values=tuple(h1_values), h2_count=h2_count, h3_count=h3_count)


# =============================================================================
# BODY TEXT
# =============================================================================


def _tree_body_text(soup: BeautifulSoup, markup: str) -> str:
    body = soup.body
    if body is not None and body.contents:
        clone = BeautifulSoup(str(body), "html.parser")
        for node in clone(NON_CONTENT_TAGS):
            node.decompose()
        for node in clone.select(NON_CONTENT_SELECTOR):
            node.decompose()
        return clone.get_text()

    # html.parser adds no implied <body>, so a body-less document is read whole.
    # An explicit but empty <body> is only worth re-reading for large markup.
    if body is None or len(markup) > 500:
        clone = BeautifulSoup(markup, "html.parser")
        for node in clone(["head", "title", "meta"] + NON_CONTENT_TAGS):
            node.decompose()
        return clone.get_text()
    return ""


def _regex_body_text(markup: str) -> str:
    stripped = markup
    for pattern in STRIP_BLOCK_RES:
        stripped = pattern.sub("", stripped)
    stripped = re.sub(r"<[^>]*>", " ", stripped)
    stripped = NAMED_ENTITY_RE.sub(" ", stripped)
    stripped = NUMERIC_ENTITY_RE.sub(" ", stripped)
    return WHITESPACE_RE.sub(" ", stripped).strip()


def extract_body_text(soup: BeautifulSoup, markup: str, path: str = "") -> str:
    """
    Visible body text.

    When the tree yields fewer than 50 words from a large document the regex
    strategy is also run, and whichever text has more words wins.
    """
    text = _tree_body_text(soup, markup)
    tree_word_count = len(words(text))

    if (
        tree_word_count < THRESHOLDS["client_rendered_max_words"]
        and len(markup) > THRESHOLDS["regex_fallback_min_html_length"]
    ):
        regex_text = _regex_body_text(markup)
        regex_word_count = len(words(regex_text))
        logger.debug(f"{path}: tree found {tree_word_count} words, regex found {regex_word_count}")
        if regex_word_count > tree_word_count:
            return regex_text

    return text


# =============================================================================
# IMAGES & LINKS
# =============================================================================


def extract_images(soup: BeautifulSoup, markup: str) -> Tuple[int, int]:
    """(image count, images with non-empty alt)."""
    images = soup.find_all("img")
    img_count = len(images)
    img_with_alt = sum(1 for img in images if (img.get("alt") or "").strip())

    if img_count == 0:
        tags = IMG_RE.findall(markup)
        img_count = len(tags)
        img_with_alt = sum(1 for tag in tags if IMG_ALT_RE.search(tag))

    return img_count, img_with_alt


def _origin(url: str) -> str:
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return ""
    return f"{parsed.scheme}://{parsed.netloc}"


def _classify_links(hrefs: List[str], origin: str) -> Tuple[int, int]:
    internal = external = 0
    for href in hrefs:
        if not href:
            continue
        if href.startswith("/") or (origin and href.startswith(origin)):
            internal += 1
        elif href.startswith("http"):
            external += 1
    return internal, external


def extract_links(soup: BeautifulSoup, markup: str, url: str) -> Tuple[int, int]:
    """(internal link count, external link count) relative to the page origin."""
    origin = _origin(url)
    hrefs = [a.get("href") or "" for a in soup.find_all("a", href=True)]
    internal, external = _classify_links(hrefs, origin)

    if internal == 0 and external == 0:
        internal, external = _classify_links(LINK_RE.findall(markup), origin)

    return internal, external


# =============================================================================
# STRUCTURED DATA (JSON-LD)
# =============================================================================


def collect_schema_types(data: Any, types: List[str]) -> None:
    """Walk a parsed JSON-LD value, appending every @type string found."""
    if isinstance(data, list):
        for item in data:
            collect_schema_types(item, types)
        return
    if not isinstance(data, dict):
        return

    schema_type = data.get("@type")
    if schema_type:
        for t in schema_type if isinstance(schema_type, list) else [schema_type]:
            if isinstance(t, str):
                types.append(t)

    graph = data.get("@graph")
    if isinstance(graph, list):
        for item in graph:
            collect_schema_types(item, types)


def _load_json_ld(raw_blocks: List[str], path: str) -> List[Any]:
    """Parse each block and walk its types; a block failing either step is dropped."""
    documents = []
    for raw in raw_blocks:
        try:
            document = json.loads(raw or "{}")
            collect_schema_types(document, [])
        except (ValueError, RecursionError):
            logger.debug(f"{path}: skipping unparseable JSON-LD block")
            continue
        documents.append(document)
    return documents


def extract_json_ld(soup: BeautifulSoup, markup: str, path: str = "") -> List[Any]:
    """Parsed JSON-LD documents; invalid blocks are skipped one by one."""
    scripts = soup.find_all("script", attrs={"type": "application/ld+json"})
    documents = _load_json_ld([s.string or s.get_text() for s in scripts], path)

    if not schema_types(documents):
        documents = _load_json_ld(JSON_LD_RE.findall(markup), path)

    return documents


def schema_types(documents: List[Any]) -> Tuple[str, ...]:
    """Distinct @type values across all documents, first-seen order."""
    types: List[str] = []
    for document in documents:
        collect_schema_types(document, types)
    return tuple(dict.fromkeys(types))


def flatten_schemas(documents: List[Any]) -> List[dict]:
    """Top-level schema objects: arrays and @graph containers are unwrapped one level."""
    schemas: List[dict] = []
    for data in documents:
        if isinstance(data, list):
            schemas.extend(item for item in data if isinstance(item, dict))
        elif isinstance(data, dict) and isinstance(data.get("@graph"), list):
            schemas.extend(item for item in data["@graph"] if isinstance(item, dict))
        elif isinstance(data, dict):
            schemas.append(data)
    return schemas
