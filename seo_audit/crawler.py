"""
Site Crawler

Fetches the configured page list and the four site-level resources
(robots.txt, sitemap.xml, social preview image, web manifest) in a single
concurrent batch, handing each page body to the analyzer.

Transport failures never escape this module: a page that cannot be fetched
becomes a zeroed PageAnalysis with status 0, and a resource check that fails
in any way reads as False / empty.
"""

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import httpx

from .analyzer import analyze_html, empty_page_analysis
from .config import Settings, get_settings
from .constants import MANIFEST_PATH, OG_IMAGE_PATH, PUBLIC_PAGES, ROBOTS_PATH, SITEMAP_PATH
from .models import PageAnalysis, SiteValidation
from .utils import round_half_up

logger = logging.getLogger(__name__)

SITEMAP_LOC_RE = re.compile(r"<loc>")


class FetchError(Exception):
    """Transport-level failure (connection error or timeout) while fetching a URL."""

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


@dataclass(frozen=True)
class FetchResponse:
    """What the crawler needs from one HTTP exchange."""
    status_code: int
    text: str
    elapsed_ms: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class PageFetcher:
    """Thin async HTTP client used for page fetches and resource checks."""

    def __init__(
        self,
        user_agent: str = "JulyuSEOAuditor/1.0",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    async def __aenter__(self) -> "PageFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> FetchResponse:
        """
        Issue one request.

        Any HTTP status is a successful fetch; only transport errors and
        timeouts raise FetchError.
        """
        kwargs = {"headers": headers}
        if timeout is not None:
            kwargs["timeout"] = timeout

        start = time.perf_counter()
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise FetchError(f"Timed out fetching {url}", url=url) from e
        except httpx.RequestError as e:
            raise FetchError(f"Request error fetching {url}: {e}", url=url) from e

        elapsed_ms = round_half_up((time.perf_counter() - start) * 1000)
        return FetchResponse(status_code=response.status_code, text=response.text, elapsed_ms=elapsed_ms)


class SiteCrawler:
    """Crawls one site: the configured pages plus its site-level resources."""

    def __init__(
        self,
        fetcher: PageFetcher,
        base_url: str,
        pages: Sequence[str] = PUBLIC_PAGES,
        page_timeout: float = 10.0,
        resource_timeout: float = 5.0,
    ):
        self.fetcher = fetcher
        self.base_url = base_url.rstrip("/")
        self.pages = list(pages)
        self.page_timeout = page_timeout
        self.resource_timeout = resource_timeout

    # =========================================================================
    # PAGES
    # =========================================================================

    async def crawl_page(self, path: str) -> PageAnalysis:
        """Fetch and analyze one page; transport failures yield a status-0 record."""
        url = f"{self.base_url}{path}"
        start = time.perf_counter()

        try:
            response = await self.fetcher.fetch(url, timeout=self.page_timeout, headers={"Accept": "text/html"})
        except FetchError as e:
            elapsed_ms = round_half_up((time.perf_counter() - start) * 1000)
            logger.warning(f"{path}: fetch failed after {elapsed_ms}ms: {e}")
            return empty_page_analysis(path, url, elapsed_ms)

        logger.debug(
            f"{path}: status={response.status_code}, html={len(response.text)} chars, time={response.elapsed_ms}ms"
        )
        return analyze_html(response.text, path, url, response.status_code, response.elapsed_ms)

    # =========================================================================
    # SITE RESOURCES
    # =========================================================================

    async def validate_robots_txt(self) -> bool:
        """robots.txt must answer 2xx and mention both a user-agent and a sitemap."""
        try:
            response = await self.fetcher.fetch(f"{self.base_url}{ROBOTS_PATH}", timeout=self.resource_timeout)
        except FetchError as e:
            logger.warning(f"robots.txt check failed: {e}")
            return False

        if not response.ok:
            return False
        lower = response.text.lower()
        return "user-agent" in lower and "sitemap" in lower

    async def validate_sitemap(self) -> Tuple[int, Tuple[str, ...]]:
        """(number of <loc> entries, configured paths absent from the sitemap)."""
        try:
            response = await self.fetcher.fetch(f"{self.base_url}{SITEMAP_PATH}", timeout=self.resource_timeout)
        except FetchError as e:
            logger.warning(f"sitemap.xml check failed: {e}")
            return 0, tuple(self.pages)

        if not response.ok:
            return 0, tuple(self.pages)

        body = response.text
        count = len(SITEMAP_LOC_RE.findall(body))
        missing = tuple(path for path in self.pages if f"{self.base_url}{path}" not in body)
        return count, missing

    async def check_resource_exists(self, url: str) -> bool:
        """HEAD request; exists iff it answers 2xx."""
        try:
            response = await self.fetcher.fetch(url, method="HEAD", timeout=self.resource_timeout)
        except FetchError as e:
            logger.warning(f"Resource check failed for {url}: {e}")
            return False
        return response.ok

    # =========================================================================
    # BATCH
    # =========================================================================

    async def crawl(self) -> Tuple[List[PageAnalysis], SiteValidation]:
        """Run every page fetch and resource check concurrently."""
        logger.info(f"Crawling {len(self.pages)} pages on {self.base_url}")

        page_tasks = [self.crawl_page(path) for path in self.pages]
        resource_tasks = [
            self.validate_robots_txt(),
            self.validate_sitemap(),
            self.check_resource_exists(f"{self.base_url}{OG_IMAGE_PATH}"),
            self.check_resource_exists(f"{self.base_url}{MANIFEST_PATH}"),
        ]

        results = await asyncio.gather(*page_tasks, *resource_tasks, return_exceptions=True)
        page_results = results[: len(self.pages)]
        robots, sitemap, og_image, manifest = results[len(self.pages):]

        pages = []
        for path, result in zip(self.pages, page_results):
            if isinstance(result, Exception):
                logger.error(f"{path}: unexpected error while crawling: {result}")
                result = empty_page_analysis(path, f"{self.base_url}{path}")
            pages.append(result)

        if isinstance(sitemap, Exception):
            logger.error(f"Unexpected error while validating sitemap: {sitemap}")
            sitemap = (0, tuple(self.pages))
        sitemap_count, sitemap_missing = sitemap

        validation = SiteValidation(
            robots_txt_valid=_resource_flag(robots, "robots.txt"),
            sitemap_page_count=sitemap_count,
            sitemap_missing_pages=sitemap_missing,
            og_image_exists=_resource_flag(og_image, "OpenGraph image"),
            manifest_exists=_resource_flag(manifest, "web manifest"),
        )

        reachable = sum(1 for page in pages if page.status_code != 0)
        logger.info(f"Crawl complete: {reachable}/{len(pages)} pages reachable")
        return pages, validation


def _resource_flag(result, label: str) -> bool:
    if isinstance(result, Exception):
        logger.error(f"Unexpected error while checking {label}: {result}")
        return False
    return bool(result)


async def crawl_site(
    settings: Optional[Settings] = None,
    fetcher: Optional[PageFetcher] = None,
) -> Tuple[List[PageAnalysis], SiteValidation]:
    """
    Crawl the configured site.

    Args:
        settings: Defaults to the cached environment settings
        fetcher: Shared fetcher; when omitted one is created and closed here

    Returns:
        (pages in configured order, site validation)
    """
    settings = settings or get_settings()
    owns_fetcher = fetcher is None
    if owns_fetcher:
        fetcher = PageFetcher(user_agent=settings.USER_AGENT, timeout=settings.PAGE_TIMEOUT)

    crawler = SiteCrawler(
        fetcher,
        settings.base_url,
        page_timeout=settings.PAGE_TIMEOUT,
        resource_timeout=settings.RESOURCE_TIMEOUT,
    )
    try:
        return await crawler.crawl()
    finally:
        if owns_fetcher:
            await fetcher.close()
