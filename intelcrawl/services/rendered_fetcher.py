import asyncio
import logging
import random
from typing import Optional, Sequence, Tuple

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from intelcrawl.domain.error_kind import ErrorKind
from intelcrawl.domain.fetcher_name import FetcherName
from intelcrawl.domain.page_result import FetchResult
from intelcrawl.exceptions import FetchError
from intelcrawl.services.browser_pool import BrowserPool
from intelcrawl.services.fetch_errors import classify_message
from intelcrawl.services.html_text_extractor import collapse_whitespace
from intelcrawl.services.keyword_extractor import KeywordExtractor
from intelcrawl.services.link_extractor import LinkExtractor
from intelcrawl.services.relevance_filter import RelevanceFilter
from intelcrawl.services.retry_policy import RENDERED_RETRY_POLICY, RetryPolicy
from intelcrawl.services.site_classifier import SiteClassifier
from intelcrawl.services.stealth import browser_headers, random_user_agent, random_viewport

logger = logging.getLogger(__name__)

# (wait_until, timeout_ms); the first step that completes wins.
NAVIGATION_STEPS: Tuple[Tuple[str, int], ...] = (
    ("domcontentloaded", 25_000),
    ("networkidle", 35_000),
    ("load", 45_000),
)

BLOCKED_RESOURCE_TYPES = frozenset({"image", "font", "media"})
TRACKER_MARKERS = ("google-analytics", "googletagmanager", "facebook.com", "twitter.com")

ARTICLE_SELECTORS = ("article", '[role="main"]', ".article-content", ".news-content", ".content")
SITE_SELECTORS = (
    ".news_view",
    ".article_view",
    ".newsct_article",
    "#article-view-content-div",
    ".read_body",
    ".article_body",
)
MIN_SECTION_CHARS = 200
MIN_PAGE_CHARS = 100

EXTRACT_TEXT_JS = """
({articleSelectors, siteSelectors, minChars}) => {
  const pick = (selectors) => {
    for (const selector of selectors) {
      const el = document.querySelector(selector);
      if (!el) continue;
      const text = el.innerText || el.textContent || "";
      if (text.trim().length > minChars) return text;
    }
    return null;
  };
  const chosen = pick(articleSelectors) || pick(siteSelectors);
  if (chosen) return chosen;
  if (!document.body) return "";
  const clone = document.body.cloneNode(true);
  clone.querySelectorAll(
    "nav, header, footer, aside, script, style, noscript, .menu, .sidebar, .ad, .advertisement"
  ).forEach((el) => el.remove());
  const stripped = clone.textContent || "";
  if (stripped.trim().length > minChars) return stripped;
  return document.body.innerText || document.body.textContent || "";
}
"""


def should_block(resource_type: str, url: str) -> bool:
    url = url.lower()
    if resource_type in BLOCKED_RESOURCE_TYPES:
        return True
    if resource_type == "stylesheet" and "ads" in url:
        return True
    return resource_type == "script" and any(m in url for m in TRACKER_MARKERS)


async def _route_request(route) -> None:
    request = route.request
    if should_block(request.resource_type, request.url):
        await route.abort()
    else:
        await route.continue_()


class RenderedFetcher:
    """Renders pages in a pooled headless browser before searching them.

    Each call opens a fresh context with a rotated fingerprint, blocks heavy
    and tracking resources, tries progressively more patient navigation
    waits and settles for a category-dependent delay before reading text.
    The page and context are always closed.
    """

    name = FetcherName.RENDERED

    def __init__(
        self,
        pool: BrowserPool,
        keyword_extractor: KeywordExtractor,
        classifier: Optional[SiteClassifier] = None,
        link_extractor: Optional[LinkExtractor] = None,
        relevance_filter: Optional[RelevanceFilter] = None,
        retry_policy: RetryPolicy = RENDERED_RETRY_POLICY,
        navigation_steps: Sequence[Tuple[str, int]] = NAVIGATION_STEPS,
        sleep=None,
    ):
        self.pool = pool
        self.keyword_extractor = keyword_extractor
        self.classifier = classifier or SiteClassifier()
        self.link_extractor = link_extractor or LinkExtractor()
        self.relevance_filter = relevance_filter or RelevanceFilter()
        self.retry_policy = retry_policy
        self.navigation_steps = tuple(navigation_steps)
        self._sleep = sleep or asyncio.sleep

    async def fetch(self, url: str, keywords, extract_links: bool = False) -> FetchResult:
        for attempt in range(self.retry_policy.max_retries + 1):
            try:
                return await self._fetch_once(url, keywords, extract_links)
            except FetchError as e:
                kind = e.kind
            except PlaywrightTimeoutError:
                kind = ErrorKind.TIMEOUT
            except PlaywrightError as e:
                kind = classify_message(str(e))
            except Exception as e:
                logger.exception("Unexpected error rendering %s", url)
                kind = classify_message(str(e))

            if not self.retry_policy.should_retry(kind, attempt):
                logger.warning("Rendered fetch gave up on %s after %d attempt(s) [%s]", url, attempt + 1, kind.value)
                return FetchResult.failed(kind)
            delay = self.retry_policy.delay_before_retry(kind, attempt + 1)
            logger.info("Rendered fetch of %s failed (%s), retry %d in %.1fs", url, kind.value, attempt + 1, delay)
            await self._sleep(delay)

    async def _fetch_once(self, url: str, keywords, extract_links: bool) -> FetchResult:
        browser = await self.pool.acquire()
        context = await browser.new_context(
            user_agent=random_user_agent(),
            viewport=random_viewport(),
            extra_http_headers=browser_headers(),
            java_script_enabled=True,
            ignore_https_errors=True,
        )
        page = None
        try:
            page = await context.new_page()
            await page.route("**/*", _route_request)
            await self._navigate(page, url)

            low, high = self.classifier.settle_delay_range(url)
            await self._sleep(random.uniform(low, high))

            text = collapse_whitespace(await page.evaluate(EXTRACT_TEXT_JS, {
                "articleSelectors": list(ARTICLE_SELECTORS),
                "siteSelectors": list(SITE_SELECTORS),
                "minChars": MIN_SECTION_CHARS,
            }))
            if len(text) < MIN_PAGE_CHARS:
                raise FetchError(url, ErrorKind.CONTENT, ValueError(f"only {len(text)} characters of text"))

            snippets = self.keyword_extractor.extract(text, keywords)
            links = []
            if extract_links:
                links = await self._links(page, url, keywords)
            logger.debug("Rendered fetch of %s: %d snippets, %d links", url, len(snippets), len(links))
            return FetchResult(snippets=snippets, discovered_links=links, text=text)
        finally:
            await self._close(page, context)

    async def _navigate(self, page, url: str) -> None:
        last_timeout = None
        for wait_until, timeout_ms in self.navigation_steps:
            try:
                await page.goto(url, wait_until=wait_until, timeout=timeout_ms)
                return
            except PlaywrightTimeoutError as e:
                logger.debug("Navigation to %s timed out waiting for %s", url, wait_until)
                last_timeout = e
        raise FetchError(url, ErrorKind.TIMEOUT, last_timeout)

    async def _links(self, page, url: str, keywords):
        try:
            html = await page.content()
            candidates = self.link_extractor.extract_links(page.url or url, html)
            return self.relevance_filter.prioritise(candidates, keywords)
        except Exception:
            logger.exception("Link extraction failed for %s", url)
            return []

    @staticmethod
    async def _close(page, context) -> None:
        for resource in (page, context):
            if resource is None:
                continue
            try:
                await resource.close()
            except Exception:
                logger.warning("Error closing browser resource", exc_info=True)

    async def shutdown(self) -> None:
        await self.pool.shutdown()


def navigation_steps(max_timeout_ms: int) -> Tuple[Tuple[str, int], ...]:
    """NAVIGATION_STEPS with every timeout capped at `max_timeout_ms`."""
    if max_timeout_ms <= 0:
        return NAVIGATION_STEPS
    return tuple((wait_until, min(timeout, max_timeout_ms)) for wait_until, timeout in NAVIGATION_STEPS)
