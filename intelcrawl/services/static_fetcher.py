import asyncio
import logging
from typing import Optional, Tuple

from intelcrawl.domain.error_kind import ErrorKind
from intelcrawl.domain.fetcher_name import FetcherName
from intelcrawl.domain.page_result import FetchResult
from intelcrawl.exceptions import FetchError
from intelcrawl.services.html_text_extractor import HtmlTextExtractor
from intelcrawl.services.keyword_extractor import KeywordExtractor
from intelcrawl.services.link_extractor import LinkExtractor
from intelcrawl.services.relevance_filter import RelevanceFilter
from intelcrawl.services.retry_policy import STATIC_RETRY_POLICY, RetryPolicy
from intelcrawl.services.stealth import random_delay

logger = logging.getLogger(__name__)


class StaticFetcher:
    """Fetches raw HTML over plain HTTP and searches it without running scripts.

    The blocking `HttpService` call runs in a worker thread. Transient
    failures are retried per `retry_policy` with exponential backoff, and the
    request timeout grows with each attempt.
    """

    name = FetcherName.STATIC

    def __init__(
        self,
        http_service,
        keyword_extractor: KeywordExtractor,
        text_extractor: Optional[HtmlTextExtractor] = None,
        link_extractor: Optional[LinkExtractor] = None,
        relevance_filter: Optional[RelevanceFilter] = None,
        retry_policy: RetryPolicy = STATIC_RETRY_POLICY,
        pre_request_delay: Tuple[float, float] = (0.1, 0.5),
        sleep=None,
    ):
        self.http_service = http_service
        self.keyword_extractor = keyword_extractor
        self.text_extractor = text_extractor or HtmlTextExtractor()
        self.link_extractor = link_extractor or LinkExtractor()
        self.relevance_filter = relevance_filter or RelevanceFilter()
        self.retry_policy = retry_policy
        self.pre_request_delay = pre_request_delay
        self._sleep = sleep or asyncio.sleep

    async def _get(self, url: str):
        base_timeout = self.http_service.timeout
        for attempt in range(self.retry_policy.max_retries + 1):
            try:
                return await asyncio.to_thread(self.http_service.fetch, url, base_timeout * (attempt + 1))
            except FetchError as e:
                if not self.retry_policy.should_retry(e.kind, attempt):
                    raise
                delay = self.retry_policy.delay_before_retry(e.kind, attempt + 1)
                logger.info("Static fetch of %s failed (%s), retry %d in %.1fs", url, e.kind.value, attempt + 1, delay)
                await self._sleep(delay)

    async def fetch(self, url: str, keywords, extract_links: bool = False) -> FetchResult:
        await random_delay(self.pre_request_delay, self._sleep)
        try:
            response = await self._get(url)
        except FetchError as e:
            logger.warning("Static fetch gave up on %s: %s", url, e)
            return FetchResult.failed(e.kind)
        except Exception:
            logger.exception("Unexpected error fetching %s", url)
            return FetchResult.failed(ErrorKind.OTHER)

        text = self.text_extractor.extract(response.text)
        if not text:
            return FetchResult.failed(ErrorKind.CONTENT)
        snippets = self.keyword_extractor.extract(text, keywords)

        links = []
        if extract_links:
            try:
                candidates = self.link_extractor.extract_links(response.final_url or url, response.text)
                links = self.relevance_filter.prioritise(candidates, keywords)
            except Exception:
                logger.exception("Link extraction failed for %s", url)
                links = []

        logger.debug("Static fetch of %s: %d snippets, %d links", url, len(snippets), len(links))
        return FetchResult(snippets=snippets, discovered_links=links, text=text)
