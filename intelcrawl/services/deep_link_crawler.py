import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from intelcrawl.domain.frontier import Frontier
from intelcrawl.domain.options import CrawlOptions
from intelcrawl.domain.page_result import PageResult, ScrapeResult, VisitRecord
from intelcrawl.domain.visited_set import VisitedSet
from intelcrawl.services.crawl_policy import CrawlPolicy
from intelcrawl.services.rate_limiter import RateLimiter
from intelcrawl.services.relevance_filter import RelevanceFilter
from intelcrawl.services.smart_scraper import SmartScraper

logger = logging.getLogger(__name__)


@dataclass
class DeepCrawlResult:
    seed: str
    pages: List[PageResult] = field(default_factory=list)
    discovered_links: List[str] = field(default_factory=list)
    visits: List[VisitRecord] = field(default_factory=list)


class DeepLinkCrawler:
    """Breadth-first expansion of one seed, bounded by depth, fan-out and budget.

    Depth levels run strictly in order and the URLs of one level run
    concurrently, each holding a slot of the shared semaphore while it is
    paced and fetched. The run-wide VisitedSet makes every URL processed at
    most once, whichever seed or parent reached it first.
    """

    def __init__(
        self,
        scraper: SmartScraper,
        rate_limiter: RateLimiter,
        relevance_filter: Optional[RelevanceFilter] = None,
        crawl_policy: Optional[CrawlPolicy] = None,
    ):
        self.scraper = scraper
        self.rate_limiter = rate_limiter
        self.relevance_filter = relevance_filter or RelevanceFilter()
        self.crawl_policy = crawl_policy or CrawlPolicy()

    async def crawl(
        self,
        seed: str,
        keywords,
        options: CrawlOptions,
        visited: VisitedSet,
        semaphore: Optional[asyncio.Semaphore] = None,
    ) -> DeepCrawlResult:
        semaphore = semaphore or asyncio.Semaphore(options.concurrency)
        max_depth = options.effective_max_depth
        frontier = Frontier(max_depth, options.url_budget, visited.is_visited, lambda: len(visited))
        result = DeepCrawlResult(seed=seed)
        links: Dict[str, None] = {}

        if not frontier.push(seed, 0):
            logger.info("Seed %s already visited or over budget, skipping", seed)
            return result

        depth = frontier.next_depth()
        while depth is not None:
            batch = frontier.pop_level(depth)
            logger.info("Crawling %d URL(s) at depth %d from seed %s", len(batch), depth, seed)
            pages = await asyncio.gather(*(
                self._visit(url, d, keywords, options, visited, semaphore) for url, d in batch
            ))
            for page in pages:
                if page is None:
                    continue
                result.visits.append(visited.get(page.url))
                if page.snippets:
                    result.pages.append(page)
                for link in page.discovered_links:
                    links.setdefault(link, None)
                if page.depth < max_depth:
                    self._enqueue(frontier, page, options)
            depth = frontier.next_depth()

        result.discovered_links = list(links)
        logger.info(
            "Seed %s done: %d page(s) with snippets, %d link(s) discovered",
            seed, len(result.pages), len(result.discovered_links),
        )
        return result

    def _enqueue(self, frontier: Frontier, page: PageResult, options: CrawlOptions) -> int:
        accepted = 0
        for link in page.discovered_links:
            if accepted >= options.max_links_per_page:
                break
            if self.relevance_filter.is_non_content(link) or not self.relevance_filter.is_allowlisted(link):
                continue
            if frontier.push(link, page.depth + 1):
                accepted += 1
        logger.debug("Queued %d link(s) from %s at depth %d", accepted, page.url, page.depth + 1)
        return accepted

    async def _visit(
        self,
        url: str,
        depth: int,
        keywords,
        options: CrawlOptions,
        visited: VisitedSet,
        semaphore: asyncio.Semaphore,
    ) -> Optional[PageResult]:
        if not await visited.claim(url, depth):
            logger.debug("Skipping %s: already claimed or budget exhausted", url)
            return None

        if await self.crawl_policy.should_skip(url, depth, options):
            return None

        async with semaphore:
            await self.rate_limiter.wait_for_slot(url, options.per_host_delay_ms / 1000)
            try:
                scraped = await self.scraper.scrape(url, keywords, extract_links=depth < options.effective_max_depth)
            except Exception:
                logger.exception("Scrape failed for %s", url)
                scraped = ScrapeResult()

        now = datetime.now(timezone.utc)
        visited.record(VisitRecord(
            url=url,
            depth=depth,
            fetcher_used=scraped.fetcher_used,
            success=scraped.success,
            snippet_count=len(scraped.data),
            timestamp=now,
        ))
        return PageResult(
            url=url,
            snippets=list(scraped.data),
            discovered_links=list(scraped.discovered_links),
            fetcher_used=scraped.fetcher_used,
            success=scraped.success,
            depth=depth,
            fetched_at=now,
        )
