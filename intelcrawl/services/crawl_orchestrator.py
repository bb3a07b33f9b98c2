import asyncio
import logging
from typing import Iterable, List, Optional
from urllib.parse import urlparse

from intelcrawl.domain.crawl_session import CrawlSession, CrawlSessionResult, CrawlSummary
from intelcrawl.domain.keyword_set import KeywordSet
from intelcrawl.domain.options import CrawlOptions
from intelcrawl.exceptions import CrawlPreconditionError
from intelcrawl.services.deep_link_crawler import DeepLinkCrawler
from intelcrawl.services.smart_scraper import SmartScraper

logger = logging.getLogger(__name__)


def normalize_seeds(seeds: Iterable[str]) -> List[str]:
    """Strip and dedupe seeds; raise CrawlPreconditionError for non-HTTP(S) entries."""
    out: List[str] = []
    invalid = []
    for raw in seeds or ():
        seed = (raw or "").strip()
        if not seed:
            continue
        parsed = urlparse(seed)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            invalid.append(seed)
            continue
        if seed not in out:
            out.append(seed)
    if invalid:
        raise CrawlPreconditionError(f"Invalid seed URL(s): {', '.join(invalid)}")
    return out


class CrawlOrchestrator:
    """Runs one crawl session: validates inputs, fans seeds out, assembles records.

    Every seed goes through DeepLinkCrawler; with deep links disabled the
    effective depth is 0 so each seed is a single paced, deduplicated scrape.
    One `asyncio.Semaphore(concurrency)` bounds all per-URL work of the run.
    """

    def __init__(
        self,
        crawler: DeepLinkCrawler,
        scraper: SmartScraper,
        default_options: Optional[CrawlOptions] = None,
    ):
        self.crawler = crawler
        self.scraper = scraper
        self.default_options = default_options or CrawlOptions()

    def prepare(self, seeds: Iterable[str], keywords: Iterable[str], options: Optional[CrawlOptions] = None) -> CrawlSession:
        """Check preconditions and build the session; no network activity."""
        options = options or self.default_options
        keyword_set = keywords if isinstance(keywords, KeywordSet) else KeywordSet(keywords or ())
        if not keyword_set:
            raise CrawlPreconditionError("At least one non-blank keyword is required")
        seed_list = normalize_seeds(seeds)
        if not seed_list:
            raise CrawlPreconditionError("At least one seed URL is required")
        try:
            options.validate()
        except (TypeError, ValueError) as e:
            raise CrawlPreconditionError(str(e)) from e
        return CrawlSession(seed_list, keyword_set, options)

    async def run(self, seeds: Iterable[str], keywords: Iterable[str], options: Optional[CrawlOptions] = None) -> CrawlSessionResult:
        session = self.prepare(seeds, keywords, options)
        return await self.execute(session)

    async def execute(self, session: CrawlSession) -> CrawlSessionResult:
        options = session.options
        semaphore = asyncio.Semaphore(options.concurrency)
        logger.info(
            "Starting crawl session %s: %d seed(s), keywords=%s, deep_links=%s, budget=%d",
            session.session_id, len(session.seeds), list(session.keywords),
            options.deep_links_enabled, options.url_budget,
        )

        await asyncio.gather(*(self._crawl_seed(session, seed, semaphore) for seed in session.seeds))
        session.finish()

        summary = CrawlSummary.from_session(session, self.scraper.stats())
        logger.info(
            "Crawl session %s finished: %d URL(s) visited, %d snippet(s), %d failed seed(s)",
            session.session_id, summary.total_urls_visited, summary.total_articles_found, len(summary.failed_seeds),
        )
        return CrawlSessionResult(records=session.records(), summary=summary)

    async def _crawl_seed(self, session: CrawlSession, seed: str, semaphore: asyncio.Semaphore) -> None:
        try:
            result = await self.crawler.crawl(seed, session.keywords, session.options, session.visited, semaphore)
        except Exception:
            logger.exception("Crawl of seed %s failed", seed)
            session.failed_seeds.append(seed)
            return
        session.add_pages(result.pages)
        session.add_links(result.discovered_links)
        visit = session.visited.get(seed)
        if visit is not None and visit.depth == 0 and not visit.success:
            session.failed_seeds.append(seed)
