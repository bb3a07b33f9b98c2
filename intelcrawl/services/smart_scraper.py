import logging
from typing import Dict, List, Optional

from intelcrawl.domain.error_kind import ErrorKind
from intelcrawl.domain.page_result import FetchResult, ScrapeResult
from intelcrawl.services.fetcher import FetcherRegistry
from intelcrawl.services.rate_limiter import host_of
from intelcrawl.services.strategy_memory import StrategyMemory

logger = logging.getLogger(__name__)


class SmartScraper:
    """Tries fetchers in the order StrategyMemory suggests for the host.

    The first fetcher that yields at least one snippet wins and is remembered
    for the host. A DNS or connection-refused failure stops the attempt
    early since another fetcher cannot reach the host either.
    """

    def __init__(self, fetchers: FetcherRegistry, memory: Optional[StrategyMemory] = None):
        self.fetchers = fetchers
        self.memory = memory or StrategyMemory()

    async def scrape(self, url: str, keywords, extract_links: bool = False) -> ScrapeResult:
        host = host_of(url)
        last_kind: Optional[ErrorKind] = None
        links: List[str] = []

        for name in self.memory.strategy_for(url):
            fetcher = self.fetchers.get(name)
            try:
                result = await fetcher.fetch(url, keywords, extract_links=extract_links)
            except Exception:
                logger.exception("%s fetcher raised for %s", name.value, url)
                result = FetchResult.failed(ErrorKind.OTHER)

            if result.snippets:
                self.memory.record_outcome(host, name, True, len(result.snippets))
                logger.info("%s fetcher found %d snippets on %s", name.value, len(result.snippets), url)
                return ScrapeResult(
                    data=list(result.snippets),
                    discovered_links=list(result.discovered_links),
                    fetcher_used=name,
                    success=True,
                    text=result.text,
                )

            self.memory.record_outcome(host, name, False)
            if result.discovered_links and not links:
                links = list(result.discovered_links)
            last_kind = result.error_kind
            if last_kind is not None and last_kind.is_terminal:
                logger.warning("Giving up on %s after %s error from %s fetcher", url, last_kind.value, name.value)
                break
            logger.debug("%s fetcher found nothing on %s, trying next", name.value, url)

        return ScrapeResult(discovered_links=links, success=False, error_kind=last_kind)

    def stats(self) -> Dict[str, object]:
        return self.memory.stats()
