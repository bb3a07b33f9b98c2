import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from intelcrawl.domain.fetcher_name import FetcherName
from intelcrawl.services.rate_limiter import host_of
from intelcrawl.services.site_classifier import SiteCategory, SiteClassifier

logger = logging.getLogger(__name__)

RENDERED_FIRST = (SiteCategory.DYNAMIC, SiteCategory.HEAVY_SCRIPT, SiteCategory.REGIONAL_DYNAMIC)


@dataclass
class FetcherCounts:
    success: int = 0
    failures: int = 0
    last_attempt_at: Optional[float] = None


@dataclass
class StrategyMemoryEntry:
    counts: Dict[FetcherName, FetcherCounts] = field(
        default_factory=lambda: {name: FetcherCounts() for name in FetcherName}
    )
    last_successful_fetcher: Optional[FetcherName] = None
    last_success_at: Optional[float] = None

    @property
    def last_attempt_at(self) -> Optional[float]:
        stamps = [c.last_attempt_at for c in self.counts.values() if c.last_attempt_at is not None]
        return max(stamps) if stamps else None


class StrategyMemory:
    """Per-host record of which fetcher worked, biasing future fetcher order.

    Lives as long as its owner; nothing here is written to durable storage.
    """

    def __init__(self, classifier: Optional[SiteClassifier] = None, clock: Optional[Callable[[], float]] = None):
        self.classifier = classifier or SiteClassifier()
        self._clock = clock or time.time
        self._entries: Dict[str, StrategyMemoryEntry] = {}
        self._totals: Dict[FetcherName, FetcherCounts] = {name: FetcherCounts() for name in FetcherName}

    def record_outcome(self, host: str, fetcher: FetcherName, success: bool, result_count: int = 0) -> None:
        host = host_of(host)
        now = self._clock()
        entry = self._entries.setdefault(host, StrategyMemoryEntry())
        counts = entry.counts[fetcher]
        counts.last_attempt_at = now
        if success and result_count > 0:
            counts.success += 1
            self._totals[fetcher].success += 1
            entry.last_successful_fetcher = fetcher
            entry.last_success_at = now
        else:
            counts.failures += 1
            self._totals[fetcher].failures += 1

    def entry(self, host: str) -> Optional[StrategyMemoryEntry]:
        return self._entries.get(host_of(host))

    def strategy_for(self, url: str) -> List[FetcherName]:
        entry = self._entries.get(host_of(url))
        if entry is not None and entry.last_successful_fetcher is not None:
            logger.debug("Using remembered strategy for %s: %s", host_of(url), entry.last_successful_fetcher.value)
            first = entry.last_successful_fetcher
        elif self.classifier.classify(url) in RENDERED_FIRST:
            first = FetcherName.RENDERED
        else:
            first = FetcherName.STATIC
        return [first] + [name for name in FetcherName if name != first]

    def stats(self) -> Dict[str, object]:
        def rate(c: FetcherCounts) -> float:
            total = c.success + c.failures
            return c.success / total if total else 0.0

        return {
            "total_attempts": sum(c.success + c.failures for c in self._totals.values()),
            "sites_remembered": len(self._entries),
            "success_rates": {name.value: rate(c) for name, c in self._totals.items()},
            "scraper_stats": {
                name.value: {"success": c.success, "failures": c.failures}
                for name, c in self._totals.items()
            },
        }

    def reset(self) -> None:
        self._entries.clear()
        self._totals = {name: FetcherCounts() for name in FetcherName}
