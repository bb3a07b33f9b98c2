import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from intelcrawl.domain.crawl_record import CrawlRecord
from intelcrawl.domain.keyword_set import KeywordSet
from intelcrawl.domain.options import CrawlOptions
from intelcrawl.domain.page_result import PageResult
from intelcrawl.domain.visited_set import VisitedSet


class CrawlSession:
    """
    State for a single crawl invocation.

    Holds the immutable inputs (seeds, keywords, options), the run-scoped
    VisitedSet shared by every task of the run, and the accumulated results.
    """

    def __init__(
        self,
        seeds: Sequence[str],
        keywords: KeywordSet,
        options: CrawlOptions,
        session_id: Optional[str] = None,
        visited: Optional[VisitedSet] = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.seeds: Tuple[str, ...] = tuple(seeds)
        self.keywords = keywords
        self.options = options
        self.visited = visited if visited is not None else VisitedSet(max_size=options.url_budget)
        self.started_at = datetime.now(timezone.utc)
        self.finished_at: Optional[datetime] = None
        self.pages: List[PageResult] = []
        self.discovered_links: Dict[str, None] = {}
        self.failed_seeds: List[str] = []

    def add_pages(self, pages: Sequence[PageResult]) -> None:
        self.pages.extend(pages)

    def add_links(self, links) -> None:
        for link in links:
            self.discovered_links.setdefault(link, None)

    def finish(self) -> None:
        self.finished_at = datetime.now(timezone.utc)

    def records(self) -> List[CrawlRecord]:
        return [CrawlRecord.from_page(p, self.session_id) for p in self.pages]

    def __repr__(self):
        return f"<CrawlSession id={self.session_id} seeds={len(self.seeds)}>"


@dataclass
class CrawlSummary:
    session_id: str
    total_urls_visited: int
    total_articles_found: int
    total_deep_link_results: int
    scraper_performance: Dict[str, Any]
    total_links_discovered: int = 0
    failed_seeds: List[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @classmethod
    def from_session(cls, session: CrawlSession, scraper_performance: Dict[str, Any]) -> "CrawlSummary":
        return cls(
            session_id=session.session_id,
            total_urls_visited=len(session.visited),
            total_articles_found=sum(len(p.snippets) for p in session.pages),
            total_deep_link_results=sum(1 for p in session.pages if p.depth > 0),
            scraper_performance=scraper_performance,
            total_links_discovered=len(session.discovered_links),
            failed_seeds=list(session.failed_seeds),
            started_at=session.started_at,
            finished_at=session.finished_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "total_urls_visited": self.total_urls_visited,
            "total_articles_found": self.total_articles_found,
            "total_deep_link_results": self.total_deep_link_results,
            "total_links_discovered": self.total_links_discovered,
            "failed_seeds": list(self.failed_seeds),
            "scraper_performance": self.scraper_performance,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


@dataclass
class CrawlSessionResult:
    records: List[CrawlRecord]
    summary: CrawlSummary
