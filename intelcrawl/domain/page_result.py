"""Result objects passed between fetchers, the scraper and the crawler."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from intelcrawl.domain.error_kind import ErrorKind
from intelcrawl.domain.fetcher_name import FetcherName


@dataclass
class FetchResult:
    """What a single fetcher produced for one URL.

    An empty result is a soft failure; `error_kind` says why when known.
    """
    snippets: List[str] = field(default_factory=list)
    discovered_links: List[str] = field(default_factory=list)
    text: str = ""
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def failed(cls, kind: ErrorKind) -> "FetchResult":
        return cls(error_kind=kind)


@dataclass
class ScrapeResult:
    data: List[str] = field(default_factory=list)
    discovered_links: List[str] = field(default_factory=list)
    fetcher_used: Optional[FetcherName] = None
    success: bool = False
    error_kind: Optional[ErrorKind] = None
    text: str = ""


@dataclass
class PageResult:
    url: str
    snippets: List[str]
    discovered_links: List[str]
    fetcher_used: Optional[FetcherName]
    success: bool
    depth: int = 0
    fetched_at: Optional[datetime] = None

    @property
    def consolidated_text(self) -> str:
        return "\n\n---\n\n".join(self.snippets)


@dataclass(frozen=True)
class VisitRecord:
    url: str
    depth: int
    fetcher_used: Optional[FetcherName]
    success: bool
    snippet_count: int
    timestamp: datetime
