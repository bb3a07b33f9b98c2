"""Domain objects for intelcrawl - explicit re-exports to satisfy linters."""
from .error_kind import ErrorKind as ErrorKind
from .fetcher_name import FetcherName as FetcherName
from .keyword_set import KeywordSet as KeywordSet
from .options import CrawlOptions as CrawlOptions
from .page_result import FetchResult as FetchResult
from .page_result import PageResult as PageResult
from .page_result import ScrapeResult as ScrapeResult
from .page_result import VisitRecord as VisitRecord
from .crawl_record import CrawlRecord as CrawlRecord
from .crawl_session import CrawlSession as CrawlSession
from .seed_config import SeedConfig as SeedConfig

__all__ = [
    "ErrorKind",
    "FetcherName",
    "KeywordSet",
    "CrawlOptions",
    "FetchResult",
    "PageResult",
    "ScrapeResult",
    "VisitRecord",
    "CrawlRecord",
    "CrawlSession",
    "SeedConfig",
]
