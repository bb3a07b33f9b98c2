from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

from intelcrawl.domain.fetcher_name import FetcherName
from intelcrawl.domain.page_result import FetchResult


class Fetcher(Protocol):
    """Fetch a URL and return keyword snippets plus optional outbound links.

    Implementations never raise for network or content problems; they
    return an empty `FetchResult` whose `error_kind` says what went wrong.
    """

    name: FetcherName

    async def fetch(self, url: str, keywords: Iterable[str], extract_links: bool = False) -> FetchResult: ...


@dataclass(frozen=True)
class FetcherRegistry:
    static_fetcher: Fetcher
    rendered_fetcher: Fetcher

    def get(self, name: FetcherName) -> Fetcher:
        if name is FetcherName.STATIC:
            return self.static_fetcher
        if name is FetcherName.RENDERED:
            return self.rendered_fetcher
        raise ValueError(f"Unknown fetcher: {name!r}")
