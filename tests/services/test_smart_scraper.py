import asyncio

from intelcrawl.domain.error_kind import ErrorKind
from intelcrawl.domain.fetcher_name import FetcherName
from intelcrawl.domain.page_result import FetchResult
from intelcrawl.services.fetcher import FetcherRegistry
from intelcrawl.services.smart_scraper import SmartScraper
from intelcrawl.services.strategy_memory import StrategyMemory


class FakeFetcher:
    def __init__(self, name, *results):
        self.name = name
        self.results = list(results)
        self.calls = []

    async def fetch(self, url, keywords, extract_links=False):
        self.calls.append((url, extract_links))
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


def _scraper(static, rendered, memory=None):
    return SmartScraper(FetcherRegistry(static, rendered), memory or StrategyMemory())


def test_falls_through_to_rendered_and_remembers_it():
    # Script-assembled page: raw HTML has no keyword hits, the rendered DOM does.
    static = FakeFetcher(FetcherName.STATIC, FetchResult(discovered_links=["https://sg.example/a"]))
    rendered = FakeFetcher(FetcherName.RENDERED, FetchResult(snippets=["...Singapore startups raised..."]))
    scraper = _scraper(static, rendered)

    first = asyncio.run(scraper.scrape("https://sg.example/news", ["Singapore"], extract_links=True))
    assert first.success
    assert first.fetcher_used is FetcherName.RENDERED
    assert first.data == ["...Singapore startups raised..."]
    assert static.calls == [("https://sg.example/news", True)]

    second = asyncio.run(scraper.scrape("https://sg.example/other", ["Singapore"]))
    assert second.fetcher_used is FetcherName.RENDERED
    assert len(static.calls) == 1
    assert len(rendered.calls) == 2


def test_static_success_stops_early():
    static = FakeFetcher(FetcherName.STATIC, FetchResult(snippets=["hit"], discovered_links=["https://a.example/x"]))
    rendered = FakeFetcher(FetcherName.RENDERED, FetchResult())
    result = asyncio.run(_scraper(static, rendered).scrape("https://a.example/", ["hit"]))
    assert result.success
    assert result.fetcher_used is FetcherName.STATIC
    assert result.discovered_links == ["https://a.example/x"]
    assert rendered.calls == []


def test_terminal_errors_short_circuit():
    for kind in (ErrorKind.DNS, ErrorKind.REFUSED):
        static = FakeFetcher(FetcherName.STATIC, FetchResult.failed(kind))
        rendered = FakeFetcher(FetcherName.RENDERED, FetchResult(snippets=["never"]))
        result = asyncio.run(_scraper(static, rendered).scrape("https://nowhere.example/", ["x"]))
        assert not result.success
        assert result.error_kind is kind
        assert rendered.calls == []


def test_total_failure_keeps_first_links_and_last_error():
    static = FakeFetcher(FetcherName.STATIC, FetchResult(discovered_links=["https://a.example/l1"], error_kind=None))
    rendered = FakeFetcher(FetcherName.RENDERED, FetchResult.failed(ErrorKind.TIMEOUT))
    memory = StrategyMemory()
    result = asyncio.run(_scraper(static, rendered, memory).scrape("https://a.example/", ["x"], extract_links=True))
    assert not result.success
    assert result.data == []
    assert result.discovered_links == ["https://a.example/l1"]
    assert result.error_kind is ErrorKind.TIMEOUT
    assert memory.stats()["scraper_stats"]["static"]["failures"] == 1
    assert memory.stats()["scraper_stats"]["rendered"]["failures"] == 1


def test_fetcher_exception_is_treated_as_failure():
    static = FakeFetcher(FetcherName.STATIC, RuntimeError("boom"))
    rendered = FakeFetcher(FetcherName.RENDERED, FetchResult(snippets=["ok"]))
    result = asyncio.run(_scraper(static, rendered).scrape("https://a.example/", ["ok"]))
    assert result.success
    assert result.fetcher_used is FetcherName.RENDERED


def test_dynamic_portals_start_with_rendered():
    static = FakeFetcher(FetcherName.STATIC, FetchResult(snippets=["static"]))
    rendered = FakeFetcher(FetcherName.RENDERED, FetchResult(snippets=["rendered"]))
    result = asyncio.run(_scraper(static, rendered).scrape("https://news.naver.com/main", ["x"]))
    assert result.fetcher_used is FetcherName.RENDERED
    assert static.calls == []


def test_stats_delegate_to_memory():
    static = FakeFetcher(FetcherName.STATIC, FetchResult(snippets=["hit"]))
    rendered = FakeFetcher(FetcherName.RENDERED, FetchResult())
    scraper = _scraper(static, rendered)
    asyncio.run(scraper.scrape("https://a.example/", ["hit"]))
    stats = scraper.stats()
    assert stats["total_attempts"] == 1
    assert stats["success_rates"]["static"] == 1.0
