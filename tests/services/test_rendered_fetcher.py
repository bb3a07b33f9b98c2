import asyncio
from unittest.mock import AsyncMock

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from intelcrawl.domain.error_kind import ErrorKind
from intelcrawl.services.keyword_extractor import KeywordExtractor
from intelcrawl.services.rendered_fetcher import NAVIGATION_STEPS, RenderedFetcher, navigation_steps, should_block

LONG_TEXT = "Singapore startups attracted record venture capital this year. " * 5


class FakePage:
    def __init__(self, text=LONG_TEXT, goto_errors=None, html="", fail_close=False):
        self.text = text
        self.goto_errors = list(goto_errors or [])
        self.html = html
        self.url = "https://a.example/landing"
        self.goto_calls = []
        self.routes = []
        self.closed = False
        self.fail_close = fail_close

    async def route(self, pattern, handler):
        self.routes.append(pattern)

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append((wait_until, timeout))
        if self.goto_errors:
            error = self.goto_errors.pop(0)
            if error is not None:
                raise error

    async def evaluate(self, script, arg):
        return self.text

    async def content(self):
        return self.html

    async def close(self):
        if self.fail_close:
            raise RuntimeError("page already closed")
        self.closed = True


class FakeContext:
    def __init__(self, page):
        self.page = page
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, page_factory):
        self.page_factory = page_factory
        self.contexts = []
        self.context_kwargs = []

    async def new_context(self, **kwargs):
        self.context_kwargs.append(kwargs)
        context = FakeContext(self.page_factory())
        self.contexts.append(context)
        return context


class FakePool:
    def __init__(self, browser):
        self.browser = browser
        self.shutdown = AsyncMock()

    async def acquire(self):
        return self.browser


def _fetcher(page_factory, sleep=None):
    browser = FakeBrowser(page_factory)
    fetcher = RenderedFetcher(FakePool(browser), KeywordExtractor(context_chars=30), sleep=sleep or AsyncMock())
    return fetcher, browser


def test_renders_and_extracts_snippets():
    page = FakePage()
    sleep = AsyncMock()
    fetcher, browser = _fetcher(lambda: page, sleep=sleep)
    result = asyncio.run(fetcher.fetch("https://a.example/", ["Singapore"]))
    assert result.snippets
    assert result.error_kind is None
    assert page.goto_calls == [("domcontentloaded", 25_000)]
    assert page.routes == ["**/*"]
    assert page.closed and browser.contexts[0].closed
    assert "user_agent" in browser.context_kwargs[0] and "viewport" in browser.context_kwargs[0]
    settle = sleep.await_args_list[0][0][0]
    assert 1.5 <= settle <= 3.0


def test_navigation_falls_back_to_more_patient_waits():
    page = FakePage(goto_errors=[PlaywrightTimeoutError("t1"), PlaywrightTimeoutError("t2"), None])
    fetcher, _ = _fetcher(lambda: page)
    result = asyncio.run(fetcher.fetch("https://a.example/", ["Singapore"]))
    assert result.snippets
    assert [w for w, _ in page.goto_calls] == ["domcontentloaded", "networkidle", "load"]


def test_timeouts_are_retried_with_extra_pause_then_give_up():
    pages = []

    def factory():
        page = FakePage(goto_errors=[PlaywrightTimeoutError("t")] * 3)
        pages.append(page)
        return page

    sleep = AsyncMock()
    fetcher, browser = _fetcher(factory, sleep=sleep)
    result = asyncio.run(fetcher.fetch("https://a.example/", ["Singapore"]))
    assert result.error_kind is ErrorKind.TIMEOUT
    assert len(pages) == 4
    assert all(p.closed for p in pages)
    assert all(c.closed for c in browser.contexts)
    retry_delays = [call[0][0] for call in sleep.await_args_list]
    assert len(retry_delays) == 3
    assert all(d >= 5.0 for d in retry_delays)


def test_dns_failure_is_not_retried():
    pages = []

    def factory():
        page = FakePage(goto_errors=[PlaywrightError("net::ERR_NAME_NOT_RESOLVED at https://nowhere.invalid/")])
        pages.append(page)
        return page

    fetcher, _ = _fetcher(factory)
    result = asyncio.run(fetcher.fetch("https://nowhere.invalid/", ["Singapore"]))
    assert result.error_kind is ErrorKind.DNS
    assert len(pages) == 1
    assert pages[0].closed


def test_short_page_text_is_a_content_failure():
    fetcher, _ = _fetcher(lambda: FakePage(text="tiny"))
    result = asyncio.run(fetcher.fetch("https://a.example/", ["Singapore"]))
    assert result.error_kind is ErrorKind.CONTENT
    assert result.snippets == []


def test_close_errors_are_swallowed():
    fetcher, browser = _fetcher(lambda: FakePage(fail_close=True))
    result = asyncio.run(fetcher.fetch("https://a.example/", ["Singapore"]))
    assert result.snippets
    assert browser.contexts[0].closed


def test_links_come_from_rendered_dom():
    html = '<a href="/news/singapore-vc">Singapore VC</a><a href="/login">Sign in</a>'
    fetcher, _ = _fetcher(lambda: FakePage(html=html))
    result = asyncio.run(fetcher.fetch("https://a.example/", ["Singapore"], extract_links=True))
    assert result.discovered_links == ["https://a.example/news/singapore-vc"]


def test_shutdown_releases_pool():
    fetcher, _ = _fetcher(lambda: FakePage())
    asyncio.run(fetcher.shutdown())
    fetcher.pool.shutdown.assert_awaited_once()


def test_request_blocking_rules():
    assert should_block("image", "https://cdn.example/a.png")
    assert should_block("font", "https://cdn.example/a.woff")
    assert should_block("stylesheet", "https://ads.example/site.css")
    assert should_block("script", "https://www.googletagmanager.com/gtm.js")
    assert not should_block("script", "https://a.example/app.js")
    assert not should_block("document", "https://a.example/")


def test_navigation_steps_cap():
    assert navigation_steps(30_000) == (("domcontentloaded", 25_000), ("networkidle", 30_000), ("load", 30_000))
    assert navigation_steps(0) == NAVIGATION_STEPS
