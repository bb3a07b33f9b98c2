from intelcrawl.domain.error_kind import ErrorKind
from intelcrawl.domain.http_response import HttpResponse
from intelcrawl.exceptions import FetchError
from intelcrawl.services.robots_service import RobotsService


class DummyHttp:
    def __init__(self, status, text, error=None):
        self.status = status
        self.text = text
        self.error = error
        self.called_urls = []

    def fetch_robots(self, url):
        self.called_urls.append(url)
        if self.error is not None:
            raise self.error
        return HttpResponse(self.status, self.text)


def test_allows_when_robots_missing():
    svc = RobotsService(DummyHttp(404, ""), user_agent="TestAgent")
    assert svc.allowed_by_robots("http://example.com/anything")


def test_blocks_disallowed_paths():
    http = DummyHttp(200, "User-agent: *\nDisallow: /private")
    svc = RobotsService(http, user_agent="TestAgent")
    assert not svc.allowed_by_robots("http://example.com/private/page")
    assert svc.allowed_by_robots("http://example.com/public")
    assert http.called_urls == ["http://example.com/robots.txt"]


def test_fails_open_and_caches_unreachable_robots():
    http = DummyHttp(0, "", error=FetchError("http://example.com/robots.txt", ErrorKind.TIMEOUT))
    svc = RobotsService(http, user_agent="TestAgent")
    assert svc.allowed_by_robots("http://example.com/a")
    assert svc.allowed_by_robots("http://example.com/b")
    assert len(http.called_urls) == 1


def test_url_without_host_is_allowed():
    http = DummyHttp(200, "User-agent: *\nDisallow: /")
    svc = RobotsService(http, user_agent="TestAgent")
    assert svc.allowed_by_robots("not a url")
    assert http.called_urls == []
