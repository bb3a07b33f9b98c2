import logging
from typing import Callable, Dict, Optional

import requests

from intelcrawl.domain.http_response import HttpResponse
from intelcrawl.exceptions import FetchError
from intelcrawl.services.fetch_errors import classify_request_exception, classify_status

logger = logging.getLogger(__name__)


class HttpService:
    """
    Blocking HTTP client wrapper for fetching web pages.

    Takes the http_client callable (normally `requests.get`) so tests can pass
    a fake, and an optional `header_factory(url)` used to rotate request
    fingerprints. Transport failures and 4xx/5xx statuses are raised as
    `FetchError` carrying a classified `ErrorKind`.
    """

    def __init__(
        self,
        user_agent: str,
        http_client: Callable,
        timeout: float = 15,
        header_factory: Optional[Callable[[str], Dict[str, str]]] = None,
    ):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client
        self.header_factory = header_factory

    def _headers_for(self, url: str) -> Dict[str, str]:
        if self.header_factory is None:
            return {"User-Agent": self.user_agent}
        return self.header_factory(url)

    def fetch(self, url: str, timeout: Optional[float] = None, raise_for_status: bool = True) -> HttpResponse:
        """Fetch URL and return response with status code, body text, and Content-Type."""
        headers = self._headers_for(url)
        try:
            resp = self.http_client(url, headers=headers, timeout=timeout or self.timeout, allow_redirects=True)
        except requests.exceptions.RequestException as e:
            raise FetchError(url, classify_request_exception(e), e) from e

        if raise_for_status:
            kind = classify_status(resp.status_code)
            if kind is not None:
                raise FetchError(url, kind, status_code=resp.status_code)

        ct = None
        if hasattr(resp, "headers"):
            ct = resp.headers.get("Content-Type")

        return HttpResponse(resp.status_code, resp.text, ct, getattr(resp, "url", None))

    def fetch_robots(self, robots_url: str) -> HttpResponse:
        """Fetch robots.txt with the plain crawler User-Agent; statuses are not raised."""
        try:
            resp = self.http_client(robots_url, headers={"User-Agent": self.user_agent}, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise FetchError(robots_url, classify_request_exception(e), e) from e
        return HttpResponse(resp.status_code, resp.text, getattr(resp, "headers", {}).get("Content-Type"))
