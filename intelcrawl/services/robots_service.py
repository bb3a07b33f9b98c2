import logging
from typing import Optional
from urllib.parse import urljoin, urlparse
from urllib.robotparser import RobotFileParser

from intelcrawl.exceptions import FetchError
from intelcrawl.services.robots_cache import RobotsCache

logger = logging.getLogger(__name__)


class RobotsFetcher:
    """Fetch robots.txt through `http_service.fetch_robots` and parse it.

    Returns None when the file is missing, unreachable or unparsable.
    """

    def __init__(self, http_service):
        self.http_service = http_service

    def fetch(self, robots_url: str) -> Optional[RobotFileParser]:
        try:
            response = self.http_service.fetch_robots(robots_url)
        except FetchError as e:
            logger.warning("Could not fetch %s: %s", robots_url, e)
            return None

        if response.status_code != 200 or not response.text:
            return None

        try:
            parser = RobotFileParser()
            parser.parse(response.text.splitlines())
            return parser
        except Exception:
            logger.exception("Error parsing robots.txt from %s", robots_url)
            return None


class RobotsService:
    """Answers whether a URL may be fetched, caching robots.txt per host. Fails open."""

    def __init__(self, http_service, user_agent: str,
                 robots_fetcher: Optional[RobotsFetcher] = None,
                 cache: Optional[RobotsCache] = None):
        self.user_agent = user_agent
        self.robots_fetcher = robots_fetcher if robots_fetcher is not None else RobotsFetcher(http_service)
        self.cache = cache if cache is not None else RobotsCache()

    def allowed_by_robots(self, url: str) -> bool:
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            return True

        base = f"{parsed.scheme}://{parsed.netloc}"
        if self.cache.contains(base):
            robots_parser = self.cache.get(base)
        else:
            robots_parser = self.robots_fetcher.fetch(urljoin(base, "/robots.txt"))
            self.cache.set(base, robots_parser)

        if robots_parser is None:
            return True

        try:
            return robots_parser.can_fetch(self.user_agent, url)
        except Exception:
            logger.exception("Error checking robots permission for %s", url)
            return True
