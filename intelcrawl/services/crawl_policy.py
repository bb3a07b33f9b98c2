import asyncio
import logging
from typing import Optional

from intelcrawl.domain.options import CrawlOptions
from intelcrawl.services.robots_service import RobotsService

logger = logging.getLogger(__name__)


class CrawlPolicy:
    """Per-URL skip rules applied after a URL is claimed and before it is fetched."""

    def __init__(self, robots_service: Optional[RobotsService] = None):
        self.robots_service = robots_service

    @staticmethod
    def should_skip_due_to_depth(depth: int, options: CrawlOptions) -> bool:
        if depth > options.effective_max_depth:
            logger.debug("Skipping (max depth reached) at depth %s", depth)
            return True
        return False

    async def should_skip_due_to_robots(self, url: str, options: CrawlOptions) -> bool:
        if self.robots_service is None or not options.respect_robots:
            return False
        allowed = await asyncio.to_thread(self.robots_service.allowed_by_robots, url)
        if not allowed:
            logger.info("Skipping (robots) %s", url)
        return not allowed

    async def should_skip(self, url: str, depth: int, options: CrawlOptions) -> bool:
        return self.should_skip_due_to_depth(depth, options) or await self.should_skip_due_to_robots(url, options)
