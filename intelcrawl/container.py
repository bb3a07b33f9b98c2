"""Dependency injection container for the application."""
import logging

from dependency_injector import containers, providers
import requests

from intelcrawl import config as env
from intelcrawl.domain.options import CrawlOptions
from intelcrawl.services.browser_pool import BrowserPool
from intelcrawl.services.crawl_orchestrator import CrawlOrchestrator
from intelcrawl.services.crawl_policy import CrawlPolicy
from intelcrawl.services.crawl_registry import InMemoryCrawlRegistry
from intelcrawl.services.deep_link_crawler import DeepLinkCrawler
from intelcrawl.services.fetcher import FetcherRegistry
from intelcrawl.services.html_text_extractor import HtmlTextExtractor
from intelcrawl.services.http_service import HttpService
from intelcrawl.services.keyword_extractor import KeywordExtractor
from intelcrawl.services.link_extractor import LinkExtractor
from intelcrawl.services.rate_limiter import RateLimiter
from intelcrawl.services.relevance_filter import RelevanceFilter
from intelcrawl.services.rendered_fetcher import RenderedFetcher, navigation_steps
from intelcrawl.services.robots_cache import RobotsCache
from intelcrawl.services.robots_service import RobotsService
from intelcrawl.services.seed_config_parser import SeedConfigParser
from intelcrawl.services.seed_config_store import SeedConfigStore
from intelcrawl.services.site_classifier import SiteClassifier
from intelcrawl.services.smart_scraper import SmartScraper
from intelcrawl.services.static_fetcher import StaticFetcher
from intelcrawl.services.stealth import random_headers
from intelcrawl.services.strategy_memory import StrategyMemory

logger = logging.getLogger(__name__)


# Environment variables used by the container (read via `intelcrawl.config` helpers).
#
# USER_AGENT (str)
#   User-Agent for robots.txt fetching; page requests rotate browser UAs.
#
# HTTP_TIMEOUT (float seconds, default: 15)
#   Base timeout for static fetches. Grows with each retry.
#
# PAGE_TIMEOUT_MS (int ms, default: 45000)
#   Cap applied to each rendered navigation step.
#
# CONTEXT_CHARS (int, default: 240)
#   Characters kept on each side of a keyword hit.
#
# INTELCRAWL_CONCURRENCY (int, default: 5)
#   Default for CrawlOptions.concurrency.
#
# INTELCRAWL_PER_HOST_DELAY_MS (int ms, default: 1500)
#   Default for CrawlOptions.per_host_delay_ms.
#
# INTELCRAWL_MIN_REQUEST_SPACING_MS (int ms, default: 1000)
#   Rate limiter spacing used when a caller does not pass its own.
#
# INTELCRAWL_MAX_REQUESTS_PER_MINUTE (int, default: 10)
#   Per-host cap over a trailing 60 s window.
#
# INTELCRAWL_BROWSER_POOL_SIZE (int, default: 2)
#   Number of pooled headless browsers.
#
# INTELCRAWL_RESPECT_ROBOTS (bool, default: false)
#   Default for CrawlOptions.respect_robots.
#
# INTELCRAWL_ROBOTS_CACHE_MAX_SIZE / INTELCRAWL_ROBOTS_CACHE_TTL_SECONDS (int, 2048 / 3600)
#   Bounds of the in-memory robots.txt cache.
#
# INTELCRAWL_CONFIG_DIR (str, default: ./configs)
#   Directory holding YAML seed configs.
ENV = {
    "USER_AGENT": env.USER_AGENT,
    "HTTP_TIMEOUT": env.get_float_env("HTTP_TIMEOUT", 15.0),
    "PAGE_TIMEOUT_MS": env.get_int_env("PAGE_TIMEOUT_MS", 45_000),
    "CONTEXT_CHARS": env.CONTEXT_CHARS,
    "INTELCRAWL_CONCURRENCY": env.get_int_env("INTELCRAWL_CONCURRENCY", 5),
    "INTELCRAWL_PER_HOST_DELAY_MS": env.get_int_env("INTELCRAWL_PER_HOST_DELAY_MS", 1500),
    "INTELCRAWL_MIN_REQUEST_SPACING_MS": env.get_int_env("INTELCRAWL_MIN_REQUEST_SPACING_MS", 1000),
    "INTELCRAWL_MAX_REQUESTS_PER_MINUTE": env.get_int_env("INTELCRAWL_MAX_REQUESTS_PER_MINUTE", 10),
    "INTELCRAWL_BROWSER_POOL_SIZE": env.get_int_env("INTELCRAWL_BROWSER_POOL_SIZE", 2),
    "INTELCRAWL_RESPECT_ROBOTS": env.get_bool_env("INTELCRAWL_RESPECT_ROBOTS", False),
    "INTELCRAWL_ROBOTS_CACHE_MAX_SIZE": env.get_int_env("INTELCRAWL_ROBOTS_CACHE_MAX_SIZE", 2048),
    "INTELCRAWL_ROBOTS_CACHE_TTL_SECONDS": env.get_int_env("INTELCRAWL_ROBOTS_CACHE_TTL_SECONDS", 3600),
    "INTELCRAWL_CONFIG_DIR": env.seed_config_dir(),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for intelcrawl."""

    config = providers.Configuration(default=ENV)

    default_options = providers.Singleton(
        CrawlOptions,
        concurrency=config.INTELCRAWL_CONCURRENCY.as_(int),
        per_host_delay_ms=config.INTELCRAWL_PER_HOST_DELAY_MS.as_(int),
        respect_robots=config.INTELCRAWL_RESPECT_ROBOTS.as_(bool),
    )

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(float),
        header_factory=providers.Object(random_headers),
    )

    keyword_extractor = providers.Singleton(KeywordExtractor, context_chars=config.CONTEXT_CHARS.as_(int))
    site_classifier = providers.Singleton(SiteClassifier)
    relevance_filter = providers.Singleton(RelevanceFilter)
    link_extractor = providers.Singleton(LinkExtractor)
    text_extractor = providers.Singleton(HtmlTextExtractor)

    static_fetcher = providers.Singleton(
        StaticFetcher,
        http_service=http_service,
        keyword_extractor=keyword_extractor,
        text_extractor=text_extractor,
        link_extractor=link_extractor,
        relevance_filter=relevance_filter,
    )

    browser_pool = providers.Singleton(BrowserPool, size=config.INTELCRAWL_BROWSER_POOL_SIZE.as_(int))

    rendered_fetcher = providers.Singleton(
        RenderedFetcher,
        pool=browser_pool,
        keyword_extractor=keyword_extractor,
        classifier=site_classifier,
        link_extractor=link_extractor,
        relevance_filter=relevance_filter,
        navigation_steps=providers.Callable(navigation_steps, config.PAGE_TIMEOUT_MS.as_(int)),
    )

    fetcher_registry = providers.Singleton(
        FetcherRegistry,
        static_fetcher=static_fetcher,
        rendered_fetcher=rendered_fetcher,
    )

    strategy_memory = providers.Singleton(StrategyMemory, classifier=site_classifier)

    smart_scraper = providers.Singleton(SmartScraper, fetchers=fetcher_registry, memory=strategy_memory)

    rate_limiter = providers.Singleton(
        RateLimiter,
        min_interval_seconds=providers.Callable(lambda ms: ms / 1000, config.INTELCRAWL_MIN_REQUEST_SPACING_MS.as_(int)),
        max_requests_per_minute=config.INTELCRAWL_MAX_REQUESTS_PER_MINUTE.as_(int),
    )

    robots_cache = providers.Singleton(
        RobotsCache,
        max_size=config.INTELCRAWL_ROBOTS_CACHE_MAX_SIZE.as_(int),
        ttl_seconds=config.INTELCRAWL_ROBOTS_CACHE_TTL_SECONDS.as_(int),
    )

    robots_service = providers.Singleton(
        RobotsService,
        http_service=http_service,
        user_agent=config.USER_AGENT.as_(str),
        cache=robots_cache,
    )

    crawl_policy = providers.Singleton(CrawlPolicy, robots_service=robots_service)

    deep_link_crawler = providers.Singleton(
        DeepLinkCrawler,
        scraper=smart_scraper,
        rate_limiter=rate_limiter,
        relevance_filter=relevance_filter,
        crawl_policy=crawl_policy,
    )

    crawl_orchestrator = providers.Factory(
        CrawlOrchestrator,
        crawler=deep_link_crawler,
        scraper=smart_scraper,
        default_options=default_options,
    )

    crawl_registry = providers.Singleton(InMemoryCrawlRegistry)

    seed_config_store = providers.Singleton(
        SeedConfigStore,
        configs_dir=config.INTELCRAWL_CONFIG_DIR.as_(str),
        parser=providers.Singleton(SeedConfigParser, base_options=default_options),
    )


async def shutdown(container: Container) -> None:
    """Release pooled browsers and the Playwright driver."""
    try:
        await container.browser_pool().shutdown()
    except Exception:
        logger.exception("Error shutting down browser pool")
