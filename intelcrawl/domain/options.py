from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

DEFAULT_MAX_TOTAL_URLS = 50
DEFAULT_MAX_TOTAL_URLS_DEEP = 100


@dataclass(frozen=True)
class CrawlOptions:
    """Run options recognised by the crawl engine."""

    deep_links_enabled: bool = True
    max_depth: int = 2
    max_links_per_page: int = 5
    max_total_urls: Optional[int] = None
    concurrency: int = 5
    per_host_delay_ms: int = 1500
    respect_robots: bool = False

    @property
    def url_budget(self) -> int:
        if self.max_total_urls is not None:
            return self.max_total_urls
        return DEFAULT_MAX_TOTAL_URLS_DEEP if self.deep_links_enabled else DEFAULT_MAX_TOTAL_URLS

    @property
    def effective_max_depth(self) -> int:
        return self.max_depth if self.deep_links_enabled else 0

    def validate(self) -> None:
        for name in ("max_depth", "max_links_per_page", "concurrency", "per_host_delay_ms"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if self.max_total_urls is not None and (isinstance(self.max_total_urls, bool) or not isinstance(self.max_total_urls, int)):
            raise ValueError(f"max_total_urls must be an integer, got {self.max_total_urls!r}")
        for name in ("deep_links_enabled", "respect_robots"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be true or false, got {getattr(self, name)!r}")
        if self.max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        if self.max_links_per_page < 0:
            raise ValueError("max_links_per_page must be >= 0")
        if self.max_total_urls is not None and self.max_total_urls < 1:
            raise ValueError("max_total_urls must be >= 1")
        if self.concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        if self.per_host_delay_ms < 0:
            raise ValueError("per_host_delay_ms must be >= 0")

    def with_overrides(self, **overrides: Any) -> "CrawlOptions":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]], base: Optional["CrawlOptions"] = None) -> "CrawlOptions":
        """Build options from a snake_case or camelCase mapping (YAML, JSON bodies)."""
        base = base or cls()
        if not data:
            return base
        aliases = {
            "deepLinksEnabled": "deep_links_enabled",
            "maxDepth": "max_depth",
            "maxLinksPerPage": "max_links_per_page",
            "maxTotalUrls": "max_total_urls",
            "perHostDelayMs": "per_host_delay_ms",
            "respectRobots": "respect_robots",
        }
        known = set(cls.__dataclass_fields__)
        overrides = {}
        for key, value in data.items():
            field_name = aliases.get(key, key)
            if field_name not in known:
                raise ValueError(f"Unknown crawl option: {key!r}")
            overrides[field_name] = value
        return base.with_overrides(**overrides)
