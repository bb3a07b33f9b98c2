import logging
import os
from typing import Any, List, Optional

from intelcrawl.domain.options import CrawlOptions
from intelcrawl.domain.seed_config import SeedConfig
from intelcrawl.exceptions import SeedConfigError
from intelcrawl.utils.url_utils import is_safe_http_url

logger = logging.getLogger(__name__)


def _as_list(value: Any, key: str, config_path: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SeedConfigError(config_path, f"'{key}' must be a list")
    return value


class SeedConfigParser:
    """Parse a YAML dict into a SeedConfig.

    Unsafe or duplicate seed URLs are dropped with a warning. Keywords are
    deduplicated case-insensitively, keeping the first spelling. It does NOT
    perform filesystem IO.
    """

    def __init__(self, min_urls: Optional[int] = None, max_urls: Optional[int] = None, base_options: Optional[CrawlOptions] = None):
        self.min_urls = min_urls
        self.max_urls = max_urls
        self.base_options = base_options or CrawlOptions()

    def parse(self, *, config_path: str, data: Any) -> SeedConfig:
        if not isinstance(data, dict):
            raise SeedConfigError(config_path, "must be a YAML mapping")

        seeds: List[str] = []
        for raw in _as_list(data.get("seeds"), "seeds", config_path):
            url = str(raw or "").strip()
            if not url:
                continue
            if not is_safe_http_url(url):
                logger.warning("Dropping unsafe seed URL %r from %s", url, config_path)
                continue
            if url not in seeds:
                seeds.append(url)

        if not seeds:
            raise SeedConfigError(config_path, "has no usable seed URLs")
        if self.min_urls is not None and len(seeds) < self.min_urls:
            raise SeedConfigError(config_path, f"must contain at least {self.min_urls} URLs (got {len(seeds)})")
        if self.max_urls is not None and len(seeds) > self.max_urls:
            raise SeedConfigError(config_path, f"must not exceed {self.max_urls} URLs (got {len(seeds)})")

        keywords: List[str] = []
        seen = set()
        for raw in _as_list(data.get("keywords"), "keywords", config_path):
            keyword = " ".join(str(raw or "").split())
            if not keyword or keyword.lower() in seen:
                continue
            seen.add(keyword.lower())
            keywords.append(keyword)
        if not keywords:
            raise SeedConfigError(config_path, "must contain at least 1 keyword")

        try:
            options = CrawlOptions.from_mapping(data.get("options"), base=self.base_options)
            options.validate()
        except (TypeError, ValueError) as e:
            raise SeedConfigError(config_path, f"has invalid options: {e}") from e

        default_name = os.path.splitext(os.path.basename(config_path))[0]
        return SeedConfig(
            name=str(data.get("name") or default_name),
            seeds=tuple(seeds),
            keywords=tuple(keywords),
            options=options,
            config_path=os.path.basename(config_path),
        )
