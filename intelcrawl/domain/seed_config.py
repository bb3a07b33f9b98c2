from dataclasses import dataclass, field
from typing import Tuple

from intelcrawl.domain.options import CrawlOptions


@dataclass(frozen=True)
class SeedConfig:
    """A named set of seeds, keywords and option overrides loaded from YAML."""
    name: str
    seeds: Tuple[str, ...]
    keywords: Tuple[str, ...]
    options: CrawlOptions = field(default_factory=CrawlOptions)
    config_path: str = ""
