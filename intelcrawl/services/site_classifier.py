from enum import Enum
from typing import Dict, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlparse


class SiteCategory(str, Enum):
    DYNAMIC = "dynamic"
    HEAVY_SCRIPT = "heavy_script"
    STATIC_FRIENDLY = "static_friendly"
    OFFICIAL = "official"
    REGIONAL_DYNAMIC = "regional_dynamic"
    UNCLASSIFIED = "unclassified"


# Portals whose content is assembled client-side.
DYNAMIC_HOSTS = (
    "naver.com", "daum.net", "newsstand.naver.com",
    "sports.naver.com", "finance.naver.com",
)

HEAVY_SCRIPT_HOSTS = (
    "hankyung.com", "mk.co.kr", "mt.co.kr",
    "inews24.com", "newspim.com",
)

STATIC_FRIENDLY_HOSTS = (
    "chosun.com", "donga.com", "joongang.co.kr",
    "yonhapnews.co.kr", "yna.co.kr", "reuters.com",
    "bloomberg.com", "channelnewsasia.com", "wikipedia.org",
)

OFFICIAL_HOSTS = (
    "mofa.go.kr", "kotra.or.kr", "kdb.co.kr",
    "mti.gov.sg", "enterprisesg.gov.sg", "mas.gov.sg",
)

# Checked in order; first table containing the host wins.
DEFAULT_TABLES: Tuple[Tuple[SiteCategory, Sequence[str]], ...] = (
    (SiteCategory.DYNAMIC, DYNAMIC_HOSTS),
    (SiteCategory.HEAVY_SCRIPT, HEAVY_SCRIPT_HOSTS),
    (SiteCategory.STATIC_FRIENDLY, STATIC_FRIENDLY_HOSTS),
    (SiteCategory.OFFICIAL, OFFICIAL_HOSTS),
)

REGIONAL_DYNAMIC_SUFFIXES = (".kr",)

SLOW_TO_HYDRATE = (SiteCategory.DYNAMIC, SiteCategory.HEAVY_SCRIPT)

# Settle delay ranges (seconds) applied by the rendered fetcher after navigation.
SETTLE_DELAYS: Dict[SiteCategory, Tuple[float, float]] = {
    SiteCategory.DYNAMIC: (3.0, 5.0),
    SiteCategory.HEAVY_SCRIPT: (2.5, 4.0),
    SiteCategory.STATIC_FRIENDLY: (2.0, 3.5),
}
DEFAULT_SETTLE_DELAY = (1.5, 3.0)


class SiteClassifier:
    """Map a URL's host to a coarse category via static lookup tables."""

    def __init__(self, tables: Optional[Sequence[Tuple[SiteCategory, Sequence[str]]]] = None, settle_delays: Optional[Mapping[SiteCategory, Tuple[float, float]]] = None):
        self._tables = tuple(tables) if tables is not None else DEFAULT_TABLES
        self._settle_delays = dict(settle_delays) if settle_delays is not None else dict(SETTLE_DELAYS)

    @staticmethod
    def _hostname(url: str) -> Optional[str]:
        try:
            host = urlparse(url).hostname
        except (ValueError, AttributeError):
            return None
        return host.lower() if host else None

    def classify(self, url: str) -> SiteCategory:
        host = self._hostname(url)
        if not host:
            return SiteCategory.UNCLASSIFIED
        for category, hosts in self._tables:
            if any(site in host for site in hosts):
                return category
        if host.endswith(REGIONAL_DYNAMIC_SUFFIXES):
            return SiteCategory.REGIONAL_DYNAMIC
        return SiteCategory.UNCLASSIFIED

    def is_slow_to_hydrate(self, url: str) -> bool:
        return self.classify(url) in SLOW_TO_HYDRATE

    def settle_delay_range(self, url: str) -> Tuple[float, float]:
        return self._settle_delays.get(self.classify(url), DEFAULT_SETTLE_DELAY)
