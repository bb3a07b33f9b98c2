import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.robotparser import RobotFileParser


@dataclass(frozen=True)
class _RobotsCacheEntry:
    parser: Optional[RobotFileParser]
    stored_at: float


class RobotsCache:
    """LRU + TTL cache of parsed robots.txt keyed by scheme://host.

    A cached `None` means the fetch failed and the host is treated as
    unrestricted until the entry expires.
    """

    def __init__(self, *, max_size: int = 2048, ttl_seconds: int = 3600, clock: Optional[Callable[[], float]] = None):
        self._max_size = max(1, int(max_size)) if max_size is not None else 2048
        self._ttl_seconds = max(0, int(ttl_seconds)) if ttl_seconds is not None else 3600
        self._clock = clock or time.time
        self._cache: "OrderedDict[str, _RobotsCacheEntry]" = OrderedDict()

    def _is_expired(self, entry: _RobotsCacheEntry) -> bool:
        if self._ttl_seconds == 0:
            return True
        return (self._clock() - entry.stored_at) > self._ttl_seconds

    def contains(self, base_url: str) -> bool:
        entry = self._cache.get(base_url)
        return entry is not None and not self._is_expired(entry)

    def get(self, base_url: str) -> Optional[RobotFileParser]:
        entry = self._cache.get(base_url)
        if entry is None:
            return None
        if self._is_expired(entry):
            self._cache.pop(base_url, None)
            return None
        self._cache.move_to_end(base_url)
        return entry.parser

    def set(self, base_url: str, parser: Optional[RobotFileParser]) -> None:
        self._cache[base_url] = _RobotsCacheEntry(parser=parser, stored_at=self._clock())
        self._cache.move_to_end(base_url)
        while len(self._cache) > self._max_size:
            self._cache.popitem(last=False)

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
