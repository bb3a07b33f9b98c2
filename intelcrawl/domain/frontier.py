from collections import OrderedDict
from typing import Callable, Dict, List, Tuple


class Frontier:
    """Depth-partitioned queue of (url, depth) pairs awaiting processing.

    No URL enters if it is already visited (per `is_visited`) or already
    queued at any depth. Entries deeper than `max_depth` and entries past
    `max_total_urls` (queued + visited) are refused.
    """

    def __init__(self, max_depth: int, max_total_urls: int, is_visited: Callable[[str], bool], visited_count: Callable[[], int] = lambda: 0):
        self.max_depth = int(max_depth)
        self.max_total_urls = int(max_total_urls)
        self._is_visited = is_visited
        self._visited_count = visited_count
        self._levels: Dict[int, "OrderedDict[str, None]"] = {}
        self._queued: set = set()

    def push(self, url: str, depth: int) -> bool:
        if depth < 0 or depth > self.max_depth:
            return False
        if url in self._queued or self._is_visited(url):
            return False
        if len(self._queued) + self._visited_count() >= self.max_total_urls:
            return False
        self._levels.setdefault(depth, OrderedDict())[url] = None
        self._queued.add(url)
        return True

    def pop_level(self, depth: int) -> List[Tuple[str, int]]:
        """Remove and return every entry queued at `depth`, in insertion order."""
        level = self._levels.pop(depth, None)
        if not level:
            return []
        for url in level:
            self._queued.discard(url)
        return [(url, depth) for url in level]

    def next_depth(self):
        """Shallowest depth with queued entries, or None when empty."""
        return min(self._levels) if self._levels else None

    def __len__(self) -> int:
        return len(self._queued)

    def __contains__(self, url: str) -> bool:
        return url in self._queued
