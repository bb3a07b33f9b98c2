import asyncio
from collections import OrderedDict
from datetime import datetime, timezone
from typing import List, Optional

from intelcrawl.domain.page_result import VisitRecord


class VisitedSet:
    """Run-scoped URL -> VisitRecord map guaranteeing at-most-once processing.

    `claim()` is the single atomic check-and-insert; two tasks reaching the
    same URL from different parents cannot both win it. A claimed URL holds a
    placeholder record until `record()` replaces it with the real outcome.
    """

    def __init__(self, max_size: Optional[int] = None):
        self._max_size = int(max_size) if max_size is not None else None
        if self._max_size is not None and self._max_size <= 0:
            self._max_size = None
        self._records: "OrderedDict[str, VisitRecord]" = OrderedDict()
        self._lock = asyncio.Lock()

    async def claim(self, url: str, depth: int) -> bool:
        """Mark `url` visited if it is not already; return True if this caller won it.

        Claims are refused once `max_size` URLs have been claimed.
        """
        async with self._lock:
            if url in self._records:
                return False
            if self._max_size is not None and len(self._records) >= self._max_size:
                return False
            self._records[url] = VisitRecord(
                url=url,
                depth=depth,
                fetcher_used=None,
                success=False,
                snippet_count=0,
                timestamp=datetime.now(timezone.utc),
            )
            return True

    def record(self, record: VisitRecord) -> None:
        """Replace the placeholder for an already-claimed URL."""
        if record.url not in self._records:
            raise KeyError(f"URL was never claimed: {record.url}")
        self._records[record.url] = record

    def is_visited(self, url: str) -> bool:
        return url in self._records

    def is_full(self) -> bool:
        return self._max_size is not None and len(self._records) >= self._max_size

    def get(self, url: str) -> Optional[VisitRecord]:
        return self._records.get(url)

    def records(self) -> List[VisitRecord]:
        return list(self._records.values())

    def urls(self) -> List[str]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, url: str) -> bool:
        return url in self._records
