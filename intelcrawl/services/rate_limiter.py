import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Deque, Dict, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0


def host_of(url_or_host: str) -> str:
    """Return the lowercased hostname of a URL; bare hosts pass through."""
    if "://" not in url_or_host:
        return url_or_host.strip().lower() or "unknown"
    try:
        host = urlparse(url_or_host).hostname
    except ValueError:
        host = None
    return (host or "unknown").lower()


class RateLimiter:
    """Per-host politeness pacing.

    Enforces jointly, per host:
    - a minimum spacing between consecutive requests;
    - at most `max_requests_per_minute` requests in any trailing 60s window.

    Waiters for the same host are serialised by a per-host lock; the order in
    which they are released is not guaranteed to be FIFO. This is advisory
    pacing: callers that skip `wait_for_slot` are not blocked.
    """

    def __init__(
        self,
        min_interval_seconds: float = 1.0,
        max_requests_per_minute: int = 10,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        if max_requests_per_minute < 1:
            raise ValueError("max_requests_per_minute must be >= 1")
        self.min_interval_seconds = max(0.0, float(min_interval_seconds))
        self.max_requests_per_minute = int(max_requests_per_minute)
        self._clock = clock or time.monotonic
        self._sleep = sleep or asyncio.sleep
        self._windows: Dict[str, Deque[float]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def _prune(self, host: str, now: float) -> Deque[float]:
        window = self._windows.setdefault(host, deque())
        cutoff = now - WINDOW_SECONDS
        while window and window[0] <= cutoff:
            window.popleft()
        return window

    def _evict_idle(self, now: float) -> None:
        """Forget hosts with no requests in the window and no pending waiters."""
        for host in list(self._windows):
            if self._users.get(host) or self._prune(host, now):
                continue
            del self._windows[host]
            self._locks.pop(host, None)

    def _delay_for(self, window: Deque[float], now: float, min_interval: float) -> float:
        delay = 0.0
        if len(window) >= self.max_requests_per_minute:
            oldest = window[-self.max_requests_per_minute]
            delay = max(delay, oldest + WINDOW_SECONDS - now)
        if window:
            delay = max(delay, window[-1] + min_interval - now)
        return delay

    async def wait_for_slot(self, url_or_host: str, min_interval_seconds: Optional[float] = None) -> float:
        """Suspend until a request to the host is allowed, then record it.

        Returns the total time spent waiting.
        """
        host = host_of(url_or_host)
        min_interval = self.min_interval_seconds if min_interval_seconds is None else max(0.0, min_interval_seconds)
        self._evict_idle(self._clock())
        lock = self._locks.setdefault(host, asyncio.Lock())
        self._users[host] = self._users.get(host, 0) + 1
        waited = 0.0
        try:
            async with lock:
                while True:
                    now = self._clock()
                    window = self._prune(host, now)
                    delay = self._delay_for(window, now, min_interval)
                    if delay <= 0:
                        window.append(now)
                        return waited
                    logger.debug("Rate limiting %s: waiting %.2fs", host, delay)
                    await self._sleep(delay)
                    waited += delay
        finally:
            remaining = self._users.get(host, 1) - 1
            if remaining > 0:
                self._users[host] = remaining
            else:
                self._users.pop(host, None)

    def current_rate(self, url_or_host: str) -> int:
        """Requests recorded for the host within the trailing window."""
        host = host_of(url_or_host)
        if host not in self._windows:
            return 0
        return len(self._prune(host, self._clock()))

    def snapshot(self) -> Dict[str, int]:
        now = self._clock()
        self._evict_idle(now)
        return {host: len(self._prune(host, now)) for host in list(self._windows)}

    def reset(self) -> None:
        self._windows.clear()
        self._locks.clear()
        self._users.clear()
