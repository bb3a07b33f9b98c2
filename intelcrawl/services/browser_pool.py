import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from playwright.async_api import async_playwright

logger = logging.getLogger(__name__)

LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-extensions",
    "--disable-blink-features=AutomationControlled",
    "--no-first-run",
    "--mute-audio",
)


class BrowserPool:
    """Fixed-capacity arena of headless Chromium browsers.

    Slots are handed out round-robin by index. A slot is launched on first use
    and relaunched when its browser has disconnected. Slot bookkeeping happens
    under one `asyncio.Lock`; callers share browsers and open their own
    contexts.
    """

    def __init__(
        self,
        size: int = 2,
        launcher: Optional[Callable[[], Awaitable]] = None,
        headless: bool = True,
    ):
        if size < 1:
            raise ValueError("size must be >= 1")
        self._slots: List = [None] * size
        self._next_index = 0
        self._launcher = launcher
        self._headless = headless
        self._playwright = None
        self._lock = asyncio.Lock()

    @property
    def size(self) -> int:
        return len(self._slots)

    @property
    def launched(self) -> int:
        return sum(1 for b in self._slots if b is not None)

    async def _launch(self):
        if self._launcher is not None:
            return await self._launcher()
        if self._playwright is None:
            self._playwright = await async_playwright().start()
        return await self._playwright.chromium.launch(headless=self._headless, args=list(LAUNCH_ARGS))

    async def acquire(self):
        async with self._lock:
            index = self._next_index
            self._next_index = (index + 1) % len(self._slots)
            browser = self._slots[index]
            if browser is not None and browser.is_connected():
                return browser
            if browser is not None:
                logger.warning("Browser in slot %d disconnected, relaunching", index)
            browser = await self._launch()
            self._slots[index] = browser
            logger.info("Launched browser in slot %d/%d", index + 1, len(self._slots))
            return browser

    async def shutdown(self) -> None:
        async with self._lock:
            for index, browser in enumerate(self._slots):
                if browser is None:
                    continue
                try:
                    await browser.close()
                except Exception:
                    logger.warning("Error closing browser in slot %d", index, exc_info=True)
                self._slots[index] = None
            if self._playwright is not None:
                try:
                    await self._playwright.stop()
                finally:
                    self._playwright = None
        logger.info("Browser pool shut down")
