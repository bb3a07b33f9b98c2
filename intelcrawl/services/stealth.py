"""Rotated browser-like request fingerprints and jittered delays."""
import asyncio
import random
from typing import Dict, Optional, Tuple
from urllib.parse import urlparse

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:120.0) Gecko/20100101 Firefox/120.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:120.0) Gecko/20100101 Firefox/120.0",
)

VIEWPORTS = (
    {"width": 1920, "height": 1080},
    {"width": 1366, "height": 768},
    {"width": 1536, "height": 864},
    {"width": 1440, "height": 900},
    {"width": 1280, "height": 720},
    {"width": 1600, "height": 900},
    {"width": 2560, "height": 1440},
)

ACCEPT_LANGUAGES = (
    "en-US,en;q=0.9,ko;q=0.8",
    "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
    "en-GB,en;q=0.9,ko;q=0.8",
    "zh-CN,zh;q=0.9,en;q=0.8,ko;q=0.7",
    "ja-JP,ja;q=0.9,en;q=0.8,ko;q=0.7",
)


def random_user_agent(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(USER_AGENTS)


def random_viewport(rng: Optional[random.Random] = None) -> Dict[str, int]:
    return dict((rng or random).choice(VIEWPORTS))


def random_accept_language(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(ACCEPT_LANGUAGES)


def random_headers(url: str, rng: Optional[random.Random] = None) -> Dict[str, str]:
    """Headers resembling a real browser navigation, rotated per request."""
    rng = rng or random
    headers = {
        "User-Agent": random_user_agent(rng),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
        "Accept-Language": random_accept_language(rng),
        "Accept-Encoding": "gzip, deflate",
        "Accept-Charset": "utf-8, iso-8859-1;q=0.5",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
        "Upgrade-Insecure-Requests": "1",
        "DNT": "1",
    }
    if rng.random() > 0.7:
        host = urlparse(url).hostname or ""
        headers["Referer"] = f"https://www.google.com/search?q={host}"
    return headers


def browser_headers(rng: Optional[random.Random] = None) -> Dict[str, str]:
    """Extra headers for rendered pages; the browser supplies the rest."""
    return {
        "Accept-Language": random_accept_language(rng),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }


async def random_delay(delay_range: Tuple[float, float], sleep=asyncio.sleep) -> float:
    low, high = delay_range
    if high <= 0:
        return 0.0
    delay = random.uniform(max(0.0, low), high)
    await sleep(delay)
    return delay
