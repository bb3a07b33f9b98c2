import logging
from typing import Callable, List, Optional, Tuple
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

SKIPPED_SCHEMES = ("javascript:", "mailto:", "tel:", "data:")


def is_encyclopedia_host(url: str) -> bool:
    return "wikipedia.org" in (urlparse(url).hostname or "")


class LinkExtractor:
    """Collect absolute outbound links with their anchor text from an HTML page.

    Fragments are dropped, only http(s) links are kept and output is
    deduplicated in document order. On encyclopedia pages only article links
    inside the main content area are considered.
    """

    def __init__(self, soup_factory: Optional[Callable[[str], BeautifulSoup]] = None):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def extract_links(self, base_url: str, html: Optional[str]) -> List[Tuple[str, str]]:
        if not html:
            return []
        soup = self._soup_factory(html)
        if is_encyclopedia_host(base_url):
            anchors = self._encyclopedia_anchors(soup)
        else:
            anchors = soup.find_all("a", href=True)

        seen = set()
        links = []
        for a in anchors:
            href = (a.get("href") or "").strip()
            if not href or href.startswith("#") or href.lower().startswith(SKIPPED_SCHEMES):
                continue
            try:
                abs_url, _ = urldefrag(urljoin(base_url, href))
            except ValueError:
                logger.debug("Skipping malformed link %r on %s", href, base_url)
                continue
            if urlparse(abs_url).scheme not in ("http", "https") or abs_url in seen:
                continue
            seen.add(abs_url)
            links.append((abs_url, a.get_text(" ", strip=True)))
        return links

    @staticmethod
    def _encyclopedia_anchors(soup: BeautifulSoup):
        content = soup.select_one("#mw-content-text") or soup
        for a in content.select('a[href^="/wiki/"]'):
            href = a.get("href", "")
            if ":" in href or "#" in href:
                continue
            yield a
