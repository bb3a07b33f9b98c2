import logging
from typing import Callable, List, Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

HEADING_SELECTOR = "h1, h2, h3, h4, h5, h6"

# News tickers, carousels and headline lists often carry the only copy of a
# story on a landing page.
CAROUSEL_SELECTORS = (
    '[class*="carousel"]',
    '[class*="slider"]',
    '[class*="swiper"]',
    '[class*="banner"]',
    '[class*="rolling"]',
    '[class*="ticker"]',
    '[class*="headline"]',
    '[class*="news"]',
    '[class*="article"]',
    '[class*="content"]',
    '[class*="롤링"]',
    '[class*="뉴스"]',
)

NON_TEXT_TAGS = ("script", "style", "noscript", "template", "iframe", "svg", "canvas")


def collapse_whitespace(text: Optional[str]) -> str:
    return " ".join((text or "").split())


class HtmlTextExtractor:
    """Builds the text a static page is searched over.

    Parts are concatenated in priority order: title, meta description,
    headings, carousel/news-list containers, then the remaining body text.
    Each part is whitespace collapsed and every element is read once.
    """

    def __init__(
        self,
        soup_factory: Optional[Callable[[str], BeautifulSoup]] = None,
        carousel_selectors=CAROUSEL_SELECTORS,
    ):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))
        self.carousel_selectors = tuple(carousel_selectors)

    def extract(self, body: Optional[str]) -> str:
        if not body:
            return ""
        try:
            soup = self._soup_factory(body)
        except Exception:
            logger.exception("Error parsing HTML body")
            return ""
        for tag in soup.find_all(list(NON_TEXT_TAGS)):
            tag.decompose()
        return " ".join(p for p in self.parts(soup) if p)

    def parts(self, soup: BeautifulSoup) -> List[str]:
        """Text parts in priority order; each element contributes once.

        Title, headings and carousel containers are removed from `soup` once
        their text is taken, so the trailing body text does not repeat them.
        """
        parts = []
        if soup.title is not None:
            parts.append(collapse_whitespace(soup.title.get_text(" ")))
            soup.title.decompose()

        meta = soup.find("meta", attrs={"name": "description"})
        if meta is not None and meta.get("content"):
            parts.append(collapse_whitespace(meta["content"]))

        for heading in soup.select(HEADING_SELECTOR):
            if heading.decomposed:
                continue
            parts.append(collapse_whitespace(heading.get_text(" ")))
            heading.decompose()

        for element in self._carousel_elements(soup):
            parts.append(collapse_whitespace(element.get_text(" ")))
            element.decompose()

        body = soup.body if soup.body is not None else soup
        parts.append(collapse_whitespace(body.get_text(" ")))
        return parts

    def _carousel_elements(self, soup: BeautifulSoup) -> List:
        """Outermost elements matching any carousel selector, in selector order."""
        taken = set()
        elements = []
        for selector in self.carousel_selectors:
            for element in soup.select(selector):
                if id(element) in taken or any(id(parent) in taken for parent in element.parents):
                    continue
                taken.add(id(element))
                elements.append(element)
        return elements

    def _carousel_text(self, soup: BeautifulSoup) -> List[str]:
        texts = (collapse_whitespace(e.get_text(" ")) for e in self._carousel_elements(soup))
        return [t for t in texts if t]
