import logging
import re
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple, Union
from urllib.parse import unquote, urlparse

from intelcrawl.domain.keyword_set import KeywordSet
from intelcrawl.services.link_extractor import is_encyclopedia_host

logger = logging.getLogger(__name__)

Link = Union[str, Tuple[str, str]]

DEFAULT_LINK_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"article|news|post|story|blog|page",
    r"analysis|research|report|study|review",
    r"profile|biography|about|overview",
    r"press|announcement|release|statement",
    r"guide|tutorial|how.*to|explainer",
    r"policy|strategy|plan|initiative|program",
    r"기사|뉴스|보도|소식",
    r"분석|연구|리포트|조사",
    r"투자|경제|금융|무역",
    r"정책|전략|계획|협력",
    r"/news/|/article/|/post/|/story/",
    r"/press/|/announcement/|/release/",
    r"/\d{4}/\d{2}/|/\d{4}-\d{2}-",
))

CONTENT_INDICATORS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"article|post|story|news|blog|page",
    r"about|profile|biography|history",
    r"analysis|research|report|study",
    r"guide|tutorial|how.*to|overview",
    r"policy|strategy|plan|initiative",
    r"announcement|press.*release|statement",
    r"\d{4}.*\d{2}.*\d{2}",
    r"\w{20,}",
))

NON_CONTENT_EXTENSIONS = re.compile(
    r"\.(pdf|doc|docx|xls|xlsx|ppt|pptx|zip|rar|jpg|jpeg|png|gif|svg|mp4|mp3|avi)$", re.IGNORECASE
)

BUSINESS_TERMS = re.compile(r"venture|capital|investment|fund|company|business|economic|finance", re.IGNORECASE)
NOT_A_PERSON_TERMS = re.compile(r"venture|capital|investment|fund|company", re.IGNORECASE)

PLACE_TOPICS = (
    "singapore", "malaysia", "thailand", "indonesia", "philippines",
    "vietnam", "myanmar", "laos", "cambodia", "brunei",
    "asia", "southeast", "asean",
)
POLITICAL_TOPICS = (
    "government", "politics", "prime minister", "president", "leader",
    "history", "founder", "independence", "parliament", "ministry",
)
BUSINESS_TOPICS = (
    "economy", "economic", "business", "industry", "development",
    "investment", "finance", "capital", "venture", "startup",
    "technology", "innovation", "enterprise",
)


def _split(link: Link) -> Tuple[str, str]:
    if isinstance(link, tuple):
        return link[0], link[1] or ""
    return link, ""


def _keywords(keywords) -> KeywordSet:
    return keywords if isinstance(keywords, KeywordSet) else KeywordSet(keywords or ())


class RelevanceFilter:
    """Decides which discovered links are worth following and in what order.

    Keyword checks here are substring checks over the decoded URL plus the
    anchor text; a phrase counts when all of its words are present.
    """

    def __init__(
        self,
        link_patterns: Optional[Sequence[Pattern]] = None,
        content_indicators: Optional[Sequence[Pattern]] = None,
        domain_allowlist: Optional[Iterable[str]] = None,
    ):
        self.link_patterns = tuple(link_patterns) if link_patterns is not None else DEFAULT_LINK_PATTERNS
        self.content_indicators = tuple(content_indicators) if content_indicators is not None else CONTENT_INDICATORS
        self.domain_allowlist = tuple(d.lower() for d in (domain_allowlist or ()))

    @staticmethod
    def is_non_content(url: str) -> bool:
        lowered = url.strip().lower()
        if not lowered or lowered.startswith("#") or lowered.startswith(("javascript:", "mailto:")):
            return True
        return bool(NON_CONTENT_EXTENSIONS.search(urlparse(url).path or lowered))

    def matches_pattern(self, url: str, anchor_text: str = "") -> bool:
        return any(p.search(url) or p.search(anchor_text) for p in self.link_patterns)

    def has_content_indicator(self, anchor_text: str) -> bool:
        return bool(anchor_text) and any(p.search(anchor_text) for p in self.content_indicators)

    def is_allowlisted(self, url: str) -> bool:
        if not self.domain_allowlist:
            return True
        host = (urlparse(url).hostname or "").lower()
        if not host:
            return False
        return any(d in host or host in d for d in self.domain_allowlist)

    @staticmethod
    def _haystack(url: str, anchor_text: str) -> str:
        return f"{unquote(url)} {anchor_text}".lower()

    def keyword_priority(self, url: str, anchor_text: str, keywords) -> int:
        """0 when no keyword is present; phrases score 100-index, words 50-index."""
        haystack = self._haystack(url, anchor_text)
        best = 0
        for index, term in enumerate(_keywords(keywords)):
            lowered = term.lower()
            if KeywordSet.is_phrase(term):
                hit = all(w in haystack for w in lowered.split())
                score = 100 - index
            else:
                hit = lowered in haystack
                score = 50 - index
            if hit:
                best = max(best, score, 1)
        return best

    def contains_keywords(self, url: str, anchor_text: str, keywords) -> bool:
        return self.keyword_priority(url, anchor_text, keywords) > 0

    def is_encyclopedia_relevant(self, url: str, anchor_text: str, keywords) -> bool:
        if not is_encyclopedia_host(url):
            return False
        terms = _keywords(keywords).terms
        if not terms:
            return False
        haystack = self._haystack(url, anchor_text)

        person_terms = [t for t in terms if KeywordSet.is_phrase(t) and not NOT_A_PERSON_TERMS.search(t)]
        if person_terms and any(t in haystack for t in PLACE_TOPICS + POLITICAL_TOPICS):
            return True

        if any(BUSINESS_TERMS.search(t) for t in terms):
            return any(t in haystack for t in BUSINESS_TOPICS)
        return False

    def is_relevant(self, url: str, anchor_text: str = "", keywords=()) -> bool:
        if self.is_non_content(url):
            return False
        if self.domain_allowlist:
            return self.matches_pattern(url, anchor_text) and self.is_allowlisted(url)
        if is_encyclopedia_host(url):
            return self.contains_keywords(url, anchor_text, keywords) or self.is_encyclopedia_relevant(url, anchor_text, keywords)
        return (
            self.matches_pattern(url, anchor_text)
            or self.has_content_indicator(anchor_text)
            or self.contains_keywords(url, anchor_text, keywords)
        )

    def prioritise(self, links: Iterable[Link], keywords=(), limit: Optional[int] = None) -> List[str]:
        """Relevant links in follow order.

        When any link carries a keyword only keyword links are returned,
        highest priority first; otherwise all relevant links in page order.
        """
        seen = set()
        relevant = []
        for link in links:
            url, anchor = _split(link)
            if url in seen or not self.is_relevant(url, anchor, keywords):
                continue
            seen.add(url)
            relevant.append((url, self.keyword_priority(url, anchor, keywords)))

        keyword_links = [item for item in relevant if item[1] > 0]
        if keyword_links:
            keyword_links.sort(key=lambda item: item[1], reverse=True)
            chosen = [url for url, _ in keyword_links]
        else:
            chosen = [url for url, _ in relevant]
        logger.debug("Prioritised %d of %d relevant links (%d keyword)", len(chosen), len(relevant), len(keyword_links))
        return chosen if limit is None else chosen[:limit]
