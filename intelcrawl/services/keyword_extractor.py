import logging
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Tuple, Union

from intelcrawl.domain.keyword_set import KeywordSet

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_CHARS = 240

# A "word" character is any Unicode letter or digit; everything else,
# including the start and end of the text, is a boundary. This keeps
# "US" from matching inside "BUS" and works for Hangul, CJK, Cyrillic, etc.
_NOT_BOUNDARY_BEFORE = r"(?<![^\W_])"
_NOT_BOUNDARY_AFTER = r"(?![^\W_])"


@lru_cache(maxsize=512)
def compile_term(term: str) -> Pattern[str]:
    """Boundary-aware, case-insensitive pattern for a keyword or phrase."""
    parts = [re.escape(p) for p in term.split()]
    body = r"\s+".join(parts)
    return re.compile(f"{_NOT_BOUNDARY_BEFORE}{body}{_NOT_BOUNDARY_AFTER}", re.IGNORECASE)


def normalize_snippet(snippet: str) -> str:
    return " ".join(snippet.split()).lower()


def _as_keyword_set(keywords: Union[KeywordSet, Iterable[str]]) -> KeywordSet:
    return keywords if isinstance(keywords, KeywordSet) else KeywordSet(keywords)


class KeywordExtractor:
    """Turns page text into deduplicated context windows around keyword hits.

    Phrases are matched first. A single-word hit that starts inside a window
    already claimed by a phrase hit is dropped, so "venture capital" and
    "capital" do not both produce a snippet for the same sentence. Output is
    deduplicated on lowercased, whitespace-collapsed content in first-seen
    order, so extraction is idempotent.
    """

    def __init__(self, context_chars: int = DEFAULT_CONTEXT_CHARS):
        if context_chars < 0:
            raise ValueError("context_chars must be >= 0")
        self.context_chars = context_chars

    def _window(self, text: str, start: int, end: int) -> Tuple[int, int]:
        return max(0, start - self.context_chars), min(len(text), end + self.context_chars)

    def extract(self, text: Optional[str], keywords: Union[KeywordSet, Iterable[str]]) -> List[str]:
        if not text:
            return []
        keyword_set = _as_keyword_set(keywords)
        if not keyword_set:
            return []

        windows: List[str] = []
        claimed: List[Tuple[int, int]] = []

        for phrase in keyword_set.phrases:
            for m in compile_term(phrase).finditer(text):
                start, end = self._window(text, m.start(), m.end())
                claimed.append((start, end))
                windows.append(text[start:end].strip())

        for word in keyword_set.words:
            for m in compile_term(word).finditer(text):
                if any(s <= m.start() < e for s, e in claimed):
                    continue
                start, end = self._window(text, m.start(), m.end())
                windows.append(text[start:end].strip())

        seen = set()
        unique: List[str] = []
        for w in windows:
            if not w:
                continue
            key = normalize_snippet(w)
            if key in seen:
                continue
            seen.add(key)
            unique.append(w)
        logger.debug("Extracted %d snippets (%d raw hits)", len(unique), len(windows))
        return unique

    def matches(self, text: Optional[str], keywords: Union[KeywordSet, Iterable[str]]) -> bool:
        if not text:
            return False
        return any(compile_term(term).search(text) for term in _as_keyword_set(keywords))
