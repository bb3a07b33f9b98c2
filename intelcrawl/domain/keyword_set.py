from typing import Iterable, Tuple


class KeywordSet:
    """Ordered, case-insensitively unique search terms.

    Terms containing whitespace are phrases; they rank above single words
    wherever matches compete (snippet windows, link prioritisation).
    """

    def __init__(self, terms: Iterable[str]):
        seen = set()
        ordered = []
        for raw in terms or []:
            term = " ".join(str(raw or "").split())
            if not term:
                continue
            key = term.lower()
            if key in seen:
                continue
            seen.add(key)
            ordered.append(term)
        self._terms: Tuple[str, ...] = tuple(ordered)

    @staticmethod
    def is_phrase(term: str) -> bool:
        return " " in term.strip()

    @property
    def terms(self) -> Tuple[str, ...]:
        return self._terms

    @property
    def phrases(self) -> Tuple[str, ...]:
        return tuple(t for t in self._terms if self.is_phrase(t))

    @property
    def words(self) -> Tuple[str, ...]:
        return tuple(t for t in self._terms if not self.is_phrase(t))

    def __iter__(self):
        return iter(self._terms)

    def __len__(self) -> int:
        return len(self._terms)

    def __bool__(self) -> bool:
        return bool(self._terms)

    def __repr__(self):
        return f"<KeywordSet {list(self._terms)!r}>"
