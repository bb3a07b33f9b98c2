from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from intelcrawl.domain.page_result import PageResult


def content_fingerprint(text: Optional[str], url: str) -> str:
    """SHA-256 of the consolidated text, or of the URL when there is no text."""
    base = text if text else f"{url}:empty"
    return hashlib.sha256(base.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class CrawlRecord:
    """Per-page record handed to the persistence collaborator."""
    url: str
    consolidated_text: str
    content_fingerprint: str
    discovered_links_json: str
    depth: int
    is_deep_link: bool
    session_id: str
    fetched_at: Optional[datetime] = None

    @classmethod
    def from_page(cls, page: PageResult, session_id: str) -> "CrawlRecord":
        text = page.consolidated_text
        return cls(
            url=page.url,
            consolidated_text=text,
            content_fingerprint=content_fingerprint(text, page.url),
            discovered_links_json=json.dumps(list(page.discovered_links)),
            depth=page.depth,
            is_deep_link=page.depth > 0,
            session_id=session_id,
            fetched_at=page.fetched_at,
        )

    def to_dict(self) -> dict:
        d = asdict(self)
        d["fetched_at"] = self.fetched_at.isoformat() if self.fetched_at else None
        return d
