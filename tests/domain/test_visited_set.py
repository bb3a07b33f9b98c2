import asyncio
from datetime import datetime, timezone

import pytest

from intelcrawl.domain.fetcher_name import FetcherName
from intelcrawl.domain.page_result import VisitRecord
from intelcrawl.domain.visited_set import VisitedSet


def test_claim_is_at_most_once():
    visited = VisitedSet()

    async def go():
        return [await visited.claim("https://a.example/", 0), await visited.claim("https://a.example/", 1)]

    assert asyncio.run(go()) == [True, False]
    assert visited.get("https://a.example/").depth == 0


def test_concurrent_claims_have_one_winner():
    visited = VisitedSet()

    async def go():
        return await asyncio.gather(*(visited.claim("https://a.example/x", 1) for _ in range(20)))

    results = asyncio.run(go())
    assert results.count(True) == 1
    assert len(visited) == 1


def test_claims_refused_once_full():
    visited = VisitedSet(max_size=2)

    async def go():
        return [await visited.claim(f"https://a.example/{i}", 0) for i in range(4)]

    assert asyncio.run(go()) == [True, True, False, False]
    assert visited.is_full()
    assert visited.urls() == ["https://a.example/0", "https://a.example/1"]


def test_record_replaces_placeholder():
    visited = VisitedSet()
    asyncio.run(visited.claim("https://a.example/", 0))
    placeholder = visited.get("https://a.example/")
    assert placeholder.success is False and placeholder.fetcher_used is None

    visited.record(VisitRecord(
        url="https://a.example/",
        depth=0,
        fetcher_used=FetcherName.STATIC,
        success=True,
        snippet_count=3,
        timestamp=datetime.now(timezone.utc),
    ))
    assert visited.get("https://a.example/").snippet_count == 3


def test_record_requires_claim():
    visited = VisitedSet()
    with pytest.raises(KeyError):
        visited.record(VisitRecord("https://b.example/", 0, None, False, 0, datetime.now(timezone.utc)))
