import pytest

from intelcrawl.exceptions import CrawlAlreadyRunningError
from intelcrawl.services.crawl_registry import InMemoryCrawlRegistry


def test_only_one_crawl_runs_at_a_time():
    registry = InMemoryCrawlRegistry()
    registry.start("a", seeds=["https://a.example/"], keywords=["x"])

    with pytest.raises(CrawlAlreadyRunningError) as exc:
        registry.start("b")
    assert exc.value.active_id == "a"

    assert registry.active()["id"] == "a"
    assert registry.finish("a", summary={"total_urls_visited": 1})
    assert registry.active() is None
    registry.start("b")


def test_finish_records_outcome_once():
    registry = InMemoryCrawlRegistry()
    registry.start("a", config_name="southeast-asia-vc")
    assert registry.finish("a", status="failed", error="boom")
    assert not registry.finish("a")
    rec = registry.get("a")
    assert rec["status"] == "failed"
    assert rec["error"] == "boom"
    assert rec["config_name"] == "southeast-asia-vc"
    assert rec["finished_at"] is not None


def test_finish_unknown_run_returns_false():
    assert not InMemoryCrawlRegistry().finish("missing")


def test_registry_bounded_completed_retention():
    registry = InMemoryCrawlRegistry(max_completed_records=2)
    for run_id in ("a", "b", "c"):
        registry.start(run_id)
        assert registry.finish(run_id)

    assert registry.get("a") is None
    assert registry.get("b") is not None
    assert registry.get("c") is not None


def test_list_recent_newest_first():
    registry = InMemoryCrawlRegistry()
    for run_id in ("a", "b", "c"):
        registry.start(run_id)
        registry.finish(run_id)
    ids = [r["id"] for r in registry.list_recent(limit=2)]
    assert len(ids) == 2
    assert set(ids) <= {"a", "b", "c"}
