"""
Tests for run.py: argument parsing, input resolution and the crawl command
with an injected container.
"""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock, patch

from intelcrawl.container import Container
from intelcrawl.domain.crawl_record import CrawlRecord
from intelcrawl.domain.options import CrawlOptions
from intelcrawl.exceptions import CrawlPreconditionError
from run import _resolve_inputs, build_parser, main, write_ndjson

CONFIG_YAML = """
name: sea
seeds: [https://a.example/]
keywords: [Singapore]
options:
  maxDepth: 1
"""


def _record(url="https://a.example/"):
    return CrawlRecord(
        url=url,
        consolidated_text="Singapore startups",
        content_fingerprint="abc",
        discovered_links_json="[]",
        depth=0,
        is_deep_link=False,
        session_id="s1",
    )


def _container(orchestrator):
    container = Container()
    container.crawl_orchestrator.override(orchestrator)
    container.browser_pool.override(Mock(shutdown=AsyncMock()))
    return container


def test_container_creates_services():
    container = Container()
    assert container.smart_scraper() is container.smart_scraper()
    assert container.crawl_orchestrator() is not container.crawl_orchestrator()
    assert container.crawl_policy().robots_service is container.robots_service()
    assert container.default_options().respect_robots is False


def test_resolve_inputs_merges_config_and_flags(tmp_path):
    (tmp_path / "sea.yml").write_text(CONFIG_YAML, encoding="utf-8")
    container = Container()
    container.config.INTELCRAWL_CONFIG_DIR.from_value(str(tmp_path))
    args = build_parser().parse_args([
        "crawl", "--config", "sea.yml", "--seed", "https://b.example/",
        "--keyword", "venture capital", "--no-deep-links", "--concurrency", "3",
    ])
    seeds, keywords, options = _resolve_inputs(args, container)
    assert seeds == ["https://a.example/", "https://b.example/"]
    assert keywords == ["Singapore", "venture capital"]
    assert options.max_depth == 1
    assert options.deep_links_enabled is False
    assert options.concurrency == 3


def test_write_ndjson_one_object_per_line():
    lines = []
    stream = SimpleNamespace(write=lines.append)
    assert write_ndjson([_record(), _record("https://b.example/")], stream) == 2
    assert [json.loads(line)["url"] for line in lines] == ["https://a.example/", "https://b.example/"]


def test_crawl_command_writes_records_to_output(tmp_path):
    summary = Mock(to_dict=Mock(return_value={"total_urls_visited": 1}))
    orchestrator = Mock(run=AsyncMock(return_value=SimpleNamespace(records=[_record()], summary=summary)))
    container = _container(orchestrator)
    out = tmp_path / "out.ndjson"

    code = main(["crawl", "--seed", "https://a.example/", "--keyword", "Singapore", "--max-depth", "0",
                 "--output", str(out)], container=container)

    assert code == 0
    seeds, keywords, options = orchestrator.run.await_args.args
    assert seeds == ["https://a.example/"]
    assert keywords == ["Singapore"]
    assert isinstance(options, CrawlOptions) and options.max_depth == 0
    assert json.loads(out.read_text(encoding="utf-8").strip())["url"] == "https://a.example/"
    container.browser_pool().shutdown.assert_awaited_once()


def test_crawl_command_exits_2_on_bad_input():
    orchestrator = Mock(run=AsyncMock(side_effect=CrawlPreconditionError("At least one seed URL is required")))
    container = _container(orchestrator)
    assert main(["crawl", "--keyword", "Singapore"], container=container) == 2
    container.browser_pool().shutdown.assert_awaited_once()


def test_main_serve_uses_uvicorn():
    with patch("uvicorn.run") as mock_uvicorn:
        assert main(["serve", "--port", "9001"], container=Container()) == 0
    assert mock_uvicorn.call_args.kwargs["port"] == 9001
