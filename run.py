import argparse
import asyncio
import json
import logging
import sys

from intelcrawl import config
from intelcrawl.container import Container, shutdown
from intelcrawl.exceptions import CrawlPreconditionError, SeedConfigError

logger = logging.getLogger("intelcrawl")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="intelcrawl", description="Keyword-driven adaptive web crawler")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)

    crawl = sub.add_parser("crawl", help="Run one crawl session and print NDJSON records")
    crawl.add_argument("--config", help="YAML seed config file")
    crawl.add_argument("--seed", action="append", default=[], help="Seed URL (repeatable)")
    crawl.add_argument("--keyword", action="append", default=[], help="Keyword or phrase (repeatable)")
    crawl.add_argument("--output", help="Write NDJSON here instead of stdout")
    crawl.add_argument("--max-depth", type=int)
    crawl.add_argument("--max-links-per-page", type=int)
    crawl.add_argument("--max-total-urls", type=int)
    crawl.add_argument("--concurrency", type=int)
    crawl.add_argument("--no-deep-links", action="store_true")
    crawl.add_argument("--respect-robots", action="store_true")
    return parser


def _resolve_inputs(args, container: Container):
    base = container.default_options()
    if args.config:
        cfg = container.seed_config_store().load_file(args.config)
        seeds = list(cfg.seeds) + list(args.seed)
        keywords = list(cfg.keywords) + list(args.keyword)
        base = cfg.options
    else:
        seeds, keywords = list(args.seed), list(args.keyword)

    options = base.with_overrides(
        max_depth=args.max_depth,
        max_links_per_page=args.max_links_per_page,
        max_total_urls=args.max_total_urls,
        concurrency=args.concurrency,
        deep_links_enabled=False if args.no_deep_links else None,
        respect_robots=True if args.respect_robots else None,
    )
    return seeds, keywords, options


def write_ndjson(records, stream) -> int:
    count = 0
    for record in records:
        stream.write(json.dumps(record.to_dict(), ensure_ascii=False, default=str) + "\n")
        count += 1
    return count


async def run_crawl(args, container: Container) -> int:
    try:
        seeds, keywords, options = _resolve_inputs(args, container)
        orchestrator = container.crawl_orchestrator()
        result = await orchestrator.run(seeds, keywords, options)
    except (CrawlPreconditionError, SeedConfigError) as e:
        logger.error("%s", e)
        return 2
    finally:
        await shutdown(container)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            written = write_ndjson(result.records, f)
    else:
        written = write_ndjson(result.records, sys.stdout)
    logger.info("Wrote %d record(s); summary: %s", written, json.dumps(result.summary.to_dict(), default=str))
    return 0


def serve(args, container: Container) -> int:
    import uvicorn

    from intelcrawl.api.server import create_app

    uvicorn.run(create_app(container), host=args.host, port=args.port, log_level=config.log_level().lower())
    return 0


def main(argv=None, container: Container = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.log_level(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if container is None:
        container = Container()
    if args.command == "serve":
        return serve(args, container)
    return asyncio.run(run_crawl(args, container))


if __name__ == "__main__":
    sys.exit(main())
