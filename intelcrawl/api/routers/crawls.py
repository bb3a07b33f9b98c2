import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from intelcrawl.domain.options import CrawlOptions
from intelcrawl.exceptions import CrawlAlreadyRunningError, CrawlPreconditionError, SeedConfigError
from intelcrawl.services.crawl_registry import InMemoryCrawlRegistry

logger = logging.getLogger(__name__)


class CrawlRequest(BaseModel):
    seeds: List[str]
    keywords: List[str]
    options: Optional[Dict[str, Any]] = None


class ConfigCrawlRequest(BaseModel):
    options: Optional[Dict[str, Any]] = None


def create_crawls_router(
    orchestrator_factory: Callable,
    seed_config_store,
    crawl_registry: InMemoryCrawlRegistry,
    scraper,
    rate_limiter,
):
    router = APIRouter(prefix="/crawls", tags=["Crawls"])

    def _options(orchestrator, data: Optional[Dict[str, Any]], base: Optional[CrawlOptions] = None) -> CrawlOptions:
        try:
            return CrawlOptions.from_mapping(data, base=base or orchestrator.default_options)
        except (TypeError, ValueError) as e:
            raise HTTPException(status_code=422, detail=str(e))

    async def _run(orchestrator, seeds, keywords, options: CrawlOptions, config_name: Optional[str] = None):
        try:
            session = orchestrator.prepare(seeds, keywords, options)
        except CrawlPreconditionError as e:
            raise HTTPException(status_code=422, detail=str(e))

        try:
            crawl_registry.start(
                session.session_id,
                seeds=session.seeds,
                keywords=list(session.keywords),
                config_name=config_name,
            )
        except CrawlAlreadyRunningError as e:
            raise HTTPException(status_code=409, detail=str(e))

        status, summary, error = "failed", None, "crawl interrupted"
        try:
            result = await orchestrator.execute(session)
            summary = result.summary.to_dict()
            status, error = "finished", None
        except Exception as e:
            logger.exception("Crawl %s failed", session.session_id)
            error = str(e)
            raise HTTPException(status_code=500, detail="crawl failed")
        finally:
            crawl_registry.finish(session.session_id, status=status, summary=summary, error=error)

        return {
            "records": [r.to_dict() for r in result.records],
            "summary": summary,
        }

    @router.post("")
    async def start_crawl(request: CrawlRequest):
        orchestrator = orchestrator_factory()
        options = _options(orchestrator, request.options)
        return await _run(orchestrator, request.seeds, request.keywords, options)

    @router.get("/config")
    def list_configs():
        return {
            name: {"seeds": len(cfg.seeds), "keywords": list(cfg.keywords), "config_path": cfg.config_path}
            for name, cfg in seed_config_store.load_all().items()
        }

    @router.post("/config/{name}")
    async def start_config_crawl(name: str, request: Optional[ConfigCrawlRequest] = None):
        try:
            cfg = seed_config_store.get(name)
        except SeedConfigError:
            raise HTTPException(status_code=404, detail="config not found")
        orchestrator = orchestrator_factory()
        options = _options(orchestrator, request.options if request else None, base=cfg.options)
        return await _run(orchestrator, cfg.seeds, cfg.keywords, options, config_name=cfg.name)

    @router.get("/stats")
    def stats():
        return {
            "scraper_performance": scraper.stats(),
            "rate_limiter": rate_limiter.snapshot(),
            "active_crawl": crawl_registry.active(),
        }

    @router.get("")
    def list_crawls(limit: int = 20):
        return crawl_registry.list_recent(limit=limit)

    @router.get("/{run_id}")
    def get_crawl(run_id: str):
        run = crawl_registry.get(run_id)
        if run is None:
            raise HTTPException(status_code=404, detail="crawl not found")
        return run

    return router
