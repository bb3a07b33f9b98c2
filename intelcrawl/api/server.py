import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from intelcrawl.api.routers import create_crawls_router, create_systems_router
from intelcrawl.container import ENV, Container, shutdown

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Build the FastAPI app; pooled browsers are released when it shuts down."""
    if container is None:
        container = Container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("intelcrawl API starting")
        try:
            yield
        finally:
            await shutdown(container)
            logger.info("intelcrawl API stopped")

    app = FastAPI(title="intelcrawl", lifespan=lifespan)
    app.state.container = container

    app.include_router(create_systems_router(ENV))
    app.include_router(create_crawls_router(
        orchestrator_factory=container.crawl_orchestrator,
        seed_config_store=container.seed_config_store(),
        crawl_registry=container.crawl_registry(),
        scraper=container.smart_scraper(),
        rate_limiter=container.rate_limiter(),
    ))
    return app
