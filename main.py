# main.py
from __future__ import annotations

import asyncio
import json
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from helpers.sitemap_cache import SitemapCache, UrlSource
from helpers.sitemap_middleware import SitemapMiddleware
from logging_setup import get_app_logger, setup_logging
from routers.error_handlers import register_error_handlers
from sitemap_settings import PREWARM_RATIO, SitemapSettings

logger = get_app_logger()


def file_url_source(path: Path) -> UrlSource:
    """URL source that reads a JSON list of url descriptors from ``path``."""
    def _read() -> List[Any]:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    async def get_urls() -> List[Any]:
        return await asyncio.to_thread(_read)

    return get_urls


def create_app(
    get_urls: Optional[UrlSource] = None,
    base: Optional[str] = None,
    settings: Optional[SitemapSettings] = None,
) -> FastAPI:
    settings = settings or SitemapSettings.from_env()
    if get_urls is None:
        get_urls = file_url_source(settings.urls_file)
    if base is None:
        base = settings.base_url

    # built here so bad arguments fail before the first request
    cache = SitemapCache(get_urls, base, max_age=settings.max_age)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheduler = None
        if settings.prewarm:
            scheduler = AsyncIOScheduler()
            scheduler.add_job(
                cache.refresh,
                "interval",
                seconds=settings.max_age * PREWARM_RATIO,
                id="sitemap_prewarm",
                replace_existing=True,
                next_run_time=datetime.now(),
            )
            scheduler.start()
            app.state.scheduler = scheduler
            logger.info("✅ Sitemap prewarm scheduler started")
        try:
            yield
        finally:
            if scheduler:
                scheduler.shutdown(wait=False)
                logger.info("✅ Scheduler stopped successfully")

    app = FastAPI(
        title="Sitemap XML server",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.sitemap_cache = cache
    app.add_middleware(SitemapMiddleware, cache=cache)
    register_error_handlers(app)

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok", "sitemaps_cached": cache.is_fresh}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = SitemapSettings.from_env()
    setup_logging(log_level=settings.log_level, log_dir=settings.log_dir)
    logger.info("Server starting…")
    uvicorn.run(create_app(settings=settings), host="0.0.0.0", port=8000, log_config=None)
