from __future__ import annotations

import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from helpers.sitemap_cache import SitemapCache, UrlSource, is_sitemap_path
from sitemap_settings import SITEMAP_MAX_AGE

logger = logging.getLogger(__name__)


class SitemapMiddleware(BaseHTTPMiddleware):
    """Serves /sitemap.xml and /sitemap-<n>.xml from a SitemapCache.

    Anything else, including chunk numbers that don't exist, falls through to
    the next handler. Refresh errors are left to the app's error handlers.
    """

    def __init__(
        self,
        app: ASGIApp,
        get_urls: Optional[UrlSource] = None,
        base: Optional[str] = None,
        max_age: float = SITEMAP_MAX_AGE,
        cache: Optional[SitemapCache] = None,
    ):
        super().__init__(app)
        self.cache = cache if cache is not None else SitemapCache(get_urls, base, max_age=max_age)

    async def dispatch(self, request, call_next):
        path = request.url.path

        # Only handle /sitemap.xml and /sitemap-<n>.xml
        if not is_sitemap_path(path):
            return await call_next(request)

        sitemaps = await self.cache.get()
        xml = sitemaps.get(path)
        if xml is None:
            logger.debug("No sitemap document at %s", path)
            return await call_next(request)

        return Response(content=xml, status_code=200, media_type="application/xml")
