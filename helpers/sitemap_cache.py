# helpers/sitemap_cache.py
# ---------------------------------------------------------------
# Time-boxed, single-flight cache around build_sitemaps().
# One refresh per window; concurrent callers share the in-flight task.
# Failed refreshes are not cached.
# ---------------------------------------------------------------

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Union

from helpers.exceptions import SitemapConfigError
from helpers.sitemap_builder import build_sitemaps
from sitemap_settings import SITEMAP_MAX_AGE, SITEMAP_URL_RE

logger = logging.getLogger(__name__)

UrlSource = Callable[[], Union[Sequence[Any], Awaitable[Sequence[Any]]]]
SitemapSet = Mapping[str, str]


def is_sitemap_path(path: str) -> bool:
    return SITEMAP_URL_RE.match(path) is not None


class SitemapCache:
    def __init__(
        self,
        get_urls: UrlSource,
        base: str,
        max_age: float = SITEMAP_MAX_AGE,
        clock: Callable[[], float] = time.monotonic,
    ):
        if not callable(get_urls):
            raise SitemapConfigError("Argument `get_urls` must be a function")
        if not isinstance(base, str):
            raise SitemapConfigError("Argument `base` must be a string")

        self.get_urls = get_urls
        self.base = base
        self.max_age = max_age
        self._clock = clock

        self._value: Optional[SitemapSet] = None
        self._expires_at = 0.0
        self._pending: Optional[asyncio.Task] = None

    @property
    def is_fresh(self) -> bool:
        return self._value is not None and self._clock() < self._expires_at

    def invalidate(self) -> None:
        """Drop the published set; the next get() rebuilds it."""
        self._value = None
        self._expires_at = 0.0

    async def get(self) -> SitemapSet:
        if self.is_fresh:
            return self._value
        return await self.refresh()

    async def refresh(self) -> SitemapSet:
        """Rebuild now, joining a rebuild that is already running.

        The current set keeps being served by get() until the new one is
        published.
        """
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._refresh(self._clock()))
        # shield: a cancelled request must not cancel the shared refresh
        return await asyncio.shield(self._pending)

    async def _load_urls(self) -> Sequence[Any]:
        urls = self.get_urls()
        if inspect.isawaitable(urls):
            urls = await urls
        if not isinstance(urls, (list, tuple)):
            raise SitemapConfigError("async function `get_urls` must resolve to a list")
        return urls

    async def _refresh(self, started_at: float) -> SitemapSet:
        logger.debug("Refreshing sitemaps for %s", self.base)
        try:
            urls = await self._load_urls()
            sitemaps = MappingProxyType(build_sitemaps(urls, self.base))
        except Exception:
            logger.error("Sitemap refresh failed", exc_info=True)
            raise
        finally:
            self._pending = None

        self._value = sitemaps
        self._expires_at = started_at + self.max_age
        logger.info("Sitemaps refreshed: %d documents from %d urls", len(sitemaps), len(urls))
        return sitemaps
