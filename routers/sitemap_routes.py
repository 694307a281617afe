# routers/sitemap_routes.py
# ---------------------------------------------------------------
# Route-based alternative to SitemapMiddleware.
# Serves the same cached documents; unknown chunks are a 404.
# ---------------------------------------------------------------

from fastapi import APIRouter, HTTPException, Response
import logging

from helpers.sitemap_cache import SitemapCache


logger = logging.getLogger(__name__)

XML_MEDIA_TYPE = "application/xml"


def create_sitemap_router(cache: SitemapCache) -> APIRouter:
    router = APIRouter(include_in_schema=False)

    @router.get("/sitemap.xml", response_class=Response)
    async def sitemap_root():
        sitemaps = await cache.get()
        return Response(content=sitemaps["/sitemap.xml"], media_type=XML_MEDIA_TYPE)

    # index stays a string so only the exact chunk path matches (no /sitemap-007.xml)
    @router.get("/sitemap-{index}.xml", response_class=Response)
    async def sitemap_chunk(index: str):
        sitemaps = await cache.get()
        xml = sitemaps.get(f"/sitemap-{index}.xml")
        if xml is None:
            raise HTTPException(status_code=404, detail="Sitemap not found")
        return Response(content=xml, media_type=XML_MEDIA_TYPE)

    return router
