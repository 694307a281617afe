# helpers/sitemap_builder.py
# ---------------------------------------------------------------
# Splits a full URL list into sitemap documents.
#   <= MAX_SITEMAP_LENGTH urls -> /sitemap.xml
#   more                       -> /sitemap-0.xml ... + index at /sitemap.xml
# ---------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence

from helpers.sitemap_utils import render_index, render_sitemap
from helpers.url_inputs import CanonicalEntry, is_alternate_group, normalize_url_input
from sitemap_settings import MAX_SITEMAP_LENGTH

logger = logging.getLogger(__name__)

ROOT_SITEMAP_PATH = "/sitemap.xml"


def sitemap_paths(count: int) -> Iterator[str]:
    for i in range(count):
        yield f"/sitemap-{i}.xml"


def build_sitemap(urls: Sequence[Any], base: str) -> str:
    """Normalize one chunk of descriptors and render it as a <urlset>."""
    entries: List[CanonicalEntry] = []
    for url in urls:
        entries.extend(normalize_url_input(url, base))

    include_xhtml = any(is_alternate_group(url) for url in urls)
    return render_sitemap(entries, include_xhtml=include_xhtml)


def build_sitemaps(urls: Sequence[Any], base: str, max_urls: Optional[int] = None) -> Dict[str, str]:
    """Build every sitemap document for ``urls``, keyed by request path.

    Chunking counts raw descriptors, so an alternate-language group always
    lands in a single chunk. Any invalid descriptor aborts the whole build.
    """
    if max_urls is None:
        max_urls = MAX_SITEMAP_LENGTH
    if max_urls < 1:
        raise ValueError("max_urls must be at least 1")

    sitemaps: Dict[str, str] = {}

    if len(urls) <= max_urls:
        sitemaps[ROOT_SITEMAP_PATH] = build_sitemap(urls, base)
        logger.debug("Built single sitemap with %d urls", len(urls))
        return sitemaps

    chunk_count = -(-len(urls) // max_urls)
    for i, path in enumerate(sitemap_paths(chunk_count)):
        start = i * max_urls
        sitemaps[path] = build_sitemap(urls[start:start + max_urls], base)

    sitemaps[ROOT_SITEMAP_PATH] = render_index(list(sitemaps), base)
    logger.info("🗺️ Built sitemap index with %d chunks for %d urls", chunk_count, len(urls))
    return sitemaps
