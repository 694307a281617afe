import asyncio

import pytest

from helpers.exceptions import SitemapConfigError, SitemapValidationError
from helpers.sitemap_cache import SitemapCache, is_sitemap_path

BASE = "https://example.com"


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.mark.parametrize("path, expected", [
    ("/sitemap.xml", True),
    ("/sitemap-0.xml", True),
    ("/sitemap-12.xml", True),
    ("/sitemap-.xml", False),
    ("/sitemap-a.xml", False),
    ("/sitemapxxml", False),
    ("/blog/sitemap.xml", False),
    ("/sitemap.xml.gz", False),
])
def test_is_sitemap_path(path, expected):
    assert is_sitemap_path(path) is expected


def test_constructor_validates_arguments():
    with pytest.raises(TypeError, match="get_urls"):
        SitemapCache(["/a"], BASE)
    with pytest.raises(SitemapConfigError, match="base"):
        SitemapCache(lambda: ["/a"], None)


def test_concurrent_calls_share_one_refresh():
    calls = 0

    async def get_urls():
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.05)
        return ["/a", "/b"]

    async def run():
        cache = SitemapCache(get_urls, BASE)
        return await asyncio.gather(cache.get(), cache.get(), cache.get())

    first, second, third = asyncio.run(run())
    assert calls == 1
    assert first is second is third
    assert list(first) == ["/sitemap.xml"]


def test_result_is_cached_until_expiry():
    clock = FakeClock()
    calls = []

    async def get_urls():
        calls.append(clock.now)
        return [f"/v{len(calls)}"]

    async def run():
        cache = SitemapCache(get_urls, BASE, max_age=60, clock=clock)
        first = await cache.get()
        clock.now += 59
        second = await cache.get()
        clock.now += 1
        third = await cache.get()
        return first, second, third

    first, second, third = asyncio.run(run())
    assert len(calls) == 2
    assert first is second
    assert "/v1" in first["/sitemap.xml"]
    assert "/v2" in third["/sitemap.xml"]


def test_published_set_is_read_only():
    async def run():
        return await SitemapCache(lambda: ["/a"], BASE).get()

    sitemaps = asyncio.run(run())
    with pytest.raises(TypeError):
        sitemaps["/sitemap.xml"] = "<urlset/>"


def test_sync_url_source_is_supported():
    async def run():
        return await SitemapCache(lambda: ("/a",), BASE).get()

    assert "https://example.com/a" in asyncio.run(run())["/sitemap.xml"]


def test_non_list_source_is_a_type_error():
    async def get_urls():
        return "/a"

    async def run():
        await SitemapCache(get_urls, BASE).get()

    with pytest.raises(TypeError, match="must resolve to a list"):
        asyncio.run(run())


def test_failures_are_shared_and_not_cached():
    calls = 0

    async def get_urls():
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        if calls == 1:
            return ["/a", {"lastMod": "2020-01-01"}]
        return ["/a"]

    async def run():
        cache = SitemapCache(get_urls, BASE)
        results = await asyncio.gather(cache.get(), cache.get(), return_exceptions=True)
        retried = await cache.get()
        return results, retried

    results, retried = asyncio.run(run())
    assert calls == 2
    assert all(isinstance(r, SitemapValidationError) for r in results)
    assert list(retried) == ["/sitemap.xml"]


def test_source_exception_propagates():
    async def get_urls():
        raise RuntimeError("database down")

    async def run():
        cache = SitemapCache(get_urls, BASE)
        with pytest.raises(RuntimeError, match="database down"):
            await cache.get()
        return cache

    cache = asyncio.run(run())
    assert not cache.is_fresh


def test_invalidate_forces_rebuild():
    calls = 0

    def get_urls():
        nonlocal calls
        calls += 1
        return ["/a"]

    async def run():
        cache = SitemapCache(get_urls, BASE)
        await cache.get()
        cache.invalidate()
        await cache.get()

    asyncio.run(run())
    assert calls == 2


def test_refresh_rebuilds_while_old_set_is_served():
    clock = FakeClock()
    calls = []

    async def get_urls():
        calls.append(1)
        await asyncio.sleep(0.02)
        return [f"/v{len(calls)}"]

    async def run():
        cache = SitemapCache(get_urls, BASE, max_age=60, clock=clock)
        old = await cache.get()
        clock.now += 55
        rebuild = asyncio.ensure_future(cache.refresh())
        await asyncio.sleep(0)
        during = await cache.get()
        new = await rebuild
        after = await cache.get()
        clock.now += 59
        return old, during, new, after, cache.is_fresh

    old, during, new, after, fresh = asyncio.run(run())
    assert len(calls) == 2
    assert during is old
    assert after is new
    assert "/v2" in new["/sitemap.xml"]
    assert fresh
