import json

import pytest
from fastapi.testclient import TestClient

from main import create_app, file_url_source
from sitemap_settings import SitemapSettings

from conftest import parse_urls


@pytest.fixture
def settings(tmp_path):
    urls_file = tmp_path / "urls.json"
    urls_file.write_text(json.dumps(["/", {"url": "/about", "changeFreq": "yearly"}]), encoding="utf-8")
    return SitemapSettings(base_url="https://example.com", urls_file=urls_file, log_dir=tmp_path / "logs")


def test_app_serves_urls_from_file(settings):
    client = TestClient(create_app(settings=settings))
    response = client.get("/sitemap.xml")

    assert response.status_code == 200
    urls = parse_urls(response.text)
    assert [(u[0], u[2]) for u in urls] == [
        ("https://example.com/", None),
        ("https://example.com/about", "yearly"),
    ]


def test_health_reports_cache_state(settings):
    client = TestClient(create_app(settings=settings))
    assert client.get("/health").json() == {"status": "ok", "sitemaps_cached": False}
    client.get("/sitemap.xml")
    assert client.get("/health").json() == {"status": "ok", "sitemaps_cached": True}


def test_refresh_failure_becomes_500(settings):
    async def get_urls():
        return {"not": "a list"}

    client = TestClient(create_app(get_urls=get_urls, settings=settings), raise_server_exceptions=False)
    response = client.get("/sitemap.xml")
    assert response.status_code == 500
    assert response.text == "Internal Server Error"
    assert client.get("/health").status_code == 200


def test_create_app_rejects_bad_base(settings):
    with pytest.raises(TypeError, match="base"):
        create_app(get_urls=lambda: [], base=123, settings=settings)


def test_prewarm_scheduler_builds_sitemaps(settings):
    settings = settings.model_copy(update={"prewarm": True})
    app = create_app(settings=settings)
    with TestClient(app) as client:
        assert client.get("/sitemap.xml").status_code == 200
        job = app.state.scheduler.get_job("sitemap_prewarm")
        assert job.func == app.state.sitemap_cache.refresh
        assert job.trigger.interval.total_seconds() < settings.max_age
    assert app.state.sitemap_cache.is_fresh


def test_file_url_source_reads_json(tmp_path):
    import asyncio

    path = tmp_path / "urls.json"
    path.write_text('["/x"]', encoding="utf-8")
    assert asyncio.run(file_url_source(path)()) == ["/x"]
