import xml.etree.ElementTree as ET

import pytest

SM = "{http://www.sitemaps.org/schemas/sitemap/0.9}"
XHTML = "{http://www.w3.org/1999/xhtml}"
BASE = "https://example.com"


def parse_urls(xml: str):
    """Returns [(loc, lastmod, changefreq, [(hreflang, href), ...]), ...]."""
    root = ET.fromstring(xml.encode("utf-8"))
    out = []
    for url in root.findall(f"{SM}url"):
        changefreq = url.find(f"{SM}changefreq")
        links = [(l.get("hreflang"), l.get("href")) for l in url.findall(f"{XHTML}link")]
        out.append((
            url.find(f"{SM}loc").text,
            url.find(f"{SM}lastmod").text,
            changefreq.text if changefreq is not None else None,
            links,
        ))
    return out


def parse_index(xml: str):
    root = ET.fromstring(xml.encode("utf-8"))
    assert root.tag == f"{SM}sitemapindex"
    return [
        (s.find(f"{SM}loc").text, s.find(f"{SM}lastmod").text)
        for s in root.findall(f"{SM}sitemap")
    ]


@pytest.fixture
def base():
    return BASE
