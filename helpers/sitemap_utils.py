# helpers/sitemap_utils.py

from __future__ import annotations

import re
from typing import Iterable, List, Optional
from xml.sax.saxutils import escape, quoteattr

from helpers.url_inputs import CanonicalEntry, today_str, to_absolute
from sitemap_settings import SITEMAP_NS, XHTML_NS

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

# characters XML 1.0 cannot carry, even escaped
_XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _text(value: str) -> str:
    return escape(_XML_ILLEGAL.sub("", value))


def _attr(value: str) -> str:
    return quoteattr(_XML_ILLEGAL.sub("", value))


def _close_root(lines: List[str], root: str) -> str:
    # An empty root collapses to a self-closing tag
    if len(lines) == 2:
        lines[1] = lines[1][:-1] + "/>"
    else:
        lines.append(f"</{root}>")
    return "\n".join(lines)


def render_sitemap(entries: Iterable[CanonicalEntry], include_xhtml: Optional[bool] = None) -> str:
    """Render canonical entries as a pretty-printed <urlset> document.

    ``include_xhtml`` controls the xmlns:xhtml declaration; when left as None
    it is declared only if some entry has alternate links.
    """
    entries = list(entries)
    if include_xhtml is None:
        include_xhtml = any(e.alternates for e in entries)

    root_attrs = f"xmlns={quoteattr(SITEMAP_NS)}"
    if include_xhtml:
        root_attrs += f" xmlns:xhtml={quoteattr(XHTML_NS)}"

    lines = [XML_DECLARATION, f"<urlset {root_attrs}>"]
    for e in entries:
        lines.append("  <url>")
        lines.append(f"    <loc>{_text(e.loc)}</loc>")
        lines.append(f"    <lastmod>{_text(e.lastmod)}</lastmod>")
        if e.changefreq is not None:
            lines.append(f"    <changefreq>{_text(e.changefreq)}</changefreq>")
        for link in e.alternates:
            lines.append(
                f'    <xhtml:link rel="alternate" hreflang={_attr(link.hreflang)} '
                f"href={_attr(link.href)}/>"
            )
        lines.append("  </url>")

    return _close_root(lines, "urlset")


def render_index(paths: Iterable[str], base: str) -> str:
    """Render a <sitemapindex> pointing at each chunk path, dated today."""
    lastmod = today_str()
    lines = [XML_DECLARATION, f"<sitemapindex xmlns={quoteattr(SITEMAP_NS)}>"]
    for path in paths:
        lines.append("  <sitemap>")
        lines.append(f"    <loc>{_text(to_absolute(path, base))}</loc>")
        lines.append(f"    <lastmod>{lastmod}</lastmod>")
        lines.append("  </sitemap>")

    return _close_root(lines, "sitemapindex")
