# sitemap_tool.py
# Writes the whole sitemap set (sitemap.xml plus any sitemap-N.xml chunks)
# to a directory, for hosts that serve sitemaps as static files.
from __future__ import annotations

import argparse
import json
import logging
import pathlib
from typing import Any, List, Optional, Sequence

from helpers.sitemap_builder import build_sitemaps

logger = logging.getLogger(__name__)


def load_urls(urls_file: Optional[str], paths: Sequence[str]) -> List[Any]:
    urls: List[Any] = []
    if urls_file:
        with open(urls_file, "r", encoding="utf-8") as f:
            urls.extend(json.load(f))
    urls.extend(paths)
    return urls


def write_sitemaps(urls: Sequence[Any], base: str, out_dir: pathlib.Path) -> List[pathlib.Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for path, xml in build_sitemaps(urls, base).items():
        target = out_dir / path.lstrip("/")
        target.write_text(xml, encoding="utf-8")
        written.append(target)
    return written


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Generate sitemap.xml (and chunks/index when needed)")
    p.add_argument("--base", required=True, help="e.g. https://example.com")
    p.add_argument("--out", default=".", help="output directory")
    p.add_argument("--urls-file", help="JSON list of url descriptors")
    p.add_argument("paths", nargs="*", help="e.g. / /about /privacy")
    args = p.parse_args(argv)

    urls = load_urls(args.urls_file, args.paths)
    if not urls:
        p.error("no urls given (pass paths or --urls-file)")

    for target in write_sitemaps(urls, args.base, pathlib.Path(args.out)):
        print(f"Wrote {target}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    raise SystemExit(main())
