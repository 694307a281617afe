# sitemap_settings.py
# -----------------------------------------------------
# Sitemap limits, XML namespaces and env-driven settings.
# Safe to import from helpers (no circular imports).
# -----------------------------------------------------

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from config_paths import DEFAULT_URLS_FILE, LOGS_DIR

MAX_SITEMAP_LENGTH = 50 * 1000          # max URLs in one sitemap (sitemaps.org)
SITEMAP_MAX_AGE = 24 * 60 * 60          # seconds a built sitemap set is served
PREWARM_RATIO = 0.9                     # prewarm job runs before the cached set expires
SITEMAP_URL_RE = re.compile(r"^/sitemap(-\d+)?\.xml$")

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XHTML_NS = "http://www.w3.org/1999/xhtml"

_TRUTHY = {"1", "true", "yes", "on"}


class SitemapSettings(BaseModel):
    base_url: str = "http://localhost:8000"
    urls_file: Path = DEFAULT_URLS_FILE
    max_age: float = SITEMAP_MAX_AGE
    prewarm: bool = False
    log_level: str = "INFO"
    log_dir: Path = LOGS_DIR

    @classmethod
    def from_env(cls, env: Optional[dict] = None) -> "SitemapSettings":
        """Build settings from SITEMAP_* / LOG_* environment variables."""
        env = os.environ if env is None else env
        values = {}
        if env.get("SITEMAP_BASE_URL"):
            values["base_url"] = env["SITEMAP_BASE_URL"]
        if env.get("SITEMAP_URLS_FILE"):
            values["urls_file"] = env["SITEMAP_URLS_FILE"]
        if env.get("SITEMAP_MAX_AGE"):
            values["max_age"] = env["SITEMAP_MAX_AGE"]
        if env.get("SITEMAP_PREWARM"):
            values["prewarm"] = env["SITEMAP_PREWARM"].strip().lower() in _TRUTHY
        if env.get("LOG_LEVEL"):
            values["log_level"] = env["LOG_LEVEL"].upper()
        if env.get("LOG_DIR"):
            values["log_dir"] = env["LOG_DIR"]
        return cls(**values)
