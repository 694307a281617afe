# logging_setup.py
from __future__ import annotations
import logging
import logging.config
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, List, Optional

APP_LOGGER = "sitemap_server"

# Our own modules; each gets console + file handlers at the configured level
APP_LOGGERS = (APP_LOGGER, "helpers", "routers", "sitemap_tool", "errors")

DEFAULT_IGNORED_ACCESS_PATHS: List[str] = ["/health", "/favicon.ico"]

# Crawlers fetch these all day; a 200 on them is not worth a log line
SITEMAP_HIT_RE = re.compile(r'"GET /sitemap(-\d+)?\.xml[^"]*" 200')


class AccessNoiseFilter(logging.Filter):
    """Drops access lines for ignored paths and, optionally, served sitemaps."""

    def __init__(self, ignored_paths: Optional[Iterable[str]] = None, quiet_sitemap_hits: bool = True):
        super().__init__()
        self.ignored_paths = list(ignored_paths or [])
        self.quiet_sitemap_hits = quiet_sitemap_hits

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        if any(p in msg for p in self.ignored_paths):
            return False
        return not (self.quiet_sitemap_hits and SITEMAP_HIT_RE.search(msg))


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | str = "logs",
    log_file_name: str = "sitemap.log",
    ignored_access_paths: Optional[Iterable[str]] = None,
    quiet_sitemap_hits: bool = True,
    file_max_bytes: int = 5 * 1024 * 1024,  # 5MB
    file_backup_count: int = 3,
) -> None:
    """
    Console (colorlog) + rotating file for the sitemap server.
    Access lines pass through AccessNoiseFilter; sitemap build/refresh
    messages from helpers.* always reach both handlers.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    datefmt = "%Y-%m-%d %H:%M:%S"
    app_handlers = ["console", "file"]

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "access_noise": {
                "()": AccessNoiseFilter,
                "ignored_paths": list(ignored_access_paths or DEFAULT_IGNORED_ACCESS_PATHS),
                "quiet_sitemap_hits": quiet_sitemap_hits,
            },
        },
        "formatters": {
            "plain": {
                "format": "%(levelname)s | %(asctime)s | %(name)s | %(message)s",
                "datefmt": datefmt,
            },
            "color": {
                "()": "colorlog.ColoredFormatter",
                "format": "%(log_color)s%(levelname)-8s%(reset)s | %(asctime)s | %(name)s | %(message)s",
                "datefmt": datefmt,
                "log_colors": {
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "bold_red",
                },
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "color",
            },
            "file": {
                "()": RotatingFileHandler,
                "level": "INFO",
                "filename": str(log_dir / log_file_name),
                "maxBytes": file_max_bytes,
                "backupCount": file_backup_count,
                "encoding": "utf-8",
                "formatter": "plain",
            },
        },
        "loggers": {
            name: {"level": log_level, "handlers": app_handlers, "propagate": False}
            for name in APP_LOGGERS
        },
        "root": {"level": "WARNING", "handlers": app_handlers},
    }
    config["loggers"].update({
        # GET /sitemap-3.xml 200 OK
        "uvicorn.access": {
            "level": log_level,
            "handlers": app_handlers,
            "filters": ["access_noise"],
            "propagate": False,
        },
        "uvicorn.error": {"level": "ERROR", "handlers": app_handlers, "propagate": False},
        "apscheduler": {"level": "WARNING"},
    })

    logging.config.dictConfig(config)
    get_app_logger().info("Logging configured ✅")


def get_app_logger(name: str = APP_LOGGER) -> logging.Logger:
    return logging.getLogger(name)
