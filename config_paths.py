# config_paths.py
# -----------------------------------------------------
# Shared filesystem paths used across the application.
# Safe to import from helpers (no circular imports).
# -----------------------------------------------------

from pathlib import Path

# Base and directories
BASE_DIR: Path = Path(__file__).resolve().parent
DATA_DIR: Path = BASE_DIR / "data"
LOGS_DIR: Path = BASE_DIR / "logs"

# Data files
DEFAULT_URLS_FILE = DATA_DIR / "sitemap_urls.json"
