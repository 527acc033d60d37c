"""Project-wide settings and defaults."""

import os
from pathlib import Path

# Base paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.environ.get("BLITZ_DATA_DIR", str(PROJECT_ROOT / "data")))

# Persistent key-value storage (one JSON object file, one key per collection)
STORAGE_PATH = Path(os.environ.get("BLITZ_STORAGE_PATH", str(DATA_DIR / "storage.json")))
STORAGE_KEY = os.environ.get("BLITZ_STORAGE_KEY", "blitzProdutos")

# Expiry thresholds
STALENESS_THRESHOLD_DAYS = int(os.environ.get("STALENESS_THRESHOLD_DAYS", "45"))
CRITICAL_THRESHOLD_DAYS = int(os.environ.get("CRITICAL_THRESHOLD_DAYS", "7"))

# "snapshot" keeps the day count frozen at registration, "live" recomputes it
URGENCY_MODE = os.environ.get("BLITZ_URGENCY_MODE", "snapshot").lower()

# Display
DISPLAY_TIMEZONE = os.environ.get("DISPLAY_TIMEZONE", "")  # empty = system local time
DATE_FORMAT = "%d/%m/%Y"
DATETIME_FORMAT = "%d/%m/%Y, %H:%M:%S"

# Export
CSV_FILENAME_PREFIX = "RELATORIO_BLITZ_"
EXPORT_DIR = Path(os.environ.get("BLITZ_EXPORT_DIR", str(DATA_DIR / "exports")))

# Web
FLASK_SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-blitz-key")
NOTICE_TIMEOUT_MS = int(os.environ.get("NOTICE_TIMEOUT_MS", "3000"))
WEB_HOST = os.environ.get("BLITZ_HOST", "127.0.0.1")
WEB_PORT = int(os.environ.get("BLITZ_PORT", "5000"))

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
