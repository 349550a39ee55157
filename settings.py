from __future__ import annotations

import os
from pathlib import Path

_BASE = Path(__file__).resolve().parent

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(_BASE / "uploads")))
BACKUP_DIR = Path(os.getenv("BACKUP_DIR", str(_BASE / "backups")))
CATALOG_DIR = Path(os.getenv("CATALOG_DIR", str(_BASE / "data" / "catalog")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Next.js dashboard dev server by default; comma separated
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]

BACKUP_VERSION = "1.0"
FEATURED_DEFAULT_LIMIT = 30
SUBJECT_PREVIEW_LIMIT = 5
RECENT_QUESTION_DAYS = 7
