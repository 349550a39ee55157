"""On-disk storage for question attachments."""

from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path
from typing import Iterable

import settings

logger = logging.getLogger(__name__)

FILE_TYPES = {
    "pdf": "pdf",
    "doc": "docx",
    "docx": "docx",
    "ppt": "ppt",
    "pptx": "ppt",
    "jpg": "image",
    "jpeg": "image",
    "png": "image",
    "gif": "image",
    "webp": "image",
    "svg": "image",
}


def file_type_for(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return FILE_TYPES.get(ext, "other")


def _unique_name(original: str) -> str:
    ext = original.rsplit(".", 1)[-1] if "." in original else "bin"
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}.{ext}"


def save_upload(original_name: str, content: bytes) -> Path:
    settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    path = settings.UPLOAD_DIR / _unique_name(original_name)
    path.write_bytes(content)
    return path


def remove_stored(url: str) -> bool:
    """Best-effort blob removal; a failure is logged and never raised."""
    try:
        p = Path(url)
        if p.exists():
            p.unlink()
        return True
    except OSError as e:
        logger.warning("could not delete stored file %s: %s", url, e)
        return False


def remove_many(urls: Iterable[str]) -> None:
    for url in urls:
        remove_stored(url)
