"""Media storage for uploaded images and videos."""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from pathlib import Path
from typing import Final, Protocol
from urllib.parse import urlsplit

from moments_archive.core.errors import ValidationFailed
from moments_archive.core.settings import settings

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES: Final[tuple[str, ...]] = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
    "video/mp4",
    "video/webm",
)
ALLOWED_EXTENSIONS: Final[tuple[str, ...]] = ("jpg", "jpeg", "png", "webp", "gif", "mp4", "webm")
PUBLIC_UPLOAD_PREFIX: Final[str] = "submissions/submission"
ADMIN_UPLOAD_PREFIX: Final[str] = "moment"


class MediaStore(Protocol):
    """Where uploaded media lives and how it is removed."""

    def upload(self, data: bytes, content_type: str, filename: str) -> str: ...

    def delete(self, url: str) -> None: ...


def validate_upload(content_type: str | None, size: int, *, max_bytes: int) -> None:
    """Reject uploads with an unsupported type or an oversized body.

    Raises:
        ValidationFailed: With a message naming the allowed types or the size cap.
    """
    if not content_type or content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationFailed(
            f"Invalid file type. Allowed: {', '.join(ALLOWED_CONTENT_TYPES)}"
        )
    if size > max_bytes:
        raise ValidationFailed(
            f"File too large. Maximum size: {max_bytes // (1024 * 1024)}MB"
        )


def sanitize_filename(name: str | None, prefix: str, *, now_ms: int | None = None) -> str:
    """Return ``<prefix>-<millis>.<ext>``, keeping only whitelisted extensions."""
    ext = name.rsplit(".", 1)[-1].lower() if name and "." in name else ""
    safe_ext = ext if ext in ALLOWED_EXTENSIONS else "jpg"
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{prefix}-{stamp}.{safe_ext}"


class LocalMediaStore:
    """Store media on local disk and serve it from a public base URL."""

    def __init__(self, root: str | Path, public_base_url: str) -> None:
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _path_for_url(self, url: str) -> Path | None:
        prefix = self.public_base_url + "/"
        if not url.startswith(prefix):
            return None
        relative = urlsplit(url).path[len(urlsplit(prefix).path):]
        candidate = (self.root / relative).resolve()
        # Never follow a URL out of the media root.
        if self.root.resolve() not in candidate.parents:
            return None
        return candidate

    def upload(self, data: bytes, content_type: str, filename: str) -> str:
        """Write `data` under the media root and return its public URL."""
        target = self.root / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info("Stored %s (%s, %d bytes)", filename, content_type, len(data))
        return f"{self.public_base_url}/{filename}"

    def delete(self, url: str) -> None:
        """Remove the file behind `url`; URLs hosted elsewhere are ignored."""
        path = self._path_for_url(url)
        if path is None:
            logger.debug("Not deleting %s: outside the local media store", url)
            return
        path.unlink(missing_ok=True)


@lru_cache(maxsize=1)
def get_media_store() -> LocalMediaStore:
    """Return the configured media store."""
    return LocalMediaStore(settings.media_root, settings.media_base_url)
