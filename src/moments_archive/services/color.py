"""Dominant-color extraction used as a display hint for moments."""

from __future__ import annotations

import io
import logging
from collections import Counter
from functools import lru_cache
from typing import Final, Protocol

import httpx
from PIL import Image, UnidentifiedImageError

from moments_archive.core.settings import settings

# Configure logger for this module
logger = logging.getLogger(__name__)

THUMBNAIL_SIZE: Final[tuple[int, int]] = (100, 100)
# Each channel is bucketed into 16 levels before counting.
_BUCKET: Final[int] = 16


class ColorExtractor(Protocol):
    """Anything that can turn a media URL into a ``#rrggbb`` string without raising."""

    async def extract(self, media_url: str) -> str: ...


def dominant_color_of(data: bytes) -> str:
    """Return the most frequent coarse color of an encoded image as ``#rrggbb``.

    Raises:
        UnidentifiedImageError: If Pillow cannot decode `data`.
    """
    with Image.open(io.BytesIO(data)) as image:
        image.thumbnail(THUMBNAIL_SIZE)
        rgb = image.convert("RGB")
        colors = rgb.getcolors(maxcolors=rgb.width * rgb.height) or []

    buckets: Counter[tuple[int, int, int]] = Counter()
    for count, (r, g, b) in colors:
        buckets[(r // _BUCKET, g // _BUCKET, b // _BUCKET)] += count
    if not buckets:
        raise ValueError("Image has no pixels")
    (r, g, b), _ = buckets.most_common(1)[0]
    half = _BUCKET // 2
    return "#" + "".join(f"{channel * _BUCKET + half:02x}" for channel in (r, g, b))


def contrast_color(hex_color: str | None) -> str:
    """Return a readable text color (dark or white) for a background color."""
    if not hex_color or len(hex_color) < 7:
        return "#ffffff"
    try:
        r = int(hex_color[1:3], 16)
        g = int(hex_color[3:5], 16)
        b = int(hex_color[5:7], 16)
    except ValueError:
        return "#ffffff"
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#1a1a1a" if luminance > 0.5 else "#ffffff"


class MediaTooLargeError(ValueError):
    """The downloaded media exceeded the byte ceiling."""


class DominantColorExtractor:
    """Download media over HTTP and derive its dominant color.

    Every failure, including timeouts, oversized bodies and media Pillow
    cannot decode such as video, degrades to the fallback color.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = settings.http_timeout_seconds,
        fallback: str = settings.fallback_color,
        max_bytes: int = settings.max_upload_bytes,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.fallback = fallback
        self.max_bytes = max_bytes
        self._transport = transport

    async def _download(self, media_url: str) -> bytes:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_seconds),
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            async with client.stream("GET", media_url) as response:
                response.raise_for_status()
                buffer = bytearray()
                async for chunk in response.aiter_bytes():
                    buffer.extend(chunk)
                    if len(buffer) > self.max_bytes:
                        raise MediaTooLargeError(
                            f"Media exceeds {self.max_bytes} bytes"
                        )
        return bytes(buffer)

    async def extract(self, media_url: str) -> str:
        """Return the dominant color of `media_url`, or the fallback."""
        try:
            return dominant_color_of(await self._download(media_url))
        except Image.DecompressionBombError as exc:
            logger.warning("Refusing oversized image %s: %s", media_url, exc)
        except (httpx.HTTPError, UnidentifiedImageError, OSError, ValueError) as exc:
            logger.warning("Color extraction failed for %s: %s", media_url, exc)
        except Exception:
            logger.exception("Unexpected color extraction failure for %s", media_url)
        return self.fallback


@lru_cache(maxsize=1)
def get_color_extractor() -> DominantColorExtractor:
    """Return the shared color extractor."""
    return DominantColorExtractor()
