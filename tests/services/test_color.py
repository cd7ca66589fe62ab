"""Tests for dominant-color extraction."""

from __future__ import annotations

import io

import httpx
import pytest
from PIL import Image

from moments_archive.services.color import (
    DominantColorExtractor,
    contrast_color,
    dominant_color_of,
)

FALLBACK = "#1a1a1a"


def _png(color: tuple[int, int, int], size: tuple[int, int] = (40, 40)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _two_tone_png() -> bytes:
    image = Image.new("RGB", (40, 40), (250, 10, 10))
    for x in range(10):
        for y in range(40):
            image.putpixel((x, y), (10, 10, 250))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def test_dominant_color_of_solid_image() -> None:
    assert dominant_color_of(_png((255, 255, 255))) == "#f8f8f8"
    assert dominant_color_of(_png((0, 0, 0))) == "#080808"


def test_dominant_color_picks_most_common_bucket() -> None:
    assert dominant_color_of(_two_tone_png()) == "#f80808"


@pytest.mark.parametrize(
    ("background", "expected"),
    [("#ffffff", "#1a1a1a"), ("#000000", "#ffffff"), (None, "#ffffff"), ("#zzzzzz", "#ffffff")],
)
def test_contrast_color(background: str | None, expected: str) -> None:
    assert contrast_color(background) == expected


@pytest.mark.asyncio
async def test_extract_downloads_and_measures() -> None:
    payload = _png((0, 0, 0))

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == "https://cdn.example.com/a.png"
        return httpx.Response(200, content=payload)

    extractor = DominantColorExtractor(fallback=FALLBACK, transport=httpx.MockTransport(handler))

    assert await extractor.extract("https://cdn.example.com/a.png") == "#080808"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(404),
        httpx.Response(200, content=b"not an image"),
    ],
)
async def test_extract_degrades_to_fallback(response: httpx.Response) -> None:
    extractor = DominantColorExtractor(
        fallback=FALLBACK, transport=httpx.MockTransport(lambda request: response)
    )

    assert await extractor.extract("https://cdn.example.com/a.mp4") == FALLBACK


@pytest.mark.asyncio
async def test_extract_degrades_on_network_error(caplog: pytest.LogCaptureFixture) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    extractor = DominantColorExtractor(fallback=FALLBACK, transport=httpx.MockTransport(handler))

    assert await extractor.extract("https://cdn.example.com/a.png") == FALLBACK
    assert "Color extraction failed" in caplog.text


@pytest.mark.asyncio
async def test_extract_degrades_on_decompression_bomb(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    payload = _png((0, 0, 0), size=(200, 200))
    extractor = DominantColorExtractor(
        fallback=FALLBACK,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=payload)),
    )

    assert await extractor.extract("https://cdn.example.com/huge.png") == FALLBACK
    assert "Refusing oversized image" in caplog.text


@pytest.mark.asyncio
async def test_extract_degrades_on_unexpected_decoder_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def broken_open(*args: object, **kwargs: object) -> Image.Image:
        raise SyntaxError("broken PNG file")

    monkeypatch.setattr(Image, "open", broken_open)
    extractor = DominantColorExtractor(
        fallback=FALLBACK,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=b"x")),
    )

    assert await extractor.extract("https://cdn.example.com/a.png") == FALLBACK


@pytest.mark.asyncio
async def test_extract_stops_reading_past_byte_ceiling(caplog: pytest.LogCaptureFixture) -> None:
    payload = _png((0, 0, 0))
    extractor = DominantColorExtractor(
        fallback=FALLBACK,
        max_bytes=len(payload) - 1,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=payload)),
    )

    assert await extractor.extract("https://cdn.example.com/a.png") == FALLBACK
    assert "Media exceeds" in caplog.text


@pytest.mark.asyncio
async def test_extract_accepts_body_at_byte_ceiling() -> None:
    payload = _png((0, 0, 0))
    extractor = DominantColorExtractor(
        fallback=FALLBACK,
        max_bytes=len(payload),
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=payload)),
    )

    assert await extractor.extract("https://cdn.example.com/a.png") == "#080808"
