"""Tests for upload validation and the local media store."""

from __future__ import annotations

from pathlib import Path

import pytest

from moments_archive.core.errors import ValidationFailed
from moments_archive.services.media import (
    PUBLIC_UPLOAD_PREFIX,
    LocalMediaStore,
    sanitize_filename,
    validate_upload,
)

MB = 1024 * 1024


@pytest.mark.parametrize("content_type", ["image/png", "image/jpeg", "video/mp4", "video/webm"])
def test_validate_upload_accepts_supported_types(content_type: str) -> None:
    validate_upload(content_type, 1024, max_bytes=10 * MB)


@pytest.mark.parametrize("content_type", [None, "", "image/svg+xml", "application/pdf"])
def test_validate_upload_rejects_other_types(content_type: str | None) -> None:
    with pytest.raises(ValidationFailed, match="Invalid file type"):
        validate_upload(content_type, 1024, max_bytes=10 * MB)


def test_validate_upload_rejects_oversized_files() -> None:
    with pytest.raises(ValidationFailed, match="Maximum size: 10MB"):
        validate_upload("image/png", 10 * MB + 1, max_bytes=10 * MB)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Photo.PNG", "moment-1700000000000.png"),
        ("../../etc/passwd", "moment-1700000000000.jpg"),
        ("clip.webm", "moment-1700000000000.webm"),
        (None, "moment-1700000000000.jpg"),
        ("payload.php", "moment-1700000000000.jpg"),
    ],
)
def test_sanitize_filename(name: str | None, expected: str) -> None:
    assert sanitize_filename(name, "moment", now_ms=1_700_000_000_000) == expected


def test_local_store_upload_and_delete(tmp_path: Path) -> None:
    store = LocalMediaStore(tmp_path, "https://media.example.com/files/")
    filename = sanitize_filename("a.png", PUBLIC_UPLOAD_PREFIX, now_ms=1)

    url = store.upload(b"data", "image/png", filename)

    assert url == "https://media.example.com/files/submissions/submission-1.png"
    stored = tmp_path / "submissions" / "submission-1.png"
    assert stored.read_bytes() == b"data"

    store.delete(url)
    assert not stored.exists()


def test_local_store_ignores_foreign_and_escaping_urls(tmp_path: Path) -> None:
    outside = tmp_path.parent / f"{tmp_path.name}-secret.txt"
    outside.write_text("keep")
    store = LocalMediaStore(tmp_path / "media", "https://media.example.com")

    store.delete("https://elsewhere.example.com/a.png")
    store.delete(f"https://media.example.com/../../{outside.name}")
    store.delete("https://media.example.com/missing.png")

    assert outside.read_text() == "keep"
