# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from moments_archive.core.categories import Category
from moments_archive.core.settings import settings
from moments_archive.db.session import Base, enable_sqlite_foreign_keys
from moments_archive.db.session import get_db as app_get_session
from moments_archive.main import app as fastapi_app
from moments_archive.models import Moment, Submission, SubmissionStatus
from moments_archive.services.color import get_color_extractor
from moments_archive.services.media import get_media_store
from moments_archive.services.moments import MomentService
from moments_archive.services.rate_limiter import RateLimiter, RateLimitPolicy, get_rate_limiter
from moments_archive.services.submissions import SubmissionService

TEST_DB_URL = "sqlite://"
ADMIN_PASSWORD = "correct-horse"
FAKE_COLOR = "#abcdef"
BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

_SLUG_COUNTER = count(1)


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeColorExtractor:
    def __init__(self, color: str = FAKE_COLOR) -> None:
        self.color = color
        self.calls: list[str] = []

    async def extract(self, media_url: str) -> str:
        self.calls.append(media_url)
        return self.color


class FakeMediaStore:
    def __init__(self) -> None:
        self.uploads: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_deletes = False

    def upload(self, data: bytes, content_type: str, filename: str) -> str:
        self.uploads[filename] = data
        return f"https://media.test/{filename}"

    def delete(self, url: str) -> None:
        if self.fail_deletes:
            raise RuntimeError("storage unavailable")
        self.deleted.append(url)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    # Plain commit/rollback semantics so rollbacks in the code under test are real.
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def rate_limiter(clock: FakeClock) -> RateLimiter:
    return RateLimiter(
        policies={
            "submission": RateLimitPolicy(hourly_limit=3, daily_limit=10),
            "upload": RateLimitPolicy(hourly_limit=3, daily_limit=10),
        },
        clock=clock,
    )


@pytest.fixture()
def color_extractor() -> FakeColorExtractor:
    return FakeColorExtractor()


@pytest.fixture()
def media_store() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture()
def submission_service(
    db_session: Session,
    color_extractor: FakeColorExtractor,
    media_store: FakeMediaStore,
) -> SubmissionService:
    return SubmissionService(
        db_session,
        color_extractor=color_extractor,
        media_store=media_store,
        slug_max_attempts=50,
    )


@pytest.fixture()
def moment_service(db_session: Session, color_extractor: FakeColorExtractor) -> MomentService:
    return MomentService(db_session, color_extractor=color_extractor)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    rate_limiter: RateLimiter,
    color_extractor: FakeColorExtractor,
    media_store: FakeMediaStore,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_color_extractor] = lambda: color_extractor
    app.dependency_overrides[get_media_store] = lambda: media_store
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def admin_headers(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Configure the admin secret and return headers that satisfy it."""
    monkeypatch.setattr(settings, "admin_password", ADMIN_PASSWORD)
    return {"x-admin-password": ADMIN_PASSWORD}


def submission_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "mediaUrl": "https://cdn.example.com/poster.png",
        "sourceUrl": "https://example.com/poster",
        "creatorName": "Studio Example",
        "title": "A poster",
    }
    payload.update(overrides)
    return payload


def approval_fields(**overrides: Any) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "title": "My Title",
        "category": "Images",
        "description": "A memorable poster.",
        "tags": ["poster", "print"],
    }
    fields.update(overrides)
    return fields


@pytest.fixture()
def make_moment(db_session: Session) -> Callable[..., Moment]:
    """Persist a moment directly, bypassing the services."""

    def _make(
        *,
        slug: str | None = None,
        title: str | None = None,
        category: Category = Category.IMAGES,
        tags: list[str] | None = None,
        published_at: datetime | None = None,
        **extra: Any,
    ) -> Moment:
        number = next(_SLUG_COUNTER)
        moment = Moment(
            slug=slug or f"moment-{number}",
            title=title or f"Moment {number}",
            category=category,
            description="Description",
            source_url="https://example.com/source",
            media_url=f"https://cdn.example.com/{number}.png",
            tags=tags if tags is not None else [],
            published_at=published_at or BASE_TIME + timedelta(minutes=number),
            **extra,
        )
        db_session.add(moment)
        db_session.commit()
        db_session.refresh(moment)
        return moment

    return _make


@pytest.fixture()
def make_submission(db_session: Session) -> Callable[..., Submission]:
    def _make(**overrides: Any) -> Submission:
        values: dict[str, Any] = {
            "media_url": "https://cdn.example.com/upload.png",
            "source_url": "https://example.com/work",
            "creator_name": "Studio Example",
            "submitter_ip": "203.0.113.5",
            "status": SubmissionStatus.PENDING,
        }
        values.update(overrides)
        submission = Submission(**values)
        db_session.add(submission)
        db_session.commit()
        db_session.refresh(submission)
        return submission

    return _make
