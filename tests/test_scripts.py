from __future__ import annotations

from collections.abc import Callable

import pytest
from sqlalchemy.orm import Session

from moments_archive.core.settings import settings
from moments_archive.models import Moment
from moments_archive.scripts import clear_moments, migrate


def test_clear_moments_requires_confirmation(capsys: pytest.CaptureFixture[str]) -> None:
    assert clear_moments.main([]) == 1
    assert "--yes" in capsys.readouterr().err


def test_clear_moments_deletes_everything(
    make_moment: Callable[..., Moment],
    db_session: Session,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    make_moment()
    make_moment()
    monkeypatch.setattr(clear_moments, "SessionLocal", lambda: db_session)

    assert clear_moments.main(["--yes"]) == 0

    assert "Deleted 2 moments" in capsys.readouterr().out
    assert db_session.query(Moment).count() == 0


def test_migrate_uses_configured_database_url(monkeypatch: pytest.MonkeyPatch) -> None:
    upgrades: list[tuple[str, str]] = []
    monkeypatch.setattr(settings, "database_url", "postgresql+asyncpg://app@db/archive")
    monkeypatch.setattr(settings, "use_testing_database", False)
    monkeypatch.setattr(
        migrate.command,
        "upgrade",
        lambda cfg, revision: upgrades.append((cfg.get_main_option("sqlalchemy.url"), revision)),
    )

    migrate.run_upgrade_head()

    assert upgrades == [("postgresql+asyncpg://app@db/archive", "head")]
