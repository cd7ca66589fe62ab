"""API tests for submission intake and review."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from moments_archive.core.settings import settings
from moments_archive.models import Submission, SubmissionStatus
from tests.conftest import approval_fields, submission_payload


def test_public_submission_is_queued(client: TestClient, admin_headers: dict[str, str]) -> None:
    response = client.post(
        "/api/v1/submissions",
        json=submission_payload(),
        headers={"X-Forwarded-For": "198.51.100.7, 10.0.0.1"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True

    listing = client.get("/api/v1/submissions?status=PENDING", headers=admin_headers).json()
    assert listing["pending_count"] == 1
    assert [item["id"] for item in listing["submissions"]] == [body["id"]]
    assert listing["submissions"][0]["submitter_ip"] == "198.51.100.7"


def test_invalid_submission_is_400(client: TestClient) -> None:
    response = client.post(
        "/api/v1/submissions", json=submission_payload(sourceUrl="javascript:alert(1)")
    )

    assert response.status_code == 400
    assert "Invalid source URL format" in response.json()["error"]


def test_honeypot_looks_successful(client: TestClient, admin_headers: dict[str, str]) -> None:
    response = client.post("/api/v1/submissions", json=submission_payload(honeypot="gotcha"))

    assert response.status_code == 201
    assert response.json()["success"] is True
    listing = client.get("/api/v1/submissions", headers=admin_headers).json()
    assert listing["submissions"] == []


def test_fourth_submission_in_an_hour_is_429(client: TestClient) -> None:
    for _ in range(3):
        assert client.post("/api/v1/submissions", json=submission_payload()).status_code == 201

    response = client.post("/api/v1/submissions", json=submission_payload())

    assert response.status_code == 429
    body = response.json()
    assert "Hourly limit" in body["error"]
    assert body["remaining"] == {"hour": 0, "day": 7}
    assert 0 < body["reset_in"]["hour"] <= 3600
    assert response.headers["X-RateLimit-Remaining-Hour"] == "0"
    assert response.headers["X-RateLimit-Remaining-Day"] == "7"
    assert int(response.headers["Retry-After"]) == body["reset_in"]["hour"]


def test_rate_limit_status_is_read_only(client: TestClient) -> None:
    client.post("/api/v1/submissions", json=submission_payload())

    first = client.get("/api/v1/submissions/rate-limit").json()
    second = client.get("/api/v1/submissions/rate-limit").json()

    assert first == second
    assert first["allowed"] is True
    assert first["remaining"] == {"hour": 2, "day": 9}


def test_admin_endpoints_require_password(
    client: TestClient, admin_headers: dict[str, str]
) -> None:
    assert client.get("/api/v1/submissions").status_code == 401
    wrong = client.get("/api/v1/submissions", headers={"x-admin-password": "nope"})
    assert wrong.status_code == 401
    assert wrong.json() == {"error": "Unauthorized"}
    assert client.get("/api/v1/submissions", headers=admin_headers).status_code == 200


def test_admin_endpoints_fail_closed_without_secret(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(settings, "admin_password", None)

    response = client.get("/api/v1/submissions", headers={"x-admin-password": ""})

    assert response.status_code == 500
    assert response.json() == {"error": "Admin password not configured"}


def test_approve_then_conflict(
    client: TestClient,
    admin_headers: dict[str, str],
    make_submission: Callable[..., Submission],
) -> None:
    submission = make_submission()
    url = f"/api/v1/submissions/{submission.id}/approve"

    response = client.post(url, json=approval_fields(), headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["moment_slug"] == "my-title"
    assert body["submission"]["status"] == SubmissionStatus.APPROVED.value
    assert body["submission"]["moment_id"] == body["moment_id"]

    again = client.post(url, json=approval_fields(), headers=admin_headers)
    assert again.status_code == 409
    assert again.json() == {"error": "Submission already approved"}

    moment = client.get("/api/v1/moments/my-title").json()["moment"]
    assert moment["tags"] == ["poster", "print"]


def test_approve_with_bad_category_is_rejected(
    client: TestClient,
    admin_headers: dict[str, str],
    make_submission: Callable[..., Submission],
) -> None:
    submission = make_submission()

    response = client.post(
        f"/api/v1/submissions/{submission.id}/approve",
        json=approval_fields(category="Music"),
        headers=admin_headers,
    )

    assert response.status_code == 422


def test_reject_then_not_found(
    client: TestClient,
    admin_headers: dict[str, str],
    make_submission: Callable[..., Submission],
) -> None:
    submission = make_submission()

    response = client.post(
        f"/api/v1/submissions/{submission.id}/reject",
        json={"review_note": "Off topic"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "deleted": submission.id}
    missing = client.get(f"/api/v1/submissions/{submission.id}", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json() == {"error": "Submission not found"}


def test_reject_without_body(
    client: TestClient,
    admin_headers: dict[str, str],
    make_submission: Callable[..., Submission],
) -> None:
    submission = make_submission()

    response = client.post(f"/api/v1/submissions/{submission.id}/reject", headers=admin_headers)

    assert response.status_code == 200


def test_get_submission(
    client: TestClient,
    admin_headers: dict[str, str],
    make_submission: Callable[..., Submission],
) -> None:
    submission = make_submission(submitter_note="Saw this in Zurich")

    response = client.get(f"/api/v1/submissions/{submission.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["submitter_note"] == "Saw this in Zurich"
