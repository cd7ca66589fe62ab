"""Shared-secret helpers for curator endpoints."""
from __future__ import annotations

import secrets


def verify_admin_password(supplied: str | None, expected: str) -> bool:
    """Return True when `supplied` matches the server-held secret.

    Args:
        supplied: Value of the x-admin-password header, if any.
        expected: Secret configured on the server.

    Returns:
        True on an exact match; the comparison runs in constant time.
    """
    if supplied is None:
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))
