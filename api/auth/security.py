"""
Shared-secret helpers.
"""

from __future__ import annotations

import secrets

API_KEY_HEADER = "x-api-key"


def api_key_matches(provided: str | None, expected: str | None) -> bool:
    """
    Exact match against the configured secret.

    With no secret configured nothing matches, so the gate stays closed.
    """
    if not provided or not expected:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
