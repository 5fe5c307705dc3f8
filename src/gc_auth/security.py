"""Helpers for keeping OAuth secrets out of logs and timing side channels."""

from __future__ import annotations

import hmac
from typing import Any

# Keys whose values are masked when a payload is logged
SENSITIVE_KEYS = frozenset(
    {
        "access_token",
        "refresh_token",
        "id_token",
        "code",
        "code_verifier",
        "client_secret",
        "authorization",
    }
)


def redact(value: str | None) -> str:
    """Redact a potentially sensitive value for safe logging.

    Args:
        value: The value to redact

    Returns:
        "***" if value is non-empty, "<empty>" if empty/None
    """
    if value is None or value == "":
        return "<empty>"
    return "***"


def constant_time_equals(a: str | None, b: str | None) -> bool:
    """Compare two strings in constant time.

    Args:
        a: First string to compare
        b: Second string to compare

    Returns:
        True if strings are equal, False otherwise
    """
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    return hmac.compare_digest(a.encode(), b.encode())


def mask_sensitive_data(
    data: dict[str, Any], sensitive_keys: frozenset[str] | set[str] | None = None
) -> dict[str, Any]:
    """Mask sensitive values in a dictionary for logging.

    Matching is exact on the lowercased key, so ``token_type`` and
    ``expires_in`` stay readable while ``access_token`` is hidden.

    Args:
        data: Dictionary potentially containing sensitive data
        sensitive_keys: Keys to mask (uses SENSITIVE_KEYS if not provided)

    Returns:
        Copy of dictionary with sensitive values masked
    """
    if sensitive_keys is None:
        sensitive_keys = SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            result[key] = mask_sensitive_data(value, sensitive_keys)
        elif key.lower() in sensitive_keys:
            result[key] = redact(None if value is None else str(value))
        else:
            result[key] = value

    return result
