"""Redaction of API keys in dispatcher debug output."""

from typing import Any

import httpx

REDACT_KEYS: frozenset[str] = frozenset({
    "access_token",
    "key",
    "api_key",
    "authorization",
})

REDACTED_VALUE = "[REDACTED]"


def redact_params(params: dict[str, Any]) -> dict[str, Any]:
    """Redact sensitive query parameters.

    Creates a copy - the original mapping is never mutated.

    Args:
        params: Query parameters as built by build_query_params().

    Returns:
        A new dictionary with sensitive values replaced by "[REDACTED]".
    """
    return {
        key: REDACTED_VALUE if key.lower() in REDACT_KEYS else value
        for key, value in params.items()
    }


def redact_url(url: str | httpx.URL) -> str:
    """Redact sensitive query parameters embedded in a URL."""
    parsed = httpx.URL(url)
    if not parsed.query:
        return str(parsed)
    sensitive = [key for key in parsed.params if key.lower() in REDACT_KEYS]
    for key in sensitive:
        parsed = parsed.copy_set_param(key, REDACTED_VALUE)
    return str(parsed)
