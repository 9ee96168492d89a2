"""Shared HTTP client configuration."""

import httpx

from gw2api._version import __version__

DEFAULT_TIMEOUT = 30.0
USER_AGENT = f"gw2api-python/{__version__}"


def create_http_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> httpx.Client:
    """Create configured HTTP client.

    Args:
        timeout: Request timeout in seconds.

    Returns:
        Configured httpx.Client instance.
    """
    return httpx.Client(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
    )


def create_async_http_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> httpx.AsyncClient:
    """Create configured async HTTP client.

    Same configuration as create_http_client(), for use inside an event loop.
    """
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
    )
