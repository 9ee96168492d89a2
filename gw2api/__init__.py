"""Guild Wars 2 API client for Python.

Public API:
    GW2Client - One method per API v2 resource
    Dispatcher - Generic request dispatcher behind GW2Client
    CallOptions - Typed call options (ids, paging, key, language, ...)

Example:
    from gw2api import GW2Client

    client = GW2Client()
    client.get_items({"ids": [12452, 28445]})
"""

from gw2api._internal.dispatch import (
    API_VERSION,
    BASE_URL,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    CallOptions,
    Dispatcher,
    build_query_params,
    get_dispatcher,
)
from gw2api._version import __version__
from gw2api.client import GW2Client
from gw2api.exceptions import (
    GW2Error,
    InvalidArgumentError,
    TransportError,
    UsageError,
)

__all__ = [
    "__version__",
    "GW2Client",
    "Dispatcher",
    "get_dispatcher",
    "build_query_params",
    "CallOptions",
    "MAX_PAGE_SIZE",
    "DEFAULT_PAGE_SIZE",
    "BASE_URL",
    "API_VERSION",
    "GW2Error",
    "InvalidArgumentError",
    "TransportError",
    "UsageError",
]
