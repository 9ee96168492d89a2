"""Request dispatcher for the Guild Wars 2 API.

Every endpoint wrapper builds a path and an options object and hands both
to Dispatcher.call().
"""

from gw2api._internal.dispatch.client import (
    Dispatcher,
    build_query_params,
    get_dispatcher,
)
from gw2api._internal.dispatch.models import (
    API_VERSION,
    BASE_URL,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    CallOptions,
)

__all__ = [
    "Dispatcher",
    "get_dispatcher",
    "build_query_params",
    "CallOptions",
    "MAX_PAGE_SIZE",
    "DEFAULT_PAGE_SIZE",
    "BASE_URL",
    "API_VERSION",
]
