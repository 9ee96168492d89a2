"""Constants and option models for the request dispatcher.

The option names follow the original wrapper API (camelCase aliases); the
query parameter names follow the Guild Wars 2 API v2 wire format.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from gw2api.exceptions import InvalidArgumentError

# =============================================================================
# Constants
# =============================================================================

MAX_PAGE_SIZE = 200
DEFAULT_PAGE_SIZE = 50  # declared by the API, never applied by the client
BASE_URL = "https://api.guildwars2.com"
API_VERSION = "v2"

# Endpoint markers that unlock endpoint-specific query parameters
EXCHANGE_MARKER = "commerce/exchange"
RECIPE_SEARCH_MARKER = "recipes/search"

# =============================================================================
# Call Options
# =============================================================================


class CallOptions(BaseModel):
    """Options recognized by Dispatcher.call().

    All fields are optional:
        ids: A single id or an ordered list of ids
        page_index: Requested page (alias pageIndex), 0 is a valid page
        page_size: Requested page size (alias pageSize), ignored above 200
        key: API key sent as access_token
        language: Locale sent as lang
        quantity: Only sent to commerce/exchange endpoints
        input: Only sent to recipes/search endpoints
        output: Only sent to recipes/search endpoints
    """

    ids: str | int | list[str | int] | None = None
    page_index: int | None = Field(default=None, alias="pageIndex")
    page_size: int | None = Field(default=None, alias="pageSize")
    key: str | None = None
    language: str | None = None
    quantity: int | None = None
    input: int | None = None
    output: int | None = None

    model_config = {"populate_by_name": True, "extra": "ignore", "frozen": True}

    @field_validator("page_index", "page_size", mode="wrap")
    @classmethod
    def drop_invalid_paging(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> int | None:
        # Paging values that are not integers are ignored, not rejected
        if isinstance(v, bool):
            return None
        try:
            return handler(v)
        except ValidationError:
            return None

    @property
    def has_ids(self) -> bool:
        """Check if ids were given (empty strings and lists count as absent)."""
        return self.ids is not None and self.ids != "" and self.ids != []

    def without_ids(self) -> "CallOptions":
        """Return a copy of these options with ids removed."""
        return self.model_copy(update={"ids": None})


def as_call_options(options: "CallOptions | Mapping[str, Any] | None") -> CallOptions:
    """Normalize caller options into a CallOptions instance.

    Args:
        options: A CallOptions, a mapping of option names, or None.

    Returns:
        A CallOptions instance. The caller's object is never mutated.

    Raises:
        InvalidArgumentError: If the options cannot be coerced.
    """
    if options is None:
        return CallOptions()
    if isinstance(options, CallOptions):
        return options
    if not isinstance(options, Mapping):
        raise InvalidArgumentError(
            f"options must be a mapping or CallOptions, got {type(options).__name__}"
        )
    try:
        return CallOptions.model_validate(dict(options))
    except ValidationError as e:
        raise InvalidArgumentError(f"Invalid options: {e}") from e
