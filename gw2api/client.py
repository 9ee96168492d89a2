"""User-facing client for the Guild Wars 2 API.

Each method maps one API resource onto Dispatcher.call(). Every method takes
an optional options object (see CallOptions) and an optional continuation.

Example usage:
    from gw2api import GW2Client

    client = GW2Client()

    build = client.get_build()
    bank = client.get_account_bank({"key": "your-api-key"})
    items = client.get_items({"ids": [12452, 28445], "language": "de"})
"""

from typing import Any

from gw2api._internal.dispatch.client import (
    Continuation,
    Dispatcher,
    ErrorHandler,
    Options,
)
from gw2api._internal.dispatch.models import CallOptions, as_call_options
from gw2api.exceptions import InvalidArgumentError

EXCHANGE_TYPES: tuple[str, ...] = ("coins", "gems")
TRANSACTION_SCOPES: tuple[str, ...] = ("history", "current")
TRANSACTION_TYPES: tuple[str, ...] = ("sells", "buys")


def _first_id(options: CallOptions) -> str | int:
    """Return the first id of the options (the id itself for a scalar)."""
    if isinstance(options.ids, list):
        return options.ids[0]
    return options.ids  # type: ignore[return-value]


def _collection(path: str, summary: str):
    """Build a wrapper for an endpoint with a fixed path."""

    def method(
        self: "GW2Client",
        options: Options = None,
        continuation: Continuation | None = None,
    ) -> Any:
        return self._dispatcher.call(path, options, continuation)

    method.__doc__ = f"{summary}\n\nEndpoint: /v2/{path}"
    return method


def _single_resource(template: str, summary: str):
    """Build a wrapper for an endpoint addressing one resource by id.

    Only the first of options.ids is used. The forwarded options are a copy
    without ids.
    """

    def method(
        self: "GW2Client",
        options: Options = None,
        continuation: Continuation | None = None,
    ) -> Any:
        opts = as_call_options(options)
        if not opts.has_ids:
            raise InvalidArgumentError("You need to provide options.ids with one id.")
        path = template.format(id=_first_id(opts))
        return self._dispatcher.call(path, opts.without_ids(), continuation)

    method.__doc__ = f"{summary}\n\nEndpoint: /v2/{template}"
    return method


class GW2Client:
    """Client for the Guild Wars 2 API v2.

    All calls go through one Dispatcher; its execution context decides
    whether methods return results directly or deliver them to the
    continuation.
    """

    def __init__(self, dispatcher: Dispatcher | None = None) -> None:
        """Initialize the client.

        Args:
            dispatcher: Dispatcher to send requests with. A blocking
                dispatcher with default settings is used if omitted.
        """
        self._dispatcher = dispatcher if dispatcher is not None else Dispatcher()

    @property
    def dispatcher(self) -> Dispatcher:
        """The dispatcher used by this client."""
        return self._dispatcher

    def set_error_handler(self, handler: ErrorHandler) -> None:
        """Replace the error handler of the underlying dispatcher."""
        self._dispatcher.set_error_handler(handler)

    # =========================================================================
    # Game and Account Endpoints
    # =========================================================================

    get_build = _collection("build", "Return the current build of the game.")
    get_token_info = _collection("tokeninfo", "Return information about the given key.")
    get_account = _collection("account", "Return the account associated with the key.")
    get_account_bank = _collection("account/bank", "Return the bank of the account.")
    get_account_dyes = _collection("account/dyes", "Return the unlocked dyes of the account.")
    get_account_materials = _collection(
        "account/materials", "Return the material storage of the account."
    )
    get_account_skins = _collection("account/skins", "Return the unlocked skins of the account.")
    get_account_wallet = _collection("account/wallet", "Return the wallet of the account.")

    # =========================================================================
    # Characters
    # =========================================================================

    get_characters = _collection("characters", "Return all or specific characters of the account.")
    get_character_inventory = _single_resource(
        "characters/{id}/inventory", "Return the inventory of one character."
    )
    get_character_equipment = _single_resource(
        "characters/{id}/equipment", "Return the equipment of one character."
    )
    get_character_recipes = _single_resource(
        "characters/{id}/recipes", "Return the unlocked recipes of one character."
    )
    get_character_specializations = _single_resource(
        "characters/{id}/specializations", "Return the specializations of one character."
    )

    # =========================================================================
    # Commerce
    # =========================================================================

    get_commerce_listings = _collection(
        "commerce/listings", "Return the current listings on the trading post."
    )
    # Prices live at commerce/prices, not at the commerce/listings path used for listings
    get_commerce_prices = _collection(
        "commerce/prices", "Return aggregated buy and sell prices on the trading post."
    )

    def get_commerce_exchange(
        self,
        type: str,
        quantity: int,
        options: Options = None,
        continuation: Continuation | None = None,
    ) -> Any:
        """Return the current gem/coin exchange rate.

        Args:
            type: Source currency, either "coins" or "gems".
            quantity: Amount of the source currency.
            options: Call options.
            continuation: Optional callable invoked with (error, result).

        Raises:
            InvalidArgumentError: If type or quantity is invalid.
        """
        if type not in EXCHANGE_TYPES:
            raise InvalidArgumentError(
                "Endpoint /commerce/exchange requires either type 'coins' or 'gems'."
            )
        if not quantity:
            raise InvalidArgumentError("Endpoint /commerce/exchange requires a quantity.")

        opts = as_call_options(options).model_copy(update={"quantity": quantity})
        return self._dispatcher.call(f"commerce/exchange/{type}", opts, continuation)

    def get_commerce_transactions(
        self,
        scope: str,
        type: str,
        options: Options = None,
        continuation: Continuation | None = None,
    ) -> Any:
        """Return the trading post transactions of the account.

        Args:
            scope: Either "history" or "current".
            type: Either "sells" or "buys".
            options: Call options, options.key is required by the API.
            continuation: Optional callable invoked with (error, result).

        Raises:
            InvalidArgumentError: If scope or type is invalid.
        """
        if scope not in TRANSACTION_SCOPES:
            raise InvalidArgumentError(
                "Endpoint /commerce/transactions requires either scope 'history' or 'current'."
            )
        if type not in TRANSACTION_TYPES:
            raise InvalidArgumentError(
                "Endpoint /commerce/transactions requires either type 'sells' or 'buys'."
            )
        return self._dispatcher.call(f"commerce/transactions/{scope}/{type}", options, continuation)

    # =========================================================================
    # World and Events
    # =========================================================================

    get_colors = _collection("colors", "Return all dye colors in the game.")
    get_continents = _collection("continents", "Return the continents of Tyria.")
    get_currencies = _collection("currencies", "Return the currencies in the game.")
    get_events = _collection("events", "Return the dynamic events.")
    get_events_state = _collection("events-state", "Return the state of dynamic events.")
    get_files = _collection("files", "Return render service URLs for icons and files.")
    get_maps = _collection("maps", "Return the maps of the game.")
    get_worlds = _collection("worlds", "Return the available server worlds.")
    get_quaggans = _collection("quaggans", "Return quaggan images.")

    # =========================================================================
    # Guilds
    # =========================================================================

    get_guild = _single_resource("guild/{id}", "Return one guild.")
    get_guild_inventory = _single_resource("guild/{id}/inventory", "Return the guild vault.")
    get_guild_log = _single_resource("guild/{id}/log", "Return the guild log.")
    get_guild_members = _single_resource("guild/{id}/members", "Return the guild members.")
    get_guild_ranks = _single_resource("guild/{id}/ranks", "Return the guild ranks.")
    get_guild_permissions = _single_resource(
        "guild/{id}/permissions", "Return the guild permissions."
    )
    get_guild_upgrades = _single_resource("guild/{id}/upgrades", "Return the guild upgrades.")

    # =========================================================================
    # Items, Crafting and Builds
    # =========================================================================

    get_items = _collection("items", "Return items in the game.")
    get_materials = _collection("materials", "Return the material storage categories.")
    get_recipes = _collection("recipes", "Return crafting recipes.")
    get_skins = _collection("skins", "Return item skins.")
    get_skills = _collection("skills", "Return skills.")
    get_specializations = _collection("specializations", "Return profession specializations.")
    get_traits = _collection("traits", "Return traits.")
    get_traits_beta = _collection("traits-beta", "Return traits from the beta endpoint.")

    def search_recipes(
        self,
        input: int | None = None,
        output: int | None = None,
        options: Options = None,
        continuation: Continuation | None = None,
    ) -> Any:
        """Return ids of recipes using an input item or producing an output item.

        Exactly one of input and output must be set, either as argument or
        in options.

        Raises:
            InvalidArgumentError: If both or neither of input and output are set.
        """
        opts = as_call_options(options)
        input = input if input is not None else opts.input
        output = output if output is not None else opts.output

        if input is not None and output is not None:
            raise InvalidArgumentError(
                "You cannot set both input and output. Define one and leave the other unset."
            )
        if input is None and output is None:
            raise InvalidArgumentError("You must provide either input or output.")

        opts = opts.model_copy(update={"input": input, "output": output})
        return self._dispatcher.call("recipes/search", opts, continuation)

    # =========================================================================
    # PvP, WvW and Leaderboards
    # =========================================================================

    get_leaderboards = _collection("leaderboards", "Return the leaderboards.")
    get_pvp_stats = _collection("pvp/stats", "Return the PvP stats of the account.")
    get_pvp_games = _collection("pvp/games", "Return recent PvP games of the account.")
    get_wvw_matches = _collection("wvw/matches", "Return the current WvW matches.")
    get_wvw_objectives = _collection("wvw/objectives", "Return the WvW objectives.")
