"""Tests for GW2Client."""

import asyncio
from unittest.mock import MagicMock

import httpx
import pytest
import respx

from gw2api import GW2Client
from gw2api._internal.dispatch.client import Dispatcher
from gw2api._internal.dispatch.models import CallOptions
from gw2api.exceptions import InvalidArgumentError, TransportError

API = "https://api.guildwars2.com/v2"


@pytest.fixture
def dispatcher():
    """A dispatcher double recording every call()."""
    return MagicMock(spec=Dispatcher)


@pytest.fixture
def client(dispatcher):
    return GW2Client(dispatcher)


class TestCollectionEndpoints:
    """Tests for wrappers with a fixed path."""

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("get_build", "build"),
            ("get_token_info", "tokeninfo"),
            ("get_account_bank", "account/bank"),
            ("get_events_state", "events-state"),
            ("get_traits_beta", "traits-beta"),
            ("get_pvp_games", "pvp/games"),
            ("get_commerce_listings", "commerce/listings"),
            ("get_commerce_prices", "commerce/prices"),
            ("get_wvw_matches", "wvw/matches"),
            ("get_wvw_objectives", "wvw/objectives"),
        ],
    )
    def test_path(self, client, dispatcher, method, path):
        """Should delegate the fixed path and options unchanged."""
        options = {"language": "en"}
        getattr(client, method)(options)
        dispatcher.call.assert_called_once_with(path, options, None)

    def test_prices_not_sent_to_listings(self, client, dispatcher):
        """Should request prices from their own endpoint."""
        client.get_commerce_prices({"ids": [19684]})
        path = dispatcher.call.call_args.args[0]
        assert path == "commerce/prices"
        assert path != "commerce/listings"

    def test_forwards_continuation(self, client, dispatcher):
        def continuation(error, result):
            pass

        client.get_items({"ids": [1, 2]}, continuation)
        dispatcher.call.assert_called_once_with("items", {"ids": [1, 2]}, continuation)

    def test_returns_dispatcher_result(self, client, dispatcher):
        dispatcher.call.return_value = {"id": 115267}
        assert client.get_build() == {"id": 115267}

    def test_has_docstring(self):
        assert "/v2/account/wallet" in GW2Client.get_account_wallet.__doc__


class TestSingleResourceEndpoints:
    """Tests for wrappers addressing one resource by id."""

    def test_uses_first_id_and_strips_ids(self, client, dispatcher):
        """Should use only the first id in the path and forward options without ids."""
        options = {"ids": ["charA", "charB"], "key": "abc"}

        client.get_character_inventory(options)

        path, forwarded, continuation = dispatcher.call.call_args.args
        assert path == "characters/charA/inventory"
        assert isinstance(forwarded, CallOptions)
        assert forwarded.ids is None
        assert forwarded.key == "abc"
        assert continuation is None

    def test_does_not_mutate_caller_options(self, client, dispatcher):
        options = {"ids": ["charA", "charB"]}
        client.get_character_equipment(options)
        assert options == {"ids": ["charA", "charB"]}

    def test_scalar_id(self, client, dispatcher):
        client.get_guild({"ids": "116E0C0E-0035-44A9-BB22-4AE3E23127E5"})
        assert dispatcher.call.call_args.args[0] == "guild/116E0C0E-0035-44A9-BB22-4AE3E23127E5"

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("get_character_recipes", "characters/x/recipes"),
            ("get_character_specializations", "characters/x/specializations"),
            ("get_guild_inventory", "guild/x/inventory"),
            ("get_guild_log", "guild/x/log"),
            ("get_guild_members", "guild/x/members"),
            ("get_guild_ranks", "guild/x/ranks"),
            ("get_guild_permissions", "guild/x/permissions"),
            ("get_guild_upgrades", "guild/x/upgrades"),
        ],
    )
    def test_path(self, client, dispatcher, method, path):
        getattr(client, method)({"ids": ["x"]})
        assert dispatcher.call.call_args.args[0] == path

    def test_missing_ids_raises(self, client, dispatcher):
        """Should raise InvalidArgumentError without ids."""
        with pytest.raises(InvalidArgumentError):
            client.get_guild_members({"key": "abc"})
        with pytest.raises(InvalidArgumentError):
            client.get_guild_members()
        dispatcher.call.assert_not_called()


class TestCommerceExchange:
    """Tests for get_commerce_exchange()."""

    def test_builds_path_and_quantity(self, client, dispatcher):
        client.get_commerce_exchange("coins", 100)

        path, forwarded, _ = dispatcher.call.call_args.args
        assert path == "commerce/exchange/coins"
        assert forwarded.quantity == 100

    def test_invalid_type_raises(self, client, dispatcher):
        with pytest.raises(InvalidArgumentError):
            client.get_commerce_exchange("karma", 100)
        dispatcher.call.assert_not_called()

    def test_missing_quantity_raises(self, client, dispatcher):
        with pytest.raises(InvalidArgumentError):
            client.get_commerce_exchange("gems", 0)
        dispatcher.call.assert_not_called()

    @respx.mock
    def test_sends_quantity_over_the_wire(self):
        """Should request commerce/exchange/coins?quantity=100."""
        route = respx.get(f"{API}/commerce/exchange/coins").mock(
            return_value=httpx.Response(200, json={"coins_per_gem": 2000, "quantity": 5})
        )

        result = GW2Client().get_commerce_exchange("coins", 100)

        assert result == {"coins_per_gem": 2000, "quantity": 5}
        assert route.calls.last.request.url.params["quantity"] == "100"


class TestCommerceTransactions:
    """Tests for get_commerce_transactions()."""

    def test_builds_path(self, client, dispatcher):
        client.get_commerce_transactions("history", "buys", {"key": "abc"})
        dispatcher.call.assert_called_once_with(
            "commerce/transactions/history/buys", {"key": "abc"}, None
        )

    def test_invalid_scope_raises(self, client, dispatcher):
        with pytest.raises(InvalidArgumentError):
            client.get_commerce_transactions("future", "buys")
        dispatcher.call.assert_not_called()

    def test_invalid_type_raises(self, client, dispatcher):
        with pytest.raises(InvalidArgumentError):
            client.get_commerce_transactions("current", "trades")
        dispatcher.call.assert_not_called()


class TestSearchRecipes:
    """Tests for search_recipes()."""

    def test_input(self, client, dispatcher):
        client.search_recipes(input=46731)
        path, forwarded, _ = dispatcher.call.call_args.args
        assert path == "recipes/search"
        assert forwarded.input == 46731
        assert forwarded.output is None

    def test_output_from_options(self, client, dispatcher):
        client.search_recipes(options={"output": 50065})
        _, forwarded, _ = dispatcher.call.call_args.args
        assert forwarded.output == 50065
        assert forwarded.input is None

    def test_both_raises(self, client, dispatcher):
        with pytest.raises(InvalidArgumentError):
            client.search_recipes(input=1, output=2)
        with pytest.raises(InvalidArgumentError):
            client.search_recipes(input=1, options={"output": 2})
        dispatcher.call.assert_not_called()

    def test_neither_raises(self, client, dispatcher):
        with pytest.raises(InvalidArgumentError):
            client.search_recipes()
        dispatcher.call.assert_not_called()


class TestGW2ClientEndToEnd:
    """Tests for GW2Client against a mocked API."""

    def test_default_dispatcher(self):
        client = GW2Client()
        assert isinstance(client.dispatcher, Dispatcher)
        assert client.dispatcher.execution_context == "blocking"

    @respx.mock
    def test_get_build(self):
        respx.get(f"{API}/build").mock(return_value=httpx.Response(200, json={"id": 115267}))
        assert GW2Client().get_build() == {"id": 115267}

    @respx.mock
    def test_single_resource_request(self):
        route = respx.get(f"{API}/characters/charA/inventory").mock(
            return_value=httpx.Response(200, json={"bags": []})
        )

        GW2Client().get_character_inventory({"ids": ["charA", "charB"], "key": "abc"})

        params = route.calls.last.request.url.params
        assert "ids" not in params
        assert params["access_token"] == "abc"

    @respx.mock
    def test_set_error_handler(self):
        respx.get(f"{API}/account").mock(return_value=httpx.Response(401))
        handled = []
        client = GW2Client()
        client.set_error_handler(handled.append)

        assert client.get_account({"key": "bad"}) is None
        assert len(handled) == 1
        assert isinstance(handled[0], TransportError)
        assert handled[0].status_code == 401

    @respx.mock
    def test_non_blocking(self):
        respx.get(f"{API}/worlds").mock(return_value=httpx.Response(200, json=[1001, 1002]))
        client = GW2Client(Dispatcher(execution_context="non_blocking"))
        calls = []

        async def main():
            await client.get_worlds(None, lambda error, body: calls.append((error, body)))

        asyncio.run(main())
        assert calls == [(None, [1001, 1002])]
