"""Request dispatcher for the Guild Wars 2 API."""

import asyncio
import os
from collections.abc import Callable, Mapping
from typing import Any, Literal

import httpx

from gw2api._internal.dispatch.models import (
    API_VERSION,
    BASE_URL,
    EXCHANGE_MARKER,
    MAX_PAGE_SIZE,
    RECIPE_SEARCH_MARKER,
    CallOptions,
    as_call_options,
)
from gw2api._internal.dispatch.redaction import redact_params, redact_url
from gw2api._internal.http import create_async_http_client, create_http_client
from gw2api.exceptions import InvalidArgumentError, TransportError, UsageError

ExecutionContext = Literal["blocking", "non_blocking"]
Continuation = Callable[[TransportError | None, Any], None]
ErrorHandler = Callable[[TransportError], None]
Options = CallOptions | Mapping[str, Any] | None

EXECUTION_CONTEXTS: tuple[str, ...] = ("blocking", "non_blocking")
DEFAULT_TIMEOUT_MS = 30000


def build_query_params(endpoint: str, options: Options = None) -> dict[str, Any]:
    """Build the query parameters for one call.

    Args:
        endpoint: The endpoint path, e.g. "commerce/exchange/coins".
        options: Call options (CallOptions, mapping or None).

    Returns:
        Mapping of wire parameter names to values. Empty if no option applies.
    """
    opts = as_call_options(options)
    params: dict[str, Any] = {}

    if opts.has_ids:
        if isinstance(opts.ids, list):
            params["ids"] = ",".join(str(i) for i in opts.ids)
        else:
            params["ids"] = opts.ids

    if opts.page_index is not None and opts.page_index >= 0:
        params["page"] = opts.page_index

    # Oversized pages are dropped, not clamped
    if opts.page_size is not None and opts.page_size <= MAX_PAGE_SIZE:
        params["page_size"] = opts.page_size

    if opts.key:
        params["access_token"] = opts.key

    if opts.language:
        params["lang"] = opts.language

    # Endpoint-specific parameters are gated on a substring of the path
    if opts.quantity is not None and EXCHANGE_MARKER in endpoint:
        params["quantity"] = opts.quantity

    if opts.input is not None and RECIPE_SEARCH_MARKER in endpoint:
        params["input"] = opts.input

    if opts.output is not None and RECIPE_SEARCH_MARKER in endpoint:
        params["output"] = opts.output

    return params


class Dispatcher:
    """Generic request dispatcher for the Guild Wars 2 API.

    Every endpoint call goes through `call()`, which assembles the request,
    performs exactly one GET and routes the outcome either as a return value
    or to a continuation. Transport errors can be intercepted by an error
    handler held by the dispatcher.

    The execution context decides how calls are performed:
        blocking: the current thread waits for the response.
        non_blocking: calls are scheduled on the running asyncio loop and a
            continuation is mandatory.

    Use `Dispatcher.from_env()` to create a dispatcher from environment variables.
    """

    def __init__(
        self,
        *,
        execution_context: ExecutionContext = "blocking",
        error_handler: ErrorHandler | None = None,
        base_url: str = BASE_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        debug: bool = False,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            execution_context: "blocking" or "non_blocking".
            error_handler: Optional callable receiving every transport error.
            base_url: Base URL of the API server.
            timeout_ms: Request timeout in milliseconds.
            debug: Enable debug logging to stderr.
        """
        if execution_context not in EXECUTION_CONTEXTS:
            raise InvalidArgumentError(
                f"execution_context must be one of {EXECUTION_CONTEXTS}, got {execution_context!r}"
            )
        if error_handler is not None and not callable(error_handler):
            raise InvalidArgumentError("The error handler must be callable.")

        self._execution_context = execution_context
        self._error_handler = error_handler
        self._base_url = base_url.rstrip("/")
        self._timeout_ms = timeout_ms
        self._debug = debug
        self._pending: set[asyncio.Task[Any]] = set()

    @classmethod
    def from_env(cls) -> "Dispatcher":
        """Create a dispatcher from environment variables.

        Optional environment variables:
            GW2API_BASE_URL: Base URL of the API server.
            GW2API_EXECUTION_CONTEXT: "blocking" (default) or "non_blocking".
            GW2API_TIMEOUT_MS: Request timeout in milliseconds.
            GW2API_DEBUG: Set to "1" to enable debug logging.

        Returns:
            A configured Dispatcher without an error handler.
        """
        base_url = os.environ.get("GW2API_BASE_URL") or BASE_URL
        execution_context = os.environ.get("GW2API_EXECUTION_CONTEXT", "blocking")
        timeout_ms = int(os.environ.get("GW2API_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS)))
        debug = os.environ.get("GW2API_DEBUG", "") == "1"

        return cls(
            execution_context=execution_context,  # type: ignore[arg-type]
            base_url=base_url,
            timeout_ms=timeout_ms,
            debug=debug,
        )

    @property
    def execution_context(self) -> ExecutionContext:
        """The execution context this dispatcher was created for."""
        return self._execution_context

    @property
    def error_handler(self) -> ErrorHandler | None:
        """The currently registered error handler, if any."""
        return self._error_handler

    def set_error_handler(self, handler: ErrorHandler) -> None:
        """Replace the error handler.

        The handler receives every TransportError instead of the caller or
        continuation. There is no way to unset it; pass a no-op to silence it.

        Raises:
            InvalidArgumentError: If handler is not callable.
        """
        if not callable(handler):
            raise InvalidArgumentError("The error handler must be callable.")
        self._error_handler = handler

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._debug:
            import sys

            print(f"[gw2api] {message}", file=sys.stderr)

    def build_url(self, endpoint: str) -> str:
        """Build the request URL for an endpoint."""
        return f"{self._base_url}/{API_VERSION}/{endpoint}"

    def call(
        self,
        endpoint: str,
        options: Options = None,
        continuation: Continuation | None = None,
    ) -> Any:
        """Send a GET request to an API endpoint.

        Args:
            endpoint: The endpoint path, e.g. "account/bank".
            options: Call options, see CallOptions.
            continuation: Optional callable invoked with (error, result).

        Returns:
            Blocking without continuation: the decoded response body, or None
            if a transport error went to the error handler.
            Blocking with continuation: None.
            Non-blocking: the asyncio.Task performing the call.

        Raises:
            InvalidArgumentError: If endpoint is empty or options are invalid.
            UsageError: If no continuation is given in a non-blocking context.
            TransportError: Blocking without continuation, when no error
                handler is registered.
        """
        if not endpoint:
            raise InvalidArgumentError("No endpoint set.")
        if continuation is not None and not callable(continuation):
            raise InvalidArgumentError("The continuation must be callable.")

        params = build_query_params(endpoint, options)
        url = self.build_url(endpoint)

        if self._execution_context == "non_blocking":
            if continuation is None:
                raise UsageError("A continuation is required in a non-blocking context.")
            return self._schedule(endpoint, url, params, continuation)

        if continuation is None:
            try:
                return self._get(endpoint, url, params)
            except TransportError as e:
                if self._error_handler is None:
                    raise
                self._intercept(e)
                return None

        try:
            result = self._get(endpoint, url, params)
        except TransportError as e:
            self._complete(continuation, e, None)
        else:
            self._complete(continuation, None, result)
        return None

    def _complete(
        self,
        continuation: Continuation,
        error: TransportError | None,
        result: Any,
    ) -> None:
        """Route a finished call to the error handler or the continuation."""
        if error is not None and self._error_handler is not None:
            self._intercept(error)
            return
        continuation(error, result)

    def _intercept(self, error: TransportError) -> None:
        self._log_debug(f"Routing error to error handler: {error}")
        self._error_handler(error)  # type: ignore[misc]

    def _get(self, endpoint: str, url: str, params: dict[str, Any]) -> Any:
        """Perform the GET request in the current thread."""
        self._log_debug(f"GET {url} params={redact_params(params)}")
        try:
            with create_http_client(timeout=self._timeout_ms / 1000) as client:
                response = client.get(url, params=params or None)
        except httpx.TimeoutException as e:
            self._log_debug("Request timed out")
            raise TransportError(f"Request to {endpoint} timed out", endpoint=endpoint) from e
        except httpx.HTTPError as e:
            self._log_debug(f"Request error: {e}")
            raise TransportError(f"Request to {endpoint} failed: {e}", endpoint=endpoint) from e
        return self._handle_response(endpoint, response)

    def _schedule(
        self,
        endpoint: str,
        url: str,
        params: dict[str, Any],
        continuation: Continuation,
    ) -> "asyncio.Task[None]":
        """Schedule the request on the running event loop."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise UsageError("Non-blocking calls require a running event loop.") from e

        task = loop.create_task(self._run_async(endpoint, url, params, continuation))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _run_async(
        self,
        endpoint: str,
        url: str,
        params: dict[str, Any],
        continuation: Continuation,
    ) -> None:
        try:
            result = await self._get_async(endpoint, url, params)
        except TransportError as e:
            self._complete(continuation, e, None)
        else:
            self._complete(continuation, None, result)

    async def _get_async(self, endpoint: str, url: str, params: dict[str, Any]) -> Any:
        """Perform the GET request on the running event loop."""
        self._log_debug(f"GET {url} params={redact_params(params)} (scheduled)")
        try:
            async with create_async_http_client(timeout=self._timeout_ms / 1000) as client:
                response = await client.get(url, params=params or None)
        except httpx.TimeoutException as e:
            self._log_debug("Request timed out")
            raise TransportError(f"Request to {endpoint} timed out", endpoint=endpoint) from e
        except httpx.HTTPError as e:
            self._log_debug(f"Request error: {e}")
            raise TransportError(f"Request to {endpoint} failed: {e}", endpoint=endpoint) from e
        return self._handle_response(endpoint, response)

    def _handle_response(self, endpoint: str, response: httpx.Response) -> Any:
        """Decode a response or raise TransportError."""
        if response.status_code >= 200 and response.status_code < 300:
            try:
                data = response.json()
            except ValueError as e:
                self._log_debug("Response body is not valid JSON")
                raise TransportError(
                    f"Invalid JSON response from {endpoint}",
                    status_code=response.status_code,
                    endpoint=endpoint,
                ) from e
            self._log_debug(f"Request succeeded with status {response.status_code}")
            return data

        self._log_debug(
            f"GET {redact_url(response.request.url)} failed with status {response.status_code}"
        )
        raise TransportError(
            f"Request to {endpoint} failed with status {response.status_code}: "
            f"{_error_text(response)}",
            status_code=response.status_code,
            endpoint=endpoint,
        )


def _error_text(response: httpx.Response) -> str:
    """Extract the error message the API sends with non-2xx responses."""
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict) and "text" in data:
        return str(data["text"])
    return response.reason_phrase


def get_dispatcher() -> Dispatcher:
    """Get a dispatcher configured from environment variables.

    Returns:
        A configured Dispatcher instance.
    """
    return Dispatcher.from_env()
