"""Public exceptions for the gw2api client."""


class GW2Error(Exception):
    """Base exception for all gw2api errors."""


class InvalidArgumentError(GW2Error, ValueError):
    """Invalid argument (missing endpoint, bad handler, bad options)."""


class UsageError(GW2Error):
    """The call cannot be dispatched in the current execution context."""


class TransportError(GW2Error):
    """Error from the network layer or the API server."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint
