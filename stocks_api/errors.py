from __future__ import annotations

from typing import Optional


class APIError(Exception):
    """Base class for every failure a client call can resolve with."""

    kind = "api_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidURLError(APIError):
    """The request URL could not be built or was rejected as malformed."""

    kind = "invalid_url"


class NoDataReturnedError(APIError):
    """The transport succeeded but the response body was empty."""

    kind = "no_data_returned"


class TransportError(APIError):
    """Network-level failure, including non-2xx responses."""

    kind = "transport_error"


class DecodeError(APIError):
    """The response body did not match the expected record."""

    kind = "decode_error"


class ClientClosedError(APIError):
    """The client was closed before the request could be scheduled."""

    kind = "client_closed"
