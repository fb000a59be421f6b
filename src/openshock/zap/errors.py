from __future__ import annotations

import requests


class OpenShockError(Exception):
    """Base class for all errors raised by this library."""


class TransportError(OpenShockError):
    """The request could not be sent or no response arrived.

    Raised for DNS, connection and timeout failures. The original
    :mod:`requests` exception is available as ``cause``.
    """

    def __init__(self, cause: requests.RequestException) -> None:
        super().__init__(str(cause))
        self.cause = cause


class DecodeError(OpenShockError):
    """The response body could not be decoded.

    Used as a base class for :exc:`MalformedJSONError` and
    :exc:`UnexpectedShapeError`.
    """

    def __init__(self, message: str, *, body: str, status_code: int) -> None:
        super().__init__(message)
        self.body = body
        self.status_code = status_code


class MalformedJSONError(DecodeError):
    """The response body is not JSON."""


class UnexpectedShapeError(DecodeError):
    """The response body is JSON, but not in the expected format."""


class EmptyPayloadError(OpenShockError):
    """The API answered with an envelope lacking the expected payload.

    This usually means the API refused the request; ``message`` carries
    whatever explanation it gave, if any.
    """

    def __init__(self, message: str | None, *, status_code: int) -> None:
        super().__init__(message or f"empty response payload (HTTP {status_code})")
        self.message = message
        self.status_code = status_code


class MissingAuthTokenError(OpenShockError):
    """No API token was given to the builder."""


class InvalidIdentityHeaderError(OpenShockError):
    """The User-Agent assembled from the app name/version is not a valid header."""

    def __init__(self, user_agent: str, reason: str) -> None:
        super().__init__(f"invalid User-Agent {user_agent!r}: {reason}")
        self.user_agent = user_agent


class InvalidControlParametersError(OpenShockError, ValueError):
    """Intensity or duration out of range, detected before sending anything."""
