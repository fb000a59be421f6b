from __future__ import annotations

import contextlib
import http
import logging
from typing import TYPE_CHECKING, Any, Callable, Iterator, TypeVar

import requests

from openshock.zap import core, errors

if TYPE_CHECKING:
    from openshock.zap.builder import ClientConfig

NAME = "Python-OpenShock"
TOKEN_HEADER = "OpenShockToken"

logger = logging.getLogger(__name__)

T = TypeVar("T")

_AUTH_FAILURE_STATUSES = [http.HTTPStatus.UNAUTHORIZED, http.HTTPStatus.FORBIDDEN]


class OpenShockAPI:
    """Base entry point for the OpenShock API.

    Normally, this is created via :class:`OpenShockAPIBuilder` rather than
    instantiated directly. All methods take an optional ``api_token`` to use
    instead of the default one.

    The instance holds no state besides its (frozen) configuration and the
    ``requests`` session, so it can be shared between threads.
    """

    def __init__(self, config: ClientConfig, session: requests.Session) -> None:
        self.config = config
        self.session = session

    def __repr__(self) -> str:
        return f"OpenShockAPI(base_url={self.config.base_url!r}, api_token=...)"

    def __enter__(self) -> OpenShockAPI:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    @contextlib.contextmanager
    def translate_transport_errors(self) -> Iterator[None]:
        try:
            yield
        except requests.RequestException as e:
            raise errors.TransportError(e) from e

    def request(
        self,
        method: str,
        path: str,
        *,
        api_token: str | None = None,
        json: dict[str, Any] | None = None,
    ) -> requests.Response:
        """Make a raw request to the API.

        The HTTP status is not checked: the API explains failures in the
        response envelope, which the callers decode.

        Normally, you should not need to use this method directly.

        Raises:
            TransportError: If the request could not be completed.
        """
        url = f"{self.config.base_url}{path}"
        headers = {TOKEN_HEADER: api_token or self.config.api_token}
        logger.debug("%s %s", method, url)
        with self.translate_transport_errors():
            response = self.session.request(method, url, headers=headers, json=json)
        logger.debug("%s %s -> %d", method, url, response.status_code)
        return response

    def _decode(
        self, response: requests.Response, parse: Callable[[Any], T]
    ) -> core.Envelope[T]:
        try:
            data = response.json()
        except requests.JSONDecodeError as e:
            raise errors.MalformedJSONError(
                f"response is not JSON: {response.text!r}",
                body=response.text,
                status_code=response.status_code,
            ) from e

        try:
            if not isinstance(data, dict):
                raise TypeError(f"expected a JSON object, got {type(data).__name__}")
            return core.Envelope.from_api_dict(data, parse)
        except (KeyError, TypeError, ValueError) as e:
            raise errors.UnexpectedShapeError(
                f"unexpected response format ({type(e).__name__}: {e})",
                body=response.text,
                status_code=response.status_code,
            ) from e

    def get_account_info(self, api_token: str | None = None) -> core.AccountInfo:
        """Get information about the account the API token belongs to.

        Raises:
            TransportError: If the request could not be completed.
            DecodeError: If the response can't be decoded.
            EmptyPayloadError: If the API returned no account data, e.g.
              because the token is invalid.
        """
        response = self.request("GET", "/1/users/self", api_token=api_token)
        envelope = self._decode(response, core.AccountInfo.from_api_dict)
        if envelope.data is None:
            raise errors.EmptyPayloadError(
                envelope.message, status_code=response.status_code
            )
        return envelope.data

    def get_shockers(
        self,
        source: core.ShockerSource = core.ShockerSource.OWN,
        api_token: str | None = None,
    ) -> list[core.DeviceGroup]:
        """Get the shockers the account has access to, grouped by hub.

        Arguments:
            source: Whether to list the account's own shockers, or those
              shared with it.

        Raises:
            TransportError: If the request could not be completed.
            DecodeError: If the response can't be decoded.
            EmptyPayloadError: If the API returned no list.
        """
        response = self.request(
            "GET", f"/1/shockers/{source.path_segment}", api_token=api_token
        )
        envelope = self._decode(
            response, lambda data: [core.DeviceGroup.from_api_dict(d) for d in data]
        )
        if envelope.data is None:
            raise errors.EmptyPayloadError(
                envelope.message, status_code=response.status_code
            )
        return envelope.data

    def post_control(
        self,
        shocker_id: str,
        control_type: core.ControlType,
        intensity: int,
        duration: int,
        api_token: str | None = None,
    ) -> str:
        """Send a single control command to a shocker.

        Arguments:
            shocker_id: ID of the shocker, see :meth:`get_shockers`.
            control_type: What the shocker should do.
            intensity: Intensity in percent (1-100).
            duration: Duration in milliseconds (300-30000).

        Returns:
            The message returned by the API, which is
            ``"Successfully sent control messages"`` on success.

        Raises:
            InvalidControlParametersError: ``intensity`` or ``duration`` are not
              integers or out of range. Nothing is sent in that case.
            TransportError: If the request could not be completed.
            DecodeError: If the response can't be decoded.
            EmptyPayloadError: If the API returned no message.
        """
        batch = core.ControlBatch(
            shocks=(
                core.ControlCommand(
                    shocker_id=shocker_id,
                    control_type=control_type,
                    intensity=intensity,
                    duration=duration,
                    exclusive=True,
                ),
            ),
            custom_name=self.config.log_name,
        )
        response = self.request(
            "POST",
            "/2/shockers/control",
            api_token=api_token,
            json=batch.to_api_dict(),
        )
        envelope = self._decode(response, lambda data: data)
        if envelope.message is None:
            raise errors.EmptyPayloadError(None, status_code=response.status_code)
        return envelope.message

    def verify_token(self, api_token: str | None = None) -> bool:
        """Check if an API token is valid.

        Returns:
            ``True`` on success, ``False`` on authentication failure.

        Raises:
            TransportError: If the request could not be completed.
            DecodeError: If the response can't be decoded, except for
              authentication failures without a JSON body.
        """
        try:
            self.get_account_info(api_token=api_token)
        except (errors.EmptyPayloadError, errors.DecodeError) as e:
            if e.status_code in _AUTH_FAILURE_STATUSES:
                return False
            raise
        return True

    def shocker(self, shocker_id: str, name: str | None = None) -> HTTPShocker:
        """Get a :class:`HTTPShocker` instance for the given shocker ID.

        Arguments:
            shocker_id: The shocker ID, see :meth:`get_shockers`.
            name: Used when converting the :class:`HTTPShocker` to a string,
                  defaults to ``shocker_id``.
        """
        return HTTPShocker(api=self, shocker_id=shocker_id, name=name)


class HTTPShocker:
    """Represents a single shocker.

    Normally, there should be no need to instantiate this manually, use
    :meth:`OpenShockAPI.shocker()` instead.

    Durations are in milliseconds (300-30000), intensities in percent (1-100).
    All methods return the API's message and raise the same errors as
    :meth:`OpenShockAPI.post_control`.
    """

    def __init__(self, api: OpenShockAPI, shocker_id: str, name: str | None) -> None:
        self.api = api
        self.shocker_id = shocker_id
        self.name = name

    def __str__(self) -> str:
        if self.name is not None:
            return self.name
        return self.shocker_id

    def shock(self, *, duration: int, intensity: int) -> str:
        return self._call(
            core.ControlType.SHOCK, duration=duration, intensity=intensity
        )

    def vibrate(self, *, duration: int, intensity: int) -> str:
        return self._call(
            core.ControlType.VIBRATE, duration=duration, intensity=intensity
        )

    def sound(self, *, duration: int, intensity: int) -> str:
        return self._call(
            core.ControlType.SOUND, duration=duration, intensity=intensity
        )

    def stop(self) -> str:
        """Stop whatever the shocker is currently doing."""
        return self._call(
            core.ControlType.STOP,
            duration=core.MIN_DURATION,
            intensity=core.MIN_INTENSITY,
        )

    def _call(
        self, control_type: core.ControlType, duration: int, intensity: int
    ) -> str:
        return self.api.post_control(
            self.shocker_id, control_type, intensity=intensity, duration=duration
        )
