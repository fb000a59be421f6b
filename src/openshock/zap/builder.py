from __future__ import annotations

import dataclasses
import os
from typing import Mapping

import requests
import requests.utils

import openshock
from openshock.zap import errors, httpapi

DEFAULT_BASE_URL = "https://api.openshock.app"

API_TOKEN_ENV_VAR = "OPENSHOCK_API_TOKEN"
BASE_URL_ENV_VAR = "OPENSHOCK_BASE_URL"


@dataclasses.dataclass(frozen=True)
class ClientConfig:
    """Settings of an :class:`OpenShockAPI`, fixed once it is built.

    Attributes:
        base_url: API root, without a trailing slash.
        api_token: Token used when a call doesn't pass its own.
        user_agent: Sent as ``User-Agent`` with every request.
        app_name: Name of the application using this library, if given.
        app_version: Version of that application, if given.
    """

    base_url: str
    api_token: str = dataclasses.field(repr=False)
    user_agent: str
    app_name: str | None = None
    app_version: str | None = None

    @property
    def log_name(self) -> str:
        """Name shown in the OpenShock log for control commands."""
        return self.app_name or httpapi.NAME


class OpenShockAPIBuilder:
    """Builder for :class:`OpenShockAPI`.

    Usage::

        api = (
            OpenShockAPIBuilder()
            .with_api_token(token)
            .with_app("my-app", "1.2.3")
            .build()
        )

    Nothing is checked until :meth:`build` is called.
    """

    def __init__(self) -> None:
        self.base_url: str | None = None
        self.api_token: str | None = None
        self.app_name: str | None = None
        self.app_version: str | None = None

    def __repr__(self) -> str:
        return (
            f"OpenShockAPIBuilder(base_url={self.base_url!r}, api_token=..., "
            f"app_name={self.app_name!r}, app_version={self.app_version!r})"
        )

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None
    ) -> OpenShockAPIBuilder:
        """Create a builder pre-filled from environment variables.

        Reads the token from ``OPENSHOCK_API_TOKEN`` and a self-hosted API root
        from ``OPENSHOCK_BASE_URL``. Unset variables are left for the caller
        to fill in.
        """
        if environ is None:
            environ = os.environ
        builder = cls()
        if API_TOKEN_ENV_VAR in environ:
            builder.with_api_token(environ[API_TOKEN_ENV_VAR])
        if BASE_URL_ENV_VAR in environ:
            builder.with_base_url(environ[BASE_URL_ENV_VAR])
        return builder

    def with_base_url(self, base_url: str) -> OpenShockAPIBuilder:
        """Use a self-hosted OpenShock instance.

        Defaults to ``https://api.openshock.app`` if never called.
        """
        self.base_url = base_url
        return self

    def with_api_token(self, api_token: str) -> OpenShockAPIBuilder:
        """Set the default API token. Required."""
        self.api_token = api_token
        return self

    def with_app(
        self, app_name: str, app_version: str | None = None
    ) -> OpenShockAPIBuilder:
        """Set the name and optionally the version of the app using this library.

        Both are added to the User-Agent, and the name is sent along with
        control commands so it shows up in the OpenShock log.
        """
        self.app_name = app_name
        self.app_version = app_version
        return self

    def _user_agent(self) -> str:
        user_agent = f"{httpapi.NAME}/{openshock.__version__}"
        if self.app_name is not None:
            if self.app_version is not None:
                user_agent += f" ({self.app_name} {self.app_version})"
            else:
                user_agent += f" ({self.app_name})"
        return user_agent

    def build(self) -> httpapi.OpenShockAPI:
        """Check the parameters and build an :class:`OpenShockAPI`.

        Raises:
            MissingAuthTokenError: No (or an empty) API token was set.
            InvalidIdentityHeaderError: The app name or version contain
              characters which can't be sent in an HTTP header.
        """
        if not self.api_token:
            raise errors.MissingAuthTokenError("no API token was provided")

        user_agent = self._user_agent()
        try:
            requests.utils.check_header_validity(("User-Agent", user_agent))
            user_agent.encode("latin-1")  # what http.client will send
        except (requests.exceptions.InvalidHeader, UnicodeEncodeError) as e:
            raise errors.InvalidIdentityHeaderError(user_agent, str(e)) from e

        config = ClientConfig(
            base_url=(self.base_url or DEFAULT_BASE_URL).rstrip("/"),
            api_token=self.api_token,
            user_agent=user_agent,
            app_name=self.app_name,
            app_version=self.app_version,
        )

        session = requests.Session()
        session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": user_agent,
        })
        return httpapi.OpenShockAPI(config=config, session=session)
