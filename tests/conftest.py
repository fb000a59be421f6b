from __future__ import annotations

from typing import Any, Callable, Iterator, TypeAlias

import pytest
from responses import RequestsMock, matchers

import openshock
from openshock.zap import builder, core, httpapi

_MatcherType: TypeAlias = Callable[..., Any]

SUCCESS_MESSAGE = "Successfully sent control messages"


class FakeCredentials:
    API_TOKEN = "OPENSHOCK-TOKEN"
    USER_ID = "d6c3f6e4-1bb5-4a28-9a8b-7a2b1c7e5f10"
    SHOCKER_ID = "0f6c4b2e-2f0b-4b1e-8b43-7d9b8c1e6a21"
    HUB_ID = "7a1f9b3c-5d2e-4c8a-9f60-3e2b1d0c4a77"
    APP_NAME = "test-app"
    APP_VERSION = "0.1.0"


class APIURLs:
    BASE = builder.DEFAULT_BASE_URL
    SELF = f"{BASE}/1/users/self"
    SHOCKERS_OWN = f"{BASE}/1/shockers/Own"
    SHOCKERS_SHARED = f"{BASE}/1/shockers/Shared"
    CONTROL = f"{BASE}/2/shockers/control"


@pytest.fixture
def credentials() -> FakeCredentials:
    return FakeCredentials()


@pytest.fixture
def openshock_api(credentials: FakeCredentials) -> Iterator[httpapi.OpenShockAPI]:
    api = (
        builder.OpenShockAPIBuilder()
        .with_api_token(credentials.API_TOKEN)
        .with_app(credentials.APP_NAME, credentials.APP_VERSION)
        .build()
    )
    with api:
        yield api


def shocker_dict(
    shocker_id: str = FakeCredentials.SHOCKER_ID,
    name: str | None = "test shocker",
    paused: bool = False,
) -> dict[str, Any]:
    return {
        "name": name,
        "isPaused": paused,
        "createdOn": "2024-03-01T12:30:00.123456+00:00",
        "id": shocker_id,
        "rfId": 12345,
        "model": "CaiXianlin",
    }


def device_group_dict(shockers: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "shockers": shockers,
        "id": FakeCredentials.HUB_ID,
        "name": "test hub",
        "createdOn": "2024-02-29T08:00:00Z",
    }


class HTTPPatcher:
    """Helper class which fakes the OpenShock API using responses.

    Each API endpoint has three methods here, e.g. for the control endpoint:

    - control_matchers: Returns the responses matchers to use for requests to
      this endpoint, matching the headers (and body) our client sent.
    - control_raw: Do a raw responses call for the control endpoint.
    - control: Configure responses for a control request, with some sensible
      defaults for how a request will usually look.
    """

    HEADERS: dict[str, str] = {
        "User-Agent": (
            f"{httpapi.NAME}/{openshock.__version__} "
            f"({FakeCredentials.APP_NAME} {FakeCredentials.APP_VERSION})"
        ),
        "Content-Type": "application/json",
        "Accept": "application/json",
    }

    def __init__(self, *, responses: RequestsMock) -> None:
        self.responses = responses

    def headers_matcher(self, api_token: str | None = None) -> _MatcherType:
        return matchers.header_matcher({
            **self.HEADERS,
            httpapi.TOKEN_HEADER: api_token or FakeCredentials.API_TOKEN,
        })

    # GET /1/users/self

    def account_info_matchers(self, api_token: str | None = None) -> list[_MatcherType]:
        return [self.headers_matcher(api_token)]

    def account_info_raw(self, **kwargs: Any) -> None:
        self.responses.get(APIURLs.SELF, **kwargs)

    def account_info(self, *, api_token: str | None = None, **data: Any) -> None:
        self.account_info_raw(
            json={
                "message": None,
                "data": {
                    "id": FakeCredentials.USER_ID,
                    "name": "Zapper",
                    "email": "zapper@example.org",
                    "image": "https://www.gravatar.com/avatar/0",
                    "rank": "User",
                    **data,
                },
            },
            match=self.account_info_matchers(api_token),
        )

    # GET /1/shockers/{Own,Shared}

    def shockers_matchers(self, api_token: str | None = None) -> list[_MatcherType]:
        return [self.headers_matcher(api_token)]

    def shockers_raw(self, url: str = APIURLs.SHOCKERS_OWN, **kwargs: Any) -> None:
        self.responses.get(url, **kwargs)

    def shockers(
        self,
        *,
        url: str = APIURLs.SHOCKERS_OWN,
        groups: list[dict[str, Any]] | None = None,
        api_token: str | None = None,
    ) -> None:
        if groups is None:
            groups = [
                device_group_dict([
                    shocker_dict(),
                    shocker_dict(shocker_id="other", name=None, paused=True),
                ])
            ]
        self.shockers_raw(
            url,
            json={"message": None, "data": groups},
            match=self.shockers_matchers(api_token),
        )

    # POST /2/shockers/control

    def control_matchers(
        self,
        *,
        control_type: core.ControlType = core.ControlType.VIBRATE,
        intensity: int = 2,
        duration: int = 1000,
        shocker_id: str = FakeCredentials.SHOCKER_ID,
        custom_name: str = FakeCredentials.APP_NAME,
        api_token: str | None = None,
    ) -> list[_MatcherType]:
        return [
            matchers.json_params_matcher({
                "shocks": [
                    {
                        "id": shocker_id,
                        "type": control_type.value,
                        "intensity": intensity,
                        "duration": duration,
                        "exclusive": True,
                    }
                ],
                "customName": custom_name,
            }),
            self.headers_matcher(api_token),
        ]

    def control_raw(self, **kwargs: Any) -> None:
        self.responses.post(APIURLs.CONTROL, **kwargs)

    def control(self, *, message: str | None = SUCCESS_MESSAGE, **kwargs: Any) -> None:
        self.control_raw(
            json={"message": message, "data": None},
            match=self.control_matchers(**kwargs),
        )


@pytest.fixture
def http_patcher(responses: RequestsMock) -> HTTPPatcher:
    return HTTPPatcher(responses=responses)
