"""Data types for the OpenShock API.

Field names and formats follow the API documentation at
https://api.openshock.app/swagger/index.html, with keys converted to
snake_case on the Python side.
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
from typing import Any, Callable, Generic, TypeVar

from openshock.zap import errors

T = TypeVar("T")

MIN_INTENSITY = 1
MAX_INTENSITY = 100
MIN_DURATION = 300  # ms
MAX_DURATION = 30_000  # ms


class Rank(enum.Enum):
    USER = "User"
    SUPPORT = "Support"
    STAFF = "Staff"
    ADMIN = "Admin"
    SYSTEM = "System"


class ShockerModel(enum.Enum):
    CAI_XIANLIN = "CaiXianlin"
    PET_TRAINER = "PetTrainer"
    PETRAINER_998DR = "Petrainer998DR"


class ControlType(enum.Enum):
    """The operation to perform for :meth:`OpenShockAPI.post_control`."""

    STOP = "Stop"
    SHOCK = "Shock"
    VIBRATE = "Vibrate"
    SOUND = "Sound"


class ShockerSource(enum.Enum):
    """Which list of shockers to return.

    Attributes:
        OWN: Shockers owned by the account.
        SHARED: Shockers other accounts shared with this one.
    """

    OWN = enum.auto()
    SHARED = enum.auto()

    @property
    def path_segment(self) -> str:
        return _SOURCE_PATH_SEGMENTS[self]


_SOURCE_PATH_SEGMENTS = {
    ShockerSource.OWN: "Own",
    ShockerSource.SHARED: "Shared",
}


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _get_typed(data: dict[str, Any], key: str, expected: type[Any]) -> Any:
    value = data[key]
    if (expected is int and not _is_int(value)) or not isinstance(value, expected):
        raise TypeError(
            f"{key!r} should be {expected.__name__}, not {type(value).__name__}"
        )
    return value


def parse_timestamp(value: str) -> datetime.datetime:
    if not isinstance(value, str):
        raise TypeError(f"timestamp should be a string, not {type(value).__name__}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(value)


@dataclasses.dataclass(frozen=True)
class AccountInfo:
    """The account an API token belongs to.

    Attributes:
        id: The user ID.
        rank: The user's rank on the OpenShock instance.
        name: Display name, if any.
        email: E-mail address, if the token may see it.
        image: Avatar URL, if any.
    """

    id: str
    rank: Rank
    name: str | None = None
    email: str | None = None
    image: str | None = None

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> AccountInfo:
        return cls(
            id=data["id"],
            rank=Rank(data["rank"]),
            name=data.get("name"),
            email=data.get("email"),
            image=data.get("image"),
        )


@dataclasses.dataclass(frozen=True)
class Shocker:
    """A single shocker, as returned by :meth:`OpenShockAPI.get_shockers`."""

    id: str
    rf_id: int
    model: ShockerModel
    is_paused: bool
    created_on: datetime.datetime
    name: str | None = None

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> Shocker:
        return cls(
            id=data["id"],
            rf_id=_get_typed(data, "rfId", int),
            model=ShockerModel(data["model"]),
            is_paused=_get_typed(data, "isPaused", bool),
            created_on=parse_timestamp(data["createdOn"]),
            name=data.get("name"),
        )


@dataclasses.dataclass(frozen=True)
class DeviceGroup:
    """A hub and the shockers paired to it."""

    id: str
    name: str
    created_on: datetime.datetime
    shockers: tuple[Shocker, ...] = ()

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> DeviceGroup:
        return cls(
            id=data["id"],
            name=data["name"],
            created_on=parse_timestamp(data["createdOn"]),
            shockers=tuple(Shocker.from_api_dict(d) for d in data["shockers"]),
        )


@dataclasses.dataclass(frozen=True)
class ControlCommand:
    """One instruction for one shocker.

    Intensity (1-100) and duration (300-30000 ms) must be integers and are
    checked on construction.

    Raises:
        InvalidControlParametersError: ``intensity`` or ``duration`` are not
          integers or out of range.
    """

    shocker_id: str
    control_type: ControlType
    intensity: int
    duration: int
    exclusive: bool = True

    def __post_init__(self) -> None:
        if not _is_int(self.intensity) or not (
            MIN_INTENSITY <= self.intensity <= MAX_INTENSITY
        ):
            raise errors.InvalidControlParametersError(
                f"intensity needs to be an integer between {MIN_INTENSITY} and "
                f"{MAX_INTENSITY}, not {self.intensity}"
            )
        if not _is_int(self.duration) or not (
            MIN_DURATION <= self.duration <= MAX_DURATION
        ):
            raise errors.InvalidControlParametersError(
                f"duration needs to be an integer between {MIN_DURATION} and "
                f"{MAX_DURATION} ms, not {self.duration}"
            )

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "id": self.shocker_id,
            "type": self.control_type.value,
            "intensity": self.intensity,
            "duration": self.duration,
            "exclusive": self.exclusive,
        }

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> ControlCommand:
        return cls(
            shocker_id=data["id"],
            control_type=ControlType(data["type"]),
            intensity=data["intensity"],
            duration=data["duration"],
            exclusive=data["exclusive"],
        )


@dataclasses.dataclass(frozen=True)
class ControlBatch:
    """Request body for the control endpoint.

    ``custom_name`` shows up in the shocker's log on the OpenShock website.
    """

    shocks: tuple[ControlCommand, ...]
    custom_name: str

    def __post_init__(self) -> None:
        if not self.shocks:
            raise errors.InvalidControlParametersError(
                "a control batch needs at least one command"
            )

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "shocks": [shock.to_api_dict() for shock in self.shocks],
            "customName": self.custom_name,
        }

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> ControlBatch:
        return cls(
            shocks=tuple(ControlCommand.from_api_dict(d) for d in data["shocks"]),
            custom_name=data["customName"],
        )


@dataclasses.dataclass(frozen=True)
class Envelope(Generic[T]):
    """The wrapper the API puts around every response."""

    message: str | None
    data: T | None

    @classmethod
    def from_api_dict(
        cls, data: dict[str, Any], parse: Callable[[Any], T]
    ) -> Envelope[T]:
        message = data.get("message")
        if message is not None and not isinstance(message, str):
            raise TypeError(f"message should be str, not {type(message).__name__}")
        payload = data.get("data")
        return cls(
            message=message,
            data=None if payload is None else parse(payload),
        )
