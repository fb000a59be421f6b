__version__ = "1.0.0"

from openshock.zap.core import (
    AccountInfo as AccountInfo,
    ControlBatch as ControlBatch,
    ControlCommand as ControlCommand,
    ControlType as ControlType,
    DeviceGroup as DeviceGroup,
    Envelope as Envelope,
    Rank as Rank,
    Shocker as Shocker,
    ShockerModel as ShockerModel,
    ShockerSource as ShockerSource,
)

from openshock.zap.errors import (
    OpenShockError as OpenShockError,
    TransportError as TransportError,
    DecodeError as DecodeError,
    MalformedJSONError as MalformedJSONError,
    UnexpectedShapeError as UnexpectedShapeError,
    EmptyPayloadError as EmptyPayloadError,
    MissingAuthTokenError as MissingAuthTokenError,
    InvalidIdentityHeaderError as InvalidIdentityHeaderError,
    InvalidControlParametersError as InvalidControlParametersError,
)

from openshock.zap.httpapi import (
    OpenShockAPI as OpenShockAPI,
    HTTPShocker as HTTPShocker,
)

from openshock.zap.builder import (
    ClientConfig as ClientConfig,
    OpenShockAPIBuilder as OpenShockAPIBuilder,
)
