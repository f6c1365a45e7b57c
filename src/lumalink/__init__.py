"""Device control reliability layer for smart lights over local and cloud transports."""

from .config import ManagerConfig
from .errors import (
    ControlTimeoutError,
    DeviceNotFoundError,
    ErrorCode,
    LumaLinkError,
    NoTransportAvailableError,
    StateQueryExhaustedError,
    TransportError,
)
from .manager import ClientManager
from .models import (
    BatchResult,
    ColorState,
    Device,
    DeviceControlState,
    DiscoverySnapshot,
    PartialControlRequest,
    Transport,
)
from .protocols import CloudDeviceAPI, DeviceHandle, LocalDeviceProtocol, RawState
from .state import ControlStateStore, DeviceHealth

__all__ = [
    "BatchResult",
    "ClientManager",
    "CloudDeviceAPI",
    "ColorState",
    "ControlStateStore",
    "ControlTimeoutError",
    "Device",
    "DeviceControlState",
    "DeviceHandle",
    "DeviceHealth",
    "DeviceNotFoundError",
    "DiscoverySnapshot",
    "ErrorCode",
    "LocalDeviceProtocol",
    "LumaLinkError",
    "ManagerConfig",
    "NoTransportAvailableError",
    "PartialControlRequest",
    "RawState",
    "StateQueryExhaustedError",
    "Transport",
    "TransportError",
]
