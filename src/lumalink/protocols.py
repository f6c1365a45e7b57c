"""Collaborator contracts consumed by the transports.

The raw local network protocol and the cloud HTTP API live outside this
package. These ``Protocol`` classes describe the shape the transports need;
any object with matching methods satisfies them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Sequence, runtime_checkable


@dataclass(slots=True)
class RawState:
    """State report from a local device handle.

    Values are already in human-readable ranges (hue 0-360, saturation and
    brightness 0-100) but may be fractional.
    """

    label: str
    power: bool
    hue: float
    saturation: float
    brightness: float
    kelvin: int


@runtime_checkable
class DeviceHandle(Protocol):
    """A single device reachable over the local network."""

    id: str

    async def get_state(self, timeout_ms: int) -> RawState | None:
        """Return the current state, or None/raise when the device did not answer."""
        ...

    async def set_power(self, on: bool, duration_ms: int) -> None:
        """Switch the device on or off; returns once acknowledged."""
        ...

    async def set_color(
        self,
        hue: int,
        saturation: int,
        brightness: int,
        kelvin: int,
        duration_ms: int,
    ) -> None:
        """Set the full colour tuple; returns once acknowledged."""
        ...


@runtime_checkable
class LocalDeviceProtocol(Protocol):
    """Local network enumeration."""

    async def discover(self, timeout_ms: int) -> Sequence[DeviceHandle]:
        """Return every device that answered within ``timeout_ms``."""
        ...

    async def close(self) -> None:
        """Release sockets held by the protocol."""
        ...


@runtime_checkable
class CloudDeviceAPI(Protocol):
    """Cloud HTTP API.

    ``list_devices`` returns the provider's JSON objects, where saturation and
    brightness are fractional 0-1.
    """

    async def list_devices(self) -> List[Dict[str, Any]]:
        """Return every device on the account."""
        ...

    async def set_power(self, device_id: str, on: bool, duration_sec: float) -> None:
        """Switch a device on or off."""
        ...

    async def set_color(self, device_id: str, color: Dict[str, float]) -> None:
        """Set ``hue``, ``saturation`` (0-1), ``brightness`` (0-1), ``kelvin`` and ``duration``."""
        ...

    async def close(self) -> None:
        """Release the HTTP client."""
        ...
