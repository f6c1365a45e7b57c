"""Device view, control request and snapshot models.

Devices are lightweight view dataclasses rebuilt on every discovery; the
caller-supplied control request is a pydantic model so that out-of-range
values are rejected before any transport is touched.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .constants import HUE_MAX, KELVIN_MAX, KELVIN_MIN, PERCENT_MAX, SAFEGUARD_BRIGHTNESS


class Transport(str, Enum):
    """Communication path to a device."""

    LOCAL = "local"
    CLOUD = "cloud"

    @property
    def alternate(self) -> "Transport":
        """Return the other transport."""
        return Transport.CLOUD if self is Transport.LOCAL else Transport.LOCAL


@dataclass(slots=True)
class Device:
    """Normalized view of a physical light.

    ``brightness`` and ``saturation`` are 0-100, ``hue`` is 0-360 degrees.
    A saturation of 0 means white mode, where ``kelvin`` is authoritative.
    """

    id: str
    label: str
    power: bool
    brightness: int
    hue: int
    saturation: int
    kelvin: int
    connected: bool
    preferred_transport: Transport
    reachable: bool = True

    @property
    def is_white_mode(self) -> bool:
        """Return True when the bulb shows white light at ``kelvin``."""
        return self.saturation == 0

    @property
    def color(self) -> "ColorState":
        """Return the colour quadruple of this device."""
        return ColorState(
            hue=self.hue,
            saturation=self.saturation,
            brightness=self.brightness,
            kelvin=self.kelvin,
        )

    def as_degraded(self) -> "Device":
        """Return a copy marked as served from cache."""
        return replace(self, connected=False, reachable=False)


@dataclass(frozen=True, slots=True)
class ColorState:
    """Full colour tuple as required by the colour-set primitives."""

    hue: int
    saturation: int
    brightness: int
    kelvin: int


class PartialControlRequest(BaseModel):
    """Caller-supplied change; unset fields are left untouched on the device."""

    power: Optional[bool] = None
    brightness: Optional[int] = Field(default=None, ge=0, le=PERCENT_MAX)
    hue: Optional[int] = Field(default=None, ge=0, le=HUE_MAX)
    saturation: Optional[int] = Field(default=None, ge=0, le=PERCENT_MAX)
    kelvin: Optional[int] = Field(default=None, ge=KELVIN_MIN, le=KELVIN_MAX)
    transition_ms: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def changes_color(self) -> bool:
        """Whether any of hue, saturation, brightness or kelvin is set."""
        return any(
            value is not None for value in (self.hue, self.saturation, self.brightness, self.kelvin)
        )

    @property
    def changes_hue_or_temperature(self) -> bool:
        """Whether hue, saturation or kelvin is set."""
        return any(value is not None for value in (self.hue, self.saturation, self.kelvin))

    def merge_into(self, current: ColorState) -> ColorState:
        """Overlay the requested channels on ``current``.

        If the merged brightness is 0, the caller did not ask for a brightness
        and did ask for a hue, saturation or temperature change, brightness is
        raised to full so the change is visible.
        """
        brightness = self.brightness if self.brightness is not None else current.brightness
        if brightness == 0 and self.brightness is None and self.changes_hue_or_temperature:
            brightness = SAFEGUARD_BRIGHTNESS
        return ColorState(
            hue=self.hue if self.hue is not None else current.hue,
            saturation=self.saturation if self.saturation is not None else current.saturation,
            brightness=brightness,
            kelvin=self.kelvin if self.kelvin is not None else current.kelvin,
        )


@dataclass(slots=True)
class DeviceControlState:
    """Per-device bookkeeping kept across discovery cycles (memory only)."""

    last_control_at: Optional[float] = None
    last_known_good_state: Optional[Device] = None
    consecutive_failure_count: int = 0


@dataclass(frozen=True, slots=True)
class DiscoverySnapshot:
    """Merged result of one discovery pass; replaced, never mutated."""

    local_available: bool = False
    cloud_available: bool = False
    devices: Tuple[Device, ...] = ()
    last_discovery_at: Optional[datetime] = None

    def find(self, device_id: str) -> Optional[Device]:
        """Return the device with ``device_id`` or None."""
        for device in self.devices:
            if device.id == device_id:
                return device
        return None

    def is_available(self, transport: Transport) -> bool:
        """Return whether ``transport`` was up for this snapshot."""
        if transport is Transport.LOCAL:
            return self.local_available
        return self.cloud_available


@dataclass(slots=True)
class BatchResult:
    """Aggregate outcome of a sequential multi-device operation."""

    succeeded: int = 0
    failed: int = 0
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        """Return the number of devices attempted."""
        return self.succeeded + self.failed
