"""Cloud HTTP transport.

The cloud serializes commands to the device itself, so there is no settle
window here. The colour endpoint still needs a full tuple, so colour changes
read the account's device list first and merge the request into it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from ..constants import HUE_MAX, PERCENT_MAX, TRANSITION_MS_DEFAULT
from ..errors import LumaLinkError, TransportError
from ..models import ColorState, Device, PartialControlRequest, Transport
from ..protocols import CloudDeviceAPI
from ..utils import short_id

logger = logging.getLogger(__name__)

T = TypeVar("T")


def cloud_light_to_device(light: Dict[str, Any]) -> Device:
    """Convert a cloud light object (fractional saturation/brightness) to a device view."""
    color = light.get("color") or {}
    connected = bool(light.get("connected", False))
    device_id = str(light["id"])
    return Device(
        id=device_id,
        label=light.get("label") or f"Light {short_id(device_id)}",
        power=light.get("power") == "on",
        brightness=max(0, min(PERCENT_MAX, round(float(light.get("brightness", 0)) * 100))),
        hue=max(0, min(HUE_MAX, round(float(color.get("hue", 0))))),
        saturation=max(0, min(PERCENT_MAX, round(float(color.get("saturation", 0)) * 100))),
        kelvin=int(color.get("kelvin", 0)),
        connected=connected,
        preferred_transport=Transport.CLOUD,
        reachable=bool(light.get("reachable", connected)),
    )


class CloudTransportClient:
    """Control surface over the cloud API."""

    transport = Transport.CLOUD

    def __init__(
        self,
        api_factory: Callable[[str], CloudDeviceAPI],
        *,
        default_transition_ms: int = TRANSITION_MS_DEFAULT,
    ) -> None:
        self._api_factory = api_factory
        self._api: Optional[CloudDeviceAPI] = None
        self.default_transition_ms = default_transition_ms
        self._device_locks: Dict[str, asyncio.Lock] = {}

    @property
    def is_initialized(self) -> bool:
        return self._api is not None

    async def initialize(self, token: Optional[str]) -> None:
        """Create the API client for ``token``."""
        if not token:
            raise TransportError("cloud", "Cloud API token is required")
        try:
            self._api = self._api_factory(token)
        except Exception as exc:
            raise TransportError("cloud", "Cloud API initialization failed", cause=exc) from exc

    async def close(self) -> None:
        """Release the API client."""
        if self._api is not None:
            await self._api.close()
            self._api = None

    def _get_device_lock(self, device_id: str) -> asyncio.Lock:
        """Get or create a lock for device operations."""
        if device_id not in self._device_locks:
            self._device_locks[device_id] = asyncio.Lock()
        return self._device_locks[device_id]

    async def _call(self, action: str, call: Callable[[CloudDeviceAPI], Awaitable[T]]) -> T:
        if self._api is None:
            raise TransportError("cloud", "Cloud client not initialized")
        try:
            return await call(self._api)
        except LumaLinkError:
            raise
        except Exception as exc:
            raise TransportError("cloud", f"Cloud {action} failed", cause=exc) from exc

    async def list_devices(self) -> List[Device]:
        """Fetch and normalize the account's devices; one HTTP call, no retry."""
        lights = await self._call("list_devices", lambda api: api.list_devices())
        try:
            devices = [cloud_light_to_device(light) for light in lights]
        except Exception as exc:
            raise TransportError("cloud", "Malformed cloud device list", cause=exc) from exc
        logger.info("Cloud API reported %d lights", len(devices))
        return devices

    async def _fetch_current(self, device_id: str) -> ColorState:
        for device in await self.list_devices():
            if device.id == device_id:
                return device.color
        raise TransportError("cloud", f"Light {short_id(device_id)} is not visible to the cloud API")

    async def control(self, device_id: str, request: PartialControlRequest) -> None:
        """Apply a partial change: power first, then read-merge-write of the colour."""
        duration_ms = (
            request.transition_ms if request.transition_ms is not None else self.default_transition_ms
        )
        duration_sec = duration_ms / 1000
        logger.info(
            "Cloud control of light %s: %s",
            short_id(device_id),
            request.model_dump(exclude_none=True),
        )

        async with self._get_device_lock(device_id):
            if request.power is not None:
                await self._call(
                    "set_power",
                    lambda api: api.set_power(device_id, request.power, duration_sec),
                )

            if not request.changes_color:
                return

            current = await self._fetch_current(device_id)
            target = request.merge_into(current)
            color = {
                "hue": target.hue,
                "saturation": target.saturation / 100,
                "brightness": target.brightness / 100,
                "kelvin": target.kelvin,
                "duration": duration_sec,
            }
            await self._call("set_color", lambda api: api.set_color(device_id, color))
