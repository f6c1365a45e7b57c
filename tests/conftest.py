"""Test configuration ensuring the src package is importable, plus transport fakes."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from lumalink.protocols import RawState  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock with a matching sleep coroutine.

    ``sleep`` records the requested delay and moves time forward instead of
    waiting, so settle windows and retry pauses are observable and instant.
    """

    def __init__(self, start: float = 1000.0) -> None:
        self.time = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.time

    def advance(self, seconds: float) -> None:
        self.time += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.time += seconds


class FakeHandle:
    """Simulated bulb on the local network that applies the commands it receives."""

    def __init__(
        self,
        device_id: str,
        *,
        label: str = "Lamp",
        power: bool = True,
        hue: float = 0,
        saturation: float = 0,
        brightness: float = 50,
        kelvin: int = 3500,
        clock: Optional[FakeClock] = None,
    ) -> None:
        self.id = device_id
        self.state = RawState(
            label=label,
            power=power,
            hue=hue,
            saturation=saturation,
            brightness=brightness,
            kelvin=kelvin,
        )
        self.clock = clock
        self.responsive = True
        self.get_state_timeouts: List[int] = []
        self.read_times: List[float] = []
        self.calls: List[tuple] = []
        self.command_error: Optional[BaseException] = None
        self.hang_commands = False

    @property
    def get_state_calls(self) -> int:
        return len(self.get_state_timeouts)

    async def get_state(self, timeout_ms: int) -> Optional[RawState]:
        self.get_state_timeouts.append(timeout_ms)
        if self.clock is not None:
            self.read_times.append(self.clock())
        if not self.responsive:
            return None
        return RawState(
            label=self.state.label,
            power=self.state.power,
            hue=self.state.hue,
            saturation=self.state.saturation,
            brightness=self.state.brightness,
            kelvin=self.state.kelvin,
        )

    async def _command(self) -> None:
        if self.hang_commands:
            await asyncio.Event().wait()
        if self.command_error is not None:
            raise self.command_error

    async def set_power(self, on: bool, duration_ms: int) -> None:
        self.calls.append(("set_power", on, duration_ms))
        await self._command()
        self.state.power = on

    async def set_color(
        self, hue: int, saturation: int, brightness: int, kelvin: int, duration_ms: int
    ) -> None:
        self.calls.append(("set_color", hue, saturation, brightness, kelvin, duration_ms))
        await self._command()
        self.state.hue = hue
        self.state.saturation = saturation
        self.state.brightness = brightness
        self.state.kelvin = kelvin


class FakeLocalProtocol:
    """Local protocol returning a fixed, mutable list of handles."""

    def __init__(self, handles: Optional[List[FakeHandle]] = None) -> None:
        self.handles = list(handles or [])
        self.discover_timeouts: List[int] = []
        self.discover_error: Optional[BaseException] = None
        self.closed = False

    async def discover(self, timeout_ms: int) -> List[FakeHandle]:
        self.discover_timeouts.append(timeout_ms)
        if self.discover_error is not None:
            raise self.discover_error
        return list(self.handles)

    async def close(self) -> None:
        self.closed = True


def cloud_light(
    device_id: str,
    *,
    label: str = "Cloud Lamp",
    power: str = "on",
    brightness: float = 0.5,
    hue: float = 0,
    saturation: float = 0,
    kelvin: int = 3500,
    connected: bool = True,
) -> Dict[str, Any]:
    """Build a light object shaped like the cloud API's JSON."""
    return {
        "id": device_id,
        "label": label,
        "power": power,
        "brightness": brightness,
        "connected": connected,
        "color": {"hue": hue, "saturation": saturation, "kelvin": kelvin},
    }


class FakeCloudAPI:
    """Cloud API double that applies commands to its light list."""

    def __init__(self, lights: Optional[List[Dict[str, Any]]] = None) -> None:
        self.lights = list(lights or [])
        self.list_calls = 0
        self.calls: List[tuple] = []
        self.error: Optional[BaseException] = None
        self.closed = False

    def _find(self, device_id: str) -> Dict[str, Any]:
        for light in self.lights:
            if light["id"] == device_id:
                return light
        raise KeyError(device_id)

    async def list_devices(self) -> List[Dict[str, Any]]:
        self.list_calls += 1
        if self.error is not None:
            raise self.error
        return [dict(light, color=dict(light["color"])) for light in self.lights]

    async def set_power(self, device_id: str, on: bool, duration_sec: float) -> None:
        self.calls.append(("set_power", device_id, on, duration_sec))
        if self.error is not None:
            raise self.error
        self._find(device_id)["power"] = "on" if on else "off"

    async def set_color(self, device_id: str, color: Dict[str, float]) -> None:
        self.calls.append(("set_color", device_id, dict(color)))
        if self.error is not None:
            raise self.error
        light = self._find(device_id)
        light["brightness"] = color["brightness"]
        light["color"] = {
            "hue": color["hue"],
            "saturation": color["saturation"],
            "kelvin": color["kelvin"],
        }

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake monotonic clock."""
    return FakeClock()
