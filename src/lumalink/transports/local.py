"""Local network transport.

Talks to device handles returned by the local protocol. Reads are gated
behind a per-device settle window after each command, retried with a
growing wait budget, and fall back to the last good snapshot while a
device is only briefly unreachable.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, List, Optional

from ..constants import (
    COMMAND_TIMEOUT_DEFAULT,
    COOLDOWN_PERIOD_DEFAULT,
    HUE_MAX,
    MAX_CONSECUTIVE_FAILURES,
    PERCENT_MAX,
    RETRY_ATTEMPTS_DEFAULT,
    RETRY_DELAY_STEP,
    STATE_TIMEOUT_BACKOFF,
    STATE_TIMEOUT_DEFAULT,
    TRANSITION_MS_DEFAULT,
)
from ..errors import ControlTimeoutError, LumaLinkError, StateQueryExhaustedError, TransportError
from ..models import ColorState, Device, PartialControlRequest, Transport
from ..protocols import DeviceHandle, LocalDeviceProtocol, RawState
from ..state import Clock, ControlStateStore
from ..utils import short_id

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def _bounded(value: float, upper: int) -> int:
    return max(0, min(upper, round(value)))


def raw_state_to_device(device_id: str, raw: RawState) -> Device:
    """Build a normalized device view from a local state report."""
    return Device(
        id=device_id,
        label=raw.label or f"Light {short_id(device_id)}",
        power=bool(raw.power),
        brightness=_bounded(raw.brightness, PERCENT_MAX),
        hue=_bounded(raw.hue, HUE_MAX),
        saturation=_bounded(raw.saturation, PERCENT_MAX),
        kelvin=int(raw.kelvin),
        connected=True,
        preferred_transport=Transport.LOCAL,
        reachable=True,
    )


class LocalTransportClient:
    """Direct control of devices reachable on the local network."""

    transport = Transport.LOCAL

    def __init__(
        self,
        protocol: LocalDeviceProtocol,
        *,
        state_timeout: float = STATE_TIMEOUT_DEFAULT,
        retry_attempts: int = RETRY_ATTEMPTS_DEFAULT,
        cooldown_period: float = COOLDOWN_PERIOD_DEFAULT,
        command_timeout: float = COMMAND_TIMEOUT_DEFAULT,
        default_transition_ms: int = TRANSITION_MS_DEFAULT,
        max_failures: int = MAX_CONSECUTIVE_FAILURES,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
        store: Optional[ControlStateStore] = None,
    ) -> None:
        self._protocol = protocol
        self._handles: Dict[str, DeviceHandle] = {}
        self.state_timeout = state_timeout
        self.retry_attempts = retry_attempts
        self.command_timeout = command_timeout
        self.default_transition_ms = default_transition_ms
        self._sleep = sleep
        self._store = store or ControlStateStore(
            cooldown_period=cooldown_period,
            max_failures=max_failures,
            clock=clock,
        )

    @property
    def store(self) -> ControlStateStore:
        """Return the cache/cooldown tracker for locally sourced devices."""
        return self._store

    @property
    def device_ids(self) -> List[str]:
        """Return the ids of every known local device."""
        return list(self._handles)

    def has_device(self, device_id: str) -> bool:
        """Return whether ``device_id`` was discovered on the local network."""
        return device_id in self._handles

    async def initialize(self, timeout: float) -> None:
        """Run the initial local scan; fail if no device answered."""
        await self.rescan(timeout)
        if not self._handles:
            raise TransportError("local", "No devices discovered on the local network")
        logger.info("Local transport ready with %d devices", len(self._handles))

    async def rescan(self, timeout: float) -> int:
        """Adopt newly answering devices; known handles are kept. Returns the new count."""
        try:
            handles = await self._protocol.discover(int(timeout * 1000))
        except LumaLinkError:
            raise
        except Exception as exc:
            raise TransportError("local", "Local discovery failed", cause=exc) from exc

        added = 0
        for handle in handles:
            if handle.id not in self._handles:
                self._handles[handle.id] = handle
                added += 1
        if added:
            logger.info("Local discovery found %d new devices", added)
        return added

    async def close(self) -> None:
        """Close the underlying protocol."""
        await self._protocol.close()

    # State queries

    async def _wait_for_cooldown(self, device_id: str) -> None:
        remaining = self._store.cooldown_remaining(device_id)
        if remaining > 0:
            logger.info(
                "Waiting %dms for light %s to settle after control",
                round(remaining * 1000),
                short_id(device_id),
            )
            await self._sleep(remaining)

    async def _read_once(self, device_id: str, handle: DeviceHandle, timeout: float) -> Optional[RawState]:
        try:
            return await asyncio.wait_for(handle.get_state(int(timeout * 1000)), timeout)
        except asyncio.TimeoutError:
            logger.debug("get_state timed out for light %s after %.2fs", short_id(device_id), timeout)
        except Exception as exc:
            logger.debug("get_state failed for light %s: %s", short_id(device_id), exc)
        return None

    async def _query_with_retry(self, device_id: str, handle: DeviceHandle) -> RawState:
        attempts = self.retry_attempts
        for attempt in range(attempts):
            timeout = self.state_timeout * STATE_TIMEOUT_BACKOFF**attempt
            state = await self._read_once(device_id, handle, timeout)
            if state is not None:
                self._store.reset_failures(device_id)
                return state
            if attempt < attempts - 1:
                await self._sleep(RETRY_DELAY_STEP * (attempt + 1))

        failures = self._store.record_failure(device_id)
        logger.warning(
            "get_state gave no answer for light %s (%d attempts, %d consecutive failures)",
            short_id(device_id),
            attempts,
            failures,
        )
        raise StateQueryExhaustedError(device_id, attempts, failures)

    async def query_state(self, device_id: str) -> Optional[Device]:
        """Return fresh state, a stale cached copy, or None if the device is presumed gone.

        Waits out the settle window of a recent command before reading.
        """
        handle = self._handles.get(device_id)
        if handle is None:
            return None

        async with self._store.lock(device_id):
            await self._wait_for_cooldown(device_id)
            try:
                raw = await self._query_with_retry(device_id, handle)
            except StateQueryExhaustedError as exc:
                failures = exc.details["consecutive_failures"]
                cached = self._store.fallback(device_id)
                if cached is not None:
                    logger.info(
                        "Using cached state for light %s (%d consecutive failures)",
                        short_id(device_id),
                        failures,
                    )
                    return cached
                logger.warning(
                    "Dropping light %s after %d consecutive failures",
                    short_id(device_id),
                    failures,
                )
                return None

            device = raw_state_to_device(device_id, raw)
            self._store.record_success(device_id, device)
            logger.debug(
                "%s: power=%s H:%d S:%d%% B:%d%% K:%d",
                device.label,
                device.power,
                device.hue,
                device.saturation,
                device.brightness,
                device.kelvin,
            )
            return device

    async def get_all_device_states(self) -> List[Device]:
        """Query every known local device, one after the other."""
        logger.info("Querying %d local lights for state", len(self._handles))
        devices: List[Device] = []
        for device_id in list(self._handles):
            device = await self.query_state(device_id)
            if device is not None:
                devices.append(device)
        return devices

    # Control

    async def _acknowledge(self, action: str, device_id: str, command: Awaitable[None]) -> None:
        try:
            await asyncio.wait_for(command, self.command_timeout)
        except asyncio.TimeoutError as exc:
            raise ControlTimeoutError(
                action,
                self.command_timeout,
                details={"device_id": device_id, "transport": self.transport.value},
            ) from exc
        except LumaLinkError:
            raise
        except Exception as exc:
            raise TransportError(
                "local", f"{action} failed for light {short_id(device_id)}", cause=exc
            ) from exc

    async def _fetch_current(self, device_id: str, handle: DeviceHandle) -> ColorState:
        """Read the live state once, bypassing cache and settle window."""
        try:
            raw = await asyncio.wait_for(
                handle.get_state(int(self.command_timeout * 1000)), self.command_timeout
            )
        except asyncio.TimeoutError as exc:
            raise TransportError(
                "local", f"Timed out reading state of light {short_id(device_id)}"
            ) from exc
        except Exception as exc:
            raise TransportError(
                "local", f"Failed to get state of light {short_id(device_id)}", cause=exc
            ) from exc
        if raw is None:
            raise TransportError("local", f"Failed to get state of light {short_id(device_id)}")

        device = raw_state_to_device(device_id, raw)
        self._store.record_success(device_id, device)
        return device.color

    async def control(self, device_id: str, request: PartialControlRequest) -> None:
        """Apply a partial change with read-merge-write for colour channels."""
        handle = self._handles.get(device_id)
        if handle is None:
            raise TransportError("local", f"Light {short_id(device_id)} is not known on the local network")

        duration = (
            request.transition_ms if request.transition_ms is not None else self.default_transition_ms
        )
        logger.info(
            "Local control of light %s: %s",
            short_id(device_id),
            request.model_dump(exclude_none=True),
        )

        async with self._store.lock(device_id):
            self._store.mark_control(device_id)

            if request.power is not None:
                await self._acknowledge(
                    "set_power", device_id, handle.set_power(request.power, duration)
                )

            if not request.changes_color:
                return

            current = await self._fetch_current(device_id, handle)
            target = request.merge_into(current)
            if request.brightness is None and target.brightness != current.brightness:
                logger.warning(
                    "Light %s is at 0%% brightness, using %d%% for colour/temperature change",
                    short_id(device_id),
                    target.brightness,
                )
            logger.debug(
                "Sending to light %s: H:%d S:%d%% B:%d%% K:%d",
                short_id(device_id),
                target.hue,
                target.saturation,
                target.brightness,
                target.kelvin,
            )
            await self._acknowledge(
                "set_color",
                device_id,
                handle.set_color(
                    target.hue, target.saturation, target.brightness, target.kelvin, duration
                ),
            )
