"""Per-device state cache and cooldown tracker.

Holds the last successful snapshot, the consecutive failure count and the
last control timestamp for every device a transport has seen. Timestamps
come from a monotonic clock; tests inject a fake one.
"""

from __future__ import annotations

import asyncio
import time
from enum import Enum
from typing import Callable, Dict, Optional

from .constants import COOLDOWN_PERIOD_DEFAULT, MAX_CONSECUTIVE_FAILURES
from .models import Device, DeviceControlState

Clock = Callable[[], float]


class DeviceHealth(str, Enum):
    """Condition of a device derived from its control state."""

    FRESH = "fresh"
    COOLING = "cooling"
    DEGRADED = "degraded"
    LOST = "lost"


class ControlStateStore:
    """Keyed store of :class:`DeviceControlState` records with per-device locks."""

    def __init__(
        self,
        *,
        cooldown_period: float = COOLDOWN_PERIOD_DEFAULT,
        max_failures: int = MAX_CONSECUTIVE_FAILURES,
        clock: Clock = time.monotonic,
    ) -> None:
        self.cooldown_period = cooldown_period
        self.max_failures = max_failures
        self._clock = clock
        self._states: Dict[str, DeviceControlState] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._states

    def __len__(self) -> int:
        return len(self._states)

    def get(self, device_id: str) -> DeviceControlState:
        """Return the record for ``device_id``, creating an empty one if needed."""
        state = self._states.get(device_id)
        if state is None:
            state = self._states[device_id] = DeviceControlState()
        return state

    def lock(self, device_id: str) -> asyncio.Lock:
        """Get or create the lock serializing operations on ``device_id``."""
        if device_id not in self._locks:
            self._locks[device_id] = asyncio.Lock()
        return self._locks[device_id]

    def mark_control(self, device_id: str) -> float:
        """Record that a command is being sent to ``device_id`` now."""
        timestamp = self._clock()
        self.get(device_id).last_control_at = timestamp
        return timestamp

    def cooldown_remaining(self, device_id: str) -> float:
        """Return how long a read must still wait for ``device_id`` to settle."""
        state = self._states.get(device_id)
        if state is None or state.last_control_at is None:
            return 0.0
        elapsed = self._clock() - state.last_control_at
        if elapsed >= self.cooldown_period:
            return 0.0
        return self.cooldown_period - elapsed

    def record_success(self, device_id: str, device: Device) -> None:
        """Cache ``device`` as the last good state and reset the failure count."""
        state = self.get(device_id)
        state.last_known_good_state = device
        state.consecutive_failure_count = 0

    def reset_failures(self, device_id: str) -> None:
        """Reset the failure count after any successful raw read."""
        self.get(device_id).consecutive_failure_count = 0

    def record_failure(self, device_id: str) -> int:
        """Increment and return the consecutive failure count."""
        state = self.get(device_id)
        state.consecutive_failure_count += 1
        return state.consecutive_failure_count

    def fallback(self, device_id: str) -> Optional[Device]:
        """Return the cached snapshot marked stale, or None if the device is presumed gone."""
        state = self._states.get(device_id)
        if state is None or state.last_known_good_state is None:
            return None
        if state.consecutive_failure_count >= self.max_failures:
            return None
        return state.last_known_good_state.as_degraded()

    def health(self, device_id: str) -> DeviceHealth:
        """Derive the device condition from failure count and last control time."""
        state = self._states.get(device_id)
        if state is None:
            return DeviceHealth.FRESH
        if state.consecutive_failure_count >= self.max_failures:
            return DeviceHealth.LOST
        if state.consecutive_failure_count > 0:
            return DeviceHealth.DEGRADED
        if self.cooldown_remaining(device_id) > 0:
            return DeviceHealth.COOLING
        return DeviceHealth.FRESH
