"""Client manager: single entry point over the local and cloud transports.

Merges discovery results from both transports into one device view, keeps
each device's preferred transport, and routes control calls with a single
cross-transport failover attempt.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .api.cloud_api import LifxHttpApi
from .config import ManagerConfig
from .constants import LOCAL_DISCOVERY_GRACE
from .errors import DeviceNotFoundError, LumaLinkError, NoTransportAvailableError, TransportError
from .models import BatchResult, Device, DiscoverySnapshot, PartialControlRequest, Transport
from .protocols import CloudDeviceAPI, LocalDeviceProtocol
from .state import Clock
from .transports import CloudTransportClient, LocalTransportClient
from .transports.local import Sleep
from .utils import now_local, short_id

logger = logging.getLogger(__name__)

TransportClient = Union[LocalTransportClient, CloudTransportClient]
CloudApiFactory = Callable[[str], CloudDeviceAPI]


class ClientManager:
    """Owns zero or one client per transport and routes calls between them."""

    def __init__(
        self,
        local_protocol: Optional[LocalDeviceProtocol] = None,
        *,
        cloud_api_factory: Optional[CloudApiFactory] = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Create an uninitialized manager.

        Args:
            local_protocol: Local network protocol; local control is skipped without one
            cloud_api_factory: Builds the cloud API from a token; defaults to ``LifxHttpApi``
            clock: Monotonic clock used for settle windows
            sleep: Coroutine used for settle and retry pauses
        """
        self._local_protocol = local_protocol
        self._cloud_api_factory = cloud_api_factory
        self._clock = clock
        self._sleep = sleep
        self._config = ManagerConfig()
        self._local: Optional[LocalTransportClient] = None
        self._cloud: Optional[CloudTransportClient] = None
        self._snapshot = DiscoverySnapshot()

    @property
    def config(self) -> ManagerConfig:
        return self._config

    @property
    def local(self) -> Optional[LocalTransportClient]:
        """Return the local transport client if it came up."""
        return self._local

    @property
    def cloud(self) -> Optional[CloudTransportClient]:
        """Return the cloud transport client if it came up."""
        return self._cloud

    @property
    def is_initialized(self) -> bool:
        """Return whether at least one transport is up."""
        return self._local is not None or self._cloud is not None

    @property
    def connection_state(self) -> DiscoverySnapshot:
        """Return the last discovery snapshot."""
        return self._snapshot

    def _default_cloud_api(self, token: str) -> CloudDeviceAPI:
        return LifxHttpApi(
            token,
            base_url=self._config.cloud_base_url,
            timeout=self._config.cloud_request_timeout,
        )

    async def _initialize_local(self, config: ManagerConfig) -> Optional[str]:
        """Bring up the local transport; return a failure reason or None."""
        local = LocalTransportClient(
            self._local_protocol,
            state_timeout=config.state_timeout,
            retry_attempts=config.retry_attempts,
            cooldown_period=config.cooldown_period,
            command_timeout=config.command_timeout,
            default_transition_ms=config.default_transition_ms,
            max_failures=config.max_consecutive_failures,
            clock=self._clock,
            sleep=self._sleep,
        )
        timeout = config.local_discovery_timeout
        try:
            await asyncio.wait_for(local.initialize(timeout), timeout + LOCAL_DISCOVERY_GRACE)
        except asyncio.TimeoutError:
            return f"local discovery did not finish within {timeout}s"
        except LumaLinkError as exc:
            return exc.message
        self._local = local
        return None

    async def _initialize_cloud(self, config: ManagerConfig) -> Optional[str]:
        """Bring up the cloud transport; return a failure reason or None."""
        cloud = CloudTransportClient(
            self._cloud_api_factory or self._default_cloud_api,
            default_transition_ms=config.default_transition_ms,
        )
        try:
            await cloud.initialize(config.cloud_token)
        except LumaLinkError as exc:
            return exc.message
        self._cloud = cloud
        return None

    async def initialize(self, config: Optional[ManagerConfig] = None) -> None:
        """Bring up whichever transports are configured.

        Raises:
            NoTransportAvailableError: If neither transport could be brought up
        """
        self._config = config or ManagerConfig()
        failures: Dict[str, str] = {}

        if not self._config.enable_local_discovery:
            failures["local"] = "disabled"
        elif self._local_protocol is None:
            logger.info("No local network protocol installed, local control unavailable")
            failures["local"] = "no local protocol configured"
        else:
            reason = await self._initialize_local(self._config)
            if reason:
                logger.warning("Local discovery failed: %s", reason)
                failures["local"] = reason

        if self._config.cloud_token:
            reason = await self._initialize_cloud(self._config)
            if reason:
                logger.warning("Cloud API initialization failed: %s", reason)
                failures["cloud"] = reason
        else:
            failures["cloud"] = "no token configured"

        self._snapshot = DiscoverySnapshot(
            local_available=self._local is not None,
            cloud_available=self._cloud is not None,
        )
        if self._local is None and self._cloud is None:
            raise NoTransportAvailableError(details=failures)
        logger.info(
            "Client manager ready (local=%s, cloud=%s)",
            self._snapshot.local_available,
            self._snapshot.cloud_available,
        )

    async def _local_devices(self) -> List[Device]:
        if self._local is None:
            return []
        if self._config.local_rescan_on_discover:
            try:
                await self._local.rescan(self._config.local_discovery_timeout)
            except LumaLinkError as exc:
                logger.warning("Local rescan failed: %s", exc)
        try:
            devices = await self._local.get_all_device_states()
        except LumaLinkError as exc:
            logger.warning("Failed to get local lights: %s", exc)
            return []
        logger.info("Found %d local lights", len(devices))
        return devices

    async def _cloud_devices(self) -> List[Device]:
        if self._cloud is None:
            return []
        try:
            devices = await self._cloud.list_devices()
        except LumaLinkError as exc:
            logger.warning("Failed to get cloud lights: %s", exc)
            return []
        logger.info("Found %d cloud lights", len(devices))
        return devices

    async def discover(self) -> DiscoverySnapshot:
        """Rebuild the merged device view; local entries win over cloud duplicates."""
        logger.info("Starting light discovery")
        merged: Dict[str, Device] = {}
        for device in await self._local_devices():
            merged[device.id] = device
        for device in await self._cloud_devices():
            merged.setdefault(device.id, device)

        self._snapshot = DiscoverySnapshot(
            local_available=self._local is not None,
            cloud_available=self._cloud is not None,
            devices=tuple(merged.values()),
            last_discovery_at=now_local(),
        )
        logger.info("Total lights discovered: %d", len(self._snapshot.devices))
        return self._snapshot

    async def get_device_state(self, device_id: str) -> Optional[Device]:
        """Run a fresh discovery and return the matching device, if any."""
        snapshot = await self.discover()
        return snapshot.find(device_id)

    def _client_for(self, transport: Transport) -> Optional[TransportClient]:
        if transport is Transport.LOCAL:
            return self._local
        return self._cloud

    async def control(self, device_id: str, request: PartialControlRequest) -> None:
        """Apply ``request`` via the device's preferred transport, failing over once.

        Raises:
            DeviceNotFoundError: If the id is not in the last snapshot
            ControlTimeoutError: If a command was not acknowledged
            TransportError: If the transport call failed
        """
        device = self._snapshot.find(device_id)
        if device is None:
            raise DeviceNotFoundError(device_id)

        primary = device.preferred_transport
        client = self._client_for(primary)
        if client is None:
            primary = primary.alternate
            client = self._client_for(primary)
        if client is None:
            raise TransportError(device.preferred_transport.value, "No transport available for control")

        logger.info(
            "Controlling %s via %s: %s",
            device.label,
            primary.value,
            request.model_dump(exclude_none=True),
        )
        try:
            await client.control(device_id, request)
        except LumaLinkError as exc:
            fallback = self._client_for(primary.alternate)
            if not exc.allows_failover or fallback is None:
                raise
            logger.warning(
                "Control via %s failed for %s, trying %s: %s",
                primary.value,
                device.label,
                primary.alternate.value,
                exc,
            )
            await fallback.control(device_id, request)
            logger.info("Control succeeded via %s (fallback)", primary.alternate.value)
            return
        logger.info("Control succeeded via %s", primary.value)

    async def control_many(
        self, requests: Iterable[Tuple[str, PartialControlRequest]]
    ) -> BatchResult:
        """Control devices one after the other, counting failures without stopping."""
        result = BatchResult()
        for device_id, request in requests:
            try:
                await self.control(device_id, request)
            except LumaLinkError as exc:
                result.failed += 1
                result.errors[device_id] = exc.message
                logger.warning("Batch control failed for light %s: %s", short_id(device_id), exc)
            except Exception as exc:  # pragma: no cover - runtime diagnostics
                result.failed += 1
                result.errors[device_id] = str(exc)
                logger.exception("Batch control crashed for light %s", short_id(device_id))
            else:
                result.succeeded += 1
        logger.info("Batch control finished: %d succeeded, %d failed", result.succeeded, result.failed)
        return result

    async def set_power_all(
        self, on: bool, device_ids: Optional[Sequence[str]] = None
    ) -> BatchResult:
        """Switch every device of the last snapshot (or ``device_ids``) on or off."""
        targets = device_ids if device_ids is not None else [d.id for d in self._snapshot.devices]
        request = PartialControlRequest(power=on)
        return await self.control_many((device_id, request) for device_id in targets)

    async def close(self) -> None:
        """Release both transports."""
        if self._local is not None:
            await self._local.close()
            self._local = None
        if self._cloud is not None:
            await self._cloud.close()
            self._cloud = None
        self._snapshot = DiscoverySnapshot()
