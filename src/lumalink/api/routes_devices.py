"""Device API routes (discovery, state, control, batch)."""

from typing import Any, Dict, List

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict

from ..manager import ClientManager
from ..models import PartialControlRequest
from ..utils import batch_result_to_dict, device_to_dict, snapshot_to_dict
from .exceptions import device_not_found, handle_control_errors, no_transport_available

router = APIRouter(prefix="/api", tags=["devices"])


class BatchControlItem(BaseModel):
    """One device and the change to apply to it."""

    device_id: str
    request: PartialControlRequest

    model_config = ConfigDict(extra="forbid")


class BatchControlBody(BaseModel):
    """Ordered list of changes applied one device at a time."""

    requests: List[BatchControlItem]

    model_config = ConfigDict(extra="forbid")


def _manager(request: Request) -> ClientManager:
    manager: ClientManager = request.app.state.manager
    if not manager.is_initialized:
        raise no_transport_available()
    return manager


async def _discovered_manager(request: Request) -> ClientManager:
    """Return the manager, running a first discovery if none happened yet."""
    manager = _manager(request)
    if manager.connection_state.last_discovery_at is None:
        await manager.discover()
    return manager


@router.get("/devices")
async def list_devices(request: Request) -> Dict[str, Any]:
    """Run a fresh discovery and return the merged snapshot."""
    snapshot = await _manager(request).discover()
    return snapshot_to_dict(snapshot)


@router.get("/devices/{device_id}")
async def get_device(request: Request, device_id: str) -> Dict[str, Any]:
    """Return the current state of one device."""
    device = await _manager(request).get_device_state(device_id)
    if device is None:
        raise device_not_found(device_id)
    return device_to_dict(device)


@router.post("/devices/batch")
async def control_batch(request: Request, body: BatchControlBody) -> Dict[str, Any]:
    """Apply changes to several devices sequentially and report the counts."""
    manager = await _discovered_manager(request)
    result = await manager.control_many((item.device_id, item.request) for item in body.requests)
    return batch_result_to_dict(result)


@router.post("/devices/{device_id}/control")
@handle_control_errors
async def control_device(
    request: Request, device_id: str, body: PartialControlRequest
) -> Dict[str, str]:
    """Apply a partial change to one device."""
    manager = await _discovered_manager(request)
    await manager.control(device_id, body)
    return {"detail": "ok"}
