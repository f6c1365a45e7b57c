"""Serialization helpers for API responses.

These convert internal dataclasses into JSON-safe primitives.
"""

from __future__ import annotations

from typing import Any, Dict

from ..models import BatchResult, Device, DiscoverySnapshot


def device_to_dict(device: Device) -> Dict[str, Any]:
    """Convert a device view into JSON-safe primitives."""
    return {
        "id": device.id,
        "label": device.label,
        "power": device.power,
        "brightness": device.brightness,
        "hue": device.hue,
        "saturation": device.saturation,
        "kelvin": device.kelvin,
        "white_mode": device.is_white_mode,
        "connected": device.connected,
        "reachable": device.reachable,
        "preferred_transport": device.preferred_transport.value,
    }


def snapshot_to_dict(snapshot: DiscoverySnapshot) -> Dict[str, Any]:
    """Convert a discovery snapshot into JSON-safe primitives."""
    return {
        "local_available": snapshot.local_available,
        "cloud_available": snapshot.cloud_available,
        "last_discovery_at": (
            snapshot.last_discovery_at.isoformat() if snapshot.last_discovery_at else None
        ),
        "devices": [device_to_dict(device) for device in snapshot.devices],
    }


def batch_result_to_dict(result: BatchResult) -> Dict[str, Any]:
    """Convert a batch result into JSON-safe primitives."""
    return {
        "succeeded": result.succeeded,
        "failed": result.failed,
        "total": result.total,
        "errors": dict(result.errors),
    }
