"""Transport clients: local network and cloud HTTP."""

from .cloud import CloudTransportClient, cloud_light_to_device
from .local import LocalTransportClient, raw_state_to_device

__all__ = [
    "CloudTransportClient",
    "LocalTransportClient",
    "cloud_light_to_device",
    "raw_state_to_device",
]
