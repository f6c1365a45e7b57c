"""Utility package for general-purpose helpers.

Provides environment configuration, clock helpers and serializers.
"""

from .env import get_env_bool, get_env_float, get_env_int, get_env_str
from .serializers import batch_result_to_dict, device_to_dict, snapshot_to_dict
from .time import now_local, short_id

__all__ = [
    # Environment utilities
    "get_env_bool",
    "get_env_float",
    "get_env_int",
    "get_env_str",
    # Time and formatting utilities
    "short_id",
    "now_local",
    # Serializers
    "batch_result_to_dict",
    "device_to_dict",
    "snapshot_to_dict",
]
