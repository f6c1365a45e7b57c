"""Timestamp and identifier formatting helpers."""

from datetime import datetime

from ..constants import SHORT_ID_LENGTH


def now_local() -> datetime:
    """Get the current wall-clock time in the local timezone.

    Used for user-facing timestamps such as the last discovery time. Elapsed
    time measurements use a monotonic clock instead.
    """
    return datetime.now().astimezone().replace(microsecond=0)


def short_id(device_id: str) -> str:
    """Return the leading characters of a device id for logs and fallback labels."""
    return device_id[:SHORT_ID_LENGTH]
