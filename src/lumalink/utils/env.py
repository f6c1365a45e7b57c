"""Environment variable utilities."""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def get_env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    """Get string environment variable.

    Blank values are treated as unset.
    """
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


def get_env_bool(name: str, default: bool) -> bool:
    """Get boolean environment variable.

    Args:
        name: Environment variable name
        default: Default value if not found

    Returns:
        Boolean value from environment or default
    """
    raw = os.getenv(name)
    if raw is None:
        return default

    s = raw.strip()
    if s == "":
        return default

    lowered = s.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False

    try:
        return bool(int(s))
    except ValueError:
        return default


def get_env_float(name: str, default: float) -> float:
    """Get positive float environment variable.

    Args:
        name: Environment variable name
        default: Default value if not found, invalid or not positive

    Returns:
        Float value from environment or default
    """
    raw = os.getenv(name)
    if raw is None:
        return default

    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float value for %s: '%s'. Using default: %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Non-positive value for %s: '%s'. Using default: %s", name, raw, default)
        return default
    return value


def get_env_int(name: str, default: int) -> int:
    """Get positive integer environment variable.

    Args:
        name: Environment variable name
        default: Default value if not found, invalid or not positive

    Returns:
        Integer value from environment or default
    """
    raw = os.getenv(name)
    if raw is None:
        return default

    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid integer value for %s: '%s'. Using default: %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Non-positive value for %s: '%s'. Using default: %s", name, raw, default)
        return default
    return value
