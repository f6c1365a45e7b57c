"""Manager configuration.

``ManagerConfig`` is validated by pydantic; ``from_env`` builds one from
``LUMALINK_*`` environment variables, falling back to defaults for missing
or invalid values.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    CLOUD_BASE_URL_DEFAULT,
    CLOUD_REQUEST_TIMEOUT_DEFAULT,
    COMMAND_TIMEOUT_DEFAULT,
    COOLDOWN_PERIOD_DEFAULT,
    LOCAL_DISCOVERY_TIMEOUT_DEFAULT,
    MAX_CONSECUTIVE_FAILURES,
    RETRY_ATTEMPTS_DEFAULT,
    STATE_TIMEOUT_DEFAULT,
    TRANSITION_MS_DEFAULT,
)
from .utils import get_env_bool, get_env_float, get_env_int, get_env_str

# Environment variable names
ENABLE_LOCAL_ENV = "LUMALINK_ENABLE_LOCAL_DISCOVERY"
LOCAL_TIMEOUT_ENV = "LUMALINK_LOCAL_TIMEOUT"
STATE_TIMEOUT_ENV = "LUMALINK_STATE_TIMEOUT"
RETRY_ATTEMPTS_ENV = "LUMALINK_RETRY_ATTEMPTS"
COOLDOWN_ENV = "LUMALINK_COOLDOWN_PERIOD"
COMMAND_TIMEOUT_ENV = "LUMALINK_COMMAND_TIMEOUT"
TRANSITION_ENV = "LUMALINK_TRANSITION_MS"
MAX_FAILURES_ENV = "LUMALINK_MAX_CONSECUTIVE_FAILURES"
CLOUD_TOKEN_ENV = "LUMALINK_CLOUD_TOKEN"
CLOUD_BASE_URL_ENV = "LUMALINK_CLOUD_BASE_URL"
CLOUD_TIMEOUT_ENV = "LUMALINK_CLOUD_TIMEOUT"
LOCAL_RESCAN_ENV = "LUMALINK_LOCAL_RESCAN"


class ManagerConfig(BaseModel):
    """Settings for the client manager and both transports.

    Durations are in seconds except ``default_transition_ms``.
    """

    enable_local_discovery: bool = True
    local_discovery_timeout: float = Field(default=LOCAL_DISCOVERY_TIMEOUT_DEFAULT, gt=0)
    state_timeout: float = Field(default=STATE_TIMEOUT_DEFAULT, gt=0)
    retry_attempts: int = Field(default=RETRY_ATTEMPTS_DEFAULT, ge=1)
    cooldown_period: float = Field(default=COOLDOWN_PERIOD_DEFAULT, ge=0)
    command_timeout: float = Field(default=COMMAND_TIMEOUT_DEFAULT, gt=0)
    default_transition_ms: int = Field(default=TRANSITION_MS_DEFAULT, ge=0)
    max_consecutive_failures: int = Field(default=MAX_CONSECUTIVE_FAILURES, ge=1)
    local_rescan_on_discover: bool = False

    cloud_token: Optional[str] = None
    cloud_base_url: str = CLOUD_BASE_URL_DEFAULT
    cloud_request_timeout: float = Field(default=CLOUD_REQUEST_TIMEOUT_DEFAULT, gt=0)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_env(cls) -> "ManagerConfig":
        """Build a config from ``LUMALINK_*`` environment variables."""
        return cls(
            enable_local_discovery=get_env_bool(ENABLE_LOCAL_ENV, True),
            local_discovery_timeout=get_env_float(LOCAL_TIMEOUT_ENV, LOCAL_DISCOVERY_TIMEOUT_DEFAULT),
            state_timeout=get_env_float(STATE_TIMEOUT_ENV, STATE_TIMEOUT_DEFAULT),
            retry_attempts=get_env_int(RETRY_ATTEMPTS_ENV, RETRY_ATTEMPTS_DEFAULT),
            cooldown_period=get_env_float(COOLDOWN_ENV, COOLDOWN_PERIOD_DEFAULT),
            command_timeout=get_env_float(COMMAND_TIMEOUT_ENV, COMMAND_TIMEOUT_DEFAULT),
            default_transition_ms=get_env_int(TRANSITION_ENV, TRANSITION_MS_DEFAULT),
            max_consecutive_failures=get_env_int(MAX_FAILURES_ENV, MAX_CONSECUTIVE_FAILURES),
            local_rescan_on_discover=get_env_bool(LOCAL_RESCAN_ENV, False),
            cloud_token=get_env_str(CLOUD_TOKEN_ENV),
            cloud_base_url=get_env_str(CLOUD_BASE_URL_ENV, CLOUD_BASE_URL_DEFAULT),
            cloud_request_timeout=get_env_float(CLOUD_TIMEOUT_ENV, CLOUD_REQUEST_TIMEOUT_DEFAULT),
        )
