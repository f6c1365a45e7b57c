"""Application constants including transport and timing definitions.

Centralized defaults so the manager, both transports and the HTTP surface
agree on the same numbers.
"""

from __future__ import annotations

# ============================================================================
# Local Transport Timing Constants
# ============================================================================

# Discovery and state query timeouts (seconds)
LOCAL_DISCOVERY_TIMEOUT_DEFAULT = 5.0  # Budget for the initial local scan
LOCAL_DISCOVERY_GRACE = 1.0  # Extra time granted to the protocol beyond its scan budget
STATE_TIMEOUT_DEFAULT = 5.0  # Base wait budget for a single state query
STATE_TIMEOUT_BACKOFF = 1.5  # Wait budget multiplier per retry attempt
RETRY_ATTEMPTS_DEFAULT = 3
RETRY_DELAY_STEP = 0.5  # Linear pause between attempts: step * (attempt + 1)

# Settle window after a command before a read is trusted (seconds)
COOLDOWN_PERIOD_DEFAULT = 2.0

# Consecutive exhausted reads after which a device is presumed gone
MAX_CONSECUTIVE_FAILURES = 3

# ============================================================================
# Command Constants
# ============================================================================

COMMAND_TIMEOUT_DEFAULT = 10.0  # Acknowledgement budget for power/color commands
TRANSITION_MS_DEFAULT = 1000  # Fade duration sent with each command

# Zero-brightness safeguard target when only colour/temperature changes
SAFEGUARD_BRIGHTNESS = 100

# ============================================================================
# Value Ranges
# ============================================================================

HUE_MAX = 360
PERCENT_MAX = 100
KELVIN_MIN = 1500
KELVIN_MAX = 9000

# ============================================================================
# Cloud API Constants
# ============================================================================

CLOUD_BASE_URL_DEFAULT = "https://api.lifx.com/v1"
CLOUD_REQUEST_TIMEOUT_DEFAULT = 10.0

# Length of the device id prefix used in log lines and fallback labels
SHORT_ID_LENGTH = 8
