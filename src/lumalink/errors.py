"""Error types and constants for consistent error handling across the library."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Standardized error codes for consistent error handling."""

    # Startup errors
    NO_TRANSPORT_AVAILABLE = "no_transport_available"

    # Device-related errors
    DEVICE_NOT_FOUND = "device_not_found"
    STATE_QUERY_EXHAUSTED = "state_query_exhausted"

    # Command-related errors
    CONTROL_TIMEOUT = "control_timeout"
    TRANSPORT_ERROR = "transport_error"

    @property
    def allows_failover(self) -> bool:
        """Whether a control failure with this code may be retried on the other transport."""
        return self in (ErrorCode.TRANSPORT_ERROR, ErrorCode.CONTROL_TIMEOUT)


class LumaLinkError(Exception):
    """Base exception class for lumalink errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        """Initialize the error.

        Args:
            code: Error code identifier
            message: Human-readable error message
            details: Additional error context and data
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.cause = cause

    @property
    def allows_failover(self) -> bool:
        """Shortcut for ``self.code.allows_failover``."""
        return self.code.allows_failover

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


# Specific error classes
class NoTransportAvailableError(LumaLinkError):
    """Raised at initialization when neither transport could be brought up."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        """Initialize no transport available error.

        Args:
            details: Per-transport failure reasons
        """
        super().__init__(
            ErrorCode.NO_TRANSPORT_AVAILABLE,
            "No connection method available. Enable local discovery or provide a cloud token.",
            details=details,
        )


class DeviceNotFoundError(LumaLinkError):
    """Raised when a device id is absent from the last discovery snapshot."""

    def __init__(self, device_id: str, details: Optional[Dict[str, Any]] = None):
        """Initialize device not found error.

        Args:
            device_id: Device id that was not found
            details: Additional error context
        """
        super().__init__(
            ErrorCode.DEVICE_NOT_FOUND,
            f"Device {device_id} not found",
            details={"device_id": device_id, **(details or {})},
        )


class StateQueryExhaustedError(LumaLinkError):
    """Raised when every local state query attempt for a device failed."""

    def __init__(self, device_id: str, attempts: int, failures: int):
        """Initialize state query exhausted error.

        Args:
            device_id: Device id that did not answer
            attempts: Number of query attempts made
            failures: Consecutive failure count after this exhaustion
        """
        super().__init__(
            ErrorCode.STATE_QUERY_EXHAUSTED,
            f"No state from device {device_id} after {attempts} attempts",
            details={
                "device_id": device_id,
                "attempts": attempts,
                "consecutive_failures": failures,
            },
        )


class ControlTimeoutError(LumaLinkError):
    """Raised when a command was not acknowledged within the command timeout."""

    def __init__(
        self,
        action: str,
        timeout: float,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize control timeout error.

        Args:
            action: Command action that timed out
            timeout: Timeout duration in seconds
            details: Additional error context
        """
        super().__init__(
            ErrorCode.CONTROL_TIMEOUT,
            f"Command '{action}' timed out after {timeout} seconds",
            details={"action": action, "timeout": timeout, **(details or {})},
        )


class TransportError(LumaLinkError):
    """Raised when an underlying transport call fails."""

    def __init__(
        self,
        transport: str,
        message: str,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize transport error.

        Args:
            transport: Name of the failing transport ("local" or "cloud")
            message: What failed
            cause: Original exception raised by the transport library
            details: Additional error context
        """
        if cause:
            message += f": {cause}"
        super().__init__(
            ErrorCode.TRANSPORT_ERROR,
            message,
            details={"transport": transport, **(details or {})},
            cause=cause,
        )
        self.transport = transport
