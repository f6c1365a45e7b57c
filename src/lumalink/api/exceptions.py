"""Exception handling utilities for API routes.

Maps lumalink errors onto HTTP status codes for consistent responses.
"""

import functools
import logging
from typing import Any, Callable, TypeVar, cast

from fastapi import HTTPException

from ..errors import ErrorCode, LumaLinkError

logger = logging.getLogger(__name__)

# TypeVar for wrapping async functions
F = TypeVar("F", bound=Callable[..., Any])

ERROR_STATUS_CODES = {
    ErrorCode.NO_TRANSPORT_AVAILABLE: 503,
    ErrorCode.DEVICE_NOT_FOUND: 404,
    ErrorCode.STATE_QUERY_EXHAUSTED: 504,
    ErrorCode.CONTROL_TIMEOUT: 504,
    ErrorCode.TRANSPORT_ERROR: 502,
}


# ============================================================================
# HTTP Error Factory Functions
# ============================================================================


def device_not_found(device_id: str) -> HTTPException:
    """Create a standardized 404 error for device not found.

    Args:
        device_id: Device id that was not found

    Returns:
        HTTPException with 404 status and formatted message
    """
    return HTTPException(status_code=404, detail=f"Device not found: {device_id}")


def no_transport_available() -> HTTPException:
    """Create a standardized 503 error when no transport is up.

    Returns:
        HTTPException with 503 status
    """
    return HTTPException(
        status_code=503,
        detail="No connection method available. Enable local discovery or provide a cloud token.",
    )


def from_lumalink_error(exc: LumaLinkError) -> HTTPException:
    """Convert a lumalink error into an HTTPException carrying its code.

    Args:
        exc: Error raised by the manager or a transport

    Returns:
        HTTPException whose detail is the error's dictionary form
    """
    status_code = ERROR_STATUS_CODES.get(exc.code, 500)
    return HTTPException(status_code=status_code, detail=exc.to_dict())


# ============================================================================
# Error Handling Decorators
# ============================================================================


def handle_control_errors(func: F) -> F:
    """Decorator for consistent error handling across device endpoints.

    - HTTPException: Pass through (already formatted for response)
    - LumaLinkError: Mapped through ``ERROR_STATUS_CODES``

    Usage:
        @router.post("/devices/{device_id}/control")
        @handle_control_errors
        async def control_device(request: Request, device_id: str, body: PartialControlRequest):
            ...
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except LumaLinkError as e:
            logger.error(f"{e.code.value} in {func.__name__}: {e}")
            raise from_lumalink_error(e) from e

    return cast(F, wrapper)
