"""FastAPI service exposing the client manager to automation layers.

The manager is created lazily and configured from ``LUMALINK_*`` environment
variables at startup. This package does not ship a local network protocol,
so the ``lumalink-service`` script on its own only controls lights through
the cloud API (``LUMALINK_CLOUD_TOKEN``). Hosts that own a local network
protocol install a manager built with it through :func:`set_manager` before
the app starts.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI

from .api.routes_devices import router as devices_router
from .config import ManagerConfig
from .errors import NoTransportAvailableError
from .manager import ClientManager
from .utils import get_env_int, get_env_str

logger = logging.getLogger(__name__)

HOST_ENV = "LUMALINK_HOST"
PORT_ENV = "LUMALINK_PORT"

# Global manager instance - initialized lazily on first access
_manager_instance: ClientManager | None = None


def get_manager() -> ClientManager:
    """Get or create the singleton client manager."""
    global _manager_instance
    if _manager_instance is None:
        _manager_instance = ClientManager()
    return _manager_instance


def set_manager(manager: ClientManager | None) -> None:
    """Replace the singleton client manager (None resets it)."""
    global _manager_instance
    _manager_instance = manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the manager on startup and release transports on shutdown."""
    manager = get_manager()
    app.state.manager = manager
    if not manager.is_initialized:
        try:
            await manager.initialize(ManagerConfig.from_env())
        except NoTransportAvailableError as exc:
            # Keep serving so health checks can report the problem
            logger.error("%s (%s)", exc.message, exc.details)
    try:
        yield
    finally:
        await manager.close()


app = FastAPI(title="lumalink", lifespan=lifespan)


@app.get("/api/health")
async def health_check() -> Dict[str, Any]:
    """Report which transports are up."""
    manager = get_manager()
    state = manager.connection_state
    return {
        "status": "healthy" if manager.is_initialized else "unavailable",
        "service": "lumalink",
        "transports": {
            "local": state.local_available,
            "cloud": state.cloud_available,
        },
        "devices": len(state.devices),
        "last_discovery_at": (
            state.last_discovery_at.isoformat() if state.last_discovery_at else None
        ),
    }


app.include_router(devices_router)


def main() -> None:  # pragma: no cover
    """Run the FastAPI service under Uvicorn."""
    import uvicorn

    from .logging_config import configure_logging, get_uvicorn_log_config

    configure_logging()
    host = get_env_str(HOST_ENV, "127.0.0.1")
    port = get_env_int(PORT_ENV, 8000)
    logger.info("Starting lumalink on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_config=get_uvicorn_log_config())


if __name__ == "__main__":
    main()
