"""
Cloud HTTP API Client

Provides access to the LIFX cloud API for listing and controlling lights.
Requires a personal access token.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..constants import CLOUD_BASE_URL_DEFAULT, CLOUD_REQUEST_TIMEOUT_DEFAULT

logger = logging.getLogger(__name__)


class LifxHttpApi:
    """Client for the LIFX HTTP API"""

    def __init__(
        self,
        token: str,
        base_url: str = CLOUD_BASE_URL_DEFAULT,
        timeout: float = CLOUD_REQUEST_TIMEOUT_DEFAULT,
    ):
        if not token:
            raise ValueError("Cloud API token is required")
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_headers(self) -> Dict[str, str]:
        """Get authentication headers for API requests"""
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self):
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def list_devices(self) -> List[Dict[str, Any]]:
        """
        List every light on the account.

        Returns:
            Decoded JSON objects as returned by ``GET /lights/all``

        Raises:
            httpx.HTTPError: On connection failure or non-2xx status
        """
        client = await self._get_client()
        response = await client.get(f"{self.base_url}/lights/all", headers=self._get_headers())
        response.raise_for_status()
        lights = response.json()
        if not isinstance(lights, list):
            raise ValueError(f"Expected a list of lights, got {type(lights).__name__}")
        logger.debug(f"Cloud API returned {len(lights)} lights")
        return lights

    async def _set_state(self, device_id: str, payload: Dict[str, Any]) -> None:
        client = await self._get_client()
        url = f"{self.base_url}/lights/id:{device_id}/state"
        response = await client.put(url, headers=self._get_headers(), json=payload)
        response.raise_for_status()

    async def set_power(self, device_id: str, on: bool, duration_sec: float) -> None:
        """
        Switch a light on or off.

        Args:
            device_id: Light id
            on: Target power state
            duration_sec: Fade duration in seconds
        """
        await self._set_state(device_id, {"power": "on" if on else "off", "duration": duration_sec})
        logger.info(f"Set power {'on' if on else 'off'} for light {device_id}")

    async def set_color(self, device_id: str, color: Dict[str, float]) -> None:
        """
        Set the full colour of a light.

        Args:
            device_id: Light id
            color: ``hue`` (0-360), ``saturation`` (0-1), ``brightness`` (0-1),
                ``kelvin`` and ``duration`` (seconds)
        """
        payload = {
            "color": (
                f"hue:{color['hue']} saturation:{color['saturation']} kelvin:{int(color['kelvin'])}"
            ),
            "brightness": color["brightness"],
            "duration": color.get("duration", 1.0),
        }
        await self._set_state(device_id, payload)
        logger.info(f"Set color for light {device_id}: {payload['color']}")
