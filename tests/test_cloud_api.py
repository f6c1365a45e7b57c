"""
Tests for the cloud HTTP API client
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
import httpx

from lumalink.api.cloud_api import LifxHttpApi


@pytest.fixture
def api():
    """Create an API client with a test token"""
    return LifxHttpApi("test-token-123", base_url="https://cloud.test/v1/")


def _response(payload=None):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status = MagicMock()
    return response


class TestLifxHttpApiSetup:
    """Test client construction"""

    def test_requires_token(self):
        """Constructing without a token should fail"""
        with pytest.raises(ValueError):
            LifxHttpApi("")

    def test_headers_carry_bearer_token(self, api):
        """Requests should authenticate with the token"""
        headers = api._get_headers()
        assert headers["Authorization"] == "Bearer test-token-123"
        assert headers["Content-Type"] == "application/json"

    def test_base_url_trailing_slash_stripped(self, api):
        assert api.base_url == "https://cloud.test/v1"


class TestLifxHttpApiListDevices:
    """Test list_devices method"""

    @pytest.mark.asyncio
    async def test_list_devices_success(self, api):
        """Should return the decoded light list"""
        lights = [{"id": "abc", "label": "Desk", "power": "on"}]

        with patch.object(api, "_get_client", return_value=AsyncMock()) as mock_client:
            mock_client.return_value.get = AsyncMock(return_value=_response(lights))

            result = await api.list_devices()

            assert result == lights
            call_args = mock_client.return_value.get.call_args
            assert call_args[0][0] == "https://cloud.test/v1/lights/all"

    @pytest.mark.asyncio
    async def test_list_devices_rejects_non_list(self, api):
        """A JSON object instead of a list is a malformed answer"""
        with patch.object(api, "_get_client", return_value=AsyncMock()) as mock_client:
            mock_client.return_value.get = AsyncMock(return_value=_response({"error": "nope"}))

            with pytest.raises(ValueError):
                await api.list_devices()

    @pytest.mark.asyncio
    async def test_list_devices_http_error_propagates(self, api):
        """HTTP status errors are left to the transport to wrap"""
        mock_response = MagicMock()
        mock_response.status_code = 401
        error = httpx.HTTPStatusError("Unauthorized", request=MagicMock(), response=mock_response)

        with patch.object(api, "_get_client", return_value=AsyncMock()) as mock_client:
            failing = _response()
            failing.raise_for_status.side_effect = error
            mock_client.return_value.get = AsyncMock(return_value=failing)

            with pytest.raises(httpx.HTTPStatusError):
                await api.list_devices()


class TestLifxHttpApiCommands:
    """Test state-changing calls"""

    @pytest.mark.asyncio
    async def test_set_power_payload(self, api):
        """Power is sent as on/off with the duration in seconds"""
        with patch.object(api, "_get_client", return_value=AsyncMock()) as mock_client:
            mock_client.return_value.put = AsyncMock(return_value=_response())

            await api.set_power("abc", False, 0.5)

            call_args = mock_client.return_value.put.call_args
            assert call_args[0][0] == "https://cloud.test/v1/lights/id:abc/state"
            assert call_args[1]["json"] == {"power": "off", "duration": 0.5}

    @pytest.mark.asyncio
    async def test_set_color_payload(self, api):
        """Colour is encoded as a selector string plus fractional brightness"""
        with patch.object(api, "_get_client", return_value=AsyncMock()) as mock_client:
            mock_client.return_value.put = AsyncMock(return_value=_response())

            await api.set_color(
                "abc",
                {"hue": 120, "saturation": 0.5, "brightness": 0.25, "kelvin": 3500, "duration": 2.0},
            )

            payload = mock_client.return_value.put.call_args[1]["json"]
            assert payload == {
                "color": "hue:120 saturation:0.5 kelvin:3500",
                "brightness": 0.25,
                "duration": 2.0,
            }


class TestLifxHttpApiClose:
    """Test close method"""

    @pytest.mark.asyncio
    async def test_close_client(self, api):
        """Should close HTTP client"""
        mock_client = AsyncMock()
        api._client = mock_client

        await api.close()

        mock_client.aclose.assert_called_once()
        assert api._client is None

    @pytest.mark.asyncio
    async def test_close_without_client(self, api):
        """Closing before any request is a no-op"""
        await api.close()
        assert api._client is None
