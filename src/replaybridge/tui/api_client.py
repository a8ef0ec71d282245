"""HTTP client for communicating with the ReplayBridge server.

Provides both sync and async methods for all API endpoints.
Used by the console to poll reel status and send commands.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class BridgeAPIError(Exception):
    """Error communicating with the ReplayBridge server."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


def _unwrap(resp: httpx.Response) -> dict:
    """Return the JSON envelope, raising if the bridge reported failure."""
    try:
        data = resp.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    if resp.is_error or not data.get("ok"):
        message = data.get("error") or f"HTTP {resp.status_code}"
        raise BridgeAPIError(message, resp.status_code)
    return data


class BridgeClient:
    """HTTP client for the ReplayBridge REST API.

    Usage:
        client = BridgeClient("127.0.0.1", 3001, token="secret")
        client.mark_highlight({"seconds": 7, "side": "H", "tag": "TD", "camsMode": "A_BOTH"})
        client.play_reel()
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 3001, token: str = ""):
        self.host = host
        self.port = port
        self.base_url = f"http://{host}:{port}"
        self._client = httpx.Client(
            base_url=self.base_url, timeout=DEFAULT_TIMEOUT, headers=_auth_headers(token),
        )

    def close(self):
        self._client.close()

    def _request(self, method: str, path: str, data: dict | None = None) -> Any:
        try:
            resp = self._client.request(method, path, json=data)
        except httpx.ConnectError:
            raise BridgeAPIError(f"Cannot connect to {self.base_url}")
        except httpx.TimeoutException:
            raise BridgeAPIError("Request timed out")
        return _unwrap(resp)

    def _get(self, path: str) -> Any:
        return self._request("GET", path)

    def _post(self, path: str, data: dict | None = None) -> Any:
        return self._request("POST", path, data)

    def get_health(self) -> dict:
        return self._get("/health")

    def get_vmix_config(self) -> dict:
        return self._get("/api/config/vmix")

    def set_vmix_host(self, host: str) -> dict:
        return self._post("/api/config/vmix", {"vmixHost": host})

    def mark_highlight(self, payload: dict) -> dict:
        return self._post("/api/highlight", payload)

    def get_reel_status(self) -> dict:
        return self._get("/api/reel/status")

    def play_reel(self) -> dict:
        return self._post("/api/reel/play")

    def stop_reel(self) -> dict:
        return self._post("/api/reel/stop")


class AsyncBridgeClient:
    """Async HTTP client for the ReplayBridge REST API.

    For use with Textual's async workers.
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 3001, token: str = ""):
        self.host = host
        self.port = port
        self.base_url = f"http://{host}:{port}"
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=DEFAULT_TIMEOUT, headers=_auth_headers(token),
        )

    async def close(self):
        await self._client.aclose()

    async def _request(self, method: str, path: str, data: dict | None = None) -> Any:
        try:
            resp = await self._client.request(method, path, json=data)
        except httpx.ConnectError:
            raise BridgeAPIError(f"Cannot connect to {self.base_url}")
        except httpx.TimeoutException:
            raise BridgeAPIError("Request timed out")
        return _unwrap(resp)

    async def get_health(self) -> dict:
        return await self._request("GET", "/health")

    async def get_vmix_config(self) -> dict:
        return await self._request("GET", "/api/config/vmix")

    async def set_vmix_host(self, host: str) -> dict:
        return await self._request("POST", "/api/config/vmix", {"vmixHost": host})

    async def mark_highlight(self, payload: dict) -> dict:
        return await self._request("POST", "/api/highlight", payload)

    async def get_reel_status(self) -> dict:
        return await self._request("GET", "/api/reel/status")

    async def play_reel(self) -> dict:
        return await self._request("POST", "/api/reel/play")

    async def stop_reel(self) -> dict:
        return await self._request("POST", "/api/reel/stop")
