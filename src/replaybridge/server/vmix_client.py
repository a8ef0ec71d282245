"""vMix HTTP API client.

vMix exposes a control endpoint at ``http://<host>:<port>/api/``. Functions
are invoked with a ``Function`` query parameter plus optional ``Value``,
``Input`` or ``Channel`` parameters; a bare GET returns the XML status.
Ref: https://www.vmix.com/help27/DeveloperAPI.html
"""

import logging

import httpx

from replaybridge.server.status_parser import StatusSnapshot, parse_status

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8088
DEFAULT_TIMEOUT = 5.0


class VmixError(Exception):
    """Error communicating with vMix."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class VmixCallError(VmixError):
    """vMix rejected a function call."""


class StatusFetchError(VmixError):
    """The status document could not be fetched."""


class VmixClient:
    """Client for the vMix web controller API.

    Usage:
        client = VmixClient("192.168.1.25")
        client.call("ReplayMarkInOut", Value=7)
        snapshot = client.get_status()
        client.call("Fade")
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.host = host
        self.port = port
        self._client = httpx.Client(timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}/api/"

    def set_host(self, host: str):
        """Point subsequent calls at a different vMix PC."""
        if host != self.host:
            logger.info("vMix target changed: %s -> %s", self.host, host)
        self.host = host

    def close(self):
        self._client.close()

    def _get(self, params: dict | None, error_cls: type[VmixError], label: str) -> httpx.Response:
        try:
            resp = self._client.get(self.base_url, params=params)
        except httpx.TimeoutException:
            raise error_cls(f"vMix {label} timed out ({self.base_url})")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise error_cls(f"Cannot reach vMix at {self.base_url}: {e}")
        if resp.is_error:
            raise error_cls(f"vMix {label} error {resp.status_code}: {resp.text}", resp.status_code)
        return resp

    def call(self, function: str, **params) -> bool:
        """Invoke a vMix function.

        Examples:
            client.call("Fade")
            client.call("ReplaySelectEvents1", Channel="A")
            client.call("ReplaySetLastEventText", Value="H • TD")
        """
        query = {"Function": function}
        query.update({k: str(v) for k, v in params.items()})
        logger.debug("vMix call %s %s", function, params)
        self._get(query, VmixCallError, "API")
        return True

    def get_status_xml(self) -> str:
        """Fetch the raw XML status document."""
        return self._get(None, StatusFetchError, "status").text

    def get_status(self) -> StatusSnapshot:
        return parse_status(self.get_status_xml())
