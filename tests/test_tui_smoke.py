"""Smoke tests for TUI modules.

Tests import correctness and BridgeClient logic with mocked HTTP
responses. Does NOT test full Textual app rendering.
"""

from unittest.mock import patch

import httpx
import pytest

from replaybridge.tui.api_client import BridgeAPIError, BridgeClient

# --- Import Tests ---

class TestTUIImports:
    """Verify all TUI modules can be imported without error."""

    def test_import_app(self):
        from replaybridge.tui.app import ReplayBridgeApp
        assert ReplayBridgeApp is not None

    def test_import_widgets(self):
        from replaybridge.tui.widgets.header_bar import HeaderBar
        from replaybridge.tui.widgets.reel_status import ReelStatus
        from replaybridge.tui.widgets.tag_grid import TagGrid
        assert HeaderBar is not None
        assert ReelStatus is not None
        assert TagGrid is not None

    def test_app_construction(self):
        from replaybridge.tui.app import ReplayBridgeApp
        app = ReplayBridgeApp("booth.local", 3001, token="", sport="mma")
        assert app.sport.name == "MMA"


# --- BridgeClient Unit Tests (mocked HTTP) ---

def _response(status_code, body):
    return httpx.Response(status_code, json=body)


class TestBridgeClientMocked:
    """Test BridgeClient methods with mocked httpx responses."""

    @pytest.fixture()
    def client(self):
        c = BridgeClient("testhost", 3001)
        yield c
        c.close()

    def test_base_url_construction(self):
        c = BridgeClient("booth.local", 8080)
        assert c.base_url == "http://booth.local:8080"
        c.close()

    def test_auth_header(self):
        c = BridgeClient("testhost", 3001, token="s3cret")
        assert c._client.headers["Authorization"] == "Bearer s3cret"
        c.close()

    def test_no_auth_header_without_token(self, client):
        assert "Authorization" not in client._client.headers

    def test_get_health_success(self, client):
        resp = _response(200, {"ok": True, "vmixHost": "vmix-pc"})
        with patch.object(client._client, "request", return_value=resp) as req:
            result = client.get_health()
        assert result["vmixHost"] == "vmix-pc"
        req.assert_called_once_with("GET", "/health", json=None)

    def test_mark_highlight_posts_payload(self, client):
        payload = {"seconds": 7, "side": "H", "tag": "TD", "camsMode": "A_BOTH", "camBEnabled": True}
        with patch.object(client._client, "request", return_value=_response(200, {"ok": True})) as req:
            client.mark_highlight(payload)
        req.assert_called_once_with("POST", "/api/highlight", json=payload)

    def test_set_vmix_host(self, client):
        resp = _response(200, {"ok": True, "vmixHost": "10.0.0.9", "vmixPort": 8088})
        with patch.object(client._client, "request", return_value=resp) as req:
            result = client.set_vmix_host("10.0.0.9")
        assert result["vmixHost"] == "10.0.0.9"
        req.assert_called_once_with("POST", "/api/config/vmix", json={"vmixHost": "10.0.0.9"})

    def test_error_envelope_raises(self, client):
        resp = _response(400, {"ok": False, "error": "tag is required"})
        with patch.object(client._client, "request", return_value=resp):
            with pytest.raises(BridgeAPIError, match="tag is required") as exc_info:
                client.mark_highlight({})
        assert exc_info.value.status_code == 400

    def test_not_ok_without_message(self, client):
        with patch.object(client._client, "request", return_value=_response(500, {})):
            with pytest.raises(BridgeAPIError, match="HTTP 500"):
                client.play_reel()

    def test_connect_error_raises(self, client):
        with patch.object(
            client._client, "request", side_effect=httpx.ConnectError("refused"),
        ):
            with pytest.raises(BridgeAPIError, match="Cannot connect"):
                client.get_reel_status()

    def test_timeout_error_raises(self, client):
        with patch.object(
            client._client, "request", side_effect=httpx.ReadTimeout("timeout"),
        ):
            with pytest.raises(BridgeAPIError, match="timed out"):
                client.stop_reel()
