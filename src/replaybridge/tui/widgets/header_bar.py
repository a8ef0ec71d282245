"""Header bar widget - shows bridge, vMix target and sticky settings."""

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Label


class HeaderBar(Widget):
    """Top bar showing the bridge target and the operator's sticky choices."""

    DEFAULT_CSS = """
    HeaderBar {
        dock: top;
        height: 1;
        background: $primary;
        color: $text;
        padding: 0 1;
    }
    HeaderBar .hb-title {
        text-style: bold;
        width: auto;
        margin-right: 2;
    }
    HeaderBar .hb-pill {
        width: auto;
        margin-right: 2;
        color: $text-muted;
    }
    HeaderBar .hb-spacer {
        width: 1fr;
    }
    HeaderBar .hb-status {
        width: auto;
        text-style: bold;
    }
    HeaderBar .hb-status.connected {
        color: $success;
    }
    HeaderBar .hb-status.disconnected {
        color: $error;
    }
    """

    bridge: reactive[str] = reactive("")
    vmix_host: reactive[str] = reactive("Loading...")
    preset: reactive[str] = reactive("General (5/7)")
    side: reactive[str] = reactive("H")
    cam_b_enabled: reactive[bool] = reactive(True)
    connected: reactive[bool] = reactive(False)

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Label("vMix Replay Controller", classes="hb-title")
            yield Label("", id="hb-bridge", classes="hb-pill")
            yield Label("", id="hb-vmix", classes="hb-pill")
            yield Label("", id="hb-preset", classes="hb-pill")
            yield Label("", id="hb-side", classes="hb-pill")
            yield Label("", id="hb-cam2", classes="hb-pill")
            yield Label("", classes="hb-spacer")
            yield Label("Connecting...", id="hb-status", classes="hb-status disconnected")

    def watch_bridge(self, bridge: str) -> None:
        self.query_one("#hb-bridge", Label).update(f"Bridge: {bridge}")

    def watch_vmix_host(self, host: str) -> None:
        self.query_one("#hb-vmix", Label).update(f"vMix: {host or 'Not set'}")

    def watch_preset(self, preset: str) -> None:
        self.query_one("#hb-preset", Label).update(f"Preset: {preset}")

    def watch_side(self, side: str) -> None:
        self.query_one("#hb-side", Label).update(f"Side: {'HOME' if side == 'H' else 'AWAY'}")

    def watch_cam_b_enabled(self, enabled: bool) -> None:
        self.query_one("#hb-cam2", Label).update(f"Cam 2: {'ON' if enabled else 'OFF'}")

    def watch_connected(self, connected: bool) -> None:
        status_label = self.query_one("#hb-status", Label)
        if connected:
            status_label.update("Connected")
            status_label.remove_class("disconnected")
            status_label.add_class("connected")
        else:
            status_label.update("Disconnected")
            status_label.remove_class("connected")
            status_label.add_class("disconnected")
