"""ReplayBridge console - Textual operator panel for vMix replay.

Run with `replaybridge` on the operator's machine to tag highlights and
play the reel through the bridge server.
"""

import asyncio
import logging

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Input, Label

from replaybridge.tui.api_client import AsyncBridgeClient, BridgeAPIError
from replaybridge.tui.presets import MANUAL_TAG, SPORTS, get_sport, highlight_payload
from replaybridge.tui.widgets.header_bar import HeaderBar
from replaybridge.tui.widgets.reel_status import ReelStatus
from replaybridge.tui.widgets.tag_grid import TagGrid

logger = logging.getLogger(__name__)

STATUS_POLL_SECONDS = 1.0


class ReplayBridgeApp(App):
    """ReplayBridge operator console."""

    TITLE = "ReplayBridge"

    CSS = """
    #main {
        height: 1fr;
    }
    #sticky {
        width: 44;
        padding: 0 1;
        border-right: solid $primary;
    }
    #tags {
        width: 1fr;
        padding: 0 1;
    }
    .section-title {
        text-style: bold;
        margin: 1 0 0 0;
    }
    .row {
        height: auto;
    }
    .row Button {
        width: 1fr;
        min-width: 8;
    }
    Button.on {
        background: $accent;
        text-style: bold;
    }
    #host-input {
        width: 1fr;
    }
    """

    BINDINGS = [
        Binding("h", "set_side('H')", "Home", show=False),
        Binding("a", "set_side('A')", "Away", show=False),
        Binding("c", "toggle_cam_b", "Cam 2", show=False),
        Binding("p", "play_reel", "Play Reel"),
        Binding("s", "stop_reel", "Stop"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 3001,
        token: str = "",
        sport: str = "GENERAL",
    ):
        super().__init__()
        self.host = host
        self.port = port
        self.token = token
        self.sport = get_sport(sport)
        self.side = "H"
        self.cam_b_enabled = True
        self.api: AsyncBridgeClient | None = None
        self._busy = False
        self._poll_active = True

    def compose(self) -> ComposeResult:
        yield HeaderBar()
        with Horizontal(id="main"):
            with Vertical(id="sticky"):
                yield Label("vMix PC IP / Hostname", classes="section-title")
                with Horizontal(classes="row"):
                    yield Input(placeholder="e.g. 192.168.1.25", id="host-input")
                    yield Button("Save Host", id="save-host")
                yield Label("Sport", classes="section-title")
                with Horizontal(classes="row"):
                    for name, preset in SPORTS.items():
                        yield Button(preset.label, id=f"sport-{name}", classes="sport")
                yield Label("Side", classes="section-title")
                with Horizontal(classes="row"):
                    yield Button("HOME", id="side-H", classes="side")
                    yield Button("AWAY", id="side-A", classes="side")
                yield Label("Wide camera", classes="section-title")
                with Horizontal(classes="row"):
                    yield Button("Cam 2 On", id="cam2-on", classes="cam2")
                    yield Button("Cam 2 Off", id="cam2-off", classes="cam2")
                yield Label("Manual", classes="section-title")
                with Horizontal(classes="row"):
                    yield Button("", id="manual-short", classes="manual")
                    yield Button("", id="manual-long", classes="manual")
                yield Label("Reel", classes="section-title")
                with Horizontal(classes="row"):
                    yield Button("▶ Play Reel", id="reel-play", variant="success")
                    yield Button("■ Stop", id="reel-stop", variant="error")
            with VerticalScroll(id="tags"):
                yield Label("Highlight Tags (one tap)", classes="section-title")
                yield TagGrid(self.sport, self.cam_b_enabled)
        yield ReelStatus()

    async def on_mount(self) -> None:
        self.api = AsyncBridgeClient(self.host, self.port, token=self.token)
        header = self.query_one(HeaderBar)
        header.bridge = f"{self.host}:{self.port}"
        self._refresh_sticky()
        self._load_config()
        self._poll_status()

    async def on_unmount(self) -> None:
        self._poll_active = False
        if self.api:
            await self.api.close()

    # --- Rendering ---

    def _refresh_sticky(self) -> None:
        header = self.query_one(HeaderBar)
        header.preset = self.sport.label
        header.side = self.side
        header.cam_b_enabled = self.cam_b_enabled

        for name in SPORTS:
            self.query_one(f"#sport-{name}", Button).set_class(name == self.sport.name, "on")
        for side in ("H", "A"):
            self.query_one(f"#side-{side}", Button).set_class(side == self.side, "on")
        self.query_one("#cam2-on", Button).set_class(self.cam_b_enabled, "on")
        self.query_one("#cam2-off", Button).set_class(not self.cam_b_enabled, "on")
        self.query_one("#manual-short", Button).label = f"Manual Short (+{self.sport.short})"
        self.query_one("#manual-long", Button).label = f"Manual Long (+{self.sport.long})"

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        for button in self.query(Button):
            button.disabled = busy

    # --- Background work ---

    @work(exclusive=True, group="config")
    async def _load_config(self) -> None:
        header = self.query_one(HeaderBar)
        try:
            data = await self.api.get_vmix_config()
            host = data.get("vmixHost", "")
            header.vmix_host = host
            self.query_one("#host-input", Input).value = host
        except BridgeAPIError as e:
            header.vmix_host = ""
            self.notify(f"❌ {e}", severity="error", timeout=3)

    @work(exclusive=True, group="poll")
    async def _poll_status(self) -> None:
        """Poll the bridge for reel status every second."""
        while self._poll_active:
            try:
                status = await self.api.get_reel_status()
                self.query_one(HeaderBar).connected = True
                self.query_one(ReelStatus).update_status(status)
            except BridgeAPIError as e:
                # A 500 here means the bridge is up but vMix isn't answering
                self.query_one(HeaderBar).connected = e.status_code is not None
                self.query_one(ReelStatus).show_unavailable(str(e))
            await asyncio.sleep(STATUS_POLL_SECONDS)

    @work(group="command")
    async def _run(self, coro, success: str = "✅ Sent to vMix") -> None:
        """Send one command; commands are ignored while one is in flight."""
        if self._busy:
            coro.close()
            return
        self._set_busy(True)
        try:
            await coro
            self.notify(success, timeout=1.2)
        except BridgeAPIError as e:
            self.notify(f"❌ {e}", severity="error", timeout=3)
        finally:
            self._set_busy(False)

    def _send_highlight(self, seconds: int, tag: str, cams: str) -> None:
        if not self.api:
            return
        payload = highlight_payload(seconds, self.side, tag, cams, self.cam_b_enabled)
        self._run(self.api.mark_highlight(payload))

    # --- Events ---

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if self._busy:
            return
        if button_id.startswith("sport-"):
            self.sport = get_sport(button_id[6:])
            await self.query_one(TagGrid).update_preset(self.sport, self.cam_b_enabled)
            self._refresh_sticky()
        elif button_id.startswith("side-"):
            self.action_set_side(button_id[5:])
        elif button_id in ("cam2-on", "cam2-off"):
            self.cam_b_enabled = button_id == "cam2-on"
            await self.query_one(TagGrid).update_preset(self.sport, self.cam_b_enabled)
            self._refresh_sticky()
        elif button_id == "manual-short":
            self._send_highlight(self.sport.short, MANUAL_TAG, "A_BOTH")
        elif button_id == "manual-long":
            self._send_highlight(self.sport.long, MANUAL_TAG, "A_BOTH")
        elif button_id == "reel-play":
            self.action_play_reel()
        elif button_id == "reel-stop":
            self.action_stop_reel()
        elif button_id == "save-host":
            self._save_host()

    def on_tag_grid_tagged(self, message: TagGrid.Tagged) -> None:
        if self._busy:
            return
        tag = message.tag
        self._send_highlight(self.sport.seconds_for(tag.length), tag.tag, tag.cams)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "host-input":
            self._save_host()

    def _save_host(self) -> None:
        host = self.query_one("#host-input", Input).value.strip()
        if not host:
            self.notify("❌ vMix IP/hostname is required", severity="error", timeout=3)
            return
        if self.api:
            self._save_host_worker(host)

    @work(exclusive=True, group="config")
    async def _save_host_worker(self, host: str) -> None:
        try:
            data = await self.api.set_vmix_host(host)
            self.query_one(HeaderBar).vmix_host = data.get("vmixHost", host)
            self.notify("✅ vMix host saved", timeout=1.5)
        except BridgeAPIError as e:
            self.notify(f"❌ {e}", severity="error", timeout=3)

    # --- Actions ---

    def action_set_side(self, side: str) -> None:
        if side in ("H", "A"):
            self.side = side
            self._refresh_sticky()

    async def action_toggle_cam_b(self) -> None:
        self.cam_b_enabled = not self.cam_b_enabled
        await self.query_one(TagGrid).update_preset(self.sport, self.cam_b_enabled)
        self._refresh_sticky()

    def action_play_reel(self) -> None:
        if self.api and not self._busy:
            self._run(self.api.play_reel())

    def action_stop_reel(self) -> None:
        if self.api and not self._busy:
            self._run(self.api.stop_reel())

    def action_quit_app(self) -> None:
        self.exit()
