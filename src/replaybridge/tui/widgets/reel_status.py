"""Reel status widget - replay playing state and return-to-preview watcher."""

from textual.app import ComposeResult
from textual.widget import Widget
from textual.widgets import Label


def _format_ms(ms) -> str:
    """Format milliseconds as M:SS.t (or --:-- when unknown)."""
    if ms is None:
        return "--:--"
    ms = max(0, int(ms))
    minutes, rem = divmod(ms, 60_000)
    seconds, millis = divmod(rem, 1000)
    return f"{minutes}:{seconds:02d}.{millis // 100}"


def _playing_text(playing) -> str:
    if playing is True:
        return "PLAYING"
    if playing is False:
        return "Stopped"
    return "Unknown"


class ReelStatus(Widget):
    """One-line summary of /api/reel/status."""

    DEFAULT_CSS = """
    ReelStatus {
        height: 1;
        padding: 0 1;
    }
    ReelStatus Label {
        width: 1fr;
    }
    """

    def compose(self) -> ComposeResult:
        yield Label("Reel: --", id="rs-line")

    def update_status(self, status: dict) -> None:
        watcher = status.get("watcher") or {}
        watch_state = watcher.get("state", "idle") if watcher.get("active") else "idle"
        text = (
            f"Reel: {_playing_text(status.get('isPlaying'))}"
            f"  Remaining: {_format_ms(status.get('remainingMs'))}"
            f"  Return-to-preview: {watch_state}"
        )
        self.query_one("#rs-line", Label).update(text)

    def show_unavailable(self, message: str) -> None:
        self.query_one("#rs-line", Label).update(f"Reel: unavailable ({message})")
