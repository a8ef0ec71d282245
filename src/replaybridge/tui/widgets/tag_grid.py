"""Tag grid widget - one button per highlight tag for the current sport."""

from textual.app import ComposeResult
from textual.containers import Grid
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button

from replaybridge.tui.presets import SportPreset, TagPreset, cams_label


def tag_button_label(preset: SportPreset, tag: TagPreset, cam_b_enabled: bool) -> str:
    secs = preset.seconds_for(tag.length)
    return f"{tag.tag}\n+{secs}s • {cams_label(tag.cams, cam_b_enabled)}"


class TagGrid(Widget):
    """Grid of one-tap highlight buttons."""

    DEFAULT_CSS = """
    TagGrid {
        height: auto;
    }
    TagGrid Grid {
        grid-size: 3;
        grid-gutter: 1;
        height: auto;
    }
    TagGrid Button {
        width: 100%;
        height: 4;
    }
    """

    class Tagged(Message):
        """Posted when a tag button is pressed."""

        def __init__(self, tag: TagPreset) -> None:
            super().__init__()
            self.tag = tag

    def __init__(self, preset: SportPreset, cam_b_enabled: bool = True, **kwargs):
        super().__init__(**kwargs)
        self._preset = preset
        self._cam_b_enabled = cam_b_enabled

    def compose(self) -> ComposeResult:
        with Grid():
            for i, tag in enumerate(self._preset.tags):
                yield Button(
                    tag_button_label(self._preset, tag, self._cam_b_enabled),
                    id=f"tag-{i}",
                    classes="tag",
                )

    async def update_preset(self, preset: SportPreset, cam_b_enabled: bool) -> None:
        """Rebuild the buttons for a new sport or camera setting."""
        self._preset = preset
        self._cam_b_enabled = cam_b_enabled
        await self.query_one(Grid).remove()
        await self.mount(Grid(*[
            Button(tag_button_label(preset, tag, cam_b_enabled), id=f"tag-{i}", classes="tag")
            for i, tag in enumerate(preset.tags)
        ]))

    def set_disabled(self, disabled: bool) -> None:
        for button in self.query(Button):
            button.disabled = disabled

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if not button_id.startswith("tag-"):
            return
        event.stop()
        index = int(button_id[4:])
        self.post_message(self.Tagged(self._preset.tags[index]))
