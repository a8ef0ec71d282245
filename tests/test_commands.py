"""Tests for highlight/reel command sequences and request validation."""

import pytest

from replaybridge.config import ReplayConfig
from replaybridge.server.commands import (
    HighlightRequest,
    ReplayCommands,
    ValidationError,
    validate_highlight,
)
from replaybridge.server.reel_watcher import ReelReturnWatcher
from replaybridge.server.vmix_client import VmixCallError

from conftest import FakeVmix


class RecordingWatcher:
    def __init__(self, vmix):
        self.vmix = vmix
        self.events = []

    def start(self):
        self.vmix.calls.append(("<watch:start>", {}))
        self.events.append("start")

    def stop(self):
        self.vmix.calls.append(("<watch:stop>", {}))
        self.events.append("stop")

    def status(self):
        return {"active": False, "state": "idle", "sawPlayback": False, "elapsed": 0.0}


def _commands(vmix=None, **settings):
    vmix = vmix or FakeVmix()
    return ReplayCommands(vmix, RecordingWatcher(vmix), ReplayConfig(**settings)), vmix


def _req(**overrides):
    values = {"seconds": 7, "side": "H", "tag": "SACK", "cams_mode": "A_BOTH", "cam_b_enabled": True}
    values.update(overrides)
    return HighlightRequest(**values)


class TestValidateHighlight:
    def _valid(self, **overrides):
        data = {"seconds": 7, "side": "H", "tag": "TD", "camsMode": "A_BOTH", "camBEnabled": True}
        data.update(overrides)
        return data

    def test_valid(self):
        req = validate_highlight(self._valid())
        assert req == HighlightRequest(7, "H", "TD", "A_BOTH", True)

    def test_numeric_string_seconds(self):
        assert validate_highlight(self._valid(seconds="10")).seconds == 10

    def test_float_seconds(self):
        assert validate_highlight(self._valid(seconds=5.0)).seconds == 5

    @pytest.mark.parametrize("seconds", [0, 3, 6, 8, 15, "abc", "", None, True, 7.5])
    def test_rejects_bad_seconds(self, seconds):
        with pytest.raises(ValidationError, match="seconds"):
            validate_highlight(self._valid(seconds=seconds))

    @pytest.mark.parametrize("side", ["h", "HOME", "B", "", None])
    def test_rejects_bad_side(self, side):
        with pytest.raises(ValidationError, match="side"):
            validate_highlight(self._valid(side=side))

    @pytest.mark.parametrize("tag", ["", "   ", None, 5])
    def test_rejects_empty_tag(self, tag):
        with pytest.raises(ValidationError, match="tag"):
            validate_highlight(self._valid(tag=tag))

    @pytest.mark.parametrize("mode", ["A", "B_ONLY", "a_only", "", None])
    def test_rejects_bad_cams_mode(self, mode):
        with pytest.raises(ValidationError, match="camsMode"):
            validate_highlight(self._valid(camsMode=mode))

    def test_rejects_non_boolean_cam_b(self):
        with pytest.raises(ValidationError, match="camBEnabled"):
            validate_highlight(self._valid(camBEnabled="yes"))

    def test_cam_b_defaults_on(self):
        data = self._valid()
        del data["camBEnabled"]
        assert validate_highlight(data).cam_b_enabled is True

    def test_tag_trimmed(self):
        assert validate_highlight(self._valid(tag="  BIG PLAY ")).tag == "BIG PLAY"

    def test_empty_body(self):
        with pytest.raises(ValidationError):
            validate_highlight(None)

    @pytest.mark.parametrize("body", [[1, 2], "x", 7])
    def test_rejects_non_object_body(self, body):
        with pytest.raises(ValidationError, match="JSON object"):
            validate_highlight(body)


class TestHighlightRequest:
    def test_label(self):
        assert _req(side="A", tag="GOAL").label == "A • GOAL"

    def test_cam_b_on_requires_both(self):
        assert _req(cams_mode="A_BOTH", cam_b_enabled=True).cam_b_on is True
        assert _req(cams_mode="A_BOTH", cam_b_enabled=False).cam_b_on is False
        assert _req(cams_mode="A_ONLY", cam_b_enabled=True).cam_b_on is False


class TestMarkHighlight:
    def test_single_list_sequence(self):
        commands, vmix = _commands()
        commands.mark_highlight(_req(tag="SACK"))
        assert vmix.calls == [
            ("ReplaySelectEvents1", {"Channel": "A"}),
            ("ReplayMarkInOut", {"Value": 7}),
            ("ReplayLastEventCameraOn", {"Value": 1}),
            ("ReplayLastEventCameraOn", {"Value": 2}),
            ("ReplaySetLastEventText", {"Value": "H • SACK"}),
        ]

    def test_wide_camera_off_for_a_only(self):
        commands, vmix = _commands()
        commands.mark_highlight(_req(cams_mode="A_ONLY"))
        assert ("ReplayLastEventCameraOff", {"Value": 2}) in vmix.calls
        assert ("ReplayLastEventCameraOn", {"Value": 2}) not in vmix.calls

    def test_wide_camera_off_when_disabled(self):
        commands, vmix = _commands()
        commands.mark_highlight(_req(cams_mode="A_BOTH", cam_b_enabled=False))
        assert vmix.functions[2:4] == ["ReplayLastEventCameraOn", "ReplayLastEventCameraOff"]

    def test_high_value_tag_duplicates(self):
        commands, vmix = _commands()
        commands.mark_highlight(_req(seconds=10, side="A", tag="TD", cams_mode="A_ONLY"))
        label = {"Value": "A • TD"}
        assert vmix.calls == [
            ("ReplaySelectEvents1", {"Channel": "A"}),
            ("ReplayMarkInOut", {"Value": 10}),
            ("ReplayLastEventCameraOn", {"Value": 1}),
            ("ReplayLastEventCameraOff", {"Value": 2}),
            ("ReplaySetLastEventText", label),
            ("ReplaySelectEvents2", {"Channel": "A"}),
            ("ReplayMarkInOut", {"Value": 10}),
            ("ReplayLastEventCameraOn", {"Value": 1}),
            ("ReplayLastEventCameraOff", {"Value": 2}),
            ("ReplaySetLastEventText", label),
            ("ReplaySelectEvents1", {"Channel": "A"}),
            ("ReplaySetLastEventText", label),
        ]

    def test_no_duplicate_when_lists_match(self):
        commands, vmix = _commands(highlights_list=3, duplicate_highlights_list=3)
        commands.mark_highlight(_req(tag="GOAL"))
        assert vmix.functions.count("ReplayMarkInOut") == 1
        assert vmix.functions[0] == "ReplaySelectEvents3"

    def test_custom_cameras_and_lists(self):
        commands, vmix = _commands(highlights_list=4, duplicate_highlights_list=6, cam_a=3, cam_b=5)
        commands.mark_highlight(_req(tag="SCORE"))
        assert vmix.calls[0] == ("ReplaySelectEvents4", {"Channel": "A"})
        assert vmix.calls[2] == ("ReplayLastEventCameraOn", {"Value": 3})
        assert vmix.calls[3] == ("ReplayLastEventCameraOn", {"Value": 5})
        assert vmix.calls[5] == ("ReplaySelectEvents6", {"Channel": "A"})

    def test_custom_duplicate_tags(self):
        commands, vmix = _commands(duplicate_tags=["SACK"])
        commands.mark_highlight(_req(tag="SACK"))
        assert vmix.functions.count("ReplayMarkInOut") == 2

    @pytest.mark.parametrize("tag", ["score", "Score", "big play"])
    def test_high_value_tag_match_ignores_case(self, tag):
        commands, vmix = _commands()
        commands.mark_highlight(_req(tag=tag))
        assert vmix.functions.count("ReplayMarkInOut") == 2
        assert ("ReplaySelectEvents2", {"Channel": "A"}) in vmix.calls

    def test_should_duplicate(self):
        commands, _ = _commands()
        assert commands.should_duplicate("td")
        assert not commands.should_duplicate("SACK")

    def test_failure_aborts_sequence(self):
        vmix = FakeVmix(fail_on="ReplayMarkInOut")
        commands, _ = _commands(vmix)
        with pytest.raises(VmixCallError):
            commands.mark_highlight(_req(tag="TD"))
        assert vmix.functions == ["ReplaySelectEvents1", "ReplayMarkInOut"]


class TestReel:
    def test_play_reel_sequence(self):
        commands, vmix = _commands()
        commands.play_reel()
        assert vmix.calls == [
            ("ReplaySelectEvents2", {"Channel": "A"}),
            ("ReplayPlayAllEventsToOutput", {"Channel": "B"}),
            ("<watch:start>", {}),
        ]

    def test_play_reel_custom_list(self):
        commands, vmix = _commands(reel_play_list=5)
        commands.play_reel()
        assert vmix.functions[0] == "ReplaySelectEvents5"

    def test_play_failure_does_not_start_watcher(self):
        vmix = FakeVmix(fail_on="ReplayPlayAllEventsToOutput")
        commands, _ = _commands(vmix)
        with pytest.raises(VmixCallError):
            commands.play_reel()
        assert commands.watcher.events == []

    def test_stop_reel_cancels_watch_first(self):
        commands, vmix = _commands()
        commands.stop_reel()
        assert vmix.calls == [
            ("<watch:stop>", {}),
            ("ReplayStop", {"Channel": "B"}),
        ]

    def test_stop_reel_cancels_real_watch(self):
        vmix = FakeVmix(statuses=[True])
        watcher = ReelReturnWatcher(vmix, poll_interval=0.01, buffer_delay=0.01, max_wait=5)
        commands = ReplayCommands(vmix, watcher)
        commands.play_reel()
        watch = watcher.active
        assert vmix.exhausted.wait(timeout=5)
        commands.stop_reel()
        watch.join(timeout=5)
        assert watch.cancelled
        assert watcher.active is None
        assert "Fade" not in vmix.functions

    def test_reel_status(self):
        vmix = FakeVmix(statuses=[True])
        commands, _ = _commands(vmix)
        status = commands.reel_status()
        assert status["isPlaying"] is True
        assert status["remainingMs"] is None
        assert status["watcher"]["state"] == "idle"
