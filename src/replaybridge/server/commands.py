"""Highlight and reel commands.

Each operation is an ordered sequence of vMix function calls. Order
matters: a list must be selected before an event is marked, and the
camera and label calls act on whichever event vMix created last. A failed
call aborts the rest of the sequence and the error propagates to the
caller; calls that already went through are not rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from replaybridge.config import ReplayConfig

if TYPE_CHECKING:
    from replaybridge.server.reel_watcher import ReelReturnWatcher
    from replaybridge.server.vmix_client import VmixClient

logger = logging.getLogger(__name__)

VALID_SECONDS = (5, 7, 10)
VALID_SIDES = ("H", "A")
CAMS_A_ONLY = "A_ONLY"
CAMS_A_BOTH = "A_BOTH"
VALID_CAMS_MODES = (CAMS_A_ONLY, CAMS_A_BOTH)

EDIT_CHANNEL = "A"
OUTPUT_CHANNEL = "B"


class ValidationError(ValueError):
    """Request input was malformed or out of range."""


@dataclass
class HighlightRequest:
    seconds: int
    side: str
    tag: str
    cams_mode: str
    cam_b_enabled: bool = True

    @property
    def label(self) -> str:
        return f"{self.side} • {self.tag}"

    @property
    def cam_b_on(self) -> bool:
        return self.cams_mode == CAMS_A_BOTH and self.cam_b_enabled


def _coerce_seconds(value) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    if not n.is_integer():
        return None
    return int(n)


def validate_highlight(data: dict | None) -> HighlightRequest:
    """Build a HighlightRequest from a JSON body or raise ValidationError."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("request body must be a JSON object")

    seconds = _coerce_seconds(data.get("seconds"))
    if seconds not in VALID_SECONDS:
        raise ValidationError("seconds must be 5, 7, or 10")

    side = data.get("side")
    if side not in VALID_SIDES:
        raise ValidationError('side must be "H" or "A"')

    tag = data.get("tag")
    if not isinstance(tag, str) or not tag.strip():
        raise ValidationError("tag is required")

    cams_mode = data.get("camsMode")
    if cams_mode not in VALID_CAMS_MODES:
        raise ValidationError('camsMode must be "A_ONLY" or "A_BOTH"')

    cam_b_enabled = data.get("camBEnabled", True)
    if not isinstance(cam_b_enabled, bool):
        raise ValidationError("camBEnabled must be a boolean")

    return HighlightRequest(
        seconds=seconds,
        side=side,
        tag=tag.strip(),
        cams_mode=cams_mode,
        cam_b_enabled=cam_b_enabled,
    )


class ReplayCommands:
    """Highlight tagging and reel playback against a vMix replay."""

    def __init__(
        self,
        client: "VmixClient",
        watcher: "ReelReturnWatcher",
        settings: ReplayConfig | None = None,
    ):
        self.client = client
        self.watcher = watcher
        self.settings = settings or ReplayConfig()
        self.duplicate_tags = {t.upper() for t in self.settings.duplicate_tags}

    def _select_list(self, list_number: int):
        self.client.call(f"ReplaySelectEvents{list_number}", Channel=EDIT_CHANNEL)

    def _set_last_event_cameras(self, cam_b_on: bool):
        # Hero camera always on
        self.client.call("ReplayLastEventCameraOn", Value=self.settings.cam_a)
        if cam_b_on:
            self.client.call("ReplayLastEventCameraOn", Value=self.settings.cam_b)
        else:
            self.client.call("ReplayLastEventCameraOff", Value=self.settings.cam_b)

    def _create_event(self, req: HighlightRequest):
        self.client.call("ReplayMarkInOut", Value=req.seconds)
        self._set_last_event_cameras(req.cam_b_on)
        self.client.call("ReplaySetLastEventText", Value=req.label)

    def should_duplicate(self, tag: str) -> bool:
        s = self.settings
        return tag.upper() in self.duplicate_tags and s.duplicate_highlights_list != s.highlights_list

    def mark_highlight(self, req: HighlightRequest):
        """Create a replay event for the last ``req.seconds`` and label it.

        High-value tags are also copied into the duplicate list, then the
        primary list is reselected and its label re-applied so the primary
        event stays tagged.
        """
        s = self.settings
        self._select_list(s.highlights_list)
        self._create_event(req)

        if not self.should_duplicate(req.tag):
            logger.info("Highlight %s (+%ds) -> list %d", req.label, req.seconds, s.highlights_list)
            return

        self._select_list(s.duplicate_highlights_list)
        self._create_event(req)

        self._select_list(s.highlights_list)
        self.client.call("ReplaySetLastEventText", Value=req.label)
        logger.info(
            "Highlight %s (+%ds) -> lists %d and %d",
            req.label, req.seconds, s.highlights_list, s.duplicate_highlights_list,
        )

    def play_reel(self):
        """Play every event in the reel list to output, then watch for the end."""
        self._select_list(self.settings.reel_play_list)
        self.client.call("ReplayPlayAllEventsToOutput", Channel=OUTPUT_CHANNEL)
        self.watcher.start()
        logger.info("Playing reel from list %d", self.settings.reel_play_list)

    def stop_reel(self):
        self.watcher.stop()
        self.client.call("ReplayStop", Channel=OUTPUT_CHANNEL)
        logger.info("Reel stopped")

    def reel_status(self) -> dict:
        snapshot = self.client.get_status()
        result = snapshot.to_dict()
        result["watcher"] = self.watcher.status()
        return result
