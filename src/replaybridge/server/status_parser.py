"""Replay status extraction from the vMix XML status document.

vMix firmware versions disagree on where replay state lives: some expose
``<replay>true</replay>``, others a ``<replay playing="True" .../>`` element,
and remaining time may be a child element or an attribute, in seconds,
milliseconds or timecode. The lookups below try each shape in order.
"""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^\d+(?:\.\d+)?$")
_TIMECODE_RE = re.compile(r"^(\d{1,2}):(\d{2}):(\d{2})(?:[.:](\d{1,3}))?$")

# Numbers above this are milliseconds, at or below it seconds.
SECONDS_CUTOFF = 1000

PLAYING_ELEMENTS = ("replay", "replayplaying", "replay_playing")
REMAINING_ELEMENTS = ("replayremaining", "remaining", "remainingtime", "timeremaining")
REMAINING_ATTRIBUTES = (
    "remaining",
    "remainingms",
    "remainingmilliseconds",
    "remainingtime",
    "timeremaining",
)


@dataclass
class StatusSnapshot:
    """Point-in-time replay state. ``None`` means the document gave no signal."""

    playing: bool | None = None
    remaining_ms: int | None = None

    def to_dict(self) -> dict:
        return {"isPlaying": self.playing, "remainingMs": self.remaining_ms}


def _parse_tree(doc) -> ET.Element | None:
    if isinstance(doc, ET.Element):
        return doc
    if not isinstance(doc, (str, bytes)) or not doc.strip():
        return None
    try:
        return ET.fromstring(doc)
    except ET.ParseError as e:
        logger.debug("Unparseable status document: %s", e)
        return None


def _local_name(tag) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1].lower()


def _find_elements(root: ET.Element, name: str):
    return [el for el in root.iter() if _local_name(el.tag) == name]


def _attributes(el: ET.Element) -> dict[str, str]:
    return {_local_name(k): v for k, v in el.attrib.items()}


def _replay_attributes(root: ET.Element) -> dict[str, str] | None:
    """Attributes of the first <replay> element that carries any."""
    for el in _find_elements(root, "replay"):
        if el.attrib:
            return _attributes(el)
    return None


def parse_duration_ms(raw) -> int | None:
    """Parse a duration as seconds, milliseconds, or HH:MM:SS[.fff] timecode."""
    if not isinstance(raw, str):
        return None
    value = raw.strip()
    if not value:
        return None

    if _NUMBER_RE.match(value):
        n = float(value)
        return round(n) if n > SECONDS_CUTOFF else round(n * 1000)

    m = _TIMECODE_RE.match(value)
    if not m:
        return None
    hours, minutes, seconds = int(m.group(1)), int(m.group(2)), int(m.group(3))
    fraction = int(m.group(4).ljust(3, "0")) if m.group(4) else 0
    return ((hours * 60 + minutes) * 60 + seconds) * 1000 + fraction


def _direct_playing(root: ET.Element) -> bool | None:
    for name in PLAYING_ELEMENTS:
        for el in _find_elements(root, name):
            text = (el.text or "").strip().lower()
            if text in ("true", "false"):
                return text == "true"
    return None


def _attribute_playing(attrs: dict[str, str]) -> bool | None:
    if attrs.get("playing"):
        return attrs["playing"].strip().lower() == "true"
    if attrs.get("state"):
        return attrs["state"].strip().lower() == "playing"
    if "speed" in attrs:
        try:
            return float(attrs["speed"]) > 0
        except ValueError:
            return False
    return None


def parse_playing_state(doc) -> bool | None:
    """Whether replay output is playing, or None if the document doesn't say."""
    root = _parse_tree(doc)
    if root is None:
        return None

    direct = _direct_playing(root)
    if direct is not None:
        return direct

    attrs = _replay_attributes(root)
    if attrs is None:
        return None
    return _attribute_playing(attrs)


def parse_remaining_ms(doc) -> int | None:
    """Remaining replay time in milliseconds, or None."""
    root = _parse_tree(doc)
    if root is None:
        return None

    for name in REMAINING_ELEMENTS:
        for el in _find_elements(root, name):
            parsed = parse_duration_ms(el.text)
            if parsed is not None:
                return parsed

    attrs = _replay_attributes(root)
    if attrs is None:
        return None
    for name in REMAINING_ATTRIBUTES:
        parsed = parse_duration_ms(attrs.get(name))
        if parsed is not None:
            return parsed
    return None


def parse_status(doc) -> StatusSnapshot:
    """Parse the document once and extract both fields."""
    root = _parse_tree(doc)
    if root is None:
        return StatusSnapshot()
    return StatusSnapshot(
        playing=parse_playing_state(root),
        remaining_ms=parse_remaining_ms(root),
    )
