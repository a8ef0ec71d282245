"""Sport presets and one-tap tag tables for the operator console.

Each tag picks a clip length (short/long, resolved per sport) and a
default camera mode. Scoring plays usually look best on the hero camera
alone; defensive or chaotic plays get the wide camera for context.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TagPreset:
    tag: str
    length: str       # "short" | "long"
    cams: str         # "A_ONLY" | "A_BOTH"


@dataclass(frozen=True)
class SportPreset:
    name: str
    label: str
    short: int
    long: int
    tags: tuple[TagPreset, ...]

    def seconds_for(self, length: str) -> int:
        return self.short if length == "short" else self.long


MANUAL_TAG = "MANUAL"

SPORTS: dict[str, SportPreset] = {
    "GENERAL": SportPreset(
        name="GENERAL",
        label="General (5/7)",
        short=5,
        long=7,
        tags=(
            TagPreset("SCORE", "long", "A_ONLY"),
            TagPreset("GOAL", "long", "A_ONLY"),
            TagPreset("3PT", "long", "A_ONLY"),
            TagPreset("DUNK", "long", "A_ONLY"),
            TagPreset("FINISH", "long", "A_ONLY"),
            TagPreset("BLOCK", "short", "A_BOTH"),
            TagPreset("STEAL", "short", "A_BOTH"),
            TagPreset("SAVE", "short", "A_BOTH"),
            TagPreset("HIT", "short", "A_BOTH"),
            TagPreset("TURNOVER", "short", "A_BOTH"),
        ),
    ),
    "FOOTBALL": SportPreset(
        name="FOOTBALL",
        label="Football (7/10)",
        short=7,
        long=10,
        tags=(
            TagPreset("TD", "long", "A_BOTH"),
            TagPreset("INT", "long", "A_BOTH"),
            TagPreset("FUMBLE", "long", "A_BOTH"),
            TagPreset("SACK", "short", "A_ONLY"),
            TagPreset("BIG PLAY", "long", "A_BOTH"),
        ),
    ),
    "MMA": SportPreset(
        name="MMA",
        label="MMA (5/7)",
        short=5,
        long=7,
        tags=(
            TagPreset("KNOCKDOWN", "long", "A_ONLY"),
            TagPreset("KO/TKO", "long", "A_ONLY"),
            TagPreset("SUB ATTEMPT", "long", "A_BOTH"),
            TagPreset("TAKEDOWN", "long", "A_BOTH"),
            TagPreset("REVERSAL", "long", "A_BOTH"),
            TagPreset("STRIKING FLURRY", "short", "A_ONLY"),
            TagPreset("CLINCH", "short", "A_BOTH"),
            TagPreset("SCRAMBLE", "short", "A_BOTH"),
            TagPreset("SPRAWL", "short", "A_BOTH"),
            TagPreset("ESCAPE", "short", "A_BOTH"),
        ),
    ),
}


def get_sport(name: str | None) -> SportPreset:
    """Look up a sport preset, falling back to GENERAL."""
    return SPORTS.get((name or "").upper(), SPORTS["GENERAL"])


def cams_label(cams: str, cam_b_enabled: bool) -> str:
    if cams == "A_ONLY" or not cam_b_enabled:
        return "Cam 1 only"
    return "Cam 1 + Cam 2"


def highlight_payload(seconds: int, side: str, tag: str, cams: str, cam_b_enabled: bool) -> dict:
    """JSON body for POST /api/highlight."""
    return {
        "seconds": seconds,
        "side": side,
        "tag": tag,
        "camsMode": cams,
        "camBEnabled": cam_b_enabled,
    }
