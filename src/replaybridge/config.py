"""Configuration loader for ReplayBridge."""

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python 3.9-3.10 fallback


DEFAULT_DUPLICATE_TAGS = ["SCORE", "GOAL", "BIG PLAY", "TD", "3PT", "DUNK"]


@dataclass
class VmixConfig:
    """Connection target for the vMix control API."""

    host: str = "VMIX-PC"
    port: int = 8088
    timeout: float = 5.0


@dataclass
class ReplayConfig:
    """vMix replay list and camera assignments."""

    highlights_list: int = 1
    duplicate_highlights_list: int = 2
    reel_play_list: int = 2
    cam_a: int = 1                # A = Hero
    cam_b: int = 2                # B = Wide
    duplicate_tags: list[str] = field(default_factory=lambda: list(DEFAULT_DUPLICATE_TAGS))


@dataclass
class ReelReturnConfig:
    """Timing for the return-to-preview watcher after a reel plays."""

    poll_ms: int = 500
    buffer_ms: int = 500
    max_wait_ms: int = 10 * 60 * 1000


@dataclass
class ServerConfig:
    """Configuration for the bridge HTTP server."""

    host: str = "0.0.0.0"
    port: int = 3001
    auth_token: str = ""          # blank = auth disabled
    static_dir: str = ""          # built web UI, optional
    data_dir: str = ""
    host_file: str = ""

    def __post_init__(self):
        if not self.data_dir:
            self.data_dir = os.path.expanduser("~/.replaybridge")
        if not self.host_file:
            self.host_file = os.path.join(self.data_dir, "vmix-host.config.json")


@dataclass
class ConsoleConfig:
    """Configuration for the terminal operator console."""

    bridge_host: str = "127.0.0.1"
    bridge_port: int = 3001
    auth_token: str = ""
    sport: str = "GENERAL"


@dataclass
class Config:
    """Top-level ReplayBridge configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    vmix: VmixConfig = field(default_factory=VmixConfig)
    replay: ReplayConfig = field(default_factory=ReplayConfig)
    reel_return: ReelReturnConfig = field(default_factory=ReelReturnConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)


def load_config(path: str | None = None, env: dict | None = None) -> Config:
    """Load configuration from replaybridge.toml, then apply env overrides.

    Search order:
    1. Explicit path argument
    2. ./replaybridge.toml
    3. ~/.config/replaybridge/replaybridge.toml
    4. Defaults
    """
    search_paths = []
    if path:
        search_paths.append(Path(path))
    search_paths.extend([
        Path("replaybridge.toml"),
        Path.home() / ".config" / "replaybridge" / "replaybridge.toml",
    ])

    config = Config()
    for p in search_paths:
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            config = _parse_config(data)
            break

    apply_env_overrides(config, os.environ if env is None else env)
    return config


def _parse_config(data: dict) -> Config:
    """Parse a TOML dict into Config."""
    config = Config()

    if "server" in data:
        s = data["server"]
        config.server = ServerConfig(
            host=s.get("host", config.server.host),
            port=s.get("port", config.server.port),
            auth_token=s.get("auth_token", ""),
            static_dir=s.get("static_dir", ""),
            data_dir=s.get("data_dir", ""),
            host_file=s.get("host_file", ""),
        )

    if "vmix" in data:
        v = data["vmix"]
        config.vmix = VmixConfig(
            host=v.get("host", config.vmix.host),
            port=v.get("port", config.vmix.port),
            timeout=v.get("timeout", config.vmix.timeout),
        )

    if "replay" in data:
        r = data["replay"]
        config.replay = ReplayConfig(
            highlights_list=r.get("highlights_list", config.replay.highlights_list),
            duplicate_highlights_list=r.get(
                "duplicate_highlights_list", config.replay.duplicate_highlights_list,
            ),
            reel_play_list=r.get("reel_play_list", config.replay.reel_play_list),
            cam_a=r.get("cam_a", config.replay.cam_a),
            cam_b=r.get("cam_b", config.replay.cam_b),
            duplicate_tags=[str(t).strip().upper() for t in r.get("duplicate_tags", DEFAULT_DUPLICATE_TAGS)],
        )

    if "reel_return" in data:
        rr = data["reel_return"]
        config.reel_return = ReelReturnConfig(
            poll_ms=rr.get("poll_ms", config.reel_return.poll_ms),
            buffer_ms=rr.get("buffer_ms", config.reel_return.buffer_ms),
            max_wait_ms=rr.get("max_wait_ms", config.reel_return.max_wait_ms),
        )

    if "console" in data:
        c = data["console"]
        config.console = ConsoleConfig(
            bridge_host=c.get("bridge_host", config.console.bridge_host),
            bridge_port=c.get("bridge_port", config.console.bridge_port),
            auth_token=c.get("auth_token", ""),
            sport=c.get("sport", config.console.sport).upper(),
        )

    return config


# env var -> (section, attribute, type)
_ENV_OVERRIDES = {
    "VMIX_HOST": ("vmix", "host", str),
    "VMIX_PORT": ("vmix", "port", int),
    "HIGHLIGHTS_LIST": ("replay", "highlights_list", int),
    "DUPLICATE_HIGHLIGHTS_LIST": ("replay", "duplicate_highlights_list", int),
    "REEL_PLAY_LIST": ("replay", "reel_play_list", int),
    "CAM_A": ("replay", "cam_a", int),
    "CAM_B": ("replay", "cam_b", int),
    "REEL_RETURN_POLL_MS": ("reel_return", "poll_ms", int),
    "REEL_RETURN_BUFFER_MS": ("reel_return", "buffer_ms", int),
    "REEL_RETURN_MAX_WAIT_MS": ("reel_return", "max_wait_ms", int),
    "AUTH_TOKEN": ("server", "auth_token", str),
    "PORT": ("server", "port", int),
}


def apply_env_overrides(config: Config, env) -> Config:
    """Apply environment variable overrides in place.

    Blank or unparseable values are ignored so a stray export can't
    zero out a list number.
    """
    for name, (section, attr, cast) in _ENV_OVERRIDES.items():
        raw = env.get(name, "")
        if not raw.strip():
            continue
        try:
            value = cast(raw.strip())
        except ValueError:
            continue
        setattr(getattr(config, section), attr, value)
    return config
