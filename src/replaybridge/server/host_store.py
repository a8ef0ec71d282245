"""Persisted vMix host record.

The operator can retarget the bridge at a different vMix PC from the UI.
The chosen host is written to a small JSON file so it survives restarts.
"""

import json
import logging
import os

logger = logging.getLogger(__name__)


def normalize_host(host) -> str:
    if not isinstance(host, str):
        return ""
    return host.strip()


def is_valid_host(host: str) -> bool:
    """A bare hostname or IPv4 address: no port, path or whitespace."""
    return bool(host) and not any(c.isspace() or c in ":/" for c in host)


class HostStore:
    """Reads and writes the ``{"vmixHost": ...}`` record."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> str | None:
        """Return the saved host, or None if there isn't a usable one."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Unable to read %s: %s", self.path, e)
            return None

        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", self.path)
            return None
        host = normalize_host(data.get("vmixHost"))
        if host and not is_valid_host(host):
            logger.warning("Ignoring invalid vMix host %r in %s", host, self.path)
            return None
        return host or None

    def save(self, host: str):
        """Write the host record. Errors propagate to the caller."""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(json.dumps({"vmixHost": host}, indent=2) + "\n")
        logger.info("Saved vMix host %s to %s", host, self.path)
