"""Shared test fixtures for ReplayBridge test suite."""

import threading

import pytest

from replaybridge.config import Config, ServerConfig
from replaybridge.server.app import create_app
from replaybridge.server.host_store import HostStore
from replaybridge.server.status_parser import StatusSnapshot
from replaybridge.server.vmix_client import StatusFetchError, VmixCallError


class FakeVmix:
    """Stand-in for VmixClient that records calls and replays scripted status.

    ``statuses`` is consumed one entry per poll; each entry is True/False/None
    for the playing flag, or an Exception instance to raise. Once exhausted
    the last entry repeats and ``exhausted`` is set.
    """

    def __init__(self, statuses=None, fail_on: str | None = None, host: str = "vmix-test", port: int = 8088):
        self.host = host
        self.port = port
        self.calls: list[tuple[str, dict]] = []
        self.statuses = list(statuses or [])
        self.fail_on = fail_on
        self.polls = 0
        self.exhausted = threading.Event()
        self.called = threading.Event()
        self._lock = threading.Lock()

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}/api/"

    def set_host(self, host: str):
        self.host = host

    @property
    def functions(self) -> list[str]:
        return [name for name, _ in self.calls]

    def call(self, function: str, **params) -> bool:
        with self._lock:
            self.calls.append((function, params))
        self.called.set()
        if self.fail_on and function == self.fail_on:
            raise VmixCallError(f"vMix API error 500: {function} failed", 500)
        return True

    def get_status(self) -> StatusSnapshot:
        with self._lock:
            self.polls += 1
            if not self.statuses:
                self.exhausted.set()
                return StatusSnapshot()
            if len(self.statuses) > 1:
                entry = self.statuses.pop(0)
            else:
                entry = self.statuses[0]
                self.exhausted.set()
        if isinstance(entry, Exception):
            raise entry
        return StatusSnapshot(playing=entry, remaining_ms=None)


@pytest.fixture
def fake_vmix():
    return FakeVmix()


@pytest.fixture
def status_error():
    return StatusFetchError("Cannot reach vMix at http://vmix-test:8088/api/")


@pytest.fixture
def host_store(tmp_path):
    return HostStore(str(tmp_path / "vmix-host.config.json"))


@pytest.fixture
def config(tmp_path):
    cfg = Config(server=ServerConfig(data_dir=str(tmp_path / "data")))
    cfg.reel_return.poll_ms = 10
    cfg.reel_return.buffer_ms = 10
    cfg.reel_return.max_wait_ms = 2000
    return cfg


@pytest.fixture
def app(config, fake_vmix, host_store):
    """Create a Flask test app backed by a fake vMix."""
    app = create_app(config, client=fake_vmix, host_store=host_store)
    app.config["TESTING"] = True
    yield app
    app.watcher.stop()


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()
