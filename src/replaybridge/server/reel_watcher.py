"""Return-to-preview watcher for replay reels.

vMix has no "playback ended" event, only a point-in-time playing flag in
its status document. After a reel is sent to output, a background thread
polls status and waits for the playing flag to go true and then false
again. On that falling edge it waits a short buffer and issues one
``Fade`` so the program output transitions back to the live preview.

Only one watch is active at a time. Starting a new one cancels the old
one; a cancelled watch makes no further device calls even if a status
fetch was in flight when it was cancelled.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from replaybridge.server.vmix_client import VmixError

if TYPE_CHECKING:
    from replaybridge.server.vmix_client import VmixClient

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_BUFFER_DELAY = 0.5
DEFAULT_MAX_WAIT = 10 * 60

TRANSITION_FUNCTION = "Fade"

# Watch states
WATCHING = "watching"
PLAYBACK_SEEN = "playback_seen"
TRANSITIONING = "transitioning"
DONE = "done"
TIMED_OUT = "timed_out"
CANCELLED = "cancelled"


class ReelWatch:
    """A single watch over one reel playback."""

    def __init__(self, clock=time.monotonic):
        self._cancelled = threading.Event()
        self._clock = clock
        self.saw_playback = False
        self.started_at = clock()
        self._state = WATCHING
        self._state_lock = threading.Lock()
        self._thread: threading.Thread | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def elapsed(self) -> float:
        return self._clock() - self.started_at

    @property
    def state(self) -> str:
        return self._state

    @state.setter
    def state(self, value: str):
        # Once cancelled, the poll thread may not move the watch to another state
        with self._state_lock:
            if self._state != CANCELLED:
                self._state = value

    def cancel(self):
        with self._state_lock:
            self._cancelled.set()
            if self._state not in (DONE, TIMED_OUT):
                self._state = CANCELLED

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``. Returns True if cancelled meanwhile."""
        return self._cancelled.wait(seconds)

    def join(self, timeout: float | None = None):
        if self._thread:
            self._thread.join(timeout=timeout)

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


class ReelReturnWatcher:
    """Owns the active ReelWatch and runs its polling loop.

    Args:
        client: vMix client used for status polls and the transition call
        poll_interval: Seconds between status polls
        buffer_delay: Seconds to wait after playback ends before fading
        max_wait: Give up (without transitioning) after this many seconds
    """

    def __init__(
        self,
        client: "VmixClient",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        buffer_delay: float = DEFAULT_BUFFER_DELAY,
        max_wait: float = DEFAULT_MAX_WAIT,
        clock=time.monotonic,
    ):
        self.client = client
        self.poll_interval = poll_interval
        self.buffer_delay = buffer_delay
        self.max_wait = max_wait
        self._clock = clock
        self._active: ReelWatch | None = None
        self._lock = threading.Lock()

    @property
    def active(self) -> ReelWatch | None:
        return self._active

    def start(self) -> ReelWatch:
        """Cancel any running watch and start a new one."""
        watch = ReelWatch(clock=self._clock)
        with self._lock:
            previous = self._active
            if previous is not None:
                previous.cancel()
                logger.info("Superseded previous reel watch")
            self._active = watch

        watch._thread = threading.Thread(
            target=self._run, args=(watch,), daemon=True, name="reel-return",
        )
        watch._thread.start()
        logger.info(
            "Watching replay output (poll=%.2fs, buffer=%.2fs, max=%ds)",
            self.poll_interval, self.buffer_delay, self.max_wait,
        )
        return watch

    def stop(self):
        """Cancel the active watch so no pending transition fires."""
        with self._lock:
            watch = self._active
            self._active = None
        if watch is not None:
            watch.cancel()
            logger.info("Reel watch cancelled")

    def _release(self, watch: ReelWatch):
        with self._lock:
            if self._active is watch:
                self._active = None

    def status(self) -> dict:
        watch = self._active
        if watch is None:
            return {"active": False, "state": "idle", "sawPlayback": False, "elapsed": 0.0}
        return {
            "active": True,
            "state": watch.state,
            "sawPlayback": watch.saw_playback,
            "elapsed": round(watch.elapsed, 1),
        }

    def _run(self, watch: ReelWatch):
        while not watch.wait(self.poll_interval):
            if watch.elapsed > self.max_wait:
                logger.warning("Timed out waiting for replay to end; not forcing transition.")
                watch.state = TIMED_OUT
                self._release(watch)
                return

            try:
                snapshot = self.client.get_status()
            except VmixError as e:
                logger.warning("Unable to poll replay status: %s", e)
                continue

            # A fetch that was in flight when we were cancelled is discarded.
            if watch.cancelled:
                return

            if snapshot.playing is True:
                if not watch.saw_playback:
                    logger.debug("Replay playback observed")
                watch.saw_playback = True
                watch.state = PLAYBACK_SEEN
            elif snapshot.playing is False and watch.saw_playback:
                self._transition(watch)
                return

    def _transition(self, watch: ReelWatch):
        watch.state = TRANSITIONING
        if watch.wait(self.buffer_delay):
            return
        try:
            self.client.call(TRANSITION_FUNCTION)
            logger.info("Replay finished; transitioned output back to preview")
        except VmixError as e:
            logger.warning("Failed to transition from replay output back to preview: %s", e)
        finally:
            watch.state = DONE
            self._release(watch)
