"""WorldScheduler — runs a step callable on a background thread at a fixed interval."""

from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class WorldScheduler:
    """Single background loop around ``step``.

    ``start()`` and ``stop()`` are idempotent.  The wait between steps is an
    ``Event.wait`` so ``stop()`` wakes the loop immediately; a step already
    running is allowed to finish.  Each loop owns its own stop event, so a
    loop that is still finishing its last step can never be revived by a
    later ``start()``.
    """

    def __init__(
        self,
        step: Callable[[], None],
        interval: float = 30.0,
        join_timeout: float = 5.0,
    ) -> None:
        self._step = step
        self._interval = interval
        self._join_timeout = join_timeout
        self._lock = threading.Lock()
        self._step_lock = threading.Lock()
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None
        self._steps = 0
        self._errors = 0

    # -- properties --

    @property
    def running(self) -> bool:
        return self._stop_event is not None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def steps(self) -> int:
        """Steps attempted so far (successful or not)."""
        return self._steps

    @property
    def errors(self) -> int:
        return self._errors

    # -- lifecycle --

    def start(self) -> bool:
        """Start the loop.  Returns False if it was already running."""
        with self._lock:
            if self._stop_event is not None:
                return False
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._thread = threading.Thread(
                target=self._run_loop, args=(stop_event,), name="world-sim", daemon=True,
            )
            self._thread.start()
        logger.info("World simulation started (interval=%.1fs)", self._interval)
        return True

    def stop(self) -> bool:
        """Stop the loop.  Returns False if it was not running."""
        with self._lock:
            if self._stop_event is None:
                return False
            self._stop_event.set()
            self._stop_event = None
            thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._join_timeout)
            if thread.is_alive():
                logger.warning("Simulation thread still finishing its step after %.1fs", self._join_timeout)
        logger.info("World simulation stopped after %d steps", self._steps)
        return True

    def step_once(self) -> bool:
        """Run one step synchronously.  Returns True if it completed without error."""
        with self._step_lock:
            self._steps += 1
            try:
                self._step()
                return True
            except Exception:
                self._errors += 1
                logger.exception("Simulation step %d failed", self._steps)
                return False

    # -- internals --

    def _run_loop(self, stop_event: threading.Event) -> None:
        logger.debug("Background simulation loop started")
        while not stop_event.is_set():
            self.step_once()
            if stop_event.wait(self._interval):
                break
        logger.debug("Background simulation loop exited")
