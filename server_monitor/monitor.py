"""
Background monitoring worker.

Design:
- Runs in its own thread so the console stays responsive.
- Every cycle:
    1) Probe the target once with a short connect timeout.
    2) Fold the outcome into MonitorState: a success clears the failure counter,
       a failure bumps it; status goes OFFLINE only once the counter reaches the threshold.
    3) Publish the status to the StatusCell; on a flip, log it and call on_change.
    4) Wait until the next interval boundary (or until stop() is called).
- Methods:
    start(): begin the daemon thread
    stop(): signal the thread to stop; join() waits for it to exit
    poll_once(): run a single cycle synchronously (used by the loop and by tests)
- Thread-safety: MonitorState is only touched by the loop thread; readers go through the
  StatusCell, which does its own locking.
"""

import logging
import threading
import time
from typing import Callable, Optional

from .config import FAILURE_THRESHOLD, MONITOR_PROBE_TIMEOUT_MS, POLL_INTERVAL_SEC
from .models import MonitorState, Target
from .repository import StatusCell
from .utils import format_status, is_host_reachable

logger = logging.getLogger(__name__)

ProbeFn = Callable[[str, int, int], bool]
ChangeFn = Callable[[Target, bool], None]


class ServerMonitor:
    def __init__(
        self,
        target: Target,
        cell: Optional[StatusCell] = None,
        interval_sec: float = POLL_INTERVAL_SEC,
        failure_threshold: int = FAILURE_THRESHOLD,
        probe_timeout_ms: int = MONITOR_PROBE_TIMEOUT_MS,
        on_change: Optional[ChangeFn] = None,
        probe: ProbeFn = is_host_reachable,
    ):
        if interval_sec <= 0:
            raise ValueError(f"interval_sec must be > 0, got {interval_sec}")
        if failure_threshold < 1:
            raise ValueError(f"failure_threshold must be >= 1, got {failure_threshold}")
        if not 0 < probe_timeout_ms <= interval_sec * 1000:
            raise ValueError(
                f"probe_timeout_ms must be in (0, {interval_sec * 1000:g}], got {probe_timeout_ms}"
            )
        self.target = target
        self.cell = cell if cell is not None else StatusCell()
        self.interval_sec = interval_sec
        self.failure_threshold = failure_threshold
        self.probe_timeout_ms = probe_timeout_ms
        self.on_change = on_change
        self.probe = probe
        self._state = MonitorState()
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._loop, name=f"monitor-{target}", daemon=True)

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    def read_status(self) -> bool:
        return self.cell.read()

    def start(self) -> None:
        logger.info(
            "Monitoring %s every %ss (offline after %d failures)",
            self.target, self.interval_sec, self.failure_threshold,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the loop thread; returns True once it has exited."""
        if self._thread.ident is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def poll_once(self) -> MonitorState:
        try:
            reachable = bool(self.probe(self.target.host, self.target.port, self.probe_timeout_ms))
        except Exception:
            logger.exception("Probe of %s raised; counting it as a failure", self.target)
            reachable = False

        self._state = self._state.advance(reachable, self.failure_threshold)
        changed = self.cell.write(self._state.status)
        logger.debug(
            "Check IP: %s | Reachable: %s | Failures: %d | Status: %s",
            self.target, reachable, self._state.consecutive_failures, format_status(self._state.status),
        )

        if changed:
            if self._state.status:
                logger.info("%s is back Online", self.target)
            else:
                logger.warning(
                    "%s is Offline after %d consecutive failures",
                    self.target, self._state.consecutive_failures,
                )
            if self.on_change is not None:
                try:
                    self.on_change(self.target, self._state.status)
                except Exception:
                    logger.exception("Status change callback failed")
        return self._state

    def _loop(self) -> None:
        next_at = time.monotonic()
        while not self._stop.is_set():
            try:
                self.poll_once()
            except Exception:
                logger.exception("Monitor cycle for %s failed", self.target)

            next_at += self.interval_sec
            delay = next_at - time.monotonic()
            if delay < 0:
                # cycle overran its slot; re-anchor instead of bursting to catch up
                next_at = time.monotonic()
                delay = 0
            self._stop.wait(delay)
        logger.info("Monitor for %s stopped", self.target)


def start_monitor(
    target: Target,
    interval_sec: float = POLL_INTERVAL_SEC,
    failure_threshold: int = FAILURE_THRESHOLD,
    probe_timeout_ms: int = MONITOR_PROBE_TIMEOUT_MS,
    on_change: Optional[ChangeFn] = None,
) -> ServerMonitor:
    """Build a ServerMonitor for target and start its background loop."""
    monitor = ServerMonitor(
        target,
        interval_sec=interval_sec,
        failure_threshold=failure_threshold,
        probe_timeout_ms=probe_timeout_ms,
        on_change=on_change,
    )
    monitor.start()
    return monitor
