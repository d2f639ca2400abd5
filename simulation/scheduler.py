"""
Recurring simulation runs.

A SimulationHandle owns one background thread that re-runs a job at a
fixed interval until cancelled. Each handle is independent: starting a
second schedule never stops the first, and cancelling one never affects
another.
"""

from __future__ import annotations

import threading
from typing import Any, Callable

from utils.logger import get_logger

logger = get_logger(__name__)


class SimulationHandle:
    """
    Handle to a recurring job.

    Example:
        handle = start_recurring(lambda: simulator.run(0.1, 0.5), interval=60)
        ...
        print(handle.latest.statistics.mean)
        handle.cancel()
    """

    def __init__(
        self,
        job: Callable[[], Any],
        interval: float,
        on_result: Callable[[Any], None] | None = None,
        run_immediately: bool = True,
    ):
        """
        Initialize handle.

        Args:
            job: Zero-argument callable run on every tick
            interval: Seconds between runs
            on_result: Called with each successful result; its errors are logged and recorded
            run_immediately: Run once at start instead of after the first interval
        """
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")

        self.job = job
        self.interval = interval
        self.on_result = on_result
        self.run_immediately = run_immediately

        self._lock = threading.Lock()
        self._latest: Any = None
        self._last_error: Exception | None = None
        self._runs = 0

        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    @property
    def latest(self) -> Any:
        """Most recent successful result, or None before the first run."""
        with self._lock:
            return self._latest

    @property
    def last_error(self) -> Exception | None:
        with self._lock:
            return self._last_error

    @property
    def runs(self) -> int:
        """Number of completed runs, failed ones included."""
        with self._lock:
            return self._runs

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> "SimulationHandle":
        """Start the background loop."""
        if self._thread and self._thread.is_alive():
            logger.warning("Recurring simulation already running")
            return self

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, daemon=True)
        self._thread.start()
        logger.info(f"Recurring simulation started (interval={self.interval}s)")
        return self

    def cancel(self, timeout: float | None = 5.0) -> None:
        """Stop the loop. Safe to call more than once."""
        self._stop_event.set()
        if self._thread and self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
        logger.info("Recurring simulation cancelled")

    def _run_once(self) -> None:
        try:
            result = self.job()
        except Exception as e:
            logger.error(f"Recurring simulation error: {e}")
            with self._lock:
                self._last_error = e
                self._runs += 1
            return

        with self._lock:
            self._latest = result
            self._last_error = None
            self._runs += 1

        if self.on_result is None:
            return

        try:
            self.on_result(result)
        except Exception as e:
            logger.error(f"Recurring simulation callback error: {e}")
            with self._lock:
                self._last_error = e

    def _loop(self) -> None:
        """Background loop."""
        if not self.run_immediately:
            if self._stop_event.wait(self.interval):
                return

        while not self._stop_event.is_set():
            self._run_once()
            self._stop_event.wait(self.interval)

    def __enter__(self) -> "SimulationHandle":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.cancel()


def start_recurring(
    job: Callable[[], Any],
    interval: float,
    on_result: Callable[[Any], None] | None = None,
    run_immediately: bool = True,
) -> SimulationHandle:
    """
    Run ``job`` every ``interval`` seconds on a background thread.

    Args:
        job: Zero-argument callable, typically a bound simulator run
        interval: Seconds between runs
        on_result: Called with each successful result
        run_immediately: Run once at start instead of after the first interval

    Returns:
        Started SimulationHandle; call ``cancel()`` to stop it
    """
    return SimulationHandle(job, interval, on_result, run_immediately).start()
