"""
ModWatch Polling Loops.

Optional schedulers that call a watcher's cycle runner on an interval.
Requires Python 3.11+.
"""

import asyncio
import threading
from collections.abc import Callable
from typing import Any

from utils.config import get_settings
from utils.logger import LoggerMixin, get_logger

logger = get_logger("poller")


class PollingLoop(LoggerMixin):
    """
    Runs a cycle function on a dedicated daemon thread.

    Every call to the cycle function, whether from the loop thread or
    through ``run_once``, is serialized by one lock, so a watcher driven
    by this loop never sees concurrent cycles. An exception from a cycle
    is logged and the loop keeps going.
    """

    def __init__(
        self,
        run_cycle: Callable[[], int],
        interval_ms: int | None = None,
    ) -> None:
        """
        Initialize the loop.

        Args:
            run_cycle: Zero-argument cycle function, e.g. ``ModificationWatcher.run_cycle``
            interval_ms: Delay between cycles; defaults to ``WatcherSettings.poll_interval_ms``
        """
        if interval_ms is None:
            interval_ms = get_settings().watcher.poll_interval_ms
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        self._run_cycle = run_cycle
        self._interval = interval_ms / 1000.0
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._cycles = 0
        self._failures = 0

    def run_once(self) -> int | None:
        """
        Run one cycle on the calling thread, serialized with the loop.

        Returns:
            The cycle's raised count, or None if the cycle failed
        """
        with self._lock:
            try:
                raised = self._run_cycle()
            except Exception as e:
                self._failures += 1
                self.log.error("poll_cycle_failed", error=str(e), exc_info=True)
                return None
            finally:
                self._cycles += 1
        return raised

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            self.run_once()
            self._wake_event.wait(self._interval)
            self._wake_event.clear()

    def start(self) -> None:
        """Start polling on a background thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._wake_event.clear()
        self._thread = threading.Thread(
            target=self._loop,
            name="ModWatchPoller",
            daemon=True,
        )
        self._thread.start()
        self.log.info("polling_started", interval_ms=int(self._interval * 1000))

    def stop(self, timeout: float = 5.0) -> None:
        """Stop polling and wait for an in-flight cycle to finish."""
        if self._thread is None:
            return

        self._stop_event.set()
        self._wake_event.set()
        self._thread.join(timeout=timeout)
        self._thread = None
        self.log.info("polling_stopped", cycles=self._cycles, failures=self._failures)

    def trigger(self) -> None:
        """Run the next cycle now instead of waiting out the interval."""
        self._wake_event.set()

    @property
    def is_running(self) -> bool:
        """Check if the loop thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def cycle_count(self) -> int:
        """Number of cycles run so far, including failed ones."""
        return self._cycles

    @property
    def failure_count(self) -> int:
        """Number of cycles that raised."""
        return self._failures

    def __enter__(self) -> "PollingLoop":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.stop()


async def poll_forever(
    run_cycle: Callable[[], int],
    stop_event: asyncio.Event,
    interval_ms: int | None = None,
) -> int:
    """
    Poll from an asyncio program until ``stop_event`` is set.

    Each cycle runs in the default executor so the event loop stays
    responsive during long scans; cycles never overlap.

    Args:
        run_cycle: Zero-argument cycle function
        stop_event: Set it to end polling after the current cycle
        interval_ms: Delay between cycles; defaults to ``WatcherSettings.poll_interval_ms``

    Returns:
        Number of cycles run
    """
    if interval_ms is None:
        interval_ms = get_settings().watcher.poll_interval_ms
    interval = interval_ms / 1000.0
    loop = asyncio.get_running_loop()

    cycles = 0
    while not stop_event.is_set():
        try:
            await loop.run_in_executor(None, run_cycle)
        except Exception as e:
            logger.error("poll_cycle_failed", error=str(e), exc_info=True)
        cycles += 1
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
        except TimeoutError:
            pass
    return cycles
