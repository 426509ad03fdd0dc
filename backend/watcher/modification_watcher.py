"""
ModWatch Modification Watcher.

Polling change detection over a set of watch roots. Each call runs
one scan-and-raise cycle; scheduling is left to the caller.
Requires Python 3.11+.
"""

import os
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from fsutil.models import FileInfo
from utils.config import get_settings
from utils.logger import LoggerMixin, get_logger
from watcher.history import HoldOffPolicy, RaiseHistory
from watcher.scanner import DirFilter, Scanner
from watcher.watch_config import ChangeCallback, NotifyPolicy, WatchConfig


class ModificationWatcher(LoggerMixin):
    """
    Re-scans watch roots on demand and raises paths modified since their last raise.

    A path is raised when it was never raised before, or when its
    modification time is at or after the start of the cycle that last
    raised it. While the newest modification seen in a cycle is younger
    than the hold-off period nothing is raised at all, except on the
    first cycle, which always raises everything it finds.

    Not thread-safe: callers must serialize ``run_cycle``. Separate
    instances share nothing and may run concurrently.

    Usage:
        watcher = ModificationWatcher(WatchConfig(
            recursive_roots=["src"],
            suffix_filter=".py",
            hold_off_ms=500,
            on_changes=lambda changed, started: print(sorted(changed)),
        ))
        watcher.run_cycle()
    """

    def __init__(self, config: WatchConfig) -> None:
        """
        Initialize the watcher. No filesystem access happens here.

        Args:
            config: Watch roots, filters, hold-off and change callback
        """
        self._config = config
        self._scanner = Scanner(
            lister=config.lister,
            stat=config.stat,
            suffix_filter=config.suffix_filter,
            dir_filter=config.dir_filter,
        )
        self._history = RaiseHistory()
        self._hold_off = HoldOffPolicy(config.hold_off_ms)
        self._cycles = 0
        self._last_scan_count = 0
        self._logger = get_logger(type(self).__name__).bind(
            roots=list(config.recursive_roots)
        )

    @property
    def config(self) -> WatchConfig:
        """The configuration this watcher was built with."""
        return self._config

    @property
    def cycle_count(self) -> int:
        """Number of completed cycles."""
        return self._cycles

    @property
    def tracked_paths(self) -> int:
        """Number of distinct paths ever raised."""
        return len(self._history)

    @property
    def last_scan_count(self) -> int:
        """Number of paths recorded by the most recent scan."""
        return self._last_scan_count

    def last_raised(self, path: str) -> int | None:
        """Start time of the cycle that last raised ``path``, if any."""
        return self._history.last_raised(path)

    def run_cycle(self) -> int:
        """
        Scan all roots once and deliver the raised paths to the callback.

        Filesystem failures never escape this method; unreadable parts of
        the tree simply contribute nothing. Exceptions raised by the
        callback, the ``other_paths`` provider or the directory filter
        do propagate.

        Returns:
            Number of paths raised this cycle
        """
        config = self._config
        cycle_start = config.clock()
        first_cycle = self._cycles == 0

        ctx = self._scanner.scan(config.recursive_roots, config.other_paths())
        self._cycles += 1
        self._last_scan_count = len(ctx)

        raised: dict[str, FileInfo] = {}
        if self._hold_off.permits(cycle_start, ctx.newest_mod_ns, first_cycle):
            for path, entry in ctx.entries.items():
                if self._history.should_raise(path, entry.mod_time_ns):
                    self._history.mark(path, cycle_start)
                    raised[path] = entry.info
        else:
            self.log.debug(
                "raise_suppressed",
                quiet_ms=(cycle_start - ctx.newest_mod_ns) // 1_000_000,
                hold_off_ms=config.hold_off_ms,
            )

        self.log.debug(
            "scan_completed",
            cycle=self._cycles,
            scanned=len(ctx),
            raised=len(raised),
            list_failures=ctx.list_failures,
        )

        if raised or config.notify is NotifyPolicy.ALWAYS:
            config.on_changes(raised, cycle_start)
        return len(raised)

    def __call__(self) -> int:
        return self.run_cycle()


def new_watcher(config: WatchConfig) -> Callable[[], int]:
    """
    Build a watcher and return its per-cycle runner.

    Args:
        config: Watch configuration

    Returns:
        Zero-argument callable that runs one cycle and returns the raised count
    """
    return ModificationWatcher(config).run_cycle


def ignore_dirs_filter(names: Iterable[str]) -> DirFilter:
    """Build an admission predicate that refuses directories with any of ``names``."""
    refused = frozenset(names)

    def admit(full_path: str, name: str) -> bool:
        return name not in refused

    return admit


def create_watcher_from_settings(
    recursive_roots: Sequence[str | os.PathLike[str]],
    on_changes: ChangeCallback,
    **overrides: Any,
) -> ModificationWatcher:
    """
    Create a watcher whose defaults come from ``WatcherSettings``.

    Args:
        recursive_roots: Directories to watch recursively
        on_changes: Change callback
        **overrides: Any other ``WatchConfig`` field, taking precedence over settings

    Returns:
        Configured ModificationWatcher instance
    """
    settings = get_settings().watcher
    fields: dict[str, Any] = {
        "suffix_filter": settings.suffix_filter,
        "hold_off_ms": settings.hold_off_ms,
        "notify": NotifyPolicy(settings.notify),
        "dir_filter": ignore_dirs_filter(settings.ignore_dirs),
    }
    fields.update(overrides)
    return ModificationWatcher(
        WatchConfig(recursive_roots=recursive_roots, on_changes=on_changes, **fields)
    )
