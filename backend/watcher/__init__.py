"""
ModWatch Watcher Package.

Polling modification watcher with hold-off debouncing.
Requires Python 3.11+.
"""

from watcher.history import HoldOffPolicy, RaiseHistory
from watcher.scanner import ScanContext, Scanner
from watcher.watch_config import NotifyPolicy, WatchConfig
from watcher.modification_watcher import (
    ModificationWatcher,
    create_watcher_from_settings,
    ignore_dirs_filter,
    new_watcher,
)
from watcher.poller import PollingLoop, poll_forever

__all__ = [
    "HoldOffPolicy",
    "RaiseHistory",
    "ScanContext",
    "Scanner",
    "NotifyPolicy",
    "WatchConfig",
    "ModificationWatcher",
    "create_watcher_from_settings",
    "ignore_dirs_filter",
    "new_watcher",
    "PollingLoop",
    "poll_forever",
]
