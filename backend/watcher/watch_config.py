"""
ModWatch Watch Configuration.

Construction-time configuration for a modification watcher.
Requires Python 3.11+.
"""

import os
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from fsutil.models import DirLister, FileInfo, PathStat
from fsutil.walk import list_dir, stat_path
from watcher.scanner import DirFilter

ChangeCallback = Callable[[dict[str, FileInfo], int], object]
PathsProvider = Callable[[], Iterable[str]]


class NotifyPolicy(str, Enum):
    """When the change callback is invoked."""

    ALWAYS = "always"  # every cycle, with an empty mapping when nothing was raised
    ON_CHANGE = "on_change"  # only when at least one path was raised


def _no_other_paths() -> Iterable[str]:
    return ()


@dataclass
class WatchConfig:
    """
    Everything a watcher needs, supplied once at construction.

    ``recursive_roots`` are walked in full every cycle; ``other_paths`` is
    called every cycle and each path it returns is walked one level deep.
    The filesystem capabilities and the clock are injectable so tests can
    substitute fakes.
    """

    on_changes: ChangeCallback
    recursive_roots: Sequence[str | os.PathLike[str]] = ()
    other_paths: PathsProvider | None = None
    suffix_filter: str = ""
    dir_filter: DirFilter | None = None
    hold_off_ms: int = 0
    notify: NotifyPolicy = NotifyPolicy.ALWAYS
    lister: DirLister = list_dir
    stat: PathStat = stat_path
    clock: Callable[[], int] = time.time_ns

    def __post_init__(self) -> None:
        if not callable(self.on_changes):
            raise ValueError("on_changes must be callable")
        if isinstance(self.recursive_roots, (str, bytes, os.PathLike)):
            raise ValueError("recursive_roots must be a sequence of paths, not a single path")
        roots: list[str] = []
        for root in self.recursive_roots:
            if not isinstance(root, (str, os.PathLike)):
                raise ValueError(f"invalid watch root: {root!r}")
            roots.append(os.fspath(root))
        self.recursive_roots = tuple(roots)
        if self.other_paths is None:
            self.other_paths = _no_other_paths
        elif not callable(self.other_paths):
            raise ValueError("other_paths must be a zero-argument callable")
        if self.dir_filter is not None and not callable(self.dir_filter):
            raise ValueError("dir_filter must be callable")
        if isinstance(self.hold_off_ms, bool) or not isinstance(self.hold_off_ms, int):
            raise ValueError(f"hold_off_ms must be an int, got {self.hold_off_ms!r}")
        if not isinstance(self.suffix_filter, str):
            raise ValueError("suffix_filter must be a string")
        self.notify = NotifyPolicy(self.notify)
