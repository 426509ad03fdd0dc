"""
ModWatch Scanner.

Gathers the modification times of every tracked path for one cycle.
Requires Python 3.11+.
"""

import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from fsutil.models import DirLister, FileInfo, PathStat
from utils.logger import LoggerMixin

DirFilter = Callable[[str, str], bool]


@dataclass(slots=True)
class ScanEntry:
    """One recorded path: its snapshot and modification time."""

    info: FileInfo
    mod_time_ns: int


@dataclass
class ScanContext:
    """Everything recorded during a single scan cycle."""

    entries: dict[str, ScanEntry] = field(default_factory=dict)
    newest_mod_ns: int = 0
    list_failures: int = 0

    def record(self, path: str, info: FileInfo) -> None:
        """Record ``path`` and track the newest modification time seen."""
        mod_time = info.mod_time_ns
        self.entries[path] = ScanEntry(info, mod_time)
        if mod_time > self.newest_mod_ns:
            self.newest_mod_ns = mod_time

    def __contains__(self, path: object) -> bool:
        return path in self.entries

    def __len__(self) -> int:
        return len(self.entries)


class Scanner(LoggerMixin):
    """
    Walks watch roots and records admitted directories and matching files.

    Recursive roots are visited in full (no early termination); each
    "other" path is visited one level deep and always recorded itself.
    Listing failures are absorbed: the unreadable directory is still
    recorded but contributes no children.
    """

    def __init__(
        self,
        lister: DirLister,
        stat: PathStat,
        suffix_filter: str = "",
        dir_filter: DirFilter | None = None,
    ) -> None:
        """
        Initialize the scanner.

        Args:
            lister: Lists direct children, raising OSError on failure
            stat: Stats a single path, returning None on failure
            suffix_filter: Only files whose path ends with this are recorded
            dir_filter: Directory admission predicate ``(full_path, name)``
        """
        self._lister = lister
        self._stat = stat
        self._suffix = suffix_filter
        self._dir_filter = dir_filter

    def scan(
        self,
        recursive_roots: Iterable[str],
        other_paths: Iterable[str] = (),
    ) -> ScanContext:
        """Run one full scan and return what it recorded."""
        ctx = ScanContext()
        for root in recursive_roots:
            self.scan_recursive(ctx, root)
        for path in other_paths:
            self.scan_shallow(ctx, path)
        return ctx

    def _admits_dir(self, full_path: str, name: str) -> bool:
        return self._dir_filter is None or self._dir_filter(full_path, name)

    def _admits_file(self, full_path: str) -> bool:
        return not self._suffix or full_path.endswith(self._suffix)

    def _list(self, ctx: ScanContext, dir_path: str) -> list[FileInfo]:
        try:
            return self._lister(dir_path)
        except OSError as e:
            ctx.list_failures += 1
            self.log.debug("list_dir_failed", path=dir_path, error=str(e))
            return []

    def scan_recursive(self, ctx: ScanContext, root: str) -> None:
        """Record ``root`` and its whole admitted subtree."""
        root = os.fspath(root)
        info = self._stat(root)
        if info is None or not info.is_dir:
            self.log.debug("watch_root_unavailable", path=root)
            return

        # Explicit stack so deep trees cannot exhaust the recursion limit
        pending: list[tuple[str, FileInfo]] = [(root, info)]
        while pending:
            dir_path, dir_info = pending.pop()
            if not self._admits_dir(dir_path, os.path.basename(dir_path) or dir_path):
                continue
            ctx.record(dir_path, dir_info)
            for child in self._list(ctx, dir_path):
                full_path = os.path.join(dir_path, child.name)
                if child.is_dir:
                    pending.append((full_path, child))
                elif child.is_file and self._admits_file(full_path):
                    ctx.record(full_path, child)

    def scan_shallow(self, ctx: ScanContext, path: str) -> None:
        """
        Record ``path`` itself plus, for a directory, its admitted direct children.

        The path itself is always recorded, bypassing admission and suffix
        rules; when it cannot be stat'ed it is recorded with a zero
        modification time. A directory refused by admission is not listed.
        """
        path = os.fspath(path)
        info = self._stat(path)

        if (
            info is not None
            and info.is_dir
            and self._admits_dir(path, os.path.basename(path) or path)
        ):
            for child in self._list(ctx, path):
                full_path = os.path.join(path, child.name)
                if child.is_dir:
                    if self._admits_dir(full_path, child.name):
                        ctx.record(full_path, child)
                elif child.is_file and self._admits_file(full_path):
                    ctx.record(full_path, child)

        if path not in ctx:
            ctx.record(path, info if info is not None else FileInfo.missing(path))
