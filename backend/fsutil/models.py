"""
ModWatch Filesystem Data Models.

Defines the snapshot type produced by directory listings and stats,
and the callable shapes the watcher accepts for them.
Requires Python 3.11+.
"""

import os
import stat
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FileInfo:
    """Point-in-time metadata for a single filesystem entry."""

    path: str
    name: str
    is_dir: bool
    is_file: bool  # regular file only
    mod_time_ns: int
    size: int = 0
    mode: int = 0

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> "FileInfo":
        """Build a snapshot from an ``os.stat_result``."""
        return cls(
            path=path,
            name=os.path.basename(path) or path,
            is_dir=stat.S_ISDIR(st.st_mode),
            is_file=stat.S_ISREG(st.st_mode),
            mod_time_ns=st.st_mtime_ns,
            size=st.st_size,
            mode=st.st_mode,
        )

    @classmethod
    def from_dir_entry(cls, entry: os.DirEntry[str]) -> "FileInfo":
        """
        Build a snapshot from an ``os.scandir`` entry.

        Symlinks are described as themselves, never their targets.
        """
        return cls.from_stat(entry.path, entry.stat(follow_symlinks=False))

    @classmethod
    def missing(cls, path: str) -> "FileInfo":
        """Synthetic snapshot for a path that could not be stat'ed."""
        return cls(
            path=path,
            name=os.path.basename(path) or path,
            is_dir=False,
            is_file=False,
            mod_time_ns=0,
        )

    @property
    def exists(self) -> bool:
        """False only for synthetic ``missing`` snapshots."""
        return self.mode != 0


# Lists the direct children of a directory; raises OSError on failure.
DirLister = Callable[[str], list[FileInfo]]

# Stats one path; returns None when it is absent or unreadable.
PathStat = Callable[[str], FileInfo | None]
