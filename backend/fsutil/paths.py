"""
ModWatch Path Predicates.

Existence checks, modification times and directory creation/removal.
Requires Python 3.11+.
"""

import os
import shutil

from fsutil.walk import StrPath, stat_path
from utils.config import get_settings


def is_dir(path: StrPath) -> bool:
    """Return whether a directory (not a file) exists at ``path``."""
    if not os.fspath(path):
        return False
    info = stat_path(path)
    return info is not None and info.is_dir


def is_file(path: StrPath) -> bool:
    """Return whether a regular file (not a directory) exists at ``path``."""
    if not os.fspath(path):
        return False
    info = stat_path(path)
    return info is not None and info.is_file


def mod_time_ns(path: StrPath) -> int | None:
    """Modification time of ``path`` in nanoseconds, or None if it cannot be stat'ed."""
    info = stat_path(path)
    return info.mod_time_ns if info is not None else None


def is_newer_than_time(path: StrPath, unix_ns: int) -> bool:
    """
    Return whether ``path`` was last modified after ``unix_ns``.

    A non-positive ``unix_ns`` means "never", so everything is newer.

    Raises:
        OSError: If ``path`` cannot be stat'ed
    """
    if unix_ns <= 0:
        return True
    return os.stat(path).st_mtime_ns > unix_ns


def locate(cur_path: StrPath, file_name: str) -> str | None:
    """
    Find the file called ``file_name`` nearest to ``cur_path``.

    Looks in ``cur_path`` first, then in each ancestor up to the filesystem root.
    """
    current = os.fspath(cur_path)
    while True:
        candidate = os.path.join(current, file_name)
        if is_file(candidate):
            return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def ensure_dir(dir_path: StrPath, mode: int | None = None) -> None:
    """Create ``dir_path`` and any missing parents; existing directories are fine."""
    if mode is None:
        mode = get_settings().fs.create_mode
    os.makedirs(dir_path, mode=mode, exist_ok=True)


def remove_all(path: StrPath) -> None:
    """Remove a file or a whole directory tree; a missing path is not an error."""
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
