"""
ModWatch Directory Walking.

Listing, stat and lazy depth-first traversal primitives.
Requires Python 3.11+.
"""

import fnmatch
import os
from collections.abc import Iterator

from fsutil.models import DirLister, FileInfo

StrPath = str | os.PathLike[str]


def list_dir(dir_path: StrPath) -> list[FileInfo]:
    """
    List the direct children of a directory, unsorted.

    Entries are described without following symlinks. Entries that
    vanish between listing and stat are left out.

    Raises:
        OSError: If the directory cannot be opened or read
    """
    infos: list[FileInfo] = []
    with os.scandir(dir_path) as entries:
        for entry in entries:
            try:
                infos.append(FileInfo.from_dir_entry(entry))
            except FileNotFoundError:
                continue
    return infos


def stat_path(path: StrPath) -> FileInfo | None:
    """Stat a single path (following symlinks), or None if that fails."""
    path = os.fspath(path)
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return None
    return FileInfo.from_stat(path, st)


def walk(
    dir_path: StrPath,
    *,
    include_self: bool = False,
    recursive: bool = True,
    dirs: bool = True,
    files: bool = True,
    ignore_errors: bool = False,
    lister: DirLister = list_dir,
) -> Iterator[tuple[str, FileInfo]]:
    """
    Lazily walk a directory tree depth-first, parents before children.

    Only directories and regular files are yielded; symlinks and special
    files are neither yielded nor followed. Stop iterating to end the walk
    early. Nothing is yielded when ``dir_path`` is not a directory.

    Args:
        dir_path: Directory to walk
        include_self: Yield ``dir_path`` itself first (requires ``dirs``)
        recursive: Descend into sub-directories
        dirs: Yield directories
        files: Yield regular files
        ignore_errors: Treat unreadable directories as empty instead of raising
        lister: Directory listing function

    Yields:
        ``(full_path, info)`` pairs

    Raises:
        OSError: On a listing failure, unless ``ignore_errors``
    """
    root = os.fspath(dir_path)
    info = stat_path(root)
    if info is None or not info.is_dir:
        return
    if include_self and dirs:
        yield root, info
    yield from _walk_children(root, recursive, dirs, files, ignore_errors, lister)


def _walk_children(
    dir_path: str,
    recursive: bool,
    dirs: bool,
    files: bool,
    ignore_errors: bool,
    lister: DirLister,
) -> Iterator[tuple[str, FileInfo]]:
    try:
        children = lister(dir_path)
    except OSError:
        if ignore_errors:
            return
        raise

    for child in children:
        full_path = os.path.join(dir_path, child.name)
        if child.is_file:
            if files:
                yield full_path, child
        elif child.is_dir:
            if dirs:
                yield full_path, child
            if recursive:
                yield from _walk_children(
                    full_path, recursive, dirs, files, ignore_errors, lister
                )


def walk_all_files(dir_path: StrPath, **kwargs) -> Iterator[tuple[str, FileInfo]]:
    """Yield every regular file anywhere under ``dir_path``."""
    return walk(dir_path, recursive=True, dirs=False, files=True, **kwargs)


def walk_dirs_in(dir_path: StrPath, **kwargs) -> Iterator[tuple[str, FileInfo]]:
    """Yield the direct sub-directories of ``dir_path``."""
    return walk(dir_path, recursive=False, dirs=True, files=False, **kwargs)


def walk_files_in(dir_path: StrPath, **kwargs) -> Iterator[tuple[str, FileInfo]]:
    """Yield the regular files directly inside ``dir_path``."""
    return walk(dir_path, recursive=False, dirs=False, files=True, **kwargs)


def all_file_paths_in(
    dir_path: StrPath,
    ignore_sub_path: StrPath = "",
    file_name: str = "",
    lister: DirLister = list_dir,
) -> list[str]:
    """
    Collect the full paths of all files directly or indirectly under ``dir_path``.

    Unreadable sub-directories are skipped; the files found elsewhere are
    still returned.

    Args:
        dir_path: Directory to search
        ignore_sub_path: Skip files under this path; relative values are
            taken relative to ``dir_path``
        file_name: ``fnmatch`` pattern the base name must match
        lister: Directory listing function

    Returns:
        Matching file paths in walk order
    """
    root = os.fspath(dir_path)
    ignore = os.fspath(ignore_sub_path)
    if ignore and not ignore.startswith(root):
        ignore = os.path.join(root, ignore)

    paths: list[str] = []
    for full_path, _info in walk_all_files(root, ignore_errors=True, lister=lister):
        if ignore and full_path.startswith(ignore):
            continue
        if file_name and not fnmatch.fnmatch(os.path.basename(full_path), file_name):
            continue
        paths.append(full_path)
    return paths


def is_any_file_in_dir_newer_than_oldest_of(
    dir_path: StrPath, *file_paths: StrPath
) -> bool:
    """
    Check whether anything under ``dir_path`` is newer than the oldest of ``file_paths``.

    Used to decide whether outputs derived from a source tree are stale.
    Answers True when no comparison files are given, when any of them
    cannot be stat'ed, or when the tree cannot be walked.
    """
    if not file_paths:
        return True

    compare = {os.fspath(p) for p in file_paths}
    oldest = 0
    for path in compare:
        try:
            mtime = os.stat(path).st_mtime_ns
        except OSError:
            return True
        if mtime > 0 and (oldest == 0 or mtime < oldest):
            oldest = mtime

    try:
        for full_path, info in walk_all_files(dir_path):
            if full_path not in compare and info.mod_time_ns > oldest:
                return True
    except OSError:
        return True
    return False
