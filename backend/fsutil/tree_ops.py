"""
ModWatch Bulk Tree Operations.

Clearing and copying whole directory trees.
Requires Python 3.11+.
"""

import os
from collections.abc import Iterable

from fsutil.files import copy_file
from fsutil.models import DirLister
from fsutil.paths import ensure_dir, is_dir, remove_all
from fsutil.walk import StrPath, list_dir


def clear_dir(dir_path: StrPath, *keep_names: str, lister: DirLister = list_dir) -> None:
    """
    Remove everything inside ``dir_path`` but not ``dir_path`` itself.

    Direct children named in ``keep_names`` survive; the names are not
    matched inside sub-directories. Does nothing when ``dir_path`` is not
    a directory.

    Raises:
        OSError: On the first listing or removal failure
    """
    if not is_dir(dir_path):
        return
    root = os.fspath(dir_path)
    for info in lister(root):
        if info.name not in keep_names:
            remove_all(os.path.join(root, info.name))


def copy_tree(
    src_dir_path: StrPath,
    dst_dir_path: StrPath,
    skip_file_suffix: str = "",
    skip_dir_names: Iterable[str] = (),
    lister: DirLister = list_dir,
) -> None:
    """
    Copy all files and sub-directories inside ``src_dir_path`` into ``dst_dir_path``.

    Args:
        src_dir_path: Directory to copy from
        dst_dir_path: Directory to copy into; created if missing
        skip_file_suffix: Files whose path ends with this are not copied
        skip_dir_names: Sub-directory names skipped at every level
        lister: Directory listing function

    Raises:
        OSError: On the first failure; earlier copies are left in place
    """
    skip_dirs = frozenset(skip_dir_names)
    _copy_tree(os.fspath(src_dir_path), os.fspath(dst_dir_path), skip_file_suffix, skip_dirs, lister)


def _copy_tree(
    src: str,
    dst: str,
    skip_file_suffix: str,
    skip_dirs: frozenset[str],
    lister: DirLister,
) -> None:
    children = lister(src)
    ensure_dir(dst)
    for info in children:
        src_path = os.path.join(src, info.name)
        dst_path = os.path.join(dst, info.name)
        if info.is_dir:
            if info.name not in skip_dirs:
                _copy_tree(src_path, dst_path, skip_file_suffix, skip_dirs, lister)
        elif info.is_file and not (skip_file_suffix and src_path.endswith(skip_file_suffix)):
            copy_file(src_path, dst_path)
