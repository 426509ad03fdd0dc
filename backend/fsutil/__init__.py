"""
ModWatch Filesystem Utilities Package.

Listing, walking, predicates and bulk file operations.
Requires Python 3.11+.
"""

from fsutil.models import DirLister, FileInfo, PathStat
from fsutil.walk import (
    all_file_paths_in,
    is_any_file_in_dir_newer_than_oldest_of,
    list_dir,
    stat_path,
    walk,
    walk_all_files,
    walk_dirs_in,
    walk_files_in,
)
from fsutil.paths import (
    ensure_dir,
    is_dir,
    is_file,
    is_newer_than_time,
    locate,
    mod_time_ns,
    remove_all,
)
from fsutil.files import (
    copy_file,
    read_binary_file,
    read_text_file,
    read_text_file_or,
    save_to,
    write_binary_file,
    write_text_file,
)
from fsutil.tree_ops import clear_dir, copy_tree

__all__ = [
    "DirLister",
    "FileInfo",
    "PathStat",
    "all_file_paths_in",
    "is_any_file_in_dir_newer_than_oldest_of",
    "list_dir",
    "stat_path",
    "walk",
    "walk_all_files",
    "walk_dirs_in",
    "walk_files_in",
    "ensure_dir",
    "is_dir",
    "is_file",
    "is_newer_than_time",
    "locate",
    "mod_time_ns",
    "remove_all",
    "copy_file",
    "read_binary_file",
    "read_text_file",
    "read_text_file_or",
    "save_to",
    "write_binary_file",
    "write_text_file",
    "clear_dir",
    "copy_tree",
]
