"""
ModWatch File Read/Write Helpers.

Short-hands for whole-file reads, writes and stream copies.
Requires Python 3.11+.
"""

import os
import shutil
from typing import BinaryIO

from fsutil.paths import ensure_dir
from fsutil.walk import StrPath

_COPY_BUFFER_SIZE = 1024 * 1024


def read_binary_file(file_path: StrPath) -> bytes:
    """Read a whole file as bytes."""
    with open(file_path, "rb") as f:
        return f.read()


def read_text_file(file_path: StrPath, encoding: str = "utf-8") -> str:
    """Read a whole file as text."""
    with open(file_path, encoding=encoding) as f:
        return f.read()


def read_text_file_or(file_path: StrPath, fallback: str, encoding: str = "utf-8") -> str:
    """Read a whole file as text, returning ``fallback`` if it cannot be read."""
    try:
        return read_text_file(file_path, encoding=encoding)
    except (OSError, UnicodeDecodeError):
        return fallback


def write_binary_file(file_path: StrPath, contents: bytes) -> None:
    """Write ``contents`` to ``file_path``, creating parent directories first."""
    parent = os.path.dirname(os.fspath(file_path))
    if parent:
        ensure_dir(parent)
    with open(file_path, "wb") as f:
        f.write(contents)


def write_text_file(file_path: StrPath, contents: str, encoding: str = "utf-8") -> None:
    """Write text to ``file_path``, creating parent directories first."""
    write_binary_file(file_path, contents.encode(encoding))


def save_to(src: BinaryIO, dst_file_path: StrPath) -> None:
    """Copy everything remaining in the ``src`` stream into a new file at ``dst_file_path``."""
    with open(dst_file_path, "wb") as dst:
        shutil.copyfileobj(src, dst, _COPY_BUFFER_SIZE)


def copy_file(src_file_path: StrPath, dst_file_path: StrPath) -> None:
    """Copy the contents of one file to another, overwriting the destination."""
    with open(src_file_path, "rb") as src:
        save_to(src, dst_file_path)
