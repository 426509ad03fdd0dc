"""
ModWatch Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from fsutil.models import FileInfo
from utils.config import get_settings

NS = 1_000_000_000

# Fixed, whole-second base time so mtimes survive any filesystem rounding
T0 = 1_700_000_000 * NS


def set_mtime(path: Path, mod_time_ns: int) -> None:
    """Force a path's access and modification time."""
    os.utime(path, ns=(mod_time_ns, mod_time_ns))


def touch(path: Path, mod_time_ns: int, content: str = "x") -> None:
    """Write ``path`` and pin its mtime; the parent keeps its previous mtime."""
    parent_mtime = path.parent.stat().st_mtime_ns
    path.write_text(content)
    set_mtime(path, mod_time_ns)
    set_mtime(path.parent, parent_mtime)


class FakeClock:
    """Manually advanced nanosecond wall clock."""

    def __init__(self, now_ns: int) -> None:
        self.now_ns = now_ns

    def __call__(self) -> int:
        return self.now_ns

    def advance(self, seconds: float) -> int:
        self.now_ns += int(seconds * NS)
        return self.now_ns


class ChangeRecorder:
    """Change callback that remembers every invocation."""

    def __init__(self) -> None:
        self.calls: list[tuple[dict[str, FileInfo], int]] = []

    def __call__(self, changed: dict[str, FileInfo], cycle_start_ns: int) -> None:
        self.calls.append((dict(changed), cycle_start_ns))

    @property
    def last(self) -> dict[str, FileInfo]:
        return self.calls[-1][0]


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Drop cached settings so environment tweaks take effect per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    """Clock sitting 100 seconds after the sample tree's mtimes."""
    return FakeClock(T0 + 100 * NS)


@pytest.fixture
def recorder() -> ChangeRecorder:
    """Create a change recorder."""
    return ChangeRecorder()


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    Create a small tree with every mtime pinned to T0.

    root/
        a.txt
        a.log
        sub/b.txt
        skip/c.txt
    """
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    (root / "skip").mkdir()

    (root / "a.txt").write_text("a")
    (root / "a.log").write_text("log")
    (root / "sub" / "b.txt").write_text("b")
    (root / "skip" / "c.txt").write_text("c")

    for path in [
        root / "a.txt",
        root / "a.log",
        root / "sub" / "b.txt",
        root / "skip" / "c.txt",
        root / "sub",
        root / "skip",
        root,
    ]:
        set_mtime(path, T0)

    return root
