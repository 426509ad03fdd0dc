"""
Tests for the Modification Watcher.

Requires Python 3.11+.
"""

from pathlib import Path

import pytest

from conftest import NS, T0, ChangeRecorder, FakeClock, touch
from fsutil.models import FileInfo
from fsutil.walk import list_dir
from watcher.modification_watcher import (
    ModificationWatcher,
    create_watcher_from_settings,
    ignore_dirs_filter,
    new_watcher,
)
from watcher.watch_config import NotifyPolicy, WatchConfig


@pytest.fixture
def make_watcher(sample_tree: Path, clock: FakeClock, recorder: ChangeRecorder):
    """Factory for watchers over the sample tree with a fake clock."""

    def factory(**kwargs) -> ModificationWatcher:
        kwargs.setdefault("recursive_roots", [str(sample_tree)])
        return ModificationWatcher(WatchConfig(on_changes=recorder, clock=clock, **kwargs))

    return factory


def all_sample_paths(root: Path) -> set[str]:
    return {
        str(root),
        str(root / "a.txt"),
        str(root / "a.log"),
        str(root / "sub"),
        str(root / "sub" / "b.txt"),
        str(root / "skip"),
        str(root / "skip" / "c.txt"),
    }


class TestFirstCycle:
    """Test cases for the first cycle."""

    def test_raises_everything(self, make_watcher, recorder: ChangeRecorder, sample_tree: Path, clock: FakeClock):
        """Test that the first cycle raises every discoverable path."""
        watcher = make_watcher()

        count = watcher.run_cycle()

        assert count == 7
        assert set(recorder.last) == all_sample_paths(sample_tree)
        assert recorder.calls[0][1] == clock.now_ns
        assert watcher.cycle_count == 1

    def test_ignores_hold_off(self, make_watcher, recorder: ChangeRecorder, clock: FakeClock):
        """Test that the first cycle raises even right after a change."""
        clock.now_ns = T0 + NS  # newest change one second ago
        watcher = make_watcher(hold_off_ms=5000)

        assert watcher.run_cycle() == 7

    def test_no_io_at_construction(self, recorder: ChangeRecorder, clock: FakeClock):
        """Test that building a watcher touches nothing."""
        calls: list[str] = []

        def lister(path: str) -> list[FileInfo]:
            calls.append(path)
            return []

        def stat(path: str) -> FileInfo | None:
            calls.append(path)
            return None

        ModificationWatcher(
            WatchConfig(
                on_changes=recorder,
                recursive_roots=["/nowhere"],
                other_paths=lambda: calls.append("provider") or [],
                lister=lister,
                stat=stat,
                clock=clock,
            )
        )

        assert calls == []
        assert recorder.calls == []


class TestHoldOff:
    """Test cases for debounce suppression."""

    def test_recent_change_suppresses_whole_cycle(
        self, make_watcher, recorder: ChangeRecorder, sample_tree: Path, clock: FakeClock
    ):
        """Test that nothing is raised while the tree is still changing."""
        watcher = make_watcher(hold_off_ms=5000)
        watcher.run_cycle()

        clock.now_ns = T0 + 200 * NS
        touch(sample_tree / "a.txt", T0 + 199 * NS)

        assert watcher.run_cycle() == 0
        assert recorder.last == {}

    def test_raises_once_quiet(
        self, make_watcher, recorder: ChangeRecorder, sample_tree: Path, clock: FakeClock
    ):
        """Test that the change is raised once the hold-off has passed."""
        watcher = make_watcher(hold_off_ms=5000)
        watcher.run_cycle()

        clock.now_ns = T0 + 200 * NS
        touch(sample_tree / "a.txt", T0 + 199 * NS)
        watcher.run_cycle()

        clock.now_ns = T0 + 210 * NS
        assert watcher.run_cycle() == 1
        assert set(recorder.last) == {str(sample_tree / "a.txt")}

    def test_disabled_hold_off_raises_immediately(
        self, make_watcher, recorder: ChangeRecorder, sample_tree: Path, clock: FakeClock
    ):
        """Test that a zero hold-off raises on the very next cycle."""
        watcher = make_watcher(hold_off_ms=0)
        watcher.run_cycle()

        clock.now_ns = T0 + 200 * NS
        touch(sample_tree / "a.txt", T0 + 200 * NS)

        assert watcher.run_cycle() == 1


class TestRaisePolicy:
    """Test cases for re-raise behaviour."""

    def test_no_reraise_without_change(
        self, make_watcher, recorder: ChangeRecorder, sample_tree: Path, clock: FakeClock
    ):
        """Test that unchanged paths are not raised again."""
        watcher = make_watcher()
        watcher.run_cycle()
        first_raise = watcher.last_raised(str(sample_tree / "a.txt"))

        clock.advance(60)

        assert watcher.run_cycle() == 0
        assert watcher.last_raised(str(sample_tree / "a.txt")) == first_raise

    def test_reraise_on_touch(
        self, make_watcher, recorder: ChangeRecorder, sample_tree: Path, clock: FakeClock
    ):
        """Test that a modified path is raised again."""
        watcher = make_watcher()
        watcher.run_cycle()

        touch(sample_tree / "sub" / "b.txt", T0 + 150 * NS)
        clock.now_ns = T0 + 200 * NS

        assert watcher.run_cycle() == 1
        assert set(recorder.last) == {str(sample_tree / "sub" / "b.txt")}
        assert watcher.last_raised(str(sample_tree / "sub" / "b.txt")) == T0 + 200 * NS

    def test_new_file_raised(
        self, make_watcher, recorder: ChangeRecorder, sample_tree: Path, clock: FakeClock
    ):
        """Test that a file appearing later is raised."""
        watcher = make_watcher()
        watcher.run_cycle()

        touch(sample_tree / "sub" / "new.txt", T0)
        clock.advance(60)

        assert watcher.run_cycle() == 1
        assert str(sample_tree / "sub" / "new.txt") in recorder.last

    def test_idempotent_empty_cycles(
        self, make_watcher, recorder: ChangeRecorder, clock: FakeClock
    ):
        """Test that repeated cycles without changes raise nothing."""
        watcher = make_watcher()
        watcher.run_cycle()
        tracked = watcher.tracked_paths

        for _ in range(3):
            clock.advance(1)
            assert watcher.run_cycle() == 0

        assert watcher.tracked_paths == tracked
        assert watcher.cycle_count == 4


class TestFiltering:
    """Test cases for suffix and admission filtering."""

    def test_suffix_filter(self, make_watcher, recorder: ChangeRecorder, sample_tree: Path):
        """Test that only matching files and all directories are raised."""
        watcher = make_watcher(suffix_filter=".txt")
        watcher.run_cycle()

        assert set(recorder.last) == all_sample_paths(sample_tree) - {str(sample_tree / "a.log")}

    def test_dir_admission_pruning(self, make_watcher, recorder: ChangeRecorder, sample_tree: Path):
        """Test that a refused directory and its subtree are never raised."""
        watcher = make_watcher(suffix_filter=".txt", dir_filter=ignore_dirs_filter(["skip"]))
        watcher.run_cycle()

        assert str(sample_tree / "skip") not in recorder.last
        assert str(sample_tree / "skip" / "c.txt") not in recorder.last
        assert str(sample_tree / "sub" / "b.txt") in recorder.last

    def test_listing_failure_isolation(self, make_watcher, recorder: ChangeRecorder, sample_tree: Path):
        """Test that an unreadable directory leaves its siblings intact."""

        def failing_lister(path: str) -> list[FileInfo]:
            if path == str(sample_tree / "sub"):
                raise PermissionError(path)
            return list_dir(path)

        watcher = make_watcher(lister=failing_lister)

        assert watcher.run_cycle() == 6
        assert str(sample_tree / "skip" / "c.txt") in recorder.last
        assert str(sample_tree / "sub" / "b.txt") not in recorder.last


class TestOtherPaths:
    """Test cases for dynamically provided paths."""

    def test_provider_called_every_cycle(
        self, make_watcher, recorder: ChangeRecorder, sample_tree: Path, clock: FakeClock
    ):
        """Test that other paths are re-evaluated fresh each cycle."""
        extra = sample_tree.parent / "extra.cfg"
        touch(extra, T0)
        provided: list[str] = []
        calls = 0

        def provider() -> list[str]:
            nonlocal calls
            calls += 1
            return list(provided)

        watcher = make_watcher(recursive_roots=[], other_paths=provider)
        assert watcher.run_cycle() == 0

        provided.append(str(extra))
        clock.advance(1)

        assert watcher.run_cycle() == 1
        assert set(recorder.last) == {str(extra)}
        assert calls == 2

    def test_missing_path_raised_every_cycle(
        self, make_watcher, recorder: ChangeRecorder, tmp_path: Path, clock: FakeClock
    ):
        """Test that an un-stat-able path is never filtered out."""
        missing = str(tmp_path / "gone.txt")
        watcher = make_watcher(recursive_roots=[], other_paths=lambda: [missing])

        assert watcher.run_cycle() == 1
        clock.advance(1)
        assert watcher.run_cycle() == 1
        assert recorder.last[missing].mod_time_ns == 0


class TestNotifyPolicy:
    """Test cases for callback delivery."""

    def test_always_notifies_empty_cycles(self, make_watcher, recorder: ChangeRecorder, clock: FakeClock):
        """Test that ALWAYS delivers empty change sets."""
        watcher = make_watcher(notify=NotifyPolicy.ALWAYS)
        watcher.run_cycle()
        clock.advance(1)
        watcher.run_cycle()

        assert len(recorder.calls) == 2
        assert recorder.calls[1] == ({}, clock.now_ns)

    def test_on_change_skips_empty_cycles(self, make_watcher, recorder: ChangeRecorder, clock: FakeClock):
        """Test that ON_CHANGE stays quiet when nothing was raised."""
        watcher = make_watcher(notify="on_change")
        watcher.run_cycle()
        clock.advance(1)
        watcher.run_cycle()

        assert len(recorder.calls) == 1

    def test_callback_errors_propagate(self, sample_tree: Path, clock: FakeClock):
        """Test that a failing callback is not swallowed."""

        def explode(changed: dict[str, FileInfo], cycle_start_ns: int) -> None:
            raise RuntimeError("callback failed")

        watcher = ModificationWatcher(
            WatchConfig(on_changes=explode, recursive_roots=[str(sample_tree)], clock=clock)
        )

        with pytest.raises(RuntimeError):
            watcher.run_cycle()


class TestConstruction:
    """Test cases for building watchers."""

    def test_new_watcher_returns_runner(self, sample_tree: Path, recorder: ChangeRecorder, clock: FakeClock):
        """Test the function-style constructor."""
        run_cycle = new_watcher(
            WatchConfig(on_changes=recorder, recursive_roots=[sample_tree], clock=clock)
        )

        assert callable(run_cycle)
        assert run_cycle() == 7
        assert run_cycle() == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"on_changes": None},
            {"recursive_roots": "/single/path"},
            {"recursive_roots": [42]},
            {"hold_off_ms": 1.5},
            {"hold_off_ms": True},
            {"notify": "sometimes"},
            {"other_paths": ["/not/callable"]},
        ],
    )
    def test_invalid_config(self, recorder: ChangeRecorder, kwargs):
        """Test that bad configuration is rejected."""
        kwargs.setdefault("on_changes", recorder)
        with pytest.raises(ValueError):
            WatchConfig(**kwargs)

    def test_from_settings(self, monkeypatch, sample_tree: Path, recorder: ChangeRecorder, clock: FakeClock):
        """Test defaults taken from environment settings."""
        monkeypatch.setenv("WATCHER_HOLD_OFF_MS", "2500")
        monkeypatch.setenv("WATCHER_SUFFIX_FILTER", ".txt")
        monkeypatch.setenv("WATCHER_IGNORE_DIRS", "skip, node_modules")
        monkeypatch.setenv("WATCHER_NOTIFY", "on_change")

        watcher = create_watcher_from_settings([str(sample_tree)], recorder, clock=clock)
        watcher.run_cycle()

        assert watcher.config.hold_off_ms == 2500
        assert watcher.config.notify is NotifyPolicy.ON_CHANGE
        assert set(recorder.last) == {
            str(sample_tree),
            str(sample_tree / "a.txt"),
            str(sample_tree / "sub"),
            str(sample_tree / "sub" / "b.txt"),
        }

    def test_from_settings_overrides(self, sample_tree: Path, recorder: ChangeRecorder, clock: FakeClock):
        """Test that explicit overrides beat settings."""
        watcher = create_watcher_from_settings(
            [str(sample_tree)], recorder, clock=clock, hold_off_ms=750, suffix_filter=".log"
        )

        assert watcher.config.hold_off_ms == 750
        assert watcher() == 4
