#!/usr/bin/env python3
"""
ModWatch Tree Watch Script.

Polls one or more directory trees and logs every raised change set.
Requires Python 3.11+.

Usage:
    python scripts/watch_tree.py /path/to/project --suffix .py --hold-off-ms 500
"""

import argparse
import sys
import time
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from fsutil.models import FileInfo
from utils.config import get_settings
from utils.logger import configure_logging, get_logger
from watcher.modification_watcher import create_watcher_from_settings, ignore_dirs_filter
from watcher.poller import PollingLoop
from watcher.watch_config import NotifyPolicy


configure_logging()
logger = get_logger("watch_tree")


def log_changes(changed: dict[str, FileInfo], cycle_start_ns: int) -> None:
    """Log one raised change set."""
    for path in sorted(changed):
        info = changed[path]
        logger.info(
            "path_changed",
            path=path,
            kind="dir" if info.is_dir else "file" if info.is_file else "missing",
            mod_time_ns=info.mod_time_ns,
        )
    logger.info("changes_raised", count=len(changed), cycle_start_ns=cycle_start_ns)


def main() -> int:
    """Main entry point."""
    settings = get_settings().watcher

    parser = argparse.ArgumentParser(
        description="Poll directory trees and report modified paths"
    )
    parser.add_argument(
        "roots",
        type=Path,
        nargs="+",
        help="Directories to watch recursively",
    )
    parser.add_argument(
        "--file",
        dest="files",
        type=Path,
        action="append",
        default=[],
        help="Extra path watched one level deep (repeatable)",
    )
    parser.add_argument(
        "--suffix",
        default=settings.suffix_filter,
        help="Only track files ending with this suffix",
    )
    parser.add_argument(
        "--hold-off-ms",
        type=int,
        default=settings.hold_off_ms,
        help="Quiet period required after the newest change before reporting",
    )
    parser.add_argument(
        "--interval-ms",
        type=int,
        default=settings.poll_interval_ms,
        help="Delay between scans",
    )
    parser.add_argument(
        "--ignore-dir",
        dest="ignore_dirs",
        action="append",
        default=None,
        help="Directory name to skip (repeatable, replaces the configured list)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single scan and exit",
    )

    args = parser.parse_args()

    missing = [root for root in args.roots if not root.is_dir()]
    if missing:
        for root in missing:
            logger.error("root_not_a_directory", path=str(root))
        return 1

    extra_paths = [str(p) for p in args.files]
    watcher = create_watcher_from_settings(
        [str(root.resolve()) for root in args.roots],
        log_changes,
        other_paths=lambda: extra_paths,
        suffix_filter=args.suffix,
        hold_off_ms=args.hold_off_ms,
        notify=NotifyPolicy.ON_CHANGE,
        dir_filter=ignore_dirs_filter(
            settings.ignore_dirs if args.ignore_dirs is None else args.ignore_dirs
        ),
    )

    if args.once:
        raised = watcher.run_cycle()
        logger.info("scan_finished", raised=raised, scanned=watcher.last_scan_count)
        return 0

    try:
        with PollingLoop(watcher.run_cycle, interval_ms=args.interval_ms):
            while True:
                time.sleep(3600)
    except KeyboardInterrupt:
        logger.info("interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
