"""
ModWatch Raise History and Hold-Off Policy.

Decides whether a scan cycle may raise at all, and which paths
qualify for raising once it may.
Requires Python 3.11+.
"""

from dataclasses import dataclass, field

NS_PER_MS = 1_000_000


@dataclass
class RaiseHistory:
    """
    Remembers when each path was last included in a raised change set.

    Paths are never forgotten for the lifetime of the history; only their
    timestamps move forward.
    """

    _last_raised: dict[str, int] = field(default_factory=dict)

    def should_raise(self, path: str, mod_time_ns: int) -> bool:
        """
        Check whether ``path`` qualifies for the current raise.

        A path qualifies when it was never raised, when its modification
        time is unknown (zero), or when it was modified at or after the
        moment it was last raised.
        """
        last = self._last_raised.get(path, 0)
        return last == 0 or mod_time_ns == 0 or last <= mod_time_ns

    def mark(self, path: str, raised_at_ns: int) -> None:
        """Record that ``path`` was raised at ``raised_at_ns``."""
        self._last_raised[path] = raised_at_ns

    def last_raised(self, path: str) -> int | None:
        """Timestamp of the last raise of ``path``, if any."""
        return self._last_raised.get(path)

    def __len__(self) -> int:
        return len(self._last_raised)

    def __contains__(self, path: object) -> bool:
        return path in self._last_raised


class HoldOffPolicy:
    """
    Suppresses raising while the watched tree is still being written to.

    A cycle may raise when it is the first cycle, when hold-off is
    disabled (non-positive), or when the newest modification seen in the
    cycle is older than the hold-off period.
    """

    def __init__(self, hold_off_ms: int = 0) -> None:
        """
        Initialize the policy.

        Args:
            hold_off_ms: Required quiet period in milliseconds; <= 0 disables it
        """
        self._hold_off_ns = hold_off_ms * NS_PER_MS

    @property
    def enabled(self) -> bool:
        """Whether any quiet period is enforced."""
        return self._hold_off_ns > 0

    @property
    def hold_off_ns(self) -> int:
        """Quiet period in nanoseconds."""
        return self._hold_off_ns

    def permits(self, cycle_start_ns: int, newest_mod_ns: int, first_cycle: bool) -> bool:
        """Return whether the cycle starting at ``cycle_start_ns`` may raise."""
        if first_cycle or not self.enabled:
            return True
        return (cycle_start_ns - newest_mod_ns) > self._hold_off_ns
