"""Readiness policies deciding when a composite fix is emitted.

Two policies exist:

``MonotonicTimePolicy`` (default)
    Emits when RMC and GGA have both been seen, GSA reports a 2D/3D fix
    with at least 3 satellites, a position is known, and the fix time is
    strictly newer than the last emitted one. Observed flags are never
    cleared, so any later sentence carrying a newer time emits again
    without waiting for a fresh RMC+GGA pair.

``InactivityTimeoutPolicy``
    Ignores GSA entirely and gates on the GGA fix quality. After an
    emission it holds for a fixed wall-clock interval, then clears the
    observed flags so that a fresh RMC+GGA pair is required.
"""

import time
from collections.abc import Callable
from typing import Protocol

from gnssbridge.fix.types import CompositeFix

_MINIMUM_FIX_MODE = 2
_MINIMUM_SATELLITES = 3

# A fix time this far behind the watermark is treated as a new UTC day
_MIDNIGHT_ROLLOVER_MS = 12 * 3600 * 1000

_DEFAULT_INACTIVITY_TIMEOUT = 1.5


class ReadinessPolicy(Protocol):
    """Strategy interface used by ``FixAccumulator``."""

    def on_sentence(self, fix: CompositeFix) -> None:
        """Called before an accepted sentence is applied to *fix*."""

    def try_emit(self, fix: CompositeFix) -> bool:
        """Return True, and record the emission, if *fix* should be emitted."""

    def reset(self) -> None:
        """Forget any emission bookkeeping held by the policy itself."""


class MonotonicTimePolicy:
    """Emit at most once per strictly increasing fix timestamp."""

    def on_sentence(self, fix: CompositeFix) -> None:
        pass

    def is_ready(self, fix: CompositeFix) -> bool:
        return (
            fix.rmc_observed
            and fix.gga_observed
            and fix.fix_mode >= _MINIMUM_FIX_MODE
            and fix.satellites_used >= _MINIMUM_SATELLITES
            and fix.has_position
            and fix.fix_time_ms is not None
            and fix.fix_time_ms > fix.last_emitted_ms
        )

    def try_emit(self, fix: CompositeFix) -> bool:
        fix_time_ms = fix.fix_time_ms
        if fix_time_ms is None:
            return False

        if fix.last_emitted_ms - fix_time_ms > _MIDNIGHT_ROLLOVER_MS:
            fix.last_emitted_ms = -1

        if not self.is_ready(fix):
            return False

        fix.last_emitted_ms = fix_time_ms
        return True

    def reset(self) -> None:
        pass


class InactivityTimeoutPolicy:
    """Emit once per RMC+GGA pair, re-arming after a quiet interval.

    Args:
        timeout: Seconds after an emission before the next one may be
            assembled (default: ``1.5``).
        clock: Monotonic clock returning seconds; injectable for tests.
    """

    def __init__(
        self,
        timeout: float = _DEFAULT_INACTIVITY_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self._timeout = timeout
        self._clock = clock
        self._emitted_at: float | None = None

    @property
    def emitted(self) -> bool:
        return self._emitted_at is not None

    def on_sentence(self, fix: CompositeFix) -> None:
        if self._emitted_at is None:
            return
        if self._clock() - self._emitted_at < self._timeout:
            return
        self._emitted_at = None
        fix.rmc_observed = False
        fix.gga_observed = False

    def try_emit(self, fix: CompositeFix) -> bool:
        fix_time_ms = fix.fix_time_ms
        if fix_time_ms is None:
            return False

        ready = (
            self._emitted_at is None
            and fix.rmc_observed
            and fix.gga_observed
            and fix.fix_quality > 0
            and fix.has_position
        )
        if not ready:
            return False

        self._emitted_at = self._clock()
        fix.last_emitted_ms = fix_time_ms
        return True

    def reset(self) -> None:
        self._emitted_at = None
