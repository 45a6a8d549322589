"""Cooldown guard for the downstream trigger.

A single-permit rate limiter: one permit, refilled once the cooldown has
elapsed since it was last taken.
"""

import threading
import time
from collections.abc import Callable

DEFAULT_COOLDOWN_MS = 10_000


def epoch_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class Debouncer:
    """Allows an action at most once per cooldown window.

    The last-fired timestamp starts at 0 ("never fired") and is only ever
    set to the current time, so it never decreases while the process runs.
    The check and the update happen under one lock.
    """

    def __init__(
        self,
        cooldown_ms: int = DEFAULT_COOLDOWN_MS,
        clock: Callable[[], int] = epoch_millis,
    ):
        if cooldown_ms < 0:
            raise ValueError(f"cooldown_ms must be non-negative, got {cooldown_ms}")
        self._cooldown_ms = cooldown_ms
        self._clock = clock
        self._last_fired_ms = 0
        self._lock = threading.Lock()

    @property
    def cooldown_ms(self) -> int:
        return self._cooldown_ms

    @property
    def last_fired_ms(self) -> int:
        with self._lock:
            return self._last_fired_ms

    def try_acquire(self, now_ms: int | None = None) -> bool:
        """Take the permit if the cooldown has elapsed.

        Args:
            now_ms: Current time in ms; read from the clock when omitted.

        Returns:
            True if the caller may fire (the timestamp is now ``now_ms``),
            False if still inside the cooldown window (timestamp unchanged).
        """
        with self._lock:
            now = self._clock() if now_ms is None else now_ms
            if now - self._last_fired_ms < self._cooldown_ms:
                return False
            self._last_fired_ms = now
            return True

    def remaining_ms(self, now_ms: int | None = None) -> int:
        """Milliseconds left in the current cooldown window (0 if open)."""
        with self._lock:
            now = self._clock() if now_ms is None else now_ms
            return max(0, self._cooldown_ms - (now - self._last_fired_ms))
