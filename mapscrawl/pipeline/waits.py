"""Wait strategies used between page interactions and the next read."""

from __future__ import annotations

import time
from typing import Callable, Optional, Protocol


Condition = Callable[[], bool]


class WaitStrategy(Protocol):
    def wait(self, timeout_ms: int, condition: Optional[Condition] = None) -> bool:
        """Block until ``condition`` holds or ``timeout_ms`` elapses.

        Returns True if the condition was observed to hold.
        """
        ...


def _sleep_ms(ms: int) -> None:
    time.sleep(ms / 1000.0)


class FixedDelayWait:
    """Always pause the full timeout; the condition is checked once at the end."""

    def __init__(self, sleep_ms: Callable[[int], None] = _sleep_ms) -> None:
        self._sleep_ms = sleep_ms

    def wait(self, timeout_ms: int, condition: Optional[Condition] = None) -> bool:
        if timeout_ms > 0:
            self._sleep_ms(timeout_ms)
        return bool(condition()) if condition is not None else True


class PollingWait:
    """Check ``condition`` every ``interval_ms`` and return as soon as it holds."""

    def __init__(
        self,
        *,
        interval_ms: int = 250,
        sleep_ms: Callable[[int], None] = _sleep_ms,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval_ms = max(1, int(interval_ms))
        self._sleep_ms = sleep_ms
        self._clock = clock

    def wait(self, timeout_ms: int, condition: Optional[Condition] = None) -> bool:
        if condition is None:
            if timeout_ms > 0:
                self._sleep_ms(timeout_ms)
            return True
        deadline = self._clock() + timeout_ms / 1000.0
        while True:
            try:
                if condition():
                    return True
            except Exception as e:
                print(f"  ⚠️  wait condition raised: {e}")
            remaining_ms = int((deadline - self._clock()) * 1000)
            if remaining_ms <= 0:
                return False
            self._sleep_ms(min(self.interval_ms, remaining_ms))
