from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .drivers.base import PageDriver
from .waits import FixedDelayWait, WaitStrategy


SCROLL_TO_END_JS = """
(selector) => {
    const el = document.querySelector(selector);
    if (!el) return false;
    el.scrollTop = el.scrollHeight;
    return true;
}
"""

MEASURE_EXTENT_JS = """
(selector) => {
    const el = document.querySelector(selector);
    return el ? el.scrollHeight : null;
}
"""


@dataclass(frozen=True)
class ScrollOutcome:
    scrolls: int
    extent: Optional[int]
    converged: bool
    error: Optional[str] = None


class ScrollConvergenceEngine:
    """Scroll the results container until its height stops growing.

    The feed lazily appends listings as it is scrolled, so an unchanged
    scroll extent between two measurements is the only end-of-results
    signal. Running out of attempts is accepted as partial results.
    """

    def __init__(
        self,
        driver: PageDriver,
        *,
        selector: str,
        max_attempts: int,
        settle_ms: int,
        waiter: Optional[WaitStrategy] = None,
    ) -> None:
        self.driver = driver
        self.selector = selector
        self.max_attempts = max(0, int(max_attempts))
        self.settle_ms = settle_ms
        self.waiter = waiter or FixedDelayWait()

    def _measure(self) -> Optional[int]:
        value = self.driver.evaluate(MEASURE_EXTENT_JS, self.selector)
        return int(value) if value is not None else None

    def run(self) -> ScrollOutcome:
        print("📜 Scrolling through results...")
        scrolls = 0
        extent: Optional[int] = None
        try:
            extent = self._measure()
            if extent is None:
                return ScrollOutcome(scrolls=0, extent=None, converged=False, error="container not found")
            while scrolls < self.max_attempts:
                self.driver.evaluate(SCROLL_TO_END_JS, self.selector)
                scrolls += 1
                self.waiter.wait(self.settle_ms)
                current = self._measure()
                if current is None:
                    return ScrollOutcome(scrolls=scrolls, extent=extent, converged=False, error="container disappeared")
                if current == extent:
                    print(f"  Reached end of results after {scrolls} scroll(s)")
                    return ScrollOutcome(scrolls=scrolls, extent=current, converged=True)
                extent = current
                print(f"  Scroll attempt {scrolls}/{self.max_attempts} (extent={extent})")
        except Exception as e:
            print(f"  ⚠️  Scrolling stopped early: {e}")
            return ScrollOutcome(scrolls=scrolls, extent=extent, converged=False, error=str(e))
        print(f"  Scroll budget exhausted ({self.max_attempts} attempts); keeping partial results")
        return ScrollOutcome(scrolls=scrolls, extent=extent, converged=False)
