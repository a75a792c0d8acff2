from __future__ import annotations

from typing import Any, List, Optional, Protocol


class NavigationError(RuntimeError):
    """Initial page load failed or timed out; the search cannot continue."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"navigation to {url} failed: {reason}")
        self.url = url
        self.reason = reason


class PageDriver(Protocol):
    """Minimal page contract the pipeline stages talk to.

    All calls run sequentially against one shared page.
    """

    def navigate(self, url: str, *, timeout_ms: int, wait_until: str = "load") -> Optional[int]:
        """Load ``url``; return HTTP status if known. Raises NavigationError."""
        ...

    def evaluate(self, script: str, arg: Any = None) -> Any:
        ...

    def find_elements(self, selector: str, within: Any = None) -> List[Any]:
        ...

    def click_element(self, element: Any) -> None:
        ...

    def pause(self, ms: int) -> None:
        ...
