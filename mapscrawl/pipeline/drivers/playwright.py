from __future__ import annotations

from typing import Any, List, Optional

from playwright.sync_api import (
    Error as PlaywrightError,
    Page,
    sync_playwright,
)

from ...config import BrowserSettings
from .base import NavigationError


class PlaywrightPageDriver:
    """PageDriver backed by a Playwright sync ``Page``."""

    def __init__(self, page: Page) -> None:
        self.page = page

    def navigate(self, url: str, *, timeout_ms: int, wait_until: str = "load") -> Optional[int]:
        try:
            response = self.page.goto(url, wait_until=wait_until, timeout=timeout_ms)
        except PlaywrightError as e:
            # TimeoutError is a subclass of Error
            raise NavigationError(url, str(e)) from e
        return response.status if response else None

    def evaluate(self, script: str, arg: Any = None) -> Any:
        if arg is None:
            return self.page.evaluate(script)
        return self.page.evaluate(script, arg)

    def find_elements(self, selector: str, within: Any = None) -> List[Any]:
        root = within if within is not None else self.page
        return list(root.query_selector_all(selector))

    def click_element(self, element: Any) -> None:
        element.click()

    def pause(self, ms: int) -> None:
        self.page.wait_for_timeout(ms)


class BrowserSession:
    """Scoped browser acquisition: launch on enter, close on exit.

    Usage::

        with BrowserSession(settings.browser) as driver:
            pipeline = MapsSearchPipeline(driver, settings)
            ...
    """

    def __init__(self, settings: Optional[BrowserSettings] = None) -> None:
        self.settings = settings or BrowserSettings()
        self._pw_cm = None
        self._browser = None
        self.driver: Optional[PlaywrightPageDriver] = None

    def __enter__(self) -> PlaywrightPageDriver:
        print("🌐 Launching browser...")
        self._pw_cm = sync_playwright()
        playwright = self._pw_cm.__enter__()
        try:
            self._browser = playwright.chromium.launch(
                headless=self.settings.headless,
                args=list(self.settings.launch_args),
            )
            context = self._browser.new_context(
                user_agent=self.settings.user_agent,
                locale=self.settings.locale,
                no_viewport=True,
            )
            page = context.new_page()
        except Exception:
            self._close()
            raise
        self.driver = PlaywrightPageDriver(page)
        return self.driver

    def __exit__(self, exc_type, exc, tb) -> None:
        self._close()

    def _close(self) -> None:
        try:
            if self._browser is not None:
                self._browser.close()
                print("🌐 Browser closed")
        finally:
            self._browser = None
            self.driver = None
            if self._pw_cm is not None:
                cm, self._pw_cm = self._pw_cm, None
                cm.__exit__(None, None, None)
