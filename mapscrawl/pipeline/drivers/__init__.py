from .base import NavigationError, PageDriver
from .playwright import BrowserSession, PlaywrightPageDriver

__all__ = ["NavigationError", "PageDriver", "BrowserSession", "PlaywrightPageDriver"]
