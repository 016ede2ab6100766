"""Browser drivers for table_verifier."""

from .base import PageDriver, open_page
from .playwright_driver import BrowserSession, PlaywrightPageDriver

__all__ = [
    "PageDriver",
    "open_page",
    "BrowserSession",
    "PlaywrightPageDriver",
]
