"""Abstract page driver used by the verification engine."""

from abc import ABC, abstractmethod
from typing import List, Optional


class PageDriver(ABC):
    """
    Browser capability the engine needs.

    All calls are synchronous. Methods that wait are bounded: when the
    condition does not hold within the timeout they raise
    ElementNotFoundError. A timeout of None means the driver's default
    explicit-wait bound.
    """

    @abstractmethod
    def goto(self, url: str) -> None:
        """Navigate to a URL."""
        pass

    @abstractmethod
    def refresh(self) -> None:
        """Reload the current page."""
        pass

    @abstractmethod
    def page_source(self) -> str:
        """Return the current document's HTML."""
        pass

    @abstractmethod
    def current_url(self) -> str:
        pass

    @abstractmethod
    def wait_for(
        self, selector: str, state: str = "attached", timeout: Optional[float] = None
    ) -> None:
        """
        Wait until the first match of a selector reaches a state.

        Args:
            selector: Element selector
            state: 'attached', 'visible' or 'hidden'
            timeout: Bound in seconds
        """
        pass

    @abstractmethod
    def text_of(self, selector: str, timeout: Optional[float] = None) -> str:
        """Wait for the first match and return its rendered text."""
        pass

    @abstractmethod
    def texts_of(self, selector: str) -> List[str]:
        """Return the rendered text of every current match, without waiting."""
        pass

    @abstractmethod
    def attribute_of(
        self, selector: str, name: str, timeout: Optional[float] = None
    ) -> Optional[str]:
        """Wait for the first match and return an attribute (None if absent)."""
        pass

    @abstractmethod
    def click(self, selector: str, nth: int = 0, timeout: Optional[float] = None) -> None:
        """Wait until the nth match is clickable and click it."""
        pass

    @abstractmethod
    def wait_for_attribute_change(
        self,
        selector: str,
        name: str,
        previous: Optional[str],
        timeout: Optional[float] = None,
    ) -> Optional[str]:
        """
        Wait until an attribute differs from a previously read value.

        The selector must be a CSS selector; XPath is not accepted here.

        Returns:
            The new attribute value (None if the attribute was removed)
        """
        pass

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Unconditional settle delay."""
        pass


def open_page(driver: PageDriver, url: str, settle_delay: float) -> None:
    """Navigate to a page and let it settle."""
    driver.goto(url)
    driver.sleep(settle_delay)
