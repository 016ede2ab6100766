"""Page driver and browser session backed by Playwright's sync API."""

import logging
from typing import List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ..core.config import VerifierConfig
from ..core.errors import DriverError, ElementNotFoundError
from .base import PageDriver

logger = logging.getLogger(__name__)

_ATTRIBUTE_CHANGED_JS = """
([selector, name, previous]) => {
    const el = document.querySelector(selector);
    return el !== null && el.getAttribute(name) !== previous;
}
"""


class PlaywrightPageDriver(PageDriver):
    """
    PageDriver implementation on a Playwright Page.

    Playwright timeouts become ElementNotFoundError, any other Playwright
    error becomes DriverError.
    """

    def __init__(self, page: Page, default_timeout: float = 10.0):
        self._page = page
        self._default_timeout = default_timeout

    @property
    def page(self) -> Page:
        return self._page

    def _ms(self, timeout: Optional[float]) -> float:
        return (self._default_timeout if timeout is None else timeout) * 1000

    def _seconds(self, timeout: Optional[float]) -> float:
        return self._default_timeout if timeout is None else timeout

    def goto(self, url: str) -> None:
        try:
            self._page.goto(url)
        except PlaywrightError as e:
            raise DriverError(f"Error in opening web page: {url}: {e}") from e

    def refresh(self) -> None:
        try:
            self._page.reload()
        except PlaywrightError as e:
            raise DriverError(f"Error in refreshing page: {e}") from e

    def page_source(self) -> str:
        try:
            # A click may have started a navigation
            self._page.wait_for_load_state()
            return self._page.content()
        except PlaywrightError as e:
            raise DriverError(f"Error in reading page source: {e}") from e

    def current_url(self) -> str:
        return self._page.url

    def wait_for(
        self, selector: str, state: str = "attached", timeout: Optional[float] = None
    ) -> None:
        try:
            self._page.locator(selector).first.wait_for(state=state, timeout=self._ms(timeout))
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(selector, self._seconds(timeout), state) from e
        except PlaywrightError as e:
            raise DriverError(str(e)) from e

    def text_of(self, selector: str, timeout: Optional[float] = None) -> str:
        try:
            return self._page.locator(selector).first.inner_text(timeout=self._ms(timeout))
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(selector, self._seconds(timeout)) from e
        except PlaywrightError as e:
            raise DriverError(str(e)) from e

    def texts_of(self, selector: str) -> List[str]:
        try:
            return self._page.locator(selector).all_inner_texts()
        except PlaywrightError as e:
            raise DriverError(str(e)) from e

    def attribute_of(
        self, selector: str, name: str, timeout: Optional[float] = None
    ) -> Optional[str]:
        try:
            return self._page.locator(selector).first.get_attribute(
                name, timeout=self._ms(timeout)
            )
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(selector, self._seconds(timeout)) from e
        except PlaywrightError as e:
            raise DriverError(str(e)) from e

    def click(self, selector: str, nth: int = 0, timeout: Optional[float] = None) -> None:
        try:
            self._page.locator(selector).nth(nth).click(timeout=self._ms(timeout))
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(selector, self._seconds(timeout), "not clickable") from e
        except PlaywrightError as e:
            raise DriverError(str(e)) from e

    def wait_for_attribute_change(
        self,
        selector: str,
        name: str,
        previous: Optional[str],
        timeout: Optional[float] = None,
    ) -> Optional[str]:
        try:
            self._page.wait_for_function(
                _ATTRIBUTE_CHANGED_JS,
                arg=[selector, name, previous],
                timeout=self._ms(timeout),
            )
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(
                selector, self._seconds(timeout), f"'{name}' stayed '{previous}'"
            ) from e
        except PlaywrightError as e:
            raise DriverError(str(e)) from e
        return self.attribute_of(selector, name, timeout=timeout)

    def sleep(self, seconds: float) -> None:
        self._page.wait_for_timeout(seconds * 1000)


class BrowserSession:
    """
    One browser session shared by every table test in a run.

    Use as a context manager; the browser and Playwright are always closed
    on exit.

    Example:
        with BrowserSession(config) as driver:
            run_suite(cases, config, driver=driver)
    """

    def __init__(self, config: VerifierConfig):
        self._config = config
        self._playwright = None
        self._browser = None
        self.driver: Optional[PlaywrightPageDriver] = None

    def start(self) -> PlaywrightPageDriver:
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self._config.headless,
                args=["--no-sandbox"],
            )
            width, height = self._config.viewport
            page = self._browser.new_page(viewport={"width": width, "height": height})
        except PlaywrightError as e:
            self.close()
            raise DriverError(f"Error in setting up browser: {e}") from e

        logger.info("chromium %s", self._browser.version)
        self.driver = PlaywrightPageDriver(page, default_timeout=self._config.wait_timeout)
        return self.driver

    def close(self) -> None:
        if self._browser is not None:
            try:
                self._browser.close()
            except PlaywrightError as e:
                logger.warning("Error in closing browser: %s", e)
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
        self.driver = None

    def __enter__(self) -> PlaywrightPageDriver:
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
