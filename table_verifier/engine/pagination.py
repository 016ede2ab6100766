"""Page-size selection."""

import logging
from typing import Sequence

from ..core.context import RunContext
from ..core.results import CheckResult, FailureKind, Phase

logger = logging.getLogger(__name__)


def choose_page_size(record_count: int, options: Sequence[int]) -> int:
    """
    Pick the page size that shows every record on one page.

    Returns the smallest option strictly greater than record_count. When no
    option is large enough the smallest option is returned, which leaves the
    table under-provisioned for large fixtures.

    Args:
        record_count: Number of fixture records
        options: Configured page sizes

    Returns:
        The page size to select
    """
    ordered = sorted(options)
    if not ordered:
        raise ValueError("No page size options configured")
    for value in ordered:
        if record_count < value:
            return value
    return ordered[0]


def select_page_size(context: RunContext, page_name: str, record_count: int) -> CheckResult:
    """
    Open the page-size control and select the size chosen for record_count.

    The page is refreshed and given a settle delay afterwards, whether or not
    the option was found.

    Raises:
        ElementNotFoundError: If the control or its option list never appears
    """
    driver = context.driver
    selectors = context.selectors
    timeout = context.config.wait_timeout

    size = choose_page_size(record_count, context.config.page_size_options)
    logger.info("Dropdown selected: %d", size)

    driver.click(selectors.page_size_control, timeout=timeout)
    driver.wait_for(selectors.page_size_option, state="visible", timeout=timeout)
    options = [text.strip() for text in driver.texts_of(selectors.page_size_option)]

    if str(size) in options:
        driver.click(selectors.page_size_option, nth=options.index(str(size)), timeout=timeout)
        driver.wait_for(selectors.page_size_option, state="hidden", timeout=timeout)
        check = CheckResult.ok(Phase.PAGE_SIZE, str(size), f"Page size {size} selected")
    else:
        line = context.sink.failure(
            f"{page_name}: Page size option {size} not available. Options: {options}"
        )
        check = CheckResult.fail(Phase.PAGE_SIZE, str(size), FailureKind.ELEMENT_NOT_FOUND, line)

    driver.refresh()
    driver.sleep(context.config.settle_delay)
    return check
