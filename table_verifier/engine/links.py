"""Link-navigation verification."""

import logging
from typing import Iterable, List, Optional

from ..core.context import RunContext
from ..core.errors import DriverError
from ..core.results import CheckResult, FailureKind, Phase, failure_kind_for
from ..core.schema import TableSchema

logger = logging.getLogger(__name__)


def distinct_values(values: Iterable[str]) -> List[str]:
    """Stripped, non-empty values in first-seen order."""
    seen = dict.fromkeys(v.strip() for v in values)
    return [v for v in seen if v]


def page_size_text(context: RunContext) -> str:
    """Text currently displayed by the page-size control."""
    return context.driver.text_of(
        context.selectors.page_size_control, timeout=context.config.wait_timeout
    ).strip()


def verify_links(
    context: RunContext, schema: TableSchema, page_name: str, page_url: str
) -> List[CheckResult]:
    """
    Click every distinct value of every link column and come back.

    For each value the destination page must contain the clicked text, and
    the page-size control must display the same text after returning to
    page_url as it did before the click. A browser error fails only the
    value it happened on; the table page is reopened after every value.

    Returns:
        Two checks per value: the link target and the page-size state
    """
    checks: List[CheckResult] = []
    for column_key in schema.link_column_keys():
        try:
            values = distinct_values(context.driver.texts_of(context.selectors.cell(column_key)))
        except DriverError as e:
            line = context.sink.failure(f"{page_name}: Could not read link column {column_key}. {e}")
            checks.append(CheckResult.fail(Phase.LINKS, column_key, failure_kind_for(e), line))
            continue
        logger.info("%s: %d link values in column %s", page_name, len(values), column_key)
        for index, value in enumerate(values, start=1):
            checks.extend(_verify_link(context, schema, page_name, page_url, index, value))
    return checks


def _verify_link(
    context: RunContext,
    schema: TableSchema,
    page_name: str,
    page_url: str,
    index: int,
    value: str,
) -> List[CheckResult]:
    driver = context.driver
    selectors = context.selectors
    sink = context.sink
    timeout = context.config.wait_timeout
    checks: List[CheckResult] = []

    before: Optional[str] = None
    try:
        before = page_size_text(context)
    except DriverError as e:
        line = sink.failure(f"{page_name}: Page size control not found before opening {value}. {e}")
        checks.append(CheckResult.fail(Phase.LINKS, value, failure_kind_for(e), line))

    href = None
    try:
        row = selectors.row_containing(value)
        driver.wait_for(row, timeout=timeout)
        href = driver.attribute_of(selectors.anchor_in(row), "href", timeout=timeout)
        driver.click(row, timeout=timeout)

        if value in driver.page_source():
            line = sink.success(
                f"{page_name}: Link Test Pass for {index}. {value}. URL : {href}"
            )
            checks.append(CheckResult.ok(Phase.LINKS, value, line))
        else:
            current_page = schema.describe_current_page(driver)
            line = sink.failure(
                f"{page_name}: Link Test Fail for {index}. {value} page failed. "
                f"The current navigation page that we landed on is {current_page}. "
                f"Current URL : {href}"
            )
            checks.append(
                CheckResult.fail(Phase.LINKS, value, FailureKind.LINK_TARGET_MISMATCH, line)
            )
    except DriverError as e:
        line = sink.failure(f"{page_name}: Link Test Fail for {index}. {value}. {e}")
        checks.append(CheckResult.fail(Phase.LINKS, value, failure_kind_for(e), line))

    subject = f"{value} (page size)"
    try:
        driver.goto(page_url)
        driver.refresh()
    except DriverError as e:
        line = sink.failure(f"{page_name}: Could not return to {page_url} after opening {value}. {e}")
        checks.append(CheckResult.fail(Phase.LINKS, subject, failure_kind_for(e), line))
        return checks

    if before is None:
        return checks

    try:
        after = page_size_text(context)
    except DriverError as e:
        line = sink.failure(f"{page_name}: Page size control not found after navigating back. {e}")
        checks.append(CheckResult.fail(Phase.LINKS, subject, failure_kind_for(e), line))
        return checks

    if after != before:
        line = sink.failure(
            f"{page_name}: Dropdown value changed after navigating back. "
            f"Before: {before}, After: {after}"
        )
        checks.append(
            CheckResult.fail(Phase.LINKS, subject, FailureKind.NAVIGATION_REGRESSION, line)
        )
    else:
        checks.append(CheckResult.ok(Phase.LINKS, subject))
    return checks
