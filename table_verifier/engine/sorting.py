"""Sort-order verification for a single column."""

import logging
from typing import List

from ..core.context import RunContext
from ..core.errors import DriverError, ElementNotFoundError, UnsortableValuesError
from ..core.results import CheckResult, FailureKind, Phase, failure_kind_for
from ..core.schema import ColumnSpec, Record, SortState, TableSchema
from .reconcile import mismatch_message, reconcile_column

logger = logging.getLogger(__name__)


def toggle_sort(context: RunContext, column_key: str) -> SortState:
    """
    Click a column header and return the sort state it settles on.

    The header's sort attribute is read before the click and the driver
    waits until it changes, so the state returned is the one the UI applied
    for this click.

    Raises:
        ElementNotFoundError: If the header is missing or its sort state
            does not change within the wait bound
        DriverError: If the browser fails to click or read the header
    """
    driver = context.driver
    selectors = context.selectors
    timeout = context.config.wait_timeout
    header = selectors.header(column_key)

    previous = driver.attribute_of(header, selectors.sort_attribute, timeout=timeout)
    driver.click(header, timeout=timeout)
    observed = driver.wait_for_attribute_change(
        header, selectors.sort_attribute, previous, timeout=timeout
    )
    state = SortState.parse(observed)
    logger.debug("%s: sort state %s -> %s", column_key, previous, state.value)
    return state


def verify_column_sorting(
    context: RunContext,
    schema: TableSchema,
    page_name: str,
    records: List[Record],
    column: ColumnSpec,
) -> List[CheckResult]:
    """
    Run the configured number of sort toggles on one column.

    Every cycle re-sorts records in place to the observed direction and
    reconciles the rendered column against them. A failing cycle, including
    one hit by a browser error, does not stop the remaining ones.

    Returns:
        One CheckResult per cycle
    """
    return [
        _sort_cycle(context, schema, page_name, records, column)
        for _ in range(context.config.sort_cycles)
    ]


def _sort_cycle(
    context: RunContext,
    schema: TableSchema,
    page_name: str,
    records: List[Record],
    column: ColumnSpec,
) -> CheckResult:
    sink = context.sink
    selectors = context.selectors

    try:
        state = toggle_sort(context, column.key)
    except ElementNotFoundError as e:
        line = sink.failure(f"{page_name}: Sort state did not change for: {column.name}. {e}")
        return CheckResult.fail(Phase.SORTING, column.name, FailureKind.ELEMENT_NOT_FOUND, line)
    except DriverError as e:
        line = sink.failure(f"{page_name}: Sort toggle failed for: {column.name}. {e}")
        return CheckResult.fail(Phase.SORTING, column.name, FailureKind.DRIVER_ERROR, line)

    subject = f"{column.name} ({state.value})"
    try:
        schema.apply_sort(records, column.key, state)
    except UnsortableValuesError as e:
        line = sink.failure(f"{page_name}: Cannot sort fixture by: {column.name}. {e}")
        return CheckResult.fail(Phase.SORTING, subject, FailureKind.FIXTURE_PARSE_ERROR, line)

    try:
        ui_values = context.driver.texts_of(selectors.cell(column.key))
        ui_ids = context.driver.texts_of(selectors.cell(schema.identifier_key))
    except DriverError as e:
        line = sink.failure(
            f"{page_name}: Could not read {column.name} after sorting in {state.value} order. {e}"
        )
        return CheckResult.fail(Phase.SORTING, subject, failure_kind_for(e), line)

    reconciliation = reconcile_column(
        schema, column.key, column.name, ui_values, records, ui_ids
    )

    details = []
    for mismatch in reconciliation.mismatches:
        details.append(
            sink.failure(
                mismatch_message(page_name, schema.identifier_name, mismatch, column.name)
            )
        )

    if reconciliation.passed:
        line = sink.success(
            f"{page_name}: Values are correctly sorted in {state.value} order by: {column.name}"
        )
        return CheckResult.ok(Phase.SORTING, subject, line)

    if not reconciliation.length_matches:
        details.append(
            f"Number of rows on UI: {reconciliation.ui_rows}, in JSON: {reconciliation.fixture_rows}"
        )
    line = sink.failure(
        f"{page_name}: Values are not correctly sorted in {state.value} order by: {column.name}"
    )
    return CheckResult.fail(
        Phase.SORTING, subject, FailureKind.SORT_ORDER_MISMATCH, line, details
    )
