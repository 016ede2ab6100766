"""Table verification engine."""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..core.context import RunContext
from ..core.errors import DriverError, ElementNotFoundError, FixtureParseError
from ..core.results import (
    CheckResult,
    FailureKind,
    Phase,
    PhaseResult,
    TableReport,
    failure_kind_for,
)
from ..core.schema import Record, TableSchema
from ..driver.base import open_page
from ..fixtures.loader import load_fixture
from .links import verify_links
from .pagination import select_page_size
from .reconcile import mismatch_message, reconcile_column
from .sorting import verify_column_sorting

logger = logging.getLogger(__name__)


class TableVerifier:
    """
    Verifies one rendered table against its fixture.

    A run opens the page and then goes through its phases in order:

    - headers: every column name is present on the page
    - fixture: the fixture file is loaded into records
    - page_size: the page size is set so all records fit on one page
    - content: every column matches the fixture row by row
    - sorting: every column sorts correctly for each header toggle
    - links: every link value navigates to a page naming it, and the
      page size survives the round trip

    Phases record their failures instead of raising. A header failure does
    not stop the later phases; sorting only runs when content verification
    passed; links always run.

    Example:
        verifier = TableVerifier(
            context,
            schema=WorkunitsSchema(),
            page_name="Workunits",
            page_url="/esp/files/index.html#/workunits",
            fixture_path="fixtures/workunits.json",
        )
        report = verifier.run()
    """

    def __init__(
        self,
        context: RunContext,
        schema: TableSchema,
        page_name: str,
        page_url: str,
        fixture_path: Union[str, Path],
    ):
        """
        Initialize the verifier.

        Args:
            context: Run context holding the driver, config and log sink
            schema: Schema describing the table's columns and value handling
            page_name: Name used in every narrative line
            page_url: Table URL, absolute or relative to config.base_url
            fixture_path: Path to the fixture JSON file
        """
        self._context = context
        self._schema = schema
        self._page_name = page_name
        self._page_url = context.config.resolve_url(page_url)
        self._fixture_path = Path(fixture_path)
        self._records: Optional[List[Record]] = None

    @property
    def page_name(self) -> str:
        return self._page_name

    @property
    def page_url(self) -> str:
        return self._page_url

    @property
    def records(self) -> Optional[List[Record]]:
        """Fixture records in their current order (None until loaded)."""
        return self._records

    def run(self) -> TableReport:
        """
        Run every phase and return the collected results.

        Returns:
            TableReport with one PhaseResult per phase, in execution order
        """
        report = TableReport(page_name=self._page_name)

        self._run_phase(report, Phase.PAGE_LOAD, self._open)
        self._run_phase(report, Phase.HEADERS, self.check_headers)

        self._run_phase(report, Phase.FIXTURE, self._load_records)
        if self._records is None:
            reason = f"fixture not loaded: {self._fixture_path}"
            for phase in (Phase.PAGE_SIZE, Phase.CONTENT, Phase.SORTING):
                self._skip(report, phase, reason)
        else:
            self._run_phase(report, Phase.PAGE_SIZE, self._select_page_size)
            content = self._run_phase(report, Phase.CONTENT, self.verify_content)
            if content.passed:
                self._run_phase(report, Phase.SORTING, self.verify_sorting)
            else:
                self._skip(report, Phase.SORTING, "content verification failed")

        self._run_phase(report, Phase.LINKS, self.verify_links)
        return report

    def _run_phase(
        self, report: TableReport, phase: Phase, func: Callable[[PhaseResult], None]
    ) -> PhaseResult:
        """Run one phase, turning anything it raises into a failed check."""
        result = report.add_phase(phase)
        try:
            func(result)
        except ElementNotFoundError as e:
            line = self._context.sink.failure(f"{self._page_name}: {phase.value}: {e}")
            result.add(CheckResult.fail(phase, e.selector, FailureKind.ELEMENT_NOT_FOUND, line))
        except Exception as e:
            logger.exception("%s: %s phase aborted", self._page_name, phase.value)
            line = self._context.sink.failure(
                f"{self._page_name}: {phase.value} phase aborted: {e}"
            )
            result.add(CheckResult.fail(phase, phase.value, FailureKind.PHASE_ERROR, line))
        return result

    def _skip(self, report: TableReport, phase: Phase, reason: str) -> None:
        result = report.add_phase(phase)
        result.skipped = True
        result.skip_reason = reason
        logger.info("%s: %s skipped, %s", self._page_name, phase.value, reason)

    def _open(self, result: PhaseResult) -> None:
        open_page(self._context.driver, self._page_url, self._context.config.settle_delay)
        result.add(CheckResult.ok(Phase.PAGE_LOAD, self._page_url))

    def check_headers(self, result: PhaseResult) -> None:
        """Check that every column name is rendered as exact text."""
        driver = self._context.driver
        selectors = self._context.selectors
        sink = self._context.sink

        for name in self._schema.column_names():
            try:
                driver.wait_for(selectors.text(name), timeout=self._context.config.wait_timeout)
            except DriverError as e:
                line = sink.failure(f"{self._page_name}: Text not present: {name}")
                result.add(CheckResult.fail(Phase.HEADERS, name, failure_kind_for(e), line))
            else:
                line = sink.success(f"{self._page_name}: Text present: {name}")
                result.add(CheckResult.ok(Phase.HEADERS, name, line))

    def _load_records(self, result: PhaseResult) -> None:
        try:
            self._records = load_fixture(self._fixture_path, self._schema)
        except FixtureParseError as e:
            sink = self._context.sink
            sink.failure(f"Exception: {e}")
            line = sink.failure(f"Error in JSON Parsing: {self._fixture_path}")
            result.add(
                CheckResult.fail(
                    Phase.FIXTURE, str(self._fixture_path), FailureKind.FIXTURE_PARSE_ERROR, line
                )
            )
        else:
            result.add(CheckResult.ok(Phase.FIXTURE, str(self._fixture_path)))

    def _select_page_size(self, result: PhaseResult) -> None:
        result.add(select_page_size(self._context, self._page_name, len(self._records)))

    def _snapshot(self, column_key: str) -> List[str]:
        return self._context.driver.texts_of(self._context.selectors.cell(column_key))

    def verify_content(self, result: PhaseResult) -> None:
        """
        Reconcile every column against the fixture in its loaded order.

        The identifier column is read first. If its length differs from the
        fixture it is read once more after a settle delay; a second mismatch
        fails the phase without comparing columns.
        """
        sink = self._context.sink
        schema = self._schema
        records = self._records
        expected = len(records)

        logger.info("Page: %s: Number of Objects from Json: %d", self._page_name, expected)
        ui_ids = self._snapshot(schema.identifier_key)
        if len(ui_ids) != expected:
            self._context.driver.sleep(self._context.config.settle_delay)
            ui_ids = self._snapshot(schema.identifier_key)
        logger.info("Page: %s: Number of Objects from UI: %d", self._page_name, len(ui_ids))

        if len(ui_ids) != expected:
            line = sink.failure(
                f"{self._page_name}: Number of items on UI are not equal to the number of items in JSON"
                f"\nNumber of Objects from Json: {expected}"
                f"\nNumber of Objects from UI: {len(ui_ids)}"
            )
            result.add(
                CheckResult.fail(
                    Phase.CONTENT, schema.identifier_name, FailureKind.ROW_COUNT_MISMATCH, line
                )
            )
            return

        for column in schema.columns:
            try:
                ui_values = self._snapshot(column.key)
            except DriverError as e:
                line = sink.failure(f"{self._page_name}: Could not read column: {column.name}. {e}")
                result.add(CheckResult.fail(Phase.CONTENT, column.name, failure_kind_for(e), line))
                continue

            reconciliation = reconcile_column(
                schema, column.key, column.name, ui_values, records, ui_ids
            )
            details = [
                sink.failure(
                    mismatch_message(self._page_name, schema.identifier_name, m, column.name)
                )
                for m in reconciliation.mismatches
            ]

            if reconciliation.passed:
                line = sink.success(
                    f"{self._page_name}: Content test passed for column: {column.name}"
                )
                result.add(CheckResult.ok(Phase.CONTENT, column.name, line))
            elif not reconciliation.length_matches:
                line = sink.failure(
                    f"{self._page_name}: Number of {column.name} values on UI "
                    f"({reconciliation.ui_rows}) differs from JSON ({reconciliation.fixture_rows})"
                )
                result.add(
                    CheckResult.fail(
                        Phase.CONTENT, column.name, FailureKind.ROW_COUNT_MISMATCH, line, details
                    )
                )
            else:
                result.add(
                    CheckResult.fail(
                        Phase.CONTENT,
                        column.name,
                        FailureKind.VALUE_MISMATCH,
                        f"{len(details)} of {reconciliation.fixture_rows} rows differ",
                        details,
                    )
                )

    def verify_sorting(self, result: PhaseResult) -> None:
        """Toggle and check the sort order of every sortable column."""
        for column in self._schema.sortable_columns():
            for check in verify_column_sorting(
                self._context, self._schema, self._page_name, self._records, column
            ):
                result.add(check)

    def verify_links(self, result: PhaseResult) -> None:
        """Check navigation for every link column."""
        for check in verify_links(self._context, self._schema, self._page_name, self._page_url):
            result.add(check)
