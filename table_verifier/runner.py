"""Suite runner: one browser session, table tests in sequence."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .core.config import VerifierConfig
from .core.context import RunContext
from .core.log_sink import LogSink
from .core.registry import get_schema_class
from .core.results import CheckResult, FailureKind, Phase, PhaseResult, RunReport, TableReport
from .core.schema import TableSchema
from .driver.base import PageDriver
from .driver.playwright_driver import BrowserSession
from .engine.verifier import TableVerifier

logger = logging.getLogger(__name__)

SUITE_KEYS = ("schema", "page_name", "url", "fixture")


@dataclass
class TableTestCase:
    """
    One table to verify.

    Attributes:
        page_name: Name used in narrative lines
        page_url: Table URL, absolute or relative to the base URL
        fixture_path: Fixture JSON file
        schema: Schema instance for the table
    """

    page_name: str
    page_url: str
    fixture_path: Union[str, Path]
    schema: TableSchema


def load_suite(path: Union[str, Path]) -> List[TableTestCase]:
    """
    Load table test cases from a suite file.

    The suite is a JSON array of objects with keys 'schema' (a registered
    schema name), 'page_name', 'url' and 'fixture'. Relative fixture paths
    resolve against the suite file's directory.

    Raises:
        ValueError: If an entry is malformed
        KeyError: If an entry names an unregistered schema
    """
    # Registers the bundled schemas
    from . import schemas  # noqa: F401

    path = Path(path)
    with open(path, encoding="utf-8") as f:
        entries = json.load(f)

    if not isinstance(entries, list):
        raise ValueError(f"Suite {path} must be a JSON array")

    cases = []
    for i, entry in enumerate(entries):
        missing = [k for k in SUITE_KEYS if not isinstance(entry, dict) or k not in entry]
        if missing:
            raise ValueError(f"Suite entry {i} in {path} is missing {missing}")
        fixture = Path(entry["fixture"])
        if not fixture.is_absolute():
            fixture = path.parent / fixture
        cases.append(
            TableTestCase(
                page_name=entry["page_name"],
                page_url=entry["url"],
                fixture_path=fixture,
                schema=get_schema_class(entry["schema"])(),
            )
        )
    return cases


def run_table(context: RunContext, case: TableTestCase) -> TableReport:
    """Run one case; an unexpected error becomes a failed report."""
    verifier = TableVerifier(
        context,
        schema=case.schema,
        page_name=case.page_name,
        page_url=case.page_url,
        fixture_path=case.fixture_path,
    )
    try:
        return verifier.run()
    except Exception as e:
        logger.exception("%s: table test aborted", case.page_name)
        line = context.sink.failure(f"{case.page_name}: Table test aborted: {e}")
        report = TableReport(page_name=case.page_name)
        report.phases.append(
            PhaseResult(
                phase=Phase.PAGE_LOAD,
                checks=[
                    CheckResult.fail(Phase.PAGE_LOAD, case.page_name, FailureKind.PHASE_ERROR, line)
                ],
            )
        )
        return report


def run_suite(
    cases: Iterable[TableTestCase],
    config: Optional[VerifierConfig] = None,
    driver: Optional[PageDriver] = None,
    sink: Optional[LogSink] = None,
) -> RunReport:
    """
    Run table test cases one after another against one browser session.

    When no driver is given a Playwright BrowserSession is started and
    always closed at the end, whatever the individual outcomes.

    Args:
        cases: Table tests to run, in order
        config: Run configuration (defaults from the environment)
        driver: Existing page driver; the caller owns its lifecycle
        sink: Log sink (a new one writing to stdout/stderr by default)

    Returns:
        RunReport with one TableReport per case
    """
    config = config or VerifierConfig.from_env()
    sink = sink or LogSink()
    report = RunReport()

    if driver is not None:
        context = RunContext(driver=driver, config=config, sink=sink)
        for case in cases:
            report.tables.append(run_table(context, case))
        report.completed = True
        return report

    session = BrowserSession(config)
    try:
        context = RunContext(driver=session.start(), config=config, sink=sink)
        for case in cases:
            report.tables.append(run_table(context, case))
        report.completed = True
    finally:
        session.close()
    return report
