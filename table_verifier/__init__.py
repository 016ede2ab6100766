"""
Table Verifier - check rendered, sortable, paginated tables against fixtures.

This package drives a browser through a table page and compares what it
renders with a JSON fixture: cell contents, the order produced by each
column's sort toggle, and the integrity of link navigation.
"""

from .core.config import Selectors, VerifierConfig
from .core.context import RunContext
from .core.errors import (
    DriverError,
    ElementNotFoundError,
    FixtureParseError,
    UnsortableValuesError,
    VerifierError,
)
from .core.log_sink import LogSink, configure_logging
from .core.registry import get_schema_class, is_registered, register_schema
from .core.results import CheckResult, FailureKind, Phase, RunReport, TableReport
from .core.schema import ColumnSpec, Record, SortState, TableSchema
from .driver.base import PageDriver
from .engine.verifier import TableVerifier
from .fixtures.loader import load_fixture
from .runner import TableTestCase, load_suite, run_suite

__version__ = "0.1.0"

__all__ = [
    # Core
    "TableSchema",
    "ColumnSpec",
    "Record",
    "SortState",
    "register_schema",
    "get_schema_class",
    "is_registered",
    "VerifierConfig",
    "Selectors",
    "RunContext",
    "LogSink",
    "configure_logging",
    # Results
    "CheckResult",
    "FailureKind",
    "Phase",
    "TableReport",
    "RunReport",
    # Errors
    "VerifierError",
    "DriverError",
    "ElementNotFoundError",
    "FixtureParseError",
    "UnsortableValuesError",
    # Engine
    "PageDriver",
    "TableVerifier",
    "load_fixture",
    "TableTestCase",
    "load_suite",
    "run_suite",
]
