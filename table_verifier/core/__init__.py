"""Core infrastructure for table_verifier."""

from .config import Selectors, VerifierConfig
from .context import RunContext
from .errors import (
    DriverError,
    ElementNotFoundError,
    FixtureParseError,
    UnsortableValuesError,
    VerifierError,
)
from .log_sink import LogSink, Severity, configure_logging
from .registry import get_schema_class, is_registered, register_schema
from .results import CheckResult, FailureKind, Phase, PhaseResult, RunReport, TableReport
from .schema import ColumnSpec, Record, SortState, TableSchema

__all__ = [
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
    "Severity",
    "configure_logging",
    "CheckResult",
    "FailureKind",
    "Phase",
    "PhaseResult",
    "TableReport",
    "RunReport",
    "VerifierError",
    "DriverError",
    "ElementNotFoundError",
    "FixtureParseError",
    "UnsortableValuesError",
]
