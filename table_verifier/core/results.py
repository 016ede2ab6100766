"""Result values produced by each verification phase.

Phases never let failures escape as exceptions. Every assertion becomes a
CheckResult; checks are grouped per phase and phases per table, so outcomes
can be aggregated at the orchestration boundary.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import polars as pl

from .errors import DriverError, ElementNotFoundError

REPORT_SCHEMA = {
    "page": pl.Utf8,
    "phase": pl.Utf8,
    "subject": pl.Utf8,
    "passed": pl.Boolean,
    "kind": pl.Utf8,
    "message": pl.Utf8,
}


class FailureKind(str, Enum):
    """Why a check failed."""

    ELEMENT_NOT_FOUND = "element_not_found"
    ROW_COUNT_MISMATCH = "row_count_mismatch"
    VALUE_MISMATCH = "value_mismatch"
    SORT_ORDER_MISMATCH = "sort_order_mismatch"
    NAVIGATION_REGRESSION = "navigation_regression"
    FIXTURE_PARSE_ERROR = "fixture_parse_error"
    LINK_TARGET_MISMATCH = "link_target_mismatch"
    PHASE_ERROR = "phase_error"
    DRIVER_ERROR = "driver_error"


def failure_kind_for(error: DriverError) -> FailureKind:
    """Timeouts count as missing elements; other browser errors keep their own kind."""
    if isinstance(error, ElementNotFoundError):
        return FailureKind.ELEMENT_NOT_FOUND
    return FailureKind.DRIVER_ERROR


class Phase(str, Enum):
    """Phases of a table test, in execution order."""

    PAGE_LOAD = "page_load"
    HEADERS = "headers"
    FIXTURE = "fixture"
    PAGE_SIZE = "page_size"
    CONTENT = "content"
    SORTING = "sorting"
    LINKS = "links"


@dataclass
class CheckResult:
    """
    Outcome of a single assertion.

    Attributes:
        phase: Phase the check belongs to
        subject: What was checked (column name, link value, header text)
        passed: Whether the assertion held
        kind: Failure reason, None when passed
        message: The narrative line written to the log sink
        details: Additional lines, e.g. individual row mismatches
    """

    phase: Phase
    subject: str
    passed: bool
    kind: Optional[FailureKind] = None
    message: str = ""
    details: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls, phase: Phase, subject: str, message: str = "") -> "CheckResult":
        return cls(phase=phase, subject=subject, passed=True, message=message)

    @classmethod
    def fail(
        cls,
        phase: Phase,
        subject: str,
        kind: FailureKind,
        message: str = "",
        details: Optional[List[str]] = None,
    ) -> "CheckResult":
        return cls(
            phase=phase,
            subject=subject,
            passed=False,
            kind=kind,
            message=message,
            details=list(details or []),
        )


@dataclass
class PhaseResult:
    """All checks recorded by one phase."""

    phase: Phase
    checks: List[CheckResult] = field(default_factory=list)
    skipped: bool = False
    skip_reason: str = ""

    def add(self, check: CheckResult) -> CheckResult:
        self.checks.append(check)
        return check

    @property
    def passed(self) -> bool:
        """A phase passes when it ran and none of its checks failed."""
        return not self.skipped and all(c.passed for c in self.checks)

    @property
    def failures(self) -> List[CheckResult]:
        return [c for c in self.checks if not c.passed]


@dataclass
class TableReport:
    """Outcome of one table test."""

    page_name: str
    phases: List[PhaseResult] = field(default_factory=list)

    def add_phase(self, phase: Phase) -> PhaseResult:
        result = PhaseResult(phase=phase)
        self.phases.append(result)
        return result

    def phase(self, phase: Phase) -> Optional[PhaseResult]:
        """Return the result for a phase, or None if it never started."""
        for result in self.phases:
            if result.phase == phase:
                return result
        return None

    @property
    def checks(self) -> List[CheckResult]:
        return [c for p in self.phases for c in p.checks]

    @property
    def passed(self) -> bool:
        if not self.phases or any(p.skipped for p in self.phases):
            return False
        return all(c.passed for c in self.checks)

    def failures(self, kind: Optional[FailureKind] = None) -> List[CheckResult]:
        """Return failed checks, optionally restricted to one kind."""
        return [
            c for c in self.checks if not c.passed and (kind is None or c.kind == kind)
        ]

    def to_rows(self) -> List[Dict[str, Any]]:
        return [
            {
                "page": self.page_name,
                "phase": c.phase.value,
                "subject": c.subject,
                "passed": c.passed,
                "kind": c.kind.value if c.kind else None,
                "message": c.message,
            }
            for c in self.checks
        ]

    def to_frame(self) -> pl.DataFrame:
        """One row per check."""
        return pl.DataFrame(self.to_rows(), schema=REPORT_SCHEMA)


@dataclass
class RunReport:
    """
    Outcome of a whole run.

    Attributes:
        tables: One report per table test, in execution order
        completed: True when the run reached the end and released its session
    """

    tables: List[TableReport] = field(default_factory=list)
    completed: bool = False

    @property
    def passed(self) -> bool:
        return self.completed and all(t.passed for t in self.tables)

    def to_frame(self) -> pl.DataFrame:
        rows: List[Dict[str, Any]] = []
        for table in self.tables:
            rows.extend(table.to_rows())
        return pl.DataFrame(rows, schema=REPORT_SCHEMA)

    def summary(self) -> pl.DataFrame:
        """
        Aggregate pass/fail counts per page and phase.

        Returns:
            DataFrame with columns page, phase, checks, passed, failed
        """
        return (
            self.to_frame()
            .group_by(["page", "phase"], maintain_order=True)
            .agg(
                pl.len().alias("checks"),
                pl.col("passed").sum().alias("passed"),
                (~pl.col("passed")).sum().alias("failed"),
            )
        )
