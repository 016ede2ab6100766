"""Error types raised by the verification engine and its collaborators.

This module provides the exception hierarchy shared across the package:
- VerifierError: Base class for every error the package raises on purpose
- DriverError: A browser operation could not be carried out
- ElementNotFoundError: A bounded wait for a locator or condition expired
- FixtureParseError: A fixture file is missing, unreadable, or malformed
- UnsortableValuesError: A fixture column mixes values that cannot be ordered
"""

from typing import List, Optional


class VerifierError(Exception):
    """Base class for errors raised by table_verifier."""

    pass


class DriverError(VerifierError):
    """Raised when the page driver fails to perform an operation.

    Navigation failures and unexpected browser errors are wrapped in this
    type so callers never have to know which automation library is in use.
    """

    pass


class ElementNotFoundError(DriverError):
    """Raised when a bounded wait expires before its condition holds.

    Timeouts are treated the same as a missing element: the locator (or the
    condition built on it) never became true within the wait budget.

    Attributes:
        selector: The selector that was waited on
        timeout: The wait budget in seconds, if known
    """

    def __init__(self, selector: str, timeout: Optional[float] = None, reason: str = ""):
        self.selector = selector
        self.timeout = timeout
        message = f"Element not found: {selector}"
        if timeout is not None:
            message += f" (waited {timeout:g}s)"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class FixtureParseError(VerifierError):
    """Raised when a fixture file cannot be turned into records.

    Attributes:
        path: Path of the fixture file
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason} ({path})")


class UnsortableValuesError(VerifierError):
    """Raised when a column's fixture values have no common ordering.

    Attributes:
        column_key: Column the records were to be sorted by
        kinds: Names of the value kinds found in the column
    """

    def __init__(self, column_key: str, kinds: List[str]):
        self.column_key = column_key
        self.kinds = kinds
        super().__init__(
            f"Fixture values of column '{column_key}' mix {', '.join(kinds)} and cannot be ordered"
        )
