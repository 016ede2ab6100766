"""Narrative result lines and logging setup."""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import IO, List, Optional, Tuple

from .config import VerifierConfig

RESULTS_LOGGER = "table_verifier.results"

ERROR_LOG_FILE = "error.log"
DEBUG_LOG_FILE = "debug.log"
DETAIL_LOG_FILE = "detail.log"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Severity(str, Enum):
    INFO = "info"
    FAILURE = "failure"


class LogSink:
    """
    Append-only sink for pass/fail narrative lines.

    Success lines are printed to stdout and failure lines to stderr, each
    prefixed with a fixed literal. Every line is also forwarded to the
    'table_verifier.results' logger and kept in memory in emission order.
    """

    SUCCESS_PREFIX = "Success: "
    FAILURE_PREFIX = "Failure: "

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        out: Optional[IO[str]] = None,
        err: Optional[IO[str]] = None,
        echo: bool = True,
    ):
        self._logger = logger or logging.getLogger(RESULTS_LOGGER)
        self._out = out
        self._err = err
        self._echo = echo
        self.lines: List[Tuple[Severity, str]] = []

    def success(self, message: str) -> str:
        line = self.SUCCESS_PREFIX + message
        self.lines.append((Severity.INFO, line))
        if self._echo:
            print(line, file=self._out or sys.stdout)
        self._logger.info(line)
        return line

    def failure(self, message: str) -> str:
        line = self.FAILURE_PREFIX + message
        self.lines.append((Severity.FAILURE, line))
        if self._echo:
            print(line, file=self._err or sys.stderr)
        self._logger.error(line)
        return line

    @property
    def failures(self) -> List[str]:
        return [line for severity, line in self.lines if severity == Severity.FAILURE]

    @property
    def successes(self) -> List[str]:
        return [line for severity, line in self.lines if severity == Severity.INFO]

    def clear(self) -> None:
        self.lines = []


def configure_logging(config: VerifierConfig) -> List[logging.Handler]:
    """
    Attach file handlers for a run.

    The error log always receives ERROR and above. A log_level of 'debug'
    adds a debug log at INFO, 'detail' adds a detail log at DEBUG.
    Playwright's own logger is raised to WARNING.

    Args:
        config: Run configuration (log_level, log_dir)

    Returns:
        The handlers that were attached to the package logger
    """
    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    handlers: List[logging.Handler] = []

    error_handler = logging.FileHandler(log_dir / ERROR_LOG_FILE, mode="w")
    error_handler.setLevel(logging.ERROR)
    handlers.append(error_handler)

    if config.log_level == "debug":
        debug_handler = logging.FileHandler(log_dir / DEBUG_LOG_FILE, mode="w")
        debug_handler.setLevel(logging.INFO)
        handlers.append(debug_handler)
    elif config.log_level == "detail":
        detail_handler = logging.FileHandler(log_dir / DETAIL_LOG_FILE, mode="w")
        detail_handler.setLevel(logging.DEBUG)
        handlers.append(detail_handler)

    package_logger = logging.getLogger("table_verifier")
    package_logger.setLevel(logging.DEBUG)
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    logging.getLogger("playwright").setLevel(logging.WARNING)
    return handlers
