"""Explicit run context shared by the engine and its collaborators."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .config import VerifierConfig
from .log_sink import LogSink

if TYPE_CHECKING:
    from ..driver.base import PageDriver


@dataclass
class RunContext:
    """
    Everything a table test needs from its surroundings.

    Constructed once per run and passed to every table test, so nothing is
    read from module-level state. A run drives one browser session; table
    tests use it one at a time.

    Attributes:
        driver: Page driver bound to the shared browser session
        config: Run configuration
        sink: Destination for pass/fail narrative lines
    """

    driver: "PageDriver"
    config: VerifierConfig = field(default_factory=VerifierConfig)
    sink: LogSink = field(default_factory=LogSink)

    @property
    def selectors(self):
        return self.config.selectors
