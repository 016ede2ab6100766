"""Run configuration and selector construction."""

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple
from urllib.parse import urljoin

DEFAULT_PAGE_SIZE_OPTIONS: Tuple[int, ...] = (10, 25, 50, 100, 250, 500, 1000)

LOCAL_BASE_URL = "http://127.0.0.1:8010"
CI_BASE_URL = "http://localhost:8010"

ENV_PREFIX = "TABLE_VERIFIER_"


def xpath_literal(value: str) -> str:
    """
    Quote a string for use as an XPath 1.0 literal.

    XPath has no escape sequences, so values containing both quote types
    are assembled with concat().

    Args:
        value: Raw text to match

    Returns:
        An XPath expression evaluating to the given text
    """
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    pieces = []
    for i, part in enumerate(parts):
        if part:
            pieces.append(f"'{part}'")
        if i < len(parts) - 1:
            pieces.append('"\'"')
    return "concat(" + ", ".join(pieces) + ")"


@dataclass(frozen=True)
class Selectors:
    """
    Selectors for the rendered table contract.

    Data cells carry an attribute equal to their column key, column headers
    carry a second attribute equal to the column key plus the standard
    sort-state attribute. The page-size control is a dropdown with a stable
    id whose options expose their numeric text.
    """

    cell_attribute: str = "data-automation-key"
    header_attribute: str = "data-item-key"
    sort_attribute: str = "aria-sort"
    page_size_control: str = "#pageSize"
    page_size_option: str = ".ms-Dropdown-item"

    def cell(self, column_key: str) -> str:
        return f"div[{self.cell_attribute}='{column_key}']"

    def header(self, column_key: str) -> str:
        return f"div[{self.header_attribute}='{column_key}']"

    def text(self, text: str) -> str:
        return f"xpath=//*[text()={xpath_literal(text)}]"

    def row_containing(self, text: str) -> str:
        return f"xpath=//div[contains(text(), {xpath_literal(text)})]/.."

    def anchor_in(self, row_selector: str) -> str:
        # Row selectors are XPath, so the anchor is a descendant step
        return f"{row_selector}//a"


def running_in_ci(environ: Optional[Dict[str, str]] = None) -> bool:
    """Return True when the process runs under a CI service."""
    env = os.environ if environ is None else environ
    return bool(env.get("CI") or env.get("GITHUB_ACTIONS"))


@dataclass
class VerifierConfig:
    """
    Configuration shared by every table test in a run.

    Attributes:
        page_size_options: Ascending page sizes offered by the page-size control
        wait_timeout: Bound in seconds for explicit-condition waits
        settle_delay: Unconditional delay in seconds used to let rendering settle
        sort_cycles: Number of header clicks checked per column
        headless: Run the browser without a window
        viewport: Browser viewport as (width, height)
        base_url: Prefix for relative page URLs
        log_level: One of 'error', 'debug', 'detail'
        log_dir: Directory receiving log files
        selectors: Selector construction for the rendered table
    """

    page_size_options: Tuple[int, ...] = DEFAULT_PAGE_SIZE_OPTIONS
    wait_timeout: float = 10.0
    settle_delay: float = 2.0
    sort_cycles: int = 3
    headless: bool = True
    viewport: Tuple[int, int] = (1920, 1080)
    base_url: str = LOCAL_BASE_URL
    log_level: str = "error"
    log_dir: str = "."
    selectors: Selectors = field(default_factory=Selectors)

    def __post_init__(self):
        if not self.page_size_options:
            raise ValueError("page_size_options must not be empty")
        self.page_size_options = tuple(sorted(int(v) for v in self.page_size_options))
        if self.sort_cycles < 1:
            raise ValueError(f"sort_cycles must be positive, got {self.sort_cycles}")
        if self.log_level not in ("error", "debug", "detail"):
            raise ValueError(
                f"log_level must be 'error', 'debug' or 'detail', got '{self.log_level}'"
            )

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "VerifierConfig":
        """
        Build a configuration from TABLE_VERIFIER_* environment variables.

        Recognized variables: PAGE_SIZES (comma separated), WAIT_TIMEOUT,
        SETTLE_DELAY, SORT_CYCLES, HEADLESS, BASE_URL, LOG_LEVEL, LOG_DIR.
        When BASE_URL is unset the local or CI address is chosen.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            return value if value not in (None, "") else None

        kwargs: Dict[str, object] = {}
        if get("PAGE_SIZES"):
            kwargs["page_size_options"] = tuple(
                int(v) for v in get("PAGE_SIZES").split(",") if v.strip()
            )
        if get("WAIT_TIMEOUT"):
            kwargs["wait_timeout"] = float(get("WAIT_TIMEOUT"))
        if get("SETTLE_DELAY"):
            kwargs["settle_delay"] = float(get("SETTLE_DELAY"))
        if get("SORT_CYCLES"):
            kwargs["sort_cycles"] = int(get("SORT_CYCLES"))
        if get("HEADLESS"):
            kwargs["headless"] = get("HEADLESS").lower() not in ("0", "false", "no")
        if get("LOG_LEVEL"):
            kwargs["log_level"] = get("LOG_LEVEL").lower()
        if get("LOG_DIR"):
            kwargs["log_dir"] = get("LOG_DIR")
        kwargs["base_url"] = get("BASE_URL") or (
            CI_BASE_URL if running_in_ci(env) else LOCAL_BASE_URL
        )
        return cls(**kwargs)

    def with_overrides(self, **changes) -> "VerifierConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def resolve_url(self, page_url: str) -> str:
        """Join a relative page URL onto base_url; absolute URLs pass through."""
        base = self.base_url if self.base_url.endswith("/") else self.base_url + "/"
        return urljoin(base, page_url)
