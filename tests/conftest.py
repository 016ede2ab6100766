"""Pytest configuration and shared fixtures for table_verifier tests."""

import io
import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest

from table_verifier import (
    ColumnSpec,
    DriverError,
    ElementNotFoundError,
    LogSink,
    PageDriver,
    RunContext,
    Selectors,
    TableSchema,
    VerifierConfig,
)

TABLE_URL = "http://testserver/tables/status"


# =============================================================================
# Mock Infrastructure
# =============================================================================


class FakeTableApp(PageDriver):
    """
    In-memory table page implementing the PageDriver interface.

    Renders rows (raw values, shown with str()) in a paginated, sortable
    table. Header clicks cycle through ascending and descending the way a
    Fluent UI DetailsList does. Link cells navigate to a detail page whose
    source names the clicked value.

    Knobs for simulating broken UIs:
        short_reads: identifier-column reads that come back one row short
        missing_rows: rows never rendered
        unsorted_columns: columns whose header toggles but rows keep order
        stuck_columns: columns whose sort state never changes on click
        reset_page_size_on_return: page size falls back to the default
            when the table URL is opened again
        broken_links: values whose detail page does not mention them
        missing_headers: column names not rendered
        navigating_links: values whose detail page is still navigating when
            its source is read (raises DriverError)
        detached_headers: columns whose header is detached from the DOM when
            clicked (raises DriverError)
        page_size_options: sizes offered by the page-size dropdown
    """

    def __init__(
        self,
        rows: Sequence[Dict[str, Any]],
        columns: Sequence[str],
        header_texts: Sequence[str],
        identifier_key: str,
        link_columns: Sequence[str] = (),
        table_url: str = TABLE_URL,
        page_size_options: Sequence[int] = (10, 25, 50, 100),
        default_page_size: int = 10,
        selectors: Optional[Selectors] = None,
    ):
        self.rows = [dict(r) for r in rows]
        self.columns = list(columns)
        self.header_texts = list(header_texts)
        self.identifier_key = identifier_key
        self.link_columns = list(link_columns)
        self.table_url = table_url
        self.page_size_options = list(page_size_options)
        self.default_page_size = default_page_size
        self.page_size = default_page_size
        self.selectors = selectors or Selectors()

        self.location = "about:blank"
        self.dropdown_open = False
        self.sort_states: Dict[str, str] = {c: "none" for c in self.columns}
        self.sort_column: Optional[str] = None

        self.short_reads = 0
        self.missing_rows = 0
        self.unsorted_columns: set = set()
        self.stuck_columns: set = set()
        self.reset_page_size_on_return = False
        self.broken_links: set = set()
        self.missing_headers: set = set()
        self.navigating_links: set = set()
        self.detached_headers: set = set()

        self.sleeps: List[float] = []
        self.clicks: List[str] = []
        self.visits: List[str] = []

    # -- rendering ----------------------------------------------------------

    @property
    def on_table(self) -> bool:
        return self.location == self.table_url

    def _ordered_rows(self) -> List[Dict[str, Any]]:
        column = self.sort_column
        if column is None or column in self.unsorted_columns:
            return list(self.rows)
        state = self.sort_states[column]
        if state == "none":
            return list(self.rows)
        return sorted(
            self.rows,
            key=lambda r: (r[column] is None, r[column]),
            reverse=state == "descending",
        )

    def visible_rows(self) -> List[Dict[str, Any]]:
        rows = self._ordered_rows()[: self.page_size]
        if self.missing_rows:
            rows = rows[: max(len(rows) - self.missing_rows, 0)]
        return rows

    def _render(self, value: Any) -> str:
        return "" if value is None else str(value)

    def _detail_url(self, value: str) -> str:
        return f"{self.table_url}/details/{value}"

    # -- selector lookup ----------------------------------------------------

    def _cell_column(self, selector: str) -> Optional[str]:
        for column in self.columns:
            if selector == self.selectors.cell(column):
                return column
        return None

    def _header_column(self, selector: str) -> Optional[str]:
        for column in self.columns:
            if selector == self.selectors.header(column):
                return column
        return None

    def _row_value(self, selector: str) -> Optional[str]:
        for row in self.visible_rows():
            for column in self.columns:
                value = self._render(row[column])
                if selector == self.selectors.row_containing(value):
                    return value
        return None

    def _anchor_value(self, selector: str) -> Optional[str]:
        for row in self.visible_rows():
            for column in self.link_columns:
                value = self._render(row[column])
                if selector == self.selectors.anchor_in(self.selectors.row_containing(value)):
                    return value
        return None

    # -- PageDriver ---------------------------------------------------------

    def goto(self, url: str) -> None:
        self.visits.append(url)
        self.dropdown_open = False
        if url == self.table_url and self.reset_page_size_on_return and self.location != "about:blank":
            self.page_size = self.default_page_size
        # A fresh load renders unsorted
        self.sort_states = {c: "none" for c in self.columns}
        self.sort_column = None
        self.location = url

    def refresh(self) -> None:
        self.dropdown_open = False

    def page_source(self) -> str:
        if self.on_table:
            cells = "".join(
                f"<div>{self._render(r[c])}</div>" for r in self.visible_rows() for c in self.columns
            )
            return f"<html><body>{cells}</body></html>"
        value = self.location.rsplit("/", 1)[-1]
        if value in self.navigating_links:
            raise DriverError(
                "Unable to retrieve content because the page is navigating and changing the content."
            )
        if value in self.broken_links:
            return "<html><body><h1>Not Found</h1></body></html>"
        return f"<html><body><h1>Workunit {value}</h1></body></html>"

    def current_url(self) -> str:
        return self.location

    def wait_for(self, selector: str, state: str = "attached", timeout: Optional[float] = None) -> None:
        if selector == self.selectors.page_size_option:
            if state == "hidden" and not self.dropdown_open:
                return
            if state in ("attached", "visible") and self.dropdown_open:
                return
            raise ElementNotFoundError(selector, timeout, state)
        if not self.on_table:
            raise ElementNotFoundError(selector, timeout)
        for text in self.header_texts:
            if text not in self.missing_headers and selector == self.selectors.text(text):
                return
        if self._row_value(selector) is not None:
            return
        raise ElementNotFoundError(selector, timeout)

    def text_of(self, selector: str, timeout: Optional[float] = None) -> str:
        if self.on_table and selector == self.selectors.page_size_control:
            return f" {self.page_size} "
        raise ElementNotFoundError(selector, timeout)

    def texts_of(self, selector: str) -> List[str]:
        if selector == self.selectors.page_size_option:
            return [str(o) for o in self.page_size_options] if self.dropdown_open else []
        column = self._cell_column(selector)
        if column is None or not self.on_table:
            return []
        values = [self._render(r[column]) for r in self.visible_rows()]
        if column == self.identifier_key and self.short_reads:
            self.short_reads -= 1
            return values[:-1]
        return values

    def attribute_of(self, selector: str, name: str, timeout: Optional[float] = None) -> Optional[str]:
        if not self.on_table:
            raise ElementNotFoundError(selector, timeout)
        column = self._header_column(selector)
        if column is not None and name == self.selectors.sort_attribute:
            return self.sort_states[column]
        value = self._anchor_value(selector)
        if value is not None and name == "href":
            return self._detail_url(value)
        raise ElementNotFoundError(selector, timeout)

    def click(self, selector: str, nth: int = 0, timeout: Optional[float] = None) -> None:
        self.clicks.append(selector)
        if not self.on_table:
            raise ElementNotFoundError(selector, timeout)
        if selector == self.selectors.page_size_control:
            self.dropdown_open = True
            return
        if selector == self.selectors.page_size_option and self.dropdown_open:
            self.page_size = self.page_size_options[nth]
            self.dropdown_open = False
            return
        column = self._header_column(selector)
        if column is not None:
            if column in self.detached_headers:
                raise DriverError(f"Element is not attached to the DOM: {selector}")
            self._toggle(column)
            return
        value = self._row_value(selector)
        if value is not None:
            self.location = self._detail_url(value)
            return
        raise ElementNotFoundError(selector, timeout)

    def _toggle(self, column: str) -> None:
        if column in self.stuck_columns:
            return
        current = self.sort_states[column]
        for other in self.columns:
            self.sort_states[other] = "none"
        self.sort_states[column] = "ascending" if current != "ascending" else "descending"
        self.sort_column = column

    def wait_for_attribute_change(
        self, selector: str, name: str, previous: Optional[str], timeout: Optional[float] = None
    ) -> Optional[str]:
        current = self.attribute_of(selector, name, timeout)
        if current == previous:
            raise ElementNotFoundError(selector, timeout, f"'{name}' stayed '{previous}'")
        return current

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


class StatusSchema(TableSchema):
    """Small schema used across the engine tests."""

    identifier_key = "id"
    identifier_name = "ID"
    columns = (
        ColumnSpec("id", "ID", has_link=True),
        ColumnSpec("status", "status"),
        ColumnSpec("count", "Count"),
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def status_records() -> List[Dict[str, Any]]:
    """Fixture records: identifiers A-C, status [z, x, y]."""
    return [
        {"id": "A", "status": "z", "count": 3},
        {"id": "B", "status": "x", "count": 1},
        {"id": "C", "status": "y", "count": 2},
    ]


@pytest.fixture
def write_fixture(tmp_path) -> Callable[[Any, str], Path]:
    """Write a JSON document to a file under tmp_path and return its path."""

    def _write(document: Any, name: str = "fixture.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def status_schema() -> StatusSchema:
    return StatusSchema()


@pytest.fixture
def config() -> VerifierConfig:
    """Config with fast waits and the fake app's page sizes."""
    return VerifierConfig(
        page_size_options=(10, 25, 50, 100),
        wait_timeout=0.1,
        settle_delay=0.5,
        base_url="http://testserver/",
    )


@pytest.fixture
def sink() -> LogSink:
    """Log sink that keeps lines in memory and prints nowhere visible."""
    return LogSink(out=io.StringIO(), err=io.StringIO())


@pytest.fixture
def make_app(status_schema) -> Callable[..., FakeTableApp]:
    """Build a FakeTableApp for a set of rows using the status schema."""

    def _make(rows: Sequence[Dict[str, Any]], **kwargs) -> FakeTableApp:
        return FakeTableApp(
            rows=rows,
            columns=status_schema.column_keys(),
            header_texts=status_schema.column_names(),
            identifier_key=status_schema.identifier_key,
            link_columns=status_schema.link_column_keys(),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_context(config, sink) -> Callable[[PageDriver], RunContext]:
    def _make(driver: PageDriver) -> RunContext:
        return RunContext(driver=driver, config=config, sink=sink)

    return _make
