"""Base schema class describing one kind of table."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

import polars as pl

from .errors import FixtureParseError, UnsortableValuesError

if TYPE_CHECKING:
    from ..driver.base import PageDriver


class SortState(str, Enum):
    """Sort indicator rendered on a column header."""

    ASCENDING = "ascending"
    DESCENDING = "descending"
    NONE = "none"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortState":
        """Parse an aria-sort value; missing or unknown values mean NONE."""
        if value is None:
            return cls.NONE
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.NONE


@dataclass(frozen=True)
class ColumnSpec:
    """
    A declared table column.

    Attributes:
        key: Attribute value identifying the column's cells and header
        name: Header text shown to the user
        has_link: Cells render an anchor to a detail page
        sortable: Column takes part in sort verification
    """

    key: str
    name: str
    has_link: bool = False
    sortable: bool = True


@dataclass
class Record:
    """
    One fixture entity.

    Attributes:
        identifier: Value naming the record in diagnostics
        values: Mapping from column key to raw fixture value
        position: Index of the record in the loaded fixture
    """

    identifier: Any
    values: Dict[str, Any] = field(default_factory=dict)
    position: int = 0


class TableSchema:
    """
    Describes the columns of a table type and how its values compare.

    One schema instance is injected into each table test. The engine only
    calls the hooks below; subclasses override the ones whose default does
    not fit their table (date formats, rounding, nested fixture layouts).

    Attributes:
        identifier_key: Column key of the identifier column
        identifier_name: Display name of the identifier, used in messages
        columns: Declared columns, in header order
        record_path: Keys leading from the JSON document to the record array
    """

    _schema_type: str = ""

    identifier_key: str = ""
    identifier_name: str = ""
    columns: Sequence[ColumnSpec] = ()
    record_path: Sequence[str] = ()

    def __init__(
        self,
        columns: Optional[Sequence[ColumnSpec]] = None,
        identifier_key: Optional[str] = None,
        identifier_name: Optional[str] = None,
        record_path: Optional[Sequence[str]] = None,
    ):
        if columns is not None:
            self.columns = tuple(columns)
        if identifier_key is not None:
            self.identifier_key = identifier_key
        if identifier_name is not None:
            self.identifier_name = identifier_name
        if record_path is not None:
            self.record_path = tuple(record_path)

        if not self.identifier_key:
            raise ValueError(f"{type(self).__name__} needs an identifier_key")
        if not self.columns:
            raise ValueError(f"{type(self).__name__} declares no columns")
        if not self.identifier_name:
            self.identifier_name = self.identifier_key

        keys = [c.key for c in self.columns]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"Duplicate column keys: {duplicates}")

    def column_keys(self) -> List[str]:
        return [c.key for c in self.columns]

    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def link_column_keys(self) -> List[str]:
        return [c.key for c in self.columns if c.has_link]

    def sortable_columns(self) -> List[ColumnSpec]:
        return [c for c in self.columns if c.sortable]

    def parse_records(self, document: Any, source: str = "<fixture>") -> List[Record]:
        """
        Turn a parsed JSON document into records.

        Args:
            document: Result of json.load on the fixture file
            source: Fixture path, used in error messages

        Returns:
            Records in document order

        Raises:
            FixtureParseError: If the record array cannot be reached, is not
                a list of objects, or a record lacks the identifier
        """
        payload = document
        for key in self.record_path:
            if not isinstance(payload, dict) or key not in payload:
                raise FixtureParseError(source, f"Missing key '{key}' in fixture")
            payload = payload[key]

        if not isinstance(payload, list):
            raise FixtureParseError(
                source, f"Expected an array of records, got {type(payload).__name__}"
            )

        records = []
        for i, item in enumerate(payload):
            if not isinstance(item, dict):
                raise FixtureParseError(
                    source, f"Record {i} is a {type(item).__name__}, not an object"
                )
            if self.identifier_key not in item:
                raise FixtureParseError(
                    source, f"Record {i} has no '{self.identifier_key}' field"
                )
            records.append(
                Record(identifier=item[self.identifier_key], values=item, position=i)
            )
        return records

    def column_value(self, record: Record, column_key: str) -> Any:
        """Extract the fixture value shown in a column."""
        return record.values.get(column_key)

    def normalize_ui_value(self, value: Any, column_name: str, row_id: Any) -> Any:
        """Normalize a scraped cell text before comparison."""
        if isinstance(value, str):
            return value.strip()
        return value

    def normalize_fixture_value(self, value: Any, column_name: str, row_id: Any) -> Any:
        """Normalize a fixture value before comparison."""
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def apply_sort(self, records: List[Record], column_key: str, state: SortState) -> None:
        """
        Re-sort records in place to match a rendered sort state.

        Ascending uses the natural order of the column value and descending
        its exact reverse; ties keep their current relative order. NONE
        restores the order the fixture was loaded in.

        Integers and floats order together; any other mix of value kinds
        (numbers with strings, for instance) has no natural order.

        Args:
            records: Fixture sequence, modified in place
            column_key: Column the table is sorted by
            state: Sort state observed on the header

        Raises:
            UnsortableValuesError: If the column mixes value kinds
        """
        if state == SortState.NONE:
            records.sort(key=lambda r: r.position)
            return

        descending = state == SortState.DESCENDING
        values = [self.column_value(r, column_key) for r in records]
        kinds = sorted({_value_kind(v) for v in values if v is not None})
        if len(kinds) > 1:
            raise UnsortableValuesError(column_key, kinds)

        keys = pl.Series("key", values, strict=False)
        order = (
            pl.DataFrame({"key": keys})
            .with_row_index("row")
            .sort("key", descending=descending, nulls_last=descending, maintain_order=True)
            .get_column("row")
            .to_list()
        )
        records[:] = [records[i] for i in order]

    def describe_current_page(self, driver: "PageDriver") -> str:
        """Describe where the browser landed, for link failure messages."""
        return driver.current_url()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"identifier_key='{self.identifier_key}', "
            f"columns={self.column_keys()})"
        )


def _value_kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return type(value).__name__
