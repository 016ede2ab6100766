"""Row-by-row comparison of a rendered column against fixture records."""

from dataclasses import dataclass, field
from typing import Any, List, Sequence

from ..core.schema import Record, TableSchema


@dataclass
class RowMismatch:
    """A row whose normalized UI value differs from the fixture value."""

    row: int
    row_id: Any
    ui_value: Any
    fixture_value: Any


@dataclass
class Reconciliation:
    """
    Result of reconciling one column snapshot.

    Attributes:
        column_name: Display name of the column
        ui_rows: Length of the UI snapshot
        fixture_rows: Number of fixture records
        mismatches: Rows that compared unequal, in row order
    """

    column_name: str
    ui_rows: int
    fixture_rows: int
    mismatches: List[RowMismatch] = field(default_factory=list)

    @property
    def length_matches(self) -> bool:
        return self.ui_rows == self.fixture_rows

    @property
    def passed(self) -> bool:
        return self.length_matches and not self.mismatches


def reconcile_column(
    schema: TableSchema,
    column_key: str,
    column_name: str,
    ui_values: Sequence[str],
    records: Sequence[Record],
    ui_ids: Sequence[str],
) -> Reconciliation:
    """
    Compare a column snapshot with the fixture, aligned by row position.

    Row i of the snapshot is compared with record i; records must already be
    in the order the UI is sorted by. The identifier snapshot only names rows
    in diagnostics and is passed to the normalizers.

    Args:
        schema: Schema providing the extractor and normalizers
        column_key: Key of the column being compared
        column_name: Display name passed to the normalizers
        ui_values: Scraped cell texts in rendered order
        records: Fixture records in expected order
        ui_ids: Scraped identifier texts in rendered order

    Returns:
        Reconciliation listing every mismatching row
    """
    result = Reconciliation(
        column_name=column_name, ui_rows=len(ui_values), fixture_rows=len(records)
    )
    for i, (ui_raw, record) in enumerate(zip(ui_values, records)):
        row_id = ui_ids[i].strip() if i < len(ui_ids) else record.identifier
        ui_value = schema.normalize_ui_value(ui_raw, column_name, row_id)
        fixture_value = schema.normalize_fixture_value(
            schema.column_value(record, column_key), column_name, row_id
        )
        if ui_value != fixture_value:
            result.mismatches.append(
                RowMismatch(row=i, row_id=row_id, ui_value=ui_value, fixture_value=fixture_value)
            )
    return result


def mismatch_message(page_name: str, identifier_name: str, mismatch: RowMismatch, column_name: str) -> str:
    return (
        f"{page_name}: Incorrect {column_name} : {mismatch.ui_value} in UI for "
        f"{identifier_name} : {mismatch.row_id}. Correct {column_name} is: {mismatch.fixture_value}"
    )
