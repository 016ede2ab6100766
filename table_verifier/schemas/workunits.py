"""Schema for an ECL Watch style workunit list."""

from typing import Any, Optional

from ..core.registry import register_schema
from ..core.schema import ColumnSpec, Record, TableSchema

TIME_COLUMN = "Total Cluster Time"
STATE_COLUMN = "State"


def parse_duration(text: Any) -> Optional[float]:
    """
    Convert a cluster time to seconds.

    Accepts plain seconds ('12.5'), 'm:ss.sss' and 'h:mm:ss.sss'.
    Returns None for empty or unparseable values.
    """
    if text is None:
        return None
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return float(text)
    parts = str(text).strip().split(":")
    if parts == [""] or len(parts) > 3:
        return None
    try:
        seconds = 0.0
        for part in parts:
            seconds = seconds * 60 + float(part)
    except ValueError:
        return None
    return seconds


@register_schema("workunits")
class WorkunitsSchema(TableSchema):
    """
    Workunit list with the workunit id linking to its details page.

    Cluster times compare as seconds rounded to milliseconds, so '1:02.5' in
    the UI matches 62.5 in the fixture. State compares case-insensitively.
    """

    identifier_key = "Wuid"
    identifier_name = "WUID"
    record_path = ("WUQueryResponse", "Workunits", "ECLWorkunit")
    columns = (
        ColumnSpec("Wuid", "WUID", has_link=True),
        ColumnSpec("Owner", "Owner"),
        ColumnSpec("Jobname", "Job Name"),
        ColumnSpec("Cluster", "Cluster"),
        ColumnSpec("State", STATE_COLUMN),
        ColumnSpec("TotalClusterTime", TIME_COLUMN),
    )

    def column_value(self, record: Record, column_key: str) -> Any:
        value = record.values.get(column_key)
        if column_key == "TotalClusterTime":
            return parse_duration(value)
        return value

    def normalize_ui_value(self, value: Any, column_name: str, row_id: Any) -> Any:
        value = super().normalize_ui_value(value, column_name, row_id)
        if column_name == TIME_COLUMN:
            return _format_seconds(parse_duration(value))
        if column_name == STATE_COLUMN:
            return value.lower()
        return value

    def normalize_fixture_value(self, value: Any, column_name: str, row_id: Any) -> Any:
        if column_name == TIME_COLUMN:
            return _format_seconds(parse_duration(value))
        value = super().normalize_fixture_value(value, column_name, row_id)
        if column_name == STATE_COLUMN:
            return value.lower()
        return value


def _format_seconds(seconds: Optional[float]) -> str:
    return "" if seconds is None else f"{seconds:.3f}"
