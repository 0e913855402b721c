"""Bounded preview of validated import rows."""

from collections.abc import Sequence

from school_admin.schemas.imports import ImportPreview
from school_admin.services.importer.column_schema import ColumnSchema

BLANK_PLACEHOLDER = "-"


def build_preview(
    schema: ColumnSchema,
    rows: Sequence[dict[str, str]],
    max_columns: int = 5,
    max_rows: int = 10,
) -> ImportPreview:
    """
    Project the first ``max_rows`` rows onto the first ``max_columns`` schema keys.

    Blank cells render as ``-``. Counts of what was left out are reported so
    the console can show "+N more" and "...and N more rows".
    """
    keys = schema.keys()
    columns = keys[:max_columns]
    shown = rows[:max_rows]
    return ImportPreview(
        total_rows=len(rows),
        columns=columns,
        omitted_columns=len(keys) - len(columns),
        rows=[{key: (row.get(key) or "").strip() or BLANK_PLACEHOLDER for key in columns} for row in shown],
        omitted_rows=len(rows) - len(shown),
    )
