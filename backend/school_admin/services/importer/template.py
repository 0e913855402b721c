"""CSV template generation for import kinds."""

from collections.abc import Iterable, Mapping

from school_admin.services.importer.column_schema import ColumnSchema

TEMPLATE_MEDIA_TYPE = "text/csv"

_NEEDS_QUOTING = (",", '"', "\n", "\r")


def escape_value(value: str) -> str:
    """Quote a cell when it contains the delimiter, a quote or a line break."""
    if any(ch in value for ch in _NEEDS_QUOTING):
        return '"' + value.replace('"', '""') + '"'
    return value


def generate_template(schema: ColumnSchema, rows: Iterable[Mapping[str, str]]) -> str:
    """
    Render a CSV document for ``schema``.

    The header row is the schema keys in declared order, escaped like any
    other cell; each example record becomes one body row, missing keys
    rendering as empty cells.

    Args:
        schema: Column schema of the import kind
        rows: Example records keyed by column key

    Returns:
        CSV text, lines separated by ``\\n``
    """
    keys = schema.keys()
    lines = [",".join(escape_value(key) for key in keys)]
    for row in rows:
        lines.append(",".join(escape_value(row.get(key) or "") for key in keys))
    return "\n".join(lines)
