"""Tests for CSV template generation."""

from school_admin.services.importer import CSVParser, RowValidator, generate_template, get_import_kind
from school_admin.services.importer.column_schema import ColumnSchema, ColumnSpec

SCHEMA = ColumnSchema(
    [
        ColumnSpec("name", "Name", required=True),
        ColumnSpec("note", "Note"),
        ColumnSpec("room", "Room"),
    ]
)


def test_header_is_schema_keys_in_order():
    assert generate_template(SCHEMA, []) == "name,note,room"


def test_values_with_commas_and_quotes_are_escaped():
    csv_text = generate_template(SCHEMA, [{"name": "JSS 1", "note": 'Say "hi", then sit', "room": "A"}])

    assert csv_text.split("\n")[1] == 'JSS 1,"Say ""hi"", then sit",A'


def test_keys_needing_quotes_survive_a_round_trip():
    schema = ColumnSchema(
        [
            ColumnSpec("last, first", "Name", required=True),
            ColumnSpec('nick "name"', "Nickname"),
        ]
    )
    rows = [{"last, first": "Doe, Jane", 'nick "name"': "JD"}]

    csv_text = generate_template(schema, rows)
    table = CSVParser().parse(csv_text)
    rows_out, errors = RowValidator().validate(schema, table.headers, table.rows)

    assert csv_text.split("\n")[0] == '"last, first","nick ""name"""'
    assert table.headers == ["last, first", 'nick "name"']
    assert errors == []
    assert rows_out == rows


def test_missing_values_render_empty():
    csv_text = generate_template(SCHEMA, [{"name": "JSS 1"}])

    assert csv_text == "name,note,room\nJSS 1,,"


def test_builtin_templates_validate_cleanly():
    parser = CSVParser()
    validator = RowValidator()
    for kind in ("students", "teachers", "parents", "classes", "subjects", "questions"):
        definition = get_import_kind(kind)
        table = parser.parse(generate_template(definition.schema, definition.template_rows))

        rows, errors = validator.validate(
            definition.schema, table.headers, table.rows, question_rules=definition.question_rules
        )

        assert errors == [], kind
        assert len(rows) == len(definition.template_rows)
