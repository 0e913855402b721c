"""Tests for import row validation."""

from school_admin.services.importer import CSVParser, RowValidator, ValidationError, get_import_kind
from school_admin.services.importer.column_schema import ColumnSchema, ColumnSpec

CLASS_SCHEMA = get_import_kind("classes").schema
PARENT_SCHEMA = get_import_kind("parents").schema
QUESTION_SCHEMA = get_import_kind("questions").schema

PARENT_HEADERS = PARENT_SCHEMA.keys()


def parent(first: str = "Ada", last: str = "Obi", email: str = "ada@example.com") -> dict[str, str]:
    return {key: "" for key in PARENT_HEADERS} | {"firstName": first, "lastName": last, "email": email}


def question(**values: str) -> dict[str, str]:
    row = {key: "" for key in QUESTION_SCHEMA.keys()}
    row.update({"type": "short_answer", "questionText": "Define osmosis.", "points": "5"})
    row.update(values)
    return row


def validate(schema, headers, rows):
    return RowValidator().validate(schema, headers, rows, question_rules=schema is QUESTION_SCHEMA)


# ============================================================================
# Schema gate
# ============================================================================


def test_missing_required_column_is_single_schema_error():
    headers = ["firstName", "lastName", "phone"]
    rows = [{"firstName": "", "lastName": "", "phone": ""}] * 3

    rows_out, errors = validate(PARENT_SCHEMA, headers, rows)

    assert rows_out == []
    assert errors == [ValidationError('Missing required column: "email"')]
    assert errors[0].is_schema_level


def test_first_missing_required_column_in_schema_order_is_reported():
    _, errors = validate(PARENT_SCHEMA, ["email"], [{"email": "a@b.c"}])

    assert errors == [ValidationError('Missing required column: "firstName"')]


def test_header_match_is_case_sensitive():
    _, errors = validate(CLASS_SCHEMA, ["Name", "section"], [{"Name": "JSS 1", "section": "A"}])

    assert errors == [ValidationError('Missing required column: "name"')]


def test_optional_columns_may_be_absent():
    rows, errors = validate(CLASS_SCHEMA, ["name"], [{"name": "JSS 1"}])

    assert errors == []
    assert rows == [{"name": "JSS 1"}]


def test_unknown_columns_are_ignored():
    rows, errors = validate(CLASS_SCHEMA, ["name", "colour"], [{"name": "JSS 1", "colour": "red"}])

    assert errors == []
    assert len(rows) == 1


# ============================================================================
# Row presence
# ============================================================================


def test_errors_accumulate_across_rows():
    rows = [parent(), parent(email=" "), parent(), parent(), parent(first="")]

    rows_out, errors = validate(PARENT_SCHEMA, PARENT_HEADERS, rows)

    assert rows_out == []
    assert errors == [
        ValidationError('Row 3: "email" is required', 3),
        ValidationError('Row 6: "firstName" is required', 6),
    ]


def test_only_first_blank_required_field_per_row_is_reported():
    _, errors = validate(PARENT_SCHEMA, PARENT_HEADERS, [parent(first="", last="", email="")])

    assert errors == [ValidationError('Row 2: "firstName" is required', 2)]


def test_header_only_file_has_no_data_rows():
    rows, errors = validate(PARENT_SCHEMA, PARENT_HEADERS, [])

    assert rows == []
    assert errors == [ValidationError("No data rows found in CSV")]


def test_valid_rows_pass_through_unchanged():
    rows = [parent(), parent(first="Bola")]

    rows_out, errors = validate(PARENT_SCHEMA, PARENT_HEADERS, rows)

    assert errors == []
    assert rows_out == rows


# ============================================================================
# Question rules
# ============================================================================


def test_unknown_question_type_is_rejected():
    _, errors = validate(QUESTION_SCHEMA, QUESTION_SCHEMA.keys(), [question(type="matching")])

    assert len(errors) == 1
    assert errors[0].row_number == 2
    assert '"type" must be one of' in errors[0].message


def test_points_must_be_positive_integer():
    rows = [question(points="0"), question(points="2.5"), question(points="ten"), question(points="3")]

    _, errors = validate(QUESTION_SCHEMA, QUESTION_SCHEMA.keys(), rows)

    assert [e.row_number for e in errors] == [2, 3, 4]
    assert all('"points"' in e.message for e in errors)


def test_mcq_needs_two_options():
    rows = [question(type="mcq", optionA="Yes", correctAnswer="Yes")]

    _, errors = validate(QUESTION_SCHEMA, QUESTION_SCHEMA.keys(), rows)

    assert errors == [ValidationError("Row 2: MCQ needs at least 2 options", 2)]


def test_mcq_correct_answer_must_be_an_option():
    rows = [question(type="mcq", optionA="3", optionC="4", correctAnswer="5")]

    _, errors = validate(QUESTION_SCHEMA, QUESTION_SCHEMA.keys(), rows)

    assert len(errors) == 1
    assert '"correctAnswer" must match one of the options' in errors[0].message


def test_mcq_with_options_in_any_slots_is_valid():
    rows = [question(type="mcq", optionB="3", optionD="4", correctAnswer="4"), question(type="essay")]

    rows_out, errors = validate(QUESTION_SCHEMA, QUESTION_SCHEMA.keys(), rows)

    assert errors == []
    assert len(rows_out) == 2


def test_presence_errors_win_over_question_rules():
    rows = [question(type="matching"), question(questionText="  ")]

    _, errors = validate(QUESTION_SCHEMA, QUESTION_SCHEMA.keys(), rows)

    assert errors == [ValidationError('Row 3: "questionText" is required', 3)]


def test_question_rules_do_not_apply_to_other_schemas():
    schema = ColumnSchema([ColumnSpec("type", "Type", required=True), ColumnSpec("points", "Points")])
    rows = [{"type": "anything", "points": "many"}]

    rows_out, errors = validate(schema, ["type", "points"], rows)

    assert errors == []
    assert rows_out == rows


def test_question_rules_follow_the_import_kind():
    rows = [question(points="0")]

    _, plain_errors = RowValidator().validate(QUESTION_SCHEMA, QUESTION_SCHEMA.keys(), rows)
    _, kind_errors = RowValidator().validate(
        QUESTION_SCHEMA,
        QUESTION_SCHEMA.keys(),
        rows,
        question_rules=get_import_kind("questions").question_rules,
    )

    assert plain_errors == []
    assert [e.row_number for e in kind_errors] == [2]


def test_delimiter_only_line_is_reported_as_missing_field():
    table = CSVParser().parse("name,section\nJSS 1,A\n,\n")

    _, errors = validate(CLASS_SCHEMA, table.headers, table.rows)

    assert errors == [ValidationError('Row 3: "name" is required', 3)]


def test_error_to_dict():
    assert ValidationError("Row 4: bad", 4).to_dict() == {"row_number": 4, "message": "Row 4: bad"}
    assert ValidationError("No data rows found in CSV").to_dict() == {
        "row_number": None,
        "message": "No data rows found in CSV",
    }
