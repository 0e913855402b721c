"""Tests for column schemas and the import kind registry."""

import pytest

from school_admin.core.permissions import ConsoleAction
from school_admin.services.importer.column_schema import (
    IMPORT_KINDS,
    ColumnSchema,
    ColumnSpec,
    ImportKind,
    get_import_kind,
    shape_question,
)


def test_schema_keeps_declared_order():
    schema = ColumnSchema(
        [
            ColumnSpec("name", "Name", required=True),
            ColumnSpec("section", "Section"),
            ColumnSpec("code", "Code", required=True),
        ]
    )

    assert schema.keys() == ["name", "section", "code"]
    assert schema.required_keys() == ["name", "code"]
    assert schema.optional_keys() == ["section"]
    assert schema.get("section").label == "Section"
    assert schema.get("missing") is None
    assert len(schema) == 3


def test_duplicate_keys_are_rejected():
    with pytest.raises(ValueError, match="Duplicate column key"):
        ColumnSchema([ColumnSpec("email", "Email"), ColumnSpec("email", "E-mail")])


def test_registry_covers_every_kind():
    assert set(IMPORT_KINDS) == set(ImportKind)
    for kind, definition in IMPORT_KINDS.items():
        assert definition.kind == kind
        assert definition.template_filename == f"{kind.value}-template.csv"
        assert definition.template_rows


def test_parent_schema_matches_console_columns():
    parents = get_import_kind("parents")

    assert parents.schema.keys() == [
        "firstName", "lastName", "email", "phone", "occupation", "relationship", "address",
    ]
    assert parents.schema.required_keys() == ["firstName", "lastName", "email"]
    assert parents.endpoint == "/auth/bulk-register-parents"
    assert parents.action == ConsoleAction.IMPORT_PARENTS


def test_unknown_kind_raises_value_error():
    with pytest.raises(ValueError):
        get_import_kind("invoices")


def test_class_shaper_converts_capacity_and_drops_blanks():
    classes = get_import_kind(ImportKind.CLASSES)

    shaped = classes.shape_row(
        {"name": " JSS 1 ", "section": "A", "capacity": "40", "level": "", "room": "Room 101", "description": " "}
    )

    assert shaped == {"name": "JSS 1", "section": "A", "capacity": 40, "room": "Room 101"}


def test_class_shaper_leaves_non_numeric_capacity_as_text():
    classes = get_import_kind(ImportKind.CLASSES)

    assert classes.shape_row({"name": "JSS 2", "capacity": "forty"})["capacity"] == "forty"


def test_subject_shaper_parses_core_flag():
    subjects = get_import_kind(ImportKind.SUBJECTS)

    assert subjects.shape_row({"name": "Maths", "code": "MTH", "isCore": "TRUE"})["isCore"] is True
    assert subjects.shape_row({"name": "Art", "code": "ART", "isCore": "no"})["isCore"] is False


def test_shape_question_keeps_only_fields_for_its_type():
    mcq = shape_question(
        {
            "type": "mcq",
            "questionText": " What is 2+2? ",
            "points": "5",
            "optionA": "3",
            "optionB": "4",
            "optionC": "",
            "optionD": "",
            "correctAnswer": "4",
            "markingScheme": "ignored",
        }
    )
    essay = shape_question(
        {
            "type": "essay",
            "questionText": "Discuss.",
            "points": "20",
            "optionA": "stray",
            "correctAnswer": "stray",
            "markingScheme": "Three causes",
        }
    )

    assert mcq == {
        "type": "mcq",
        "questionText": "What is 2+2?",
        "points": 5,
        "options": ["3", "4"],
        "correctAnswer": "4",
    }
    assert essay == {"type": "essay", "questionText": "Discuss.", "points": 20, "markingScheme": "Three causes"}
