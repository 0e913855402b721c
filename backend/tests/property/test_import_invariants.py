"""Property-based tests for the template round trip and the points budget."""

from hypothesis import given, settings
from hypothesis import strategies as st

from school_admin.schemas.exam_questions import Question
from school_admin.services.exams.points_budget import PointsBudgetValidator
from school_admin.services.importer import CSVParser, RowValidator, generate_template
from school_admin.services.importer.column_schema import ColumnSchema, ColumnSpec

SCHEMA = ColumnSchema(
    [
        ColumnSpec("name", "Name", required=True),
        ColumnSpec("email", "Email", required=True),
        ColumnSpec("note", "Note"),
    ]
)

# Printable text including delimiters, quotes and line breaks
cell_text = st.text(
    alphabet=st.characters(
        codec="utf-8",
        categories=("L", "N", "P", "S", "Zs"),
        include_characters=',"\n',
    ),
    max_size=20,
)
required_text = cell_text.filter(lambda s: s.strip())

rows_strategy = st.lists(
    st.fixed_dictionaries({"name": required_text, "email": required_text, "note": cell_text}),
    min_size=1,
    max_size=15,
)


@settings(max_examples=100, deadline=None)
@given(rows=rows_strategy)
def test_template_round_trip(rows: list[dict[str, str]]) -> None:
    """
    Property: a generated file parses and validates back to the same rows.
    """
    table = CSVParser().parse(generate_template(SCHEMA, rows))

    parsed, errors = RowValidator().validate(SCHEMA, table.headers, table.rows)

    assert errors == []
    assert parsed == rows


@settings(max_examples=100, deadline=None)
@given(
    max_score=st.integers(min_value=1, max_value=500),
    existing=st.lists(st.integers(min_value=1, max_value=50), max_size=10),
    batch=st.lists(st.integers(min_value=1, max_value=50), min_size=1, max_size=10),
)
def test_batch_accepted_only_when_total_fits(max_score: int, existing: list[int], batch: list[int]) -> None:
    """
    Property: a batch is accepted exactly when existing + batch <= max score,
    and the reported excess is the overshoot.
    """
    questions = [
        Question(_id=f"q{i}", type="essay", question_text="Q", points=p) for i, p in enumerate(existing)
    ]

    result = PointsBudgetValidator(max_score).check_batch(questions, batch)

    total = sum(existing) + sum(batch)
    assert result.ok == (total <= max_score)
    assert result.excess == max(0, total - max_score)


@settings(max_examples=50, deadline=None)
@given(data=st.data(), keys=st.lists(required_text, min_size=1, max_size=5, unique=True))
def test_template_round_trip_for_any_keys(data, keys: list[str]) -> None:
    """
    Property: the round trip holds whatever characters the column keys use.
    """
    schema = ColumnSchema([ColumnSpec(key, key, required=True) for key in keys])
    rows = data.draw(
        st.lists(st.fixed_dictionaries({key: required_text for key in keys}), min_size=1, max_size=5)
    )

    table = CSVParser().parse(generate_template(schema, rows))
    parsed, errors = RowValidator().validate(schema, table.headers, table.rows)

    assert table.headers == keys
    assert errors == []
    assert parsed == rows
