"""Validators for import engine."""

from collections.abc import Sequence
from typing import Any

from school_admin.schemas.exam_questions import (
    MARKING_SCHEME_MAX_LENGTH,
    OPTION_MAX_LENGTH,
    QUESTION_TEXT_MAX_LENGTH,
    QuestionType,
)
from school_admin.services.importer.column_schema import QUESTION_OPTION_KEYS, ColumnSchema

# Data rows start on line 2 of the file (line 1 is the header)
FIRST_DATA_ROW = 2


class ValidationError:
    """Validation error for one row, or for the whole file when ``row_number`` is None."""

    def __init__(self, message: str, row_number: int | None = None):
        """
        Initialize validation error.

        Args:
            message: Human-readable message, shown as-is in the console
            row_number: 1-based line number in the file; None for schema-level errors
        """
        self.message = message
        self.row_number = row_number

    @property
    def is_schema_level(self) -> bool:
        return self.row_number is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON responses."""
        return {
            "row_number": self.row_number,
            "message": self.message,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationError):
            return NotImplemented
        return (self.row_number, self.message) == (other.row_number, other.message)

    def __repr__(self) -> str:
        return f"ValidationError(row_number={self.row_number!r}, message={self.message!r})"


ValidationResult = tuple[list[dict[str, str]], list[ValidationError]]


def _blank(value: str | None) -> bool:
    return not (value or "").strip()


class RowValidator:
    """Check parsed rows against a column schema.

    Failure classes are evaluated in order and the first one that produces
    errors ends validation:

    1. a required column missing from the header (one error, no row checks)
    2. a blank required field (first one per row, every row checked)
    3. no data rows at all
    4. type-specific rules for question imports, when ``question_rules`` is
       set (first violation per row)

    Any error rejects the whole file.
    """

    def validate(
        self,
        schema: ColumnSchema,
        headers: Sequence[str],
        rows: Sequence[dict[str, str]],
        question_rules: bool = False,
    ) -> ValidationResult:
        """
        Validate a parsed file.

        Args:
            schema: Expected columns
            headers: Header cells exactly as parsed
            rows: Data rows keyed by header
            question_rules: Apply the exam question checks to every row

        Returns:
            (rows, errors); rows is empty whenever errors is not
        """
        header_set = set(headers)
        for key in schema.required_keys():
            if key not in header_set:
                return [], [ValidationError(f'Missing required column: "{key}"')]

        errors = self._check_presence(schema, rows)
        if errors:
            return [], errors

        if not rows:
            return [], [ValidationError("No data rows found in CSV")]

        if question_rules:
            errors = [e for e in (self._check_question(row, n) for n, row in self._numbered(rows)) if e]
            if errors:
                return [], errors

        return list(rows), []

    @staticmethod
    def _numbered(rows: Sequence[dict[str, str]]):
        return enumerate(rows, start=FIRST_DATA_ROW)

    def _check_presence(
        self, schema: ColumnSchema, rows: Sequence[dict[str, str]]
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []
        required = schema.required_keys()
        for row_number, row in self._numbered(rows):
            for key in required:
                if _blank(row.get(key)):
                    errors.append(ValidationError(f'Row {row_number}: "{key}" is required', row_number))
                    break
        return errors

    def _check_question(self, row: dict[str, str], row_number: int) -> ValidationError | None:
        def error(message: str) -> ValidationError:
            return ValidationError(f"Row {row_number}: {message}", row_number)

        question_type = (row.get("type") or "").strip()
        if question_type not in {t.value for t in QuestionType}:
            allowed = ", ".join(t.value for t in QuestionType)
            return error(f'"type" must be one of {allowed} (got "{question_type}")')

        points = (row.get("points") or "").strip()
        if not (points.isascii() and points.isdigit()) or int(points) < 1:
            return error('"points" must be a whole number of at least 1')

        if len((row.get("questionText") or "").strip()) > QUESTION_TEXT_MAX_LENGTH:
            return error(f'"questionText" must be at most {QUESTION_TEXT_MAX_LENGTH} characters')

        if question_type == QuestionType.MCQ.value:
            options = [row.get(key, "").strip() for key in QUESTION_OPTION_KEYS]
            options = [o for o in options if o]
            if len(options) < 2:
                return error("MCQ needs at least 2 options")
            if any(len(o) > OPTION_MAX_LENGTH for o in options):
                return error(f"options must be at most {OPTION_MAX_LENGTH} characters")
            correct = (row.get("correctAnswer") or "").strip()
            if correct and correct not in options:
                return error(f'"correctAnswer" must match one of the options (got "{correct}")')
        elif question_type != QuestionType.TRUE_FALSE.value:
            if len((row.get("markingScheme") or "").strip()) > MARKING_SCHEME_MAX_LENGTH:
                return error(f'"markingScheme" must be at most {MARKING_SCHEME_MAX_LENGTH} characters')

        return None
