"""Column schemas and the registry of importable record kinds."""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from school_admin.core.permissions import ConsoleAction
from school_admin.schemas.exam_questions import QuestionDraft


@dataclass(frozen=True)
class ColumnSpec:
    """One expected column of an import file."""

    key: str
    label: str
    required: bool = False


class ColumnSchema:
    """Ordered set of expected columns with unique keys."""

    def __init__(self, columns: Sequence[ColumnSpec]):
        seen: set[str] = set()
        for column in columns:
            if column.key in seen:
                raise ValueError(f"Duplicate column key: {column.key!r}")
            seen.add(column.key)
        self.columns: tuple[ColumnSpec, ...] = tuple(columns)

    def __iter__(self) -> Iterator[ColumnSpec]:
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    def keys(self) -> list[str]:
        return [c.key for c in self.columns]

    def required_keys(self) -> list[str]:
        return [c.key for c in self.columns if c.required]

    def optional_keys(self) -> list[str]:
        return [c.key for c in self.columns if not c.required]

    def get(self, key: str) -> ColumnSpec | None:
        for column in self.columns:
            if column.key == key:
                return column
        return None


class ImportKind(str, Enum):
    """Record kinds that can be bulk imported."""

    STUDENTS = "students"
    TEACHERS = "teachers"
    PARENTS = "parents"
    CLASSES = "classes"
    SUBJECTS = "subjects"
    QUESTIONS = "questions"


RowShaper = Callable[[dict[str, str]], dict[str, Any]]


@dataclass(frozen=True)
class ImportKindDefinition:
    """Everything the pipeline needs to know about one import kind."""

    kind: ImportKind
    title: str
    schema: ColumnSchema
    template_rows: tuple[dict[str, str], ...]
    action: ConsoleAction
    endpoint: str
    payload_key: str
    shape_row: RowShaper
    # Type, points and option checks for exam question rows
    question_rules: bool = False

    @property
    def template_filename(self) -> str:
        return f"{self.kind.value}-template.csv"

    def shape_rows(self, rows: Sequence[dict[str, str]]) -> list[dict[str, Any]]:
        return [self.shape_row(row) for row in rows]


# ============================================================================
# Row shapers (raw strings -> backend payload)
# ============================================================================


def _strip_blank(row: dict[str, str], keys: Sequence[str]) -> dict[str, Any]:
    """Trimmed values for ``keys``, omitting blanks."""
    shaped: dict[str, Any] = {}
    for key in keys:
        value = (row.get(key) or "").strip()
        if value:
            shaped[key] = value
    return shaped


def _shaper(schema: ColumnSchema) -> RowShaper:
    keys = schema.keys()
    return lambda row: _strip_blank(row, keys)


def _shape_class(row: dict[str, str]) -> dict[str, Any]:
    shaped = _strip_blank(row, CLASS_SCHEMA.keys())
    # Non-numeric capacities are left for the backend to reject.
    if shaped.get("capacity", "").isdigit():
        shaped["capacity"] = int(shaped["capacity"])
    return shaped


def _shape_subject(row: dict[str, str]) -> dict[str, Any]:
    shaped = _strip_blank(row, SUBJECT_SCHEMA.keys())
    if "isCore" in shaped:
        shaped["isCore"] = shaped["isCore"].lower() in ("true", "yes", "1")
    return shaped


def shape_question(row: dict[str, str]) -> dict[str, Any]:
    """Turn a validated question row into a bulk-create payload."""
    draft = QuestionDraft(
        type=row["type"].strip(),
        question_text=row["questionText"],
        points=int(row["points"].strip()),
        options=[row.get(key) or "" for key in QUESTION_OPTION_KEYS],
        correct_answer=row.get("correctAnswer"),
        marking_scheme=row.get("markingScheme"),
    )
    return draft.model_dump(by_alias=True, exclude_none=True, mode="json")


# ============================================================================
# Built-in schemas
# ============================================================================

STUDENT_SCHEMA = ColumnSchema(
    [
        ColumnSpec("firstName", "First Name", required=True),
        ColumnSpec("lastName", "Last Name", required=True),
        ColumnSpec("email", "Email", required=True),
        ColumnSpec("phone", "Phone"),
        ColumnSpec("gender", "Gender"),
        ColumnSpec("dateOfBirth", "Date of Birth"),
        ColumnSpec("admissionDate", "Admission Date"),
        ColumnSpec("address", "Address"),
    ]
)

TEACHER_SCHEMA = ColumnSchema(
    [
        ColumnSpec("firstName", "First Name", required=True),
        ColumnSpec("lastName", "Last Name", required=True),
        ColumnSpec("email", "Email", required=True),
        ColumnSpec("phone", "Phone"),
        ColumnSpec("employeeId", "Employee ID"),
        ColumnSpec("qualification", "Qualification"),
        ColumnSpec("primarySubject", "Primary Subject"),
        ColumnSpec("address", "Address"),
    ]
)

PARENT_SCHEMA = ColumnSchema(
    [
        ColumnSpec("firstName", "First Name", required=True),
        ColumnSpec("lastName", "Last Name", required=True),
        ColumnSpec("email", "Email", required=True),
        ColumnSpec("phone", "Phone"),
        ColumnSpec("occupation", "Occupation"),
        ColumnSpec("relationship", "Relationship"),
        ColumnSpec("address", "Address"),
    ]
)

CLASS_SCHEMA = ColumnSchema(
    [
        ColumnSpec("name", "Name", required=True),
        ColumnSpec("section", "Section"),
        ColumnSpec("capacity", "Capacity"),
        ColumnSpec("level", "Level"),
        ColumnSpec("room", "Room"),
        ColumnSpec("description", "Description"),
    ]
)

SUBJECT_SCHEMA = ColumnSchema(
    [
        ColumnSpec("name", "Name", required=True),
        ColumnSpec("code", "Code", required=True),
        ColumnSpec("isCore", "Core Subject"),
        ColumnSpec("description", "Description"),
    ]
)

QUESTION_OPTION_KEYS = ("optionA", "optionB", "optionC", "optionD")

QUESTION_SCHEMA = ColumnSchema(
    [
        ColumnSpec("type", "Type", required=True),
        ColumnSpec("questionText", "Question", required=True),
        ColumnSpec("points", "Points", required=True),
        ColumnSpec("optionA", "Option A"),
        ColumnSpec("optionB", "Option B"),
        ColumnSpec("optionC", "Option C"),
        ColumnSpec("optionD", "Option D"),
        ColumnSpec("correctAnswer", "Correct Answer"),
        ColumnSpec("markingScheme", "Marking Scheme"),
    ]
)


IMPORT_KINDS: dict[ImportKind, ImportKindDefinition] = {
    ImportKind.STUDENTS: ImportKindDefinition(
        kind=ImportKind.STUDENTS,
        title="Import Students from CSV",
        schema=STUDENT_SCHEMA,
        template_rows=(
            {"firstName": "John", "lastName": "Doe", "email": "john.doe@example.com",
             "phone": "08011112222", "gender": "male", "dateOfBirth": "2012-04-15",
             "admissionDate": "2024-09-09", "address": "12 Palm Close"},
            {"firstName": "Jane", "lastName": "Smith", "email": "jane.smith@example.com",
             "phone": "08033334444", "gender": "female", "dateOfBirth": "2011-11-02",
             "admissionDate": "2024-09-09", "address": ""},
        ),
        action=ConsoleAction.IMPORT_STUDENTS,
        endpoint="/students/bulk-import",
        payload_key="students",
        shape_row=_shaper(STUDENT_SCHEMA),
    ),
    ImportKind.TEACHERS: ImportKindDefinition(
        kind=ImportKind.TEACHERS,
        title="Import Teachers from CSV",
        schema=TEACHER_SCHEMA,
        template_rows=(
            {"firstName": "Grace", "lastName": "Okafor", "email": "grace.okafor@example.com",
             "phone": "08055550000", "employeeId": "EMP-001", "qualification": "B.Ed",
             "primarySubject": "Mathematics", "address": "7 School Road"},
        ),
        action=ConsoleAction.IMPORT_TEACHERS,
        endpoint="/teachers/bulk-import",
        payload_key="teachers",
        shape_row=_shaper(TEACHER_SCHEMA),
    ),
    ImportKind.PARENTS: ImportKindDefinition(
        kind=ImportKind.PARENTS,
        title="Import Parents from CSV",
        schema=PARENT_SCHEMA,
        template_rows=(
            {"firstName": "Michael", "lastName": "Doe", "email": "michael.doe@example.com",
             "phone": "08055556666", "occupation": "Engineer", "relationship": "father",
             "address": "123 Main St"},
            {"firstName": "Sarah", "lastName": "Smith", "email": "sarah.smith@example.com",
             "phone": "08077778888", "occupation": "Teacher", "relationship": "mother",
             "address": "456 Oak Ave"},
        ),
        action=ConsoleAction.IMPORT_PARENTS,
        endpoint="/auth/bulk-register-parents",
        payload_key="parents",
        shape_row=_shaper(PARENT_SCHEMA),
    ),
    ImportKind.CLASSES: ImportKindDefinition(
        kind=ImportKind.CLASSES,
        title="Import Classes from CSV",
        schema=CLASS_SCHEMA,
        template_rows=(
            {"name": "JSS 1", "section": "A", "capacity": "40", "level": "JSS",
             "room": "Room 101", "description": ""},
            {"name": "JSS 2", "section": "B", "capacity": "35", "level": "JSS",
             "room": "Room 102", "description": ""},
        ),
        action=ConsoleAction.IMPORT_CLASSES,
        endpoint="/classes/bulk-import",
        payload_key="classes",
        shape_row=_shape_class,
    ),
    ImportKind.SUBJECTS: ImportKindDefinition(
        kind=ImportKind.SUBJECTS,
        title="Import Subjects from CSV",
        schema=SUBJECT_SCHEMA,
        template_rows=(
            {"name": "Mathematics", "code": "MTH", "isCore": "true", "description": ""},
            {"name": "Fine Art", "code": "ART", "isCore": "false",
             "description": "Drawing, painting and craft"},
        ),
        action=ConsoleAction.IMPORT_SUBJECTS,
        endpoint="/subjects/bulk-import",
        payload_key="subjects",
        shape_row=_shape_subject,
    ),
    ImportKind.QUESTIONS: ImportKindDefinition(
        kind=ImportKind.QUESTIONS,
        title="Import Questions from CSV",
        schema=QUESTION_SCHEMA,
        template_rows=(
            {"type": "mcq", "questionText": "What is 2+2?", "points": "5",
             "optionA": "3", "optionB": "4", "optionC": "5", "optionD": "6",
             "correctAnswer": "4"},
            {"type": "true_false", "questionText": "The earth is flat.", "points": "5",
             "correctAnswer": "False"},
            {"type": "short_answer", "questionText": "Define photosynthesis.", "points": "10",
             "markingScheme": "Award marks for mentioning sunlight and CO2"},
            {"type": "essay", "questionText": "Discuss the causes of World War II.",
             "points": "20", "markingScheme": "Full marks for 3+ causes with explanations"},
        ),
        action=ConsoleAction.IMPORT_QUESTIONS,
        # Scoped per exam; the exam workspace builds the real path.
        endpoint="/exams/{exam_id}/questions/bulk",
        payload_key="questions",
        shape_row=shape_question,
        question_rules=True,
    ),
}


def get_import_kind(kind: ImportKind | str) -> ImportKindDefinition:
    """Look up an import kind; raises ``ValueError`` for unknown kinds."""
    return IMPORT_KINDS[ImportKind(kind)]
