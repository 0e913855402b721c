"""Console capabilities and the action policy table.

Capability strings mirror the permission names issued by the school backend.
Which console action needs which capability lives in ``ACTION_CAPABILITIES``
only; endpoints ask ``is_allowed`` instead of checking strings themselves.
"""

from collections.abc import Iterable
from enum import Enum


class Capability(str, Enum):
    """Backend permissions the console cares about."""

    READ_STUDENTS = "read_students"
    WRITE_STUDENTS = "write_students"
    READ_TEACHERS = "read_teachers"
    WRITE_TEACHERS = "write_teachers"
    READ_PARENTS = "read_parents"
    WRITE_PARENTS = "write_parents"
    READ_CLASSES = "read_classes"
    WRITE_CLASSES = "write_classes"
    READ_SUBJECTS = "read_subjects"
    WRITE_SUBJECTS = "write_subjects"
    READ_EXAMS = "read_exams"
    WRITE_EXAMS = "write_exams"


class ConsoleAction(str, Enum):
    """Actions exposed by the console API."""

    IMPORT_STUDENTS = "import_students"
    IMPORT_TEACHERS = "import_teachers"
    IMPORT_PARENTS = "import_parents"
    IMPORT_CLASSES = "import_classes"
    IMPORT_SUBJECTS = "import_subjects"
    IMPORT_QUESTIONS = "import_questions"
    VIEW_QUESTIONS = "view_questions"
    EDIT_QUESTIONS = "edit_questions"
    PUBLISH_EXAM = "publish_exam"


ACTION_CAPABILITIES: dict[ConsoleAction, Capability] = {
    ConsoleAction.IMPORT_STUDENTS: Capability.WRITE_STUDENTS,
    ConsoleAction.IMPORT_TEACHERS: Capability.WRITE_TEACHERS,
    ConsoleAction.IMPORT_PARENTS: Capability.WRITE_PARENTS,
    ConsoleAction.IMPORT_CLASSES: Capability.WRITE_CLASSES,
    ConsoleAction.IMPORT_SUBJECTS: Capability.WRITE_SUBJECTS,
    ConsoleAction.IMPORT_QUESTIONS: Capability.WRITE_EXAMS,
    ConsoleAction.VIEW_QUESTIONS: Capability.READ_EXAMS,
    ConsoleAction.EDIT_QUESTIONS: Capability.WRITE_EXAMS,
    ConsoleAction.PUBLISH_EXAM: Capability.WRITE_EXAMS,
}


def parse_capabilities(permissions: Iterable[str]) -> frozenset[Capability]:
    """Keep the permission strings the console knows about; ignore the rest."""
    known = {c.value: c for c in Capability}
    return frozenset(known[p] for p in permissions if p in known)


def is_allowed(capabilities: frozenset[Capability], action: ConsoleAction) -> bool:
    """Return True when ``capabilities`` grant ``action``."""
    return ACTION_CAPABILITIES[action] in capabilities
