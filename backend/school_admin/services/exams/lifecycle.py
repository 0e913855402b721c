"""Exam lifecycle guard: draft exams are editable, published exams are locked."""

from collections.abc import Sequence

from school_admin.schemas.exam_questions import Exam, ExamState, Question

LOCKED_MESSAGE = "Exam is published. Questions are locked."


class ExamLockedError(Exception):
    """The exam is published; its questions can no longer change."""

    def __init__(self, exam_id: str, message: str = LOCKED_MESSAGE):
        super().__init__(message)
        self.exam_id = exam_id
        self.message = message


class ExamPublishError(Exception):
    """The exam cannot be published yet."""

    def __init__(self, exam_id: str, message: str):
        super().__init__(message)
        self.exam_id = exam_id
        self.message = message


class ExamLifecycleGuard:
    """Checks run before any question mutation or publish."""

    @staticmethod
    def ensure_mutable(exam: Exam) -> None:
        if exam.state == ExamState.PUBLISHED:
            raise ExamLockedError(exam.id)

    @staticmethod
    def ensure_publishable(exam: Exam, questions: Sequence[Question]) -> None:
        if exam.state == ExamState.PUBLISHED:
            raise ExamLockedError(exam.id, "Exam is already published")
        if not questions:
            raise ExamPublishError(exam.id, "Add at least one question before publishing")
