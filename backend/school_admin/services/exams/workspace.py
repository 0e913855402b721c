"""Question builder workspace for one exam.

Holds the exam and its persisted questions as loaded from the school backend.
The running total used by the points budget is computed from this list only,
so every mutation updates it after the backend has accepted the change.
"""

from functools import partial
from typing import Any

from school_admin.clients.backend_api import BackendAPIClient, BackendAPIError
from school_admin.core.logging import get_logger
from school_admin.schemas.exam_questions import Exam, Question, QuestionDraft, QuestionType
from school_admin.schemas.imports import ImportOutcome
from school_admin.services.exams.lifecycle import ExamLifecycleGuard
from school_admin.services.exams.points_budget import BudgetCheck, PointsBudgetValidator
from school_admin.services.importer.submitter import BatchSubmitter

logger = get_logger(__name__)


class QuestionEditorError(Exception):
    """A single question failed the editor checks."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class QuestionNotFoundError(Exception):
    """The question is not part of this exam."""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Question {question_id} not found")


def validate_question_draft(draft: QuestionDraft) -> None:
    """Checks the question editor applies before saving one question."""
    if not draft.question_text:
        raise QuestionEditorError("Question text is required")

    if draft.type == QuestionType.MCQ:
        options = draft.options or []
        if len(options) < 2:
            raise QuestionEditorError("MCQ needs at least 2 options")
        if not draft.correct_answer:
            raise QuestionEditorError("Select the correct answer")
        if draft.correct_answer not in options:
            raise QuestionEditorError("Correct answer must be one of the options")
    elif draft.type == QuestionType.TRUE_FALSE:
        if not draft.correct_answer:
            raise QuestionEditorError("Select True or False as the correct answer")


class ExamWorkspace:
    """One exam and its questions, with the guards every change goes through."""

    def __init__(self, client: BackendAPIClient, exam: Exam, questions: list[Question]):
        self.client = client
        self.exam = exam
        self.questions = questions
        self.guard = ExamLifecycleGuard()
        self.budget = PointsBudgetValidator(exam.max_score)
        # Set when the question list may no longer match the backend
        self.stale = False

    @classmethod
    async def load(cls, client: BackendAPIClient, exam_id: str) -> "ExamWorkspace":
        exam = await client.get_exam(exam_id)
        questions = await client.list_questions(exam_id)
        return cls(client, exam, questions)

    @property
    def total_points(self) -> int:
        return self.budget.total_points(self.questions)

    @property
    def remaining_points(self) -> int:
        return max(0, self.exam.max_score - self.total_points)

    def _find(self, question_id: str) -> int:
        for index, question in enumerate(self.questions):
            if question.id == question_id:
                return index
        raise QuestionNotFoundError(question_id)

    async def create_question(self, draft: QuestionDraft) -> Question:
        self.guard.ensure_mutable(self.exam)
        validate_question_draft(draft)
        self.budget.ensure(self.questions, draft.points)

        question = await self.client.create_question(self.exam.id, draft)
        self.questions.append(question)
        logger.info(
            "Question created",
            extra={"exam_id": self.exam.id, "question_id": question.id, "total_points": self.total_points},
        )
        return question

    async def update_question(self, question_id: str, draft: QuestionDraft) -> Question:
        self.guard.ensure_mutable(self.exam)
        index = self._find(question_id)
        validate_question_draft(draft)
        self.budget.ensure(self.questions, draft.points, excluding_id=question_id)

        question = await self.client.update_question(self.exam.id, question_id, draft)
        self.questions[index] = question
        logger.info(
            "Question updated",
            extra={"exam_id": self.exam.id, "question_id": question_id, "total_points": self.total_points},
        )
        return question

    async def delete_question(self, question_id: str) -> Question:
        self.guard.ensure_mutable(self.exam)
        index = self._find(question_id)

        await self.client.delete_question(self.exam.id, question_id)
        removed = self.questions.pop(index)
        logger.info(
            "Question deleted",
            extra={"exam_id": self.exam.id, "question_id": question_id, "total_points": self.total_points},
        )
        return removed

    def check_import(self, rows: list[dict[str, Any]]) -> BudgetCheck:
        """Lifecycle and batch budget checks for an import, without sending anything."""
        self.guard.ensure_mutable(self.exam)
        return self.budget.ensure_batch(self.questions, (int(row["points"]) for row in rows))

    async def import_questions(self, rows: list[dict[str, Any]]) -> ImportOutcome:
        """
        Bulk create questions from shaped import rows.

        The whole batch must fit the remaining budget. Afterwards the question
        list is reloaded, since only the backend knows which rows it accepted.
        The outcome is returned even when that reload fails; the workspace is
        then marked stale, since its running total may be behind the backend.
        """
        self.check_import(rows)

        submitter = BatchSubmitter(
            partial(self.client.bulk_create_questions, self.exam.id), label="questions"
        )
        outcome = await submitter.submit(rows)
        try:
            self.questions = await self.client.list_questions(self.exam.id)
        except BackendAPIError as e:
            self.stale = True
            logger.warning(
                "Could not reload questions after import",
                extra={"exam_id": self.exam.id, "status_code": e.status_code, "error": e.message},
            )
        return outcome

    async def publish(self) -> Exam:
        self.guard.ensure_publishable(self.exam, self.questions)

        await self.client.publish_exam(self.exam.id)
        self.exam = self.exam.model_copy(update={"published": True})
        logger.info(
            "Exam published",
            extra={"exam_id": self.exam.id, "questions": len(self.questions), "total_points": self.total_points},
        )
        return self.exam
