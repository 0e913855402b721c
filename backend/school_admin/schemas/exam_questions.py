"""Pydantic schemas for exams and exam questions.

Field names follow the school backend's camelCase wire format (``_id``,
``questionText``, ``maxScore``); Python code uses the snake_case attributes.
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from school_admin.schemas.base import CamelModel

# Validation caps (input hardening)
QUESTION_TEXT_MAX_LENGTH = 4000
OPTION_MAX_LENGTH = 500
MARKING_SCHEME_MAX_LENGTH = 4000


class QuestionType(str, Enum):
    """Supported question kinds."""

    MCQ = "mcq"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"
    ESSAY = "essay"


class QuestionDraft(CamelModel):
    """Question payload for create/update/bulk create.

    Fields that do not apply to the question type are dropped: options only
    for mcq, correct answer for mcq and true/false, marking scheme for short
    answer and essay.
    """

    type: QuestionType
    question_text: str = Field(..., min_length=1, max_length=QUESTION_TEXT_MAX_LENGTH)
    points: int = Field(..., ge=1)
    options: list[str] | None = None
    correct_answer: str | None = None
    marking_scheme: str | None = Field(None, max_length=MARKING_SCHEME_MAX_LENGTH)

    @model_validator(mode="after")
    def shape_for_type(self) -> "QuestionDraft":
        self.question_text = self.question_text.strip()
        if not self.question_text:
            raise ValueError("questionText must not be blank")

        if self.type == QuestionType.MCQ:
            options = [o.strip() for o in (self.options or []) if o and o.strip()]
            if any(len(o) > OPTION_MAX_LENGTH for o in options):
                raise ValueError(f"options must be at most {OPTION_MAX_LENGTH} characters")
            self.options = options
        else:
            self.options = None

        if self.type in (QuestionType.MCQ, QuestionType.TRUE_FALSE):
            self.correct_answer = (self.correct_answer or "").strip() or None
            self.marking_scheme = None
        else:
            self.correct_answer = None
            self.marking_scheme = (self.marking_scheme or "").strip() or None
        return self


class Question(QuestionDraft):
    """A persisted question as returned by the backend."""

    id: str = Field(..., alias="_id")
    order: int | None = None


class ExamState(str, Enum):
    """Exam lifecycle: draft exams are editable, published ones are locked."""

    DRAFT = "draft"
    PUBLISHED = "published"


class Exam(CamelModel):
    """The exam fields the question builder needs."""

    id: str = Field(..., alias="_id")
    name: str = ""
    max_score: int = Field(..., ge=1)
    published: bool = False

    @property
    def state(self) -> ExamState:
        return ExamState.PUBLISHED if self.published else ExamState.DRAFT


class ExamQuestionsOut(BaseModel):
    """Question builder view of one exam; nested records keep the backend's field names."""

    exam: Exam
    questions: list[Question]
    total_points: int
    remaining_points: int
    status_badge: str
