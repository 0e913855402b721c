"""Status badges shown by the console for exams and import sessions."""

from enum import Enum
from typing import assert_never

from school_admin.schemas.exam_questions import ExamState
from school_admin.schemas.imports import ImportSessionState


class BadgeVariant(str, Enum):
    """Visual style of a status badge."""

    NEUTRAL = "neutral"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


def exam_state_badge(state: ExamState) -> BadgeVariant:
    match state:
        case ExamState.DRAFT:
            return BadgeVariant.WARNING
        case ExamState.PUBLISHED:
            return BadgeVariant.SUCCESS
        case _:
            assert_never(state)


def import_session_badge(state: ImportSessionState) -> BadgeVariant:
    match state:
        case ImportSessionState.EMPTY:
            return BadgeVariant.NEUTRAL
        case ImportSessionState.READY:
            return BadgeVariant.INFO
        case ImportSessionState.INVALID:
            return BadgeVariant.DANGER
        case ImportSessionState.CLOSED:
            return BadgeVariant.SUCCESS
        case ImportSessionState.FAILED:
            return BadgeVariant.WARNING
        case _:
            assert_never(state)
