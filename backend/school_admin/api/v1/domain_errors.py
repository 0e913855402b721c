"""Translate service exceptions into API errors."""

from collections.abc import Iterator
from contextlib import contextmanager

from school_admin.clients.backend_api import BackendAPIError
from school_admin.core.app_exceptions import conflict, not_found, unprocessable, upstream_error
from school_admin.services.exams.lifecycle import ExamLockedError, ExamPublishError
from school_admin.services.exams.points_budget import PointsBudgetExceededError
from school_admin.services.exams.workspace import QuestionEditorError, QuestionNotFoundError
from school_admin.services.importer.session import (
    ImportLimitExceededError,
    ImportSessionNotFoundError,
    NothingToSubmitError,
    SubmissionInProgressError,
)
from school_admin.services.importer.submitter import BatchTransportError


@contextmanager
def domain_errors() -> Iterator[None]:
    """Raise the matching ``AppError`` for any service exception raised inside the block."""
    try:
        yield
    except ExamLockedError as e:
        raise conflict("EXAM_LOCKED", e.message, {"exam_id": e.exam_id}) from e
    except ExamPublishError as e:
        raise conflict("EXAM_HAS_NO_QUESTIONS", e.message, {"exam_id": e.exam_id}) from e
    except PointsBudgetExceededError as e:
        raise conflict("POINTS_BUDGET_EXCEEDED", e.message, e.to_dict()) from e
    except SubmissionInProgressError as e:
        raise conflict("SUBMISSION_IN_PROGRESS", str(e)) from e
    except NothingToSubmitError as e:
        raise conflict("NOTHING_TO_SUBMIT", str(e)) from e
    except ImportSessionNotFoundError as e:
        raise not_found("IMPORT_SESSION_NOT_FOUND", str(e)) from e
    except QuestionNotFoundError as e:
        raise not_found("QUESTION_NOT_FOUND", str(e)) from e
    except ImportLimitExceededError as e:
        raise unprocessable(
            "VALIDATION_LIMIT_EXCEEDED",
            "Import row count exceeds maximum allowed",
            {"limit": e.max_rows, "rows": e.row_count},
        ) from e
    except QuestionEditorError as e:
        raise unprocessable("QUESTION_INVALID", e.detail) from e
    except BatchTransportError as e:
        raise upstream_error(e.status_code or 502, e.message) from e
    except BackendAPIError as e:
        raise upstream_error(e.status_code, e.message) from e
