"""Tests for the exam points budget."""

import pytest

from school_admin.schemas.exam_questions import Question
from school_admin.services.exams.points_budget import PointsBudgetExceededError, PointsBudgetValidator


def make_questions(*points: int) -> list[Question]:
    return [
        Question(_id=f"q{i}", type="short_answer", question_text=f"Q{i}", points=p)
        for i, p in enumerate(points, start=1)
    ]


EXISTING = make_questions(40, 30, 20)  # 90 of 100


def test_candidate_that_fits_is_ok():
    result = PointsBudgetValidator(100).check(EXISTING, 5)

    assert result.ok
    assert result.total == 95
    assert result.excess == 0
    assert not result.budget_reached


def test_reaching_max_score_exactly_is_ok():
    result = PointsBudgetValidator(100).check(EXISTING, 10)

    assert result.ok
    assert result.budget_reached


def test_candidate_over_budget_reports_excess():
    result = PointsBudgetValidator(100).check(EXISTING, 15)

    assert not result.ok
    assert result.excess == 5
    assert result.total == 105


def test_edit_replaces_the_question_own_points():
    validator = PointsBudgetValidator(100)

    # q1 goes from 40 to 50: 50 + 30 + 20 = 100
    assert validator.check(EXISTING, 50, excluding_id="q1").ok
    assert validator.check(EXISTING, 51, excluding_id="q1").excess == 1


def test_batch_is_checked_as_a_whole():
    validator = PointsBudgetValidator(100)

    rejected = validator.check_batch(EXISTING, [5, 6])
    accepted = validator.check_batch(EXISTING, [5, 5])

    assert rejected.excess == 1
    assert accepted.ok
    assert accepted.budget_reached


def test_ensure_raises_with_details():
    with pytest.raises(PointsBudgetExceededError) as exc_info:
        PointsBudgetValidator(100).ensure(EXISTING, 15)

    assert exc_info.value.to_dict() == {"excess": 5, "total": 105, "max_score": 100}
    assert exc_info.value.message == "Total points (105) would exceed max score (100)"


def test_ensure_batch_message_describes_import():
    with pytest.raises(PointsBudgetExceededError) as exc_info:
        PointsBudgetValidator(100).ensure_batch(EXISTING, [11])

    assert exc_info.value.message == "Import would bring total to 101 points, exceeding max score of 100"
