"""Points budget: the questions of an exam may not add up to more than its max score."""

from collections.abc import Iterable
from dataclasses import dataclass

from school_admin.schemas.exam_questions import Question


class PointsBudgetExceededError(Exception):
    """Accepting the candidate points would push the exam past its max score."""

    def __init__(self, excess: int, total: int, max_score: int, message: str | None = None):
        super().__init__(message or f"Total points ({total}) would exceed max score ({max_score})")
        self.excess = excess
        self.total = total
        self.max_score = max_score

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> dict[str, int]:
        return {"excess": self.excess, "total": self.total, "max_score": self.max_score}


@dataclass(frozen=True)
class BudgetCheck:
    """Result of a budget check; ``excess`` is 0 when the points fit."""

    total: int
    max_score: int

    @property
    def excess(self) -> int:
        return max(0, self.total - self.max_score)

    @property
    def ok(self) -> bool:
        return self.total <= self.max_score

    @property
    def budget_reached(self) -> bool:
        return self.total == self.max_score


class PointsBudgetValidator:
    """Check candidate points against an exam's max score."""

    def __init__(self, max_score: int):
        self.max_score = max_score

    @staticmethod
    def total_points(questions: Iterable[Question], excluding_id: str | None = None) -> int:
        return sum(q.points for q in questions if excluding_id is None or q.id != excluding_id)

    def check(
        self,
        existing: Iterable[Question],
        candidate_points: int,
        excluding_id: str | None = None,
    ) -> BudgetCheck:
        """
        Check one create or edit.

        ``excluding_id`` is the question being edited; its stored points are
        replaced by ``candidate_points`` rather than added to them.
        """
        total = self.total_points(existing, excluding_id) + candidate_points
        return BudgetCheck(total=total, max_score=self.max_score)

    def check_batch(self, existing: Iterable[Question], batch_points: Iterable[int]) -> BudgetCheck:
        """Check a whole import batch; it fits entirely or not at all."""
        total = self.total_points(existing) + sum(batch_points)
        return BudgetCheck(total=total, max_score=self.max_score)

    def ensure(
        self,
        existing: Iterable[Question],
        candidate_points: int,
        excluding_id: str | None = None,
    ) -> BudgetCheck:
        result = self.check(existing, candidate_points, excluding_id)
        if not result.ok:
            raise PointsBudgetExceededError(result.excess, result.total, self.max_score)
        return result

    def ensure_batch(self, existing: Iterable[Question], batch_points: Iterable[int]) -> BudgetCheck:
        result = self.check_batch(existing, batch_points)
        if not result.ok:
            raise PointsBudgetExceededError(
                result.excess,
                result.total,
                self.max_score,
                message=(
                    f"Import would bring total to {result.total} points, "
                    f"exceeding max score of {self.max_score}"
                ),
            )
        return result
