"""Quiz-taking state machine and the scoring rule shared with the server.

A :class:`QuizSession` walks a fixed list of questions. Answers are kept by
question index and may be overwritten until the quiz is submitted; submitting
needs an answer for every question.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Sequence

from app.errors import ValidationError
from app.utils import percentage

DEFAULT_PASSING_SCORE = 70


class QuizIncomplete(ValidationError):
    message = "All questions must be answered before submitting"


class QuizAlreadySubmitted(ValidationError):
    message = "Quiz has already been submitted"


@dataclass(frozen=True)
class QuizResult:
    score: int
    passed: bool
    correct: int
    total: int

    def to_record(self, when: Optional[datetime] = None) -> Dict[str, Any]:
        """The ``{score, passed, date}`` record a client stores under :func:`storage_key`."""
        when = when or datetime.now(timezone.utc)
        return {"score": self.score, "passed": self.passed, "date": when.isoformat()}


def storage_key(quiz_id) -> str:
    return f"quiz_{quiz_id}"


def _normalize(value) -> str:
    return str(value).strip().lower()


def is_correct(answer, correct_answer) -> bool:
    if answer is None or correct_answer is None:
        return False
    return _normalize(answer) == _normalize(correct_answer)


def score_answers(answer_key: Sequence, answers: Mapping[int, Any],
                  passing_score: int = DEFAULT_PASSING_SCORE) -> QuizResult:
    total = len(answer_key)
    correct = sum(1 for i, key in enumerate(answer_key) if is_correct(answers.get(i), key))
    score = percentage(correct, total)
    return QuizResult(score=score, passed=score >= passing_score, correct=correct, total=total)


class QuizSession:
    def __init__(self, answer_key: Sequence, passing_score: int = DEFAULT_PASSING_SCORE):
        self.answer_key = list(answer_key)
        self.passing_score = passing_score
        self.current_index = 0
        self.answers: Dict[int, Any] = {}
        self.submitted = False
        self.result: Optional[QuizResult] = None

    @property
    def total(self) -> int:
        return len(self.answer_key)

    @property
    def answered(self) -> int:
        return len(self.answers)

    @property
    def is_complete(self) -> bool:
        return all(i in self.answers for i in range(self.total))

    def answer(self, index: int, value) -> None:
        if self.submitted:
            raise QuizAlreadySubmitted()
        if not 0 <= index < self.total:
            raise ValidationError(f"Question index {index} out of range")
        self.answers[index] = value

    def next(self) -> int:
        if self.current_index < self.total - 1:
            self.current_index += 1
        return self.current_index

    def previous(self) -> int:
        if self.current_index > 0:
            self.current_index -= 1
        return self.current_index

    def submit(self) -> QuizResult:
        if self.submitted:
            raise QuizAlreadySubmitted()
        if not self.is_complete:
            raise QuizIncomplete()
        self.result = score_answers(self.answer_key, self.answers, self.passing_score)
        self.submitted = True
        return self.result
