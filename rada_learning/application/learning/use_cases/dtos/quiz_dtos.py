"""DTOs for quiz attempt use cases."""

from dataclasses import dataclass, field
from datetime import datetime

from rada_learning.domain.learning.entities.badge import Badge
from rada_learning.domain.learning.entities.quiz_attempt import QuizAttempt, QuizResult


@dataclass
class AttemptStarted:
    attempt_id: int
    quiz_id: int
    started_at: datetime
    deadline: datetime


@dataclass
class AnswerRecorded:
    attempt_id: int
    question_id: int
    answer_index: int


@dataclass
class QuizSubmission:
    """DTO for a scored attempt. duplicate is set when it was already locked."""

    result: QuizResult
    badges_awarded: list[Badge] = field(default_factory=list)

    @property
    def duplicate(self) -> bool:
        return self.result.duplicate


@dataclass
class AttemptView:
    """
    Read-only view of an attempt.

    expired reports a passed deadline on an attempt nobody has locked yet;
    reading never locks it.
    """

    attempt: QuizAttempt
    expired: bool
