"""
QuizAttempt aggregate root.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from rada_learning.domain.common.aggregate_root import AggregateRoot
from rada_learning.domain.common.exceptions import DomainError, ValidationError
from rada_learning.domain.common.value_objects import (
    LearnerId,
    QuestionId,
    QuizAttemptId,
    QuizId,
)
from rada_learning.domain.learning.entities.quiz import Quiz, RewardTierTable
from rada_learning.domain.learning.events import QuizAttemptLocked
from rada_learning.domain.learning.exceptions import AttemptLockedError
from rada_learning.domain.learning.services.quiz_scoring_service import QuizScoringService


@dataclass(frozen=True)
class QuizResult:
    """Scored outcome of a locked attempt."""

    attempt_id: QuizAttemptId
    score_percent: int
    passed: bool
    xp_awarded: int
    submitted_at: datetime
    duplicate: bool = False


@dataclass
class QuizAttempt(AggregateRoot[QuizAttemptId]):
    """
    A single timed attempt at a quiz.

    Business Rules:
    - deadline = started_at + the quiz time limit
    - Answers are accepted only while unlocked and not past the deadline
    - A later answer to the same question replaces the earlier one
    - Once locked, answers, score and reward never change
    - XP comes from the tier table in force when the attempt started
    """

    id: QuizAttemptId
    learner_id: LearnerId
    quiz_id: QuizId
    started_at: datetime
    deadline: datetime
    answers: dict[int, int] = field(default_factory=dict)
    submitted_at: datetime | None = None
    score_percent: int | None = None
    passed: bool | None = None
    xp_awarded: int | None = None
    locked: bool = False
    quiz_version: int = 1
    reward_tiers: RewardTierTable = field(default_factory=RewardTierTable)

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.deadline <= self.started_at:
            raise DomainError("Attempt deadline must be after its start")

    def is_expired(self, now: datetime) -> bool:
        return now > self.deadline

    def record_answer(
        self, quiz: Quiz, question_id: QuestionId, answer_index: int, now: datetime
    ) -> None:
        """
        Store an answer, overwriting any earlier answer to that question.

        Raises:
            AttemptLockedError: If the attempt is locked or past its deadline
            ValidationError: If the question is not in the quiz or the index is out of range
        """
        if self.locked:
            raise AttemptLockedError(self.id.value)
        if self.is_expired(now):
            raise AttemptLockedError(self.id.value, expired=True)

        question = quiz.question(question_id)
        if question is None:
            raise ValidationError(
                f"Question {question_id} is not part of quiz {quiz.id}",
                field="question_id",
                value=question_id.value,
            )
        question.validate_answer(answer_index)
        self.answers = {**self.answers, question_id.value: answer_index}

    def submit(self, quiz: Quiz, now: datetime, *, expired: bool = False) -> QuizResult:
        """
        Lock and score the attempt.

        Calling this on a locked attempt returns the stored result untouched.
        XP is the tier value for a passing score, zero otherwise; the ledger
        may still decide nothing new is owed (see `settle_reward`).
        """
        if self.locked:
            return self.result(duplicate=True)
        if quiz.id != self.quiz_id:
            raise DomainError(f"Attempt {self.id} belongs to quiz {self.quiz_id}, not {quiz.id}")

        scoring = QuizScoringService()
        score = scoring.score_percent(quiz.answer_key, self.answers)
        passed = scoring.is_passing(score, quiz.passing_score_percent)

        self.score_percent = score
        self.passed = passed
        self.submitted_at = min(now, self.deadline) if expired else now
        self.locked = True
        self._record_event(
            QuizAttemptLocked(
                learner_id=self.learner_id,
                quiz_id=self.quiz_id,
                attempt_id=self.id,
                score_percent=score,
                passed=passed,
                expired=expired,
            )
        )
        return self.result()

    def earned_xp(self) -> int:
        """Tier XP owed for this attempt's score, zero unless it passed."""
        if not self.locked or self.score_percent is None:
            raise DomainError(f"Attempt {self.id} has not been scored")
        if not self.passed:
            return 0
        return self.reward_tiers.xp_for(self.score_percent)

    def settle_reward(self, xp_awarded: int) -> None:
        """Record the XP actually credited by the ledger. Happens once."""
        if not self.locked:
            raise DomainError(f"Attempt {self.id} must be locked before settling XP")
        if self.xp_awarded is not None:
            raise DomainError(f"Attempt {self.id} reward is already settled")
        self.xp_awarded = xp_awarded

    def result(self, *, duplicate: bool = False) -> QuizResult:
        if not self.locked or self.score_percent is None or self.submitted_at is None:
            raise DomainError(f"Attempt {self.id} has not been scored")
        return QuizResult(
            attempt_id=self.id,
            score_percent=self.score_percent,
            passed=bool(self.passed),
            xp_awarded=self.xp_awarded or 0,
            submitted_at=self.submitted_at,
            duplicate=duplicate,
        )

    @classmethod
    def start(cls, quiz: Quiz, learner_id: LearnerId, now: datetime) -> "QuizAttempt":
        """Open a new attempt whose deadline is now + the quiz time limit."""
        return cls(
            id=QuizAttemptId.generate(),
            learner_id=learner_id,
            quiz_id=quiz.id,
            started_at=now,
            deadline=now + timedelta(seconds=quiz.time_limit_seconds),
            quiz_version=quiz.version,
            reward_tiers=quiz.reward_tiers,
        )
