"""Use case for timed quiz attempts."""

from dataclasses import dataclass
from datetime import datetime

import structlog

from rada_learning.application.common.clock import Clock
from rada_learning.application.common.unit_of_work import UnitOfWork
from rada_learning.application.learning.protocols.content_repository import (
    QuizRepositoryProtocol,
)
from rada_learning.application.learning.protocols.quiz_attempt_repository import (
    QuizAttemptRepositoryProtocol,
)
from rada_learning.application.learning.services.badge_evaluator_service import (
    BadgeRuleEvaluatorService,
)
from rada_learning.application.learning.services.learner_activity_service import (
    LearnerActivityService,
)
from rada_learning.application.learning.services.xp_ledger_service import XPLedgerService
from rada_learning.application.learning.use_cases.dtos import (
    AnswerRecorded,
    AttemptStarted,
    AttemptView,
    QuizSubmission,
)
from rada_learning.domain.common.exceptions import EntityNotFoundError
from rada_learning.domain.common.value_objects import (
    LearnerId,
    QuestionId,
    QuizAttemptId,
    QuizId,
)
from rada_learning.domain.learning.entities.quiz import Quiz
from rada_learning.domain.learning.entities.quiz_attempt import QuizAttempt
from rada_learning.domain.learning.entities.xp_transaction import XPSource
from rada_learning.domain.learning.exceptions import AttemptLockedError

logger = structlog.get_logger(__name__)


@dataclass
class _AnswerOutcome:
    recorded: AnswerRecorded | None = None
    expired_submission: QuizSubmission | None = None


class QuizAttemptUseCase:
    """
    Starts, answers and scores quiz attempts.

    Deadlines are checked lazily: the first write after the deadline locks
    and scores the attempt, commits that, and then rejects the write.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        quiz_repository: QuizRepositoryProtocol,
        quiz_attempt_repository: QuizAttemptRepositoryProtocol,
        xp_ledger_service: XPLedgerService,
        learner_activity_service: LearnerActivityService,
        badge_evaluator_service: BadgeRuleEvaluatorService,
        clock: Clock,
    ) -> None:
        self.uow = uow
        self.quiz_repository = quiz_repository
        self.quiz_attempt_repository = quiz_attempt_repository
        self.xp_ledger_service = xp_ledger_service
        self.learner_activity_service = learner_activity_service
        self.badge_evaluator_service = badge_evaluator_service
        self.clock = clock

    def start_attempt(self, learner_id: int, quiz_id: int) -> AttemptStarted:
        """
        Open a new attempt with deadline = now + time limit.

        Raises:
            EntityNotFoundError: If the quiz does not exist
        """
        learner = LearnerId(learner_id)
        return self.uow.run(
            lambda: self._start_attempt(learner, QuizId(quiz_id)), learner_id=learner
        )

    def submit_answer(
        self, attempt_id: int, question_id: int, answer_index: int
    ) -> AnswerRecorded:
        """
        Record an answer, replacing any earlier answer to the same question.

        Raises:
            EntityNotFoundError: If the attempt does not exist
            AttemptLockedError: If the attempt is locked or its deadline passed.
                A passed deadline locks and scores the attempt first.
            ValidationError: If the question or answer index is invalid
        """
        learner_id = self._owner_of(QuizAttemptId(attempt_id))
        outcome = self.uow.run(
            lambda: self._submit_answer(
                QuizAttemptId(attempt_id), QuestionId(question_id), answer_index
            ),
            learner_id=learner_id,
        )
        if outcome.expired_submission is not None:
            raise AttemptLockedError(attempt_id, expired=True)
        assert outcome.recorded is not None
        return outcome.recorded

    def submit_attempt(self, attempt_id: int) -> QuizSubmission:
        """
        Lock and score an attempt.

        Submitting a locked attempt returns the stored result with
        duplicate set, never a new score or reward.

        Raises:
            EntityNotFoundError: If the attempt does not exist
        """
        learner_id = self._owner_of(QuizAttemptId(attempt_id))
        return self.uow.run(
            lambda: self._submit_attempt(QuizAttemptId(attempt_id)),
            learner_id=learner_id,
        )

    def get_attempt(self, attempt_id: int) -> AttemptView:
        """Read an attempt without applying the lazy deadline lock."""
        attempt = self._get_attempt(QuizAttemptId(attempt_id))
        expired = not attempt.locked and attempt.is_expired(self.clock())
        return AttemptView(attempt=attempt, expired=expired)

    def _start_attempt(self, learner_id: LearnerId, quiz_id: QuizId) -> AttemptStarted:
        now = self.clock()
        quiz = self._get_quiz(quiz_id)
        self.learner_activity_service.ensure_learner(learner_id, now)
        attempt = self.quiz_attempt_repository.save(QuizAttempt.start(quiz, learner_id, now))
        logger.info(
            "quiz_attempt_started",
            learner_id=learner_id.value,
            quiz_id=quiz_id.value,
            attempt_id=attempt.id.value,
            deadline=attempt.deadline.isoformat(),
        )
        return AttemptStarted(
            attempt_id=attempt.id.value,
            quiz_id=quiz_id.value,
            started_at=attempt.started_at,
            deadline=attempt.deadline,
        )

    def _submit_answer(
        self, attempt_id: QuizAttemptId, question_id: QuestionId, answer_index: int
    ) -> _AnswerOutcome:
        now = self.clock()
        attempt = self._get_attempt(attempt_id)
        quiz = self._get_quiz(attempt.quiz_id)

        if not attempt.locked and attempt.is_expired(now):
            logger.info(
                "quiz_attempt_deadline_passed",
                attempt_id=attempt_id.value,
                deadline=attempt.deadline.isoformat(),
            )
            return _AnswerOutcome(
                expired_submission=self._finalize(attempt, quiz, now, expired=True)
            )

        attempt.record_answer(quiz, question_id, answer_index, now)
        self.quiz_attempt_repository.save(attempt)
        return _AnswerOutcome(
            recorded=AnswerRecorded(
                attempt_id=attempt_id.value,
                question_id=question_id.value,
                answer_index=answer_index,
            )
        )

    def _submit_attempt(self, attempt_id: QuizAttemptId) -> QuizSubmission:
        now = self.clock()
        attempt = self._get_attempt(attempt_id)
        if attempt.locked:
            return QuizSubmission(result=attempt.result(duplicate=True))
        quiz = self._get_quiz(attempt.quiz_id)
        return self._finalize(attempt, quiz, now, expired=attempt.is_expired(now))

    def _finalize(
        self, attempt: QuizAttempt, quiz: Quiz, now: datetime, *, expired: bool
    ) -> QuizSubmission:
        """Lock, score and reward an unlocked attempt."""
        result = attempt.submit(quiz, now, expired=expired)

        earned = attempt.earned_xp()
        credited = 0
        if earned > 0:
            credited = self.xp_ledger_service.award(
                attempt.learner_id,
                XPSource.QUIZ,
                quiz.id.value,
                earned,
                f"Quiz: {quiz.title} ({result.score_percent}%)",
            ).credited
        attempt.settle_reward(credited)

        self.uow.track(attempt)
        self.quiz_attempt_repository.save(attempt)
        self.learner_activity_service.record_activity(attempt.learner_id, now)
        badges = self.badge_evaluator_service.reevaluate(attempt.learner_id)

        logger.info(
            "quiz_attempt_scored",
            learner_id=attempt.learner_id.value,
            quiz_id=quiz.id.value,
            attempt_id=attempt.id.value,
            score_percent=result.score_percent,
            passed=result.passed,
            xp_awarded=credited,
            expired=expired,
        )
        return QuizSubmission(result=attempt.result(), badges_awarded=badges)

    def _owner_of(self, attempt_id: QuizAttemptId) -> LearnerId:
        """Learner owning the attempt, read without loading the attempt itself."""
        learner_id = self.quiz_attempt_repository.learner_id_of(attempt_id)
        if learner_id is None:
            raise EntityNotFoundError("QuizAttempt", attempt_id.value)
        return learner_id

    def _get_attempt(self, attempt_id: QuizAttemptId) -> QuizAttempt:
        attempt = self.quiz_attempt_repository.find_by_id(attempt_id)
        if attempt is None:
            raise EntityNotFoundError("QuizAttempt", attempt_id.value)
        return attempt

    def _get_quiz(self, quiz_id: QuizId) -> Quiz:
        quiz = self.quiz_repository.find_by_id(quiz_id)
        if quiz is None:
            raise EntityNotFoundError("Quiz", quiz_id.value)
        return quiz
