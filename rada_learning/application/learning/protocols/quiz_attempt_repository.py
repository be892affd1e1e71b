"""Protocol for quiz attempt persistence."""

from typing import Protocol

from rada_learning.domain.common.value_objects import LearnerId, QuizAttemptId
from rada_learning.domain.learning.entities.quiz_attempt import QuizAttempt


class QuizAttemptRepositoryProtocol(Protocol):
    """Protocol for QuizAttempt aggregate persistence."""

    def find_by_id(self, attempt_id: QuizAttemptId) -> QuizAttempt | None:
        """Find an attempt by id."""
        ...

    def learner_id_of(self, attempt_id: QuizAttemptId) -> LearnerId | None:
        """Owner of an attempt, or None if it does not exist."""
        ...

    def save(self, attempt: QuizAttempt) -> QuizAttempt:
        """
        Create or update an attempt.

        Returns:
            The attempt with its database id assigned
        """
        ...
