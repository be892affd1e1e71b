"""Common value objects shared across all domain modules."""

from .ids import (
    BadgeAwardId,
    BadgeId,
    ChallengeId,
    LearnerId,
    LessonId,
    ModuleId,
    ParticipationId,
    QuestionId,
    QuizAttemptId,
    QuizId,
    XPTransactionId,
)

__all__ = [
    "BadgeAwardId",
    "BadgeId",
    "ChallengeId",
    "LearnerId",
    "LessonId",
    "ModuleId",
    "ParticipationId",
    "QuestionId",
    "QuizAttemptId",
    "QuizId",
    "XPTransactionId",
]
