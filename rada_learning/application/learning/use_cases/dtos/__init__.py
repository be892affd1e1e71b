"""DTOs returned by learning use cases."""

from .challenge_dtos import ChallengeCompletionResult, ChallengeJoinResult
from .learner_dtos import (
    BadgeProgress,
    CommunityPostsResult,
    DailyXP,
    EarnedBadge,
    LearnerProgress,
    LessonView,
    ModuleView,
)
from .progression_dtos import LessonCompletionResult, ModuleStartResult
from .quiz_dtos import AnswerRecorded, AttemptStarted, AttemptView, QuizSubmission

__all__ = [
    "AnswerRecorded",
    "AttemptStarted",
    "AttemptView",
    "BadgeProgress",
    "ChallengeCompletionResult",
    "ChallengeJoinResult",
    "CommunityPostsResult",
    "DailyXP",
    "EarnedBadge",
    "LearnerProgress",
    "LessonCompletionResult",
    "LessonView",
    "ModuleStartResult",
    "ModuleView",
    "QuizSubmission",
]
