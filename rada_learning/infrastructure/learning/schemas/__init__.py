"""Learning API schemas."""

from .content_schemas import (
    BadgeDefinitionRequest,
    BadgeResponse,
    BadgeSchema,
    ChallengeCreateRequest,
    ChallengeResponse,
    ChallengeSchema,
    ConditionSchema,
    LessonSchema,
    ModuleCreateRequest,
    ModuleResponse,
    ModuleSchema,
    QuestionSchema,
    QuizCreateRequest,
    QuizResponse,
    QuizSchema,
    RewardTierSchema,
    RewardTiersUpdateRequest,
)
from .event_schemas import (
    AwardedBadge,
    ChallengeCompleteResult,
    ChallengeJoinResult,
    CommunityPostsResult,
    EventResponse,
    LearnerEvent,
    LessonCompletedResult,
    ModuleStartedResult,
    QuizAnswerResult,
    QuizAttemptStartedResult,
    QuizSubmitResult,
)
from .learner_schemas import (
    ActivityResponse,
    BadgeProgressResponse,
    BadgeProgressSchema,
    DailyXPSchema,
    EarnedBadgeSchema,
    LearnerProgressResponse,
    LessonProgressSchema,
    ModuleProgressSchema,
    QuizAttemptResponse,
    XPHistoryResponse,
    XPTransactionSchema,
)

__all__ = [
    "ActivityResponse",
    "AwardedBadge",
    "BadgeDefinitionRequest",
    "BadgeProgressResponse",
    "BadgeProgressSchema",
    "BadgeResponse",
    "BadgeSchema",
    "ChallengeCompleteResult",
    "ChallengeCreateRequest",
    "ChallengeJoinResult",
    "ChallengeResponse",
    "ChallengeSchema",
    "CommunityPostsResult",
    "ConditionSchema",
    "DailyXPSchema",
    "EarnedBadgeSchema",
    "EventResponse",
    "LearnerEvent",
    "LearnerProgressResponse",
    "LessonCompletedResult",
    "LessonProgressSchema",
    "LessonSchema",
    "ModuleCreateRequest",
    "ModuleProgressSchema",
    "ModuleResponse",
    "ModuleSchema",
    "ModuleStartedResult",
    "QuestionSchema",
    "QuizAnswerResult",
    "QuizAttemptResponse",
    "QuizAttemptStartedResult",
    "QuizCreateRequest",
    "QuizResponse",
    "QuizSchema",
    "QuizSubmitResult",
    "RewardTierSchema",
    "RewardTiersUpdateRequest",
    "XPHistoryResponse",
    "XPTransactionSchema",
]
