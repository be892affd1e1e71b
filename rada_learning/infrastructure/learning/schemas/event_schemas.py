"""Pydantic schemas for the learner event endpoint."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class LessonCompletedEvent(BaseModel):
    """A learner finished a lesson."""

    type: Literal["LessonCompleted"]
    learner_id: int = Field(..., gt=0, description="Learner ID")
    lesson_id: int = Field(..., gt=0, description="Lesson ID")


class ModuleStartedEvent(BaseModel):
    """A learner opened a module for the first time."""

    type: Literal["ModuleStarted"]
    learner_id: int = Field(..., gt=0, description="Learner ID")
    module_id: int = Field(..., gt=0, description="Module ID")


class QuizAttemptStartEvent(BaseModel):
    """A learner started a timed quiz attempt."""

    type: Literal["QuizAttemptStart"]
    learner_id: int = Field(..., gt=0, description="Learner ID")
    quiz_id: int = Field(..., gt=0, description="Quiz ID")


class QuizAnswerSubmitEvent(BaseModel):
    """An answer to one question of an open attempt."""

    type: Literal["QuizAnswerSubmit"]
    attempt_id: int = Field(..., gt=0, description="Quiz attempt ID")
    question_id: int = Field(..., gt=0, description="Question ID")
    answer_index: int = Field(..., ge=0, description="Zero-based index of the chosen option")


class QuizSubmitEvent(BaseModel):
    """The learner handed in an attempt."""

    type: Literal["QuizSubmit"]
    attempt_id: int = Field(..., gt=0, description="Quiz attempt ID")


class ChallengeJoinEvent(BaseModel):
    """A learner asked to join a challenge."""

    type: Literal["ChallengeJoin"]
    learner_id: int = Field(..., gt=0, description="Learner ID")
    challenge_id: int = Field(..., gt=0, description="Challenge ID")


class ChallengeCompleteEvent(BaseModel):
    """A learner completed a challenge they joined."""

    type: Literal["ChallengeComplete"]
    learner_id: int = Field(..., gt=0, description="Learner ID")
    challenge_id: int = Field(..., gt=0, description="Challenge ID")


class CommunityPostsUpdatedEvent(BaseModel):
    """The community service reports a learner's current post count."""

    type: Literal["CommunityPostsUpdated"]
    learner_id: int = Field(..., gt=0, description="Learner ID")
    post_count: int = Field(..., ge=0, description="Total posts authored by the learner")


LearnerEvent = Annotated[
    LessonCompletedEvent
    | ModuleStartedEvent
    | QuizAttemptStartEvent
    | QuizAnswerSubmitEvent
    | QuizSubmitEvent
    | ChallengeJoinEvent
    | ChallengeCompleteEvent
    | CommunityPostsUpdatedEvent,
    Field(discriminator="type"),
]


class AwardedBadge(BaseModel):
    """Badge granted as a side effect of an event."""

    id: int
    name: str
    xp_reward: int


class LessonCompletedResult(BaseModel):
    lesson_id: int
    module_id: int
    completed_at: datetime
    xp_awarded: int = Field(..., description="XP credited by this event (0 on duplicates)")
    unlocked_lesson_id: int | None = Field(None, description="Lesson unlocked by this completion")
    module_completed: bool = Field(..., description="Whether this completion finished the module")
    module_xp_awarded: int = Field(0, description="Module completion bonus credited")
    badges_awarded: list[AwardedBadge] = Field(default_factory=list)


class ModuleStartedResult(BaseModel):
    module_id: int
    status: str
    unlocked_lesson_ids: list[int] = Field(default_factory=list)


class QuizAttemptStartedResult(BaseModel):
    attempt_id: int
    quiz_id: int
    started_at: datetime
    deadline: datetime


class QuizAnswerResult(BaseModel):
    attempt_id: int
    question_id: int
    answer_index: int


class QuizSubmitResult(BaseModel):
    attempt_id: int
    score_percent: int
    passed: bool
    xp_awarded: int
    submitted_at: datetime
    badges_awarded: list[AwardedBadge] = Field(default_factory=list)


class ChallengeJoinResult(BaseModel):
    challenge_id: int
    joined_at: datetime


class ChallengeCompleteResult(BaseModel):
    challenge_id: int
    completed_at: datetime
    xp_awarded: int
    reward_badge: AwardedBadge | None = None
    badges_awarded: list[AwardedBadge] = Field(default_factory=list)


class CommunityPostsResult(BaseModel):
    learner_id: int
    post_count: int
    badges_awarded: list[AwardedBadge] = Field(default_factory=list)


EventResult = (
    LessonCompletedResult
    | ModuleStartedResult
    | QuizAttemptStartedResult
    | QuizAnswerResult
    | QuizSubmitResult
    | ChallengeJoinResult
    | ChallengeCompleteResult
    | CommunityPostsResult
)


class EventResponse(BaseModel):
    """Schema for an accepted event."""

    success: bool = Field(..., description="Whether the event was processed")
    message: str = Field(..., description="Response message")
    type: str = Field(..., description="Event type that was processed")
    duplicate: bool = Field(
        ..., description="True when the event had already been applied and nothing changed"
    )
    result: EventResult = Field(..., description="Outcome of the event")
