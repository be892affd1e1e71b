"""Pydantic schemas for content authoring endpoints."""

from datetime import datetime

from pydantic import AwareDatetime, BaseModel, Field


class LessonCreate(BaseModel):
    title: str = Field(..., min_length=1, description="Lesson title")
    xp_reward: int = Field(0, description="XP granted on first completion")


class ModuleCreateRequest(BaseModel):
    """Schema for creating a module. Lessons are given in learning order."""

    title: str = Field(..., min_length=1, description="Module title")
    xp_reward: int = Field(0, description="Bonus XP when every lesson is completed")
    lessons: list[LessonCreate] = Field(..., description="Lessons in order")


class LessonSchema(BaseModel):
    id: int
    title: str
    order_index: int
    xp_reward: int


class ModuleSchema(BaseModel):
    id: int
    title: str
    xp_reward: int
    lessons: list[LessonSchema]


class ModuleResponse(BaseModel):
    success: bool = Field(..., description="Whether the operation was successful")
    message: str = Field(..., description="Response message")
    module: ModuleSchema


class RewardTierSchema(BaseModel):
    min_score: int = Field(..., description="Minimum score percent for this tier")
    xp: int = Field(..., description="XP granted at or above min_score")


class QuestionCreate(BaseModel):
    prompt: str = Field(..., min_length=1)
    option_count: int = Field(..., description="Number of answer options")
    correct_index: int = Field(..., description="Zero-based index of the correct option")


class QuizCreateRequest(BaseModel):
    """Schema for creating a quiz."""

    title: str = Field(..., min_length=1)
    time_limit_seconds: int = Field(..., description="Attempt duration")
    passing_score_percent: int = Field(..., description="Minimum score to pass")
    questions: list[QuestionCreate]
    reward_tiers: list[RewardTierSchema] = Field(default_factory=list)


class RewardTiersUpdateRequest(BaseModel):
    reward_tiers: list[RewardTierSchema]


class QuestionSchema(BaseModel):
    """A question as shown to learners; the correct index is not exposed."""

    id: int
    prompt: str
    option_count: int
    position: int


class QuizSchema(BaseModel):
    id: int
    title: str
    time_limit_seconds: int
    passing_score_percent: int
    version: int
    questions: list[QuestionSchema]
    reward_tiers: list[RewardTierSchema]


class QuizResponse(BaseModel):
    success: bool = Field(..., description="Whether the operation was successful")
    message: str = Field(..., description="Response message")
    quiz: QuizSchema


class ConditionSchema(BaseModel):
    stat_type: str = Field(..., description="Stat the condition reads, e.g. lessons_completed")
    operator: str = Field(..., description="One of >=, >, =, <, <=")
    threshold: int


class BadgeDefinitionRequest(BaseModel):
    """Schema for creating or redefining a badge. All conditions must hold."""

    name: str = Field(..., min_length=1)
    description: str = ""
    xp_reward: int = Field(0, description="Bonus XP granted with the badge")
    conditions: list[ConditionSchema]


class BadgeSchema(BaseModel):
    id: int
    name: str
    description: str
    xp_reward: int
    version: int
    conditions: list[ConditionSchema]


class BadgeResponse(BaseModel):
    success: bool = Field(..., description="Whether the operation was successful")
    message: str = Field(..., description="Response message")
    badge: BadgeSchema


class ChallengeCreateRequest(BaseModel):
    """Schema for creating a challenge. max_participants 0 means unlimited."""

    title: str = Field(..., min_length=1)
    # Times must carry an offset; naive values are rejected
    start_at: AwareDatetime
    end_at: AwareDatetime
    max_participants: int = 0
    xp_reward: int = 0
    badge_reward_id: int | None = None


class ChallengeSchema(BaseModel):
    id: int
    title: str
    start_at: datetime
    end_at: datetime
    max_participants: int
    participant_count: int
    xp_reward: int
    badge_reward_id: int | None = None


class ChallengeResponse(BaseModel):
    success: bool = Field(..., description="Whether the operation was successful")
    message: str = Field(..., description="Response message")
    challenge: ChallengeSchema
