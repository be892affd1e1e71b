"""Pydantic schemas for learner progress queries."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class LessonProgressSchema(BaseModel):
    lesson_id: int
    title: str
    order_index: int
    status: str = Field(..., description="locked, unlocked or completed")
    completed_at: datetime | None = None


class ModuleProgressSchema(BaseModel):
    module_id: int
    title: str
    status: str = Field(..., description="not_started, in_progress or completed")
    completed_at: datetime | None = None
    lessons: list[LessonProgressSchema]


class EarnedBadgeSchema(BaseModel):
    badge_id: int
    name: str
    awarded_at: datetime


class LearnerProgressResponse(BaseModel):
    """Schema for a learner's progress snapshot."""

    learner_id: int
    total_xp: int = Field(..., description="Sum of all XP ledger entries")
    level: int = Field(..., description="Level derived from total XP")
    current_streak: int = Field(..., description="Consecutive active days up to the last activity")
    longest_streak: int
    modules: list[ModuleProgressSchema]
    badges_earned: list[EarnedBadgeSchema]


class XPTransactionSchema(BaseModel):
    id: int
    source_type: str
    source_id: int
    amount: int
    description: str
    created_at: datetime


class XPHistoryResponse(BaseModel):
    """Schema for a learner's XP ledger, most recent first."""

    learner_id: int
    total_xp: int
    transactions: list[XPTransactionSchema]


class DailyXPSchema(BaseModel):
    day: date
    xp: int


class ActivityResponse(BaseModel):
    """Schema for XP earned per day over a trailing window."""

    learner_id: int
    days: list[DailyXPSchema]


class BadgeProgressSchema(BaseModel):
    badge_id: int
    name: str
    description: str
    earned: bool
    progress_percent: int = Field(..., ge=0, le=100)
    awarded_at: datetime | None = None


class BadgeProgressResponse(BaseModel):
    """Schema for progress towards every defined badge."""

    learner_id: int
    badges: list[BadgeProgressSchema]


class QuizAttemptResponse(BaseModel):
    """Schema for a read-only view of a quiz attempt."""

    id: int
    learner_id: int
    quiz_id: int
    quiz_version: int = Field(..., description="Quiz version whose reward tiers this attempt uses")
    started_at: datetime
    deadline: datetime
    answers: dict[int, int] = Field(..., description="question_id -> answer_index")
    locked: bool
    expired: bool = Field(..., description="Deadline passed but the attempt is not yet locked")
    submitted_at: datetime | None = None
    score_percent: int | None = None
    passed: bool | None = None
    xp_awarded: int | None = None
