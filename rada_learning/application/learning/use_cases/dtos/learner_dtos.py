"""DTOs for learner activity and progress queries."""

from dataclasses import dataclass, field
from datetime import date, datetime

from rada_learning.domain.learning.entities.badge import Badge


@dataclass
class LessonView:
    lesson_id: int
    title: str
    order_index: int
    status: str
    completed_at: datetime | None = None


@dataclass
class ModuleView:
    module_id: int
    title: str
    status: str
    lessons: list[LessonView] = field(default_factory=list)
    completed_at: datetime | None = None


@dataclass
class EarnedBadge:
    badge_id: int
    name: str
    awarded_at: datetime


@dataclass
class LearnerProgress:
    """Snapshot returned by the learner progress query."""

    learner_id: int
    modules: list[ModuleView]
    total_xp: int
    level: int
    current_streak: int
    longest_streak: int
    badges_earned: list[EarnedBadge]


@dataclass
class DailyXP:
    day: date
    xp: int


@dataclass
class BadgeProgress:
    badge: Badge
    earned: bool
    progress_percent: int
    awarded_at: datetime | None = None


@dataclass
class CommunityPostsResult:
    learner_id: int
    post_count: int
    duplicate: bool
    badges_awarded: list[Badge] = field(default_factory=list)
