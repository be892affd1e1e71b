"""
Learner entity and the statistics snapshot badge rules are evaluated against.
"""

from dataclasses import dataclass
from datetime import date, datetime

from rada_learning.domain.common.entity import Entity
from rada_learning.domain.common.exceptions import ValidationError
from rada_learning.domain.common.value_objects import LearnerId


@dataclass
class Learner(Entity[LearnerId]):
    """
    A person progressing through learning content.

    Business Rules:
    - Created on the learner's first event, never deleted
    - The streak counts consecutive UTC days with learning activity
    - community_posts is reported by the community service, never derived here
    """

    id: LearnerId
    current_streak: int = 0
    longest_streak: int = 0
    last_activity_date: date | None = None
    community_posts: int = 0
    created_at: datetime | None = None

    def record_activity(self, on: date) -> bool:
        """
        Update the streak for learning activity on the given day.

        Returns:
            True when the streak changed
        """
        if self.last_activity_date == on:
            return False
        if self.last_activity_date is not None and on < self.last_activity_date:
            # Late-arriving activity never rewinds the streak
            return False

        if self.last_activity_date is not None and (on - self.last_activity_date).days == 1:
            self.current_streak += 1
        else:
            self.current_streak = 1
        self.longest_streak = max(self.longest_streak, self.current_streak)
        self.last_activity_date = on
        return True

    def report_community_posts(self, post_count: int) -> None:
        if post_count < 0:
            raise ValidationError(
                "post_count cannot be negative", field="post_count", value=post_count
            )
        self.community_posts = post_count

    @classmethod
    def create(cls, learner_id: LearnerId, created_at: datetime) -> "Learner":
        return cls(id=learner_id, created_at=created_at)


@dataclass(frozen=True)
class LearnerStats:
    """Point-in-time aggregate stats for one learner."""

    total_xp: int = 0
    lessons_completed: int = 0
    modules_completed: int = 0
    quizzes_passed: int = 0
    challenges_completed: int = 0
    community_posts: int = 0
    current_streak: int = 0

    def value_of(self, stat_type: str) -> int:
        return int(getattr(self, stat_type))


def level_for(total_xp: int, xp_per_level: int = 100) -> int:
    """Level bracket: every xp_per_level points is one level, starting at 1."""
    if xp_per_level <= 0:
        raise ValidationError("xp_per_level must be positive", field="xp_per_level")
    return max(total_xp, 0) // xp_per_level + 1
