"""DTOs for challenge use cases."""

from dataclasses import dataclass, field
from datetime import datetime

from rada_learning.domain.learning.entities.badge import Badge


@dataclass
class ChallengeJoinResult:
    challenge_id: int
    joined_at: datetime
    duplicate: bool


@dataclass
class ChallengeCompletionResult:
    challenge_id: int
    completed_at: datetime
    duplicate: bool
    xp_awarded: int = 0
    reward_badge: Badge | None = None
    badges_awarded: list[Badge] = field(default_factory=list)
