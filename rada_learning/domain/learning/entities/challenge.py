"""
Challenge entity and learner participation.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from rada_learning.domain.common.entity import Entity
from rada_learning.domain.common.exceptions import ConfigurationError
from rada_learning.domain.common.value_objects import (
    BadgeId,
    ChallengeId,
    LearnerId,
    ParticipationId,
)
from rada_learning.domain.learning.exceptions import (
    ChallengeNotActiveError,
    LateSubmissionError,
)


class ChallengeStatus(StrEnum):
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass
class Challenge(Entity[ChallengeId]):
    """
    A time-boxed, optionally capacity-limited activity.

    Business Rules:
    - start_at < end_at
    - Scheduled before start_at, Active in [start_at, end_at), Closed from end_at
    - max_participants == 0 means unlimited
    - participant_count never exceeds max_participants when it is set
    """

    id: ChallengeId
    title: str
    start_at: datetime
    end_at: datetime
    max_participants: int = 0
    xp_reward: int = 0
    badge_reward_id: BadgeId | None = None
    participant_count: int = 0

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.title or not self.title.strip():
            raise ConfigurationError("Challenge title cannot be empty", field="title")
        if self.end_at <= self.start_at:
            raise ConfigurationError("Challenge must end after it starts", field="end_at")
        if self.max_participants < 0:
            raise ConfigurationError(
                "max_participants cannot be negative", field="max_participants"
            )
        if self.xp_reward < 0:
            raise ConfigurationError("Challenge xp_reward cannot be negative", field="xp_reward")

    @property
    def is_unlimited(self) -> bool:
        return self.max_participants == 0

    def status_at(self, now: datetime) -> ChallengeStatus:
        if now < self.start_at:
            return ChallengeStatus.SCHEDULED
        if now < self.end_at:
            return ChallengeStatus.ACTIVE
        return ChallengeStatus.CLOSED

    def ensure_joinable(self, now: datetime) -> None:
        """
        Raises:
            ChallengeNotActiveError: Outside the active window
        """
        status = self.status_at(now)
        if status is not ChallengeStatus.ACTIVE:
            raise ChallengeNotActiveError(self.id.value, status.value)

    def ensure_accepts_completion(self, now: datetime) -> None:
        """
        Raises:
            LateSubmissionError: After end_at
            ChallengeNotActiveError: Before start_at
        """
        if now > self.end_at:
            raise LateSubmissionError(self.id.value, self.end_at)
        if now < self.start_at:
            raise ChallengeNotActiveError(self.id.value, ChallengeStatus.SCHEDULED.value)

    @classmethod
    def create(
        cls,
        title: str,
        start_at: datetime,
        end_at: datetime,
        max_participants: int = 0,
        xp_reward: int = 0,
        badge_reward_id: BadgeId | None = None,
    ) -> "Challenge":
        """Create a new challenge (ID will be 0 until persisted)."""
        return cls(
            id=ChallengeId.generate(),
            title=title.strip(),
            start_at=start_at,
            end_at=end_at,
            max_participants=max_participants,
            xp_reward=xp_reward,
            badge_reward_id=badge_reward_id,
        )


@dataclass
class ChallengeParticipation(Entity[ParticipationId]):
    """
    A learner's participation in a challenge.

    Business Rules:
    - One participation per (learner, challenge)
    - completed_at, once set, is never after the challenge's end_at
    """

    id: ParticipationId
    learner_id: LearnerId
    challenge_id: ChallengeId
    joined_at: datetime
    completed_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def complete(self, challenge: Challenge, now: datetime) -> bool:
        """
        Mark the participation complete.

        Returns:
            False when it was already completed (duplicate), True otherwise
        """
        if self.is_completed:
            return False
        challenge.ensure_accepts_completion(now)
        self.completed_at = now
        return True

    @classmethod
    def create(
        cls, learner_id: LearnerId, challenge_id: ChallengeId, joined_at: datetime
    ) -> "ChallengeParticipation":
        return cls(
            id=ParticipationId.generate(),
            learner_id=learner_id,
            challenge_id=challenge_id,
            joined_at=joined_at,
        )
