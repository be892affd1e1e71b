"""Protocols for badge definitions and awards."""

from typing import Protocol

from rada_learning.domain.common.value_objects import BadgeId, LearnerId
from rada_learning.domain.learning.entities.badge import Badge, BadgeAward


class BadgeRepositoryProtocol(Protocol):
    """Protocol for Badge repository operations."""

    def find_by_id(self, badge_id: BadgeId) -> Badge | None:
        """Find a badge definition."""
        ...

    def find_all(self) -> list[Badge]:
        """All badge definitions ordered by id."""
        ...

    def save(self, badge: Badge) -> Badge:
        """Create or update a badge definition."""
        ...


class BadgeAwardRepositoryProtocol(Protocol):
    """Protocol for BadgeAward repository operations."""

    def find_by_learner(self, learner_id: LearnerId) -> list[BadgeAward]:
        """Awards of a learner ordered by award time."""
        ...

    def exists(self, learner_id: LearnerId, badge_id: BadgeId) -> bool:
        """Whether the learner already holds the badge."""
        ...

    def add(self, award: BadgeAward) -> BadgeAward:
        """
        Insert an award.

        Raises:
            sqlalchemy.exc.IntegrityError: When the pair already exists
        """
        ...
