"""Protocols for challenges and participations."""

from typing import Protocol

from rada_learning.domain.common.value_objects import ChallengeId, LearnerId
from rada_learning.domain.learning.entities.challenge import (
    Challenge,
    ChallengeParticipation,
)


class ChallengeRepositoryProtocol(Protocol):
    """Protocol for Challenge repository operations."""

    def find_by_id(self, challenge_id: ChallengeId) -> Challenge | None:
        """Find a challenge."""
        ...

    def save(self, challenge: Challenge) -> Challenge:
        """Create a challenge."""
        ...

    def try_reserve_slot(self, challenge_id: ChallengeId) -> bool:
        """
        Atomically increment participant_count if a slot is free.

        Check and increment happen in one conditional UPDATE, so concurrent
        joiners can never push the count past max_participants.

        Returns:
            False when the challenge is full
        """
        ...


class ParticipationRepositoryProtocol(Protocol):
    """Protocol for ChallengeParticipation repository operations."""

    def find(
        self, learner_id: LearnerId, challenge_id: ChallengeId
    ) -> ChallengeParticipation | None:
        """Find a learner's participation in a challenge."""
        ...

    def add(self, participation: ChallengeParticipation) -> ChallengeParticipation:
        """Insert a participation."""
        ...

    def save(self, participation: ChallengeParticipation) -> ChallengeParticipation:
        """Persist completed_at of an existing participation."""
        ...
