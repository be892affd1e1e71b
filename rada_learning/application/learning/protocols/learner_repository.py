"""Protocols for learner records and their statistics."""

from typing import Protocol

from rada_learning.domain.common.value_objects import LearnerId
from rada_learning.domain.learning.entities.learner import Learner, LearnerStats


class LearnerRepositoryProtocol(Protocol):
    """Protocol for Learner repository operations."""

    def find_by_id(self, learner_id: LearnerId) -> Learner | None:
        """Find a learner by its external id."""
        ...

    def add(self, learner: Learner) -> Learner:
        """Insert a new learner row."""
        ...

    def save(self, learner: Learner) -> Learner:
        """Persist streak and community counters of an existing learner."""
        ...


class LearnerStatsRepositoryProtocol(Protocol):
    """Read model of the statistics badge conditions are evaluated against."""

    def snapshot(self, learner_id: LearnerId) -> LearnerStats:
        """
        Compute the learner's current stats.

        Reads through the caller's session so uncommitted writes of the
        current event are included.
        """
        ...
