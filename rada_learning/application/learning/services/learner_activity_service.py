"""Learner record creation and streak tracking."""

from datetime import UTC, datetime

import structlog

from rada_learning.application.learning.protocols.learner_repository import (
    LearnerRepositoryProtocol,
)
from rada_learning.domain.common.value_objects import LearnerId
from rada_learning.domain.learning.entities.learner import Learner

logger = structlog.get_logger(__name__)


class LearnerActivityService:
    """Keeps learner rows and their daily streaks up to date."""

    def __init__(self, learner_repository: LearnerRepositoryProtocol) -> None:
        self.learner_repository = learner_repository

    def ensure_learner(self, learner_id: LearnerId, now: datetime) -> Learner:
        """Return the learner, creating the row on their first event."""
        learner = self.learner_repository.find_by_id(learner_id)
        if learner is not None:
            return learner
        logger.info("learner_created", learner_id=learner_id.value)
        return self.learner_repository.add(Learner.create(learner_id, now))

    def record_activity(self, learner_id: LearnerId, now: datetime) -> Learner:
        """Count learning activity at `now` towards the UTC-day streak."""
        learner = self.ensure_learner(learner_id, now)
        if learner.record_activity(now.astimezone(UTC).date()):
            learner = self.learner_repository.save(learner)
            logger.debug(
                "streak_updated",
                learner_id=learner_id.value,
                current_streak=learner.current_streak,
                longest_streak=learner.longest_streak,
            )
        return learner
