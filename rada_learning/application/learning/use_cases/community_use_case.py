"""Use case for community activity reported by the community service."""

import structlog

from rada_learning.application.common.clock import Clock
from rada_learning.application.common.unit_of_work import UnitOfWork
from rada_learning.application.learning.protocols.learner_repository import (
    LearnerRepositoryProtocol,
)
from rada_learning.application.learning.services.badge_evaluator_service import (
    BadgeRuleEvaluatorService,
)
from rada_learning.application.learning.services.learner_activity_service import (
    LearnerActivityService,
)
from rada_learning.application.learning.use_cases.dtos import CommunityPostsResult
from rada_learning.domain.common.value_objects import LearnerId

logger = structlog.get_logger(__name__)


class CommunityActivityUseCase:
    """Stores the externally supplied post count and re-checks badges."""

    def __init__(
        self,
        uow: UnitOfWork,
        learner_repository: LearnerRepositoryProtocol,
        learner_activity_service: LearnerActivityService,
        badge_evaluator_service: BadgeRuleEvaluatorService,
        clock: Clock,
    ) -> None:
        self.uow = uow
        self.learner_repository = learner_repository
        self.learner_activity_service = learner_activity_service
        self.badge_evaluator_service = badge_evaluator_service
        self.clock = clock

    def record_community_posts(self, learner_id: int, post_count: int) -> CommunityPostsResult:
        """
        Replace the learner's community post count.

        Raises:
            ValidationError: If post_count is negative
        """
        learner = LearnerId(learner_id)
        return self.uow.run(lambda: self._record(learner, post_count), learner_id=learner)

    def _record(self, learner_id: LearnerId, post_count: int) -> CommunityPostsResult:
        learner = self.learner_activity_service.ensure_learner(learner_id, self.clock())
        duplicate = learner.community_posts == post_count
        learner.report_community_posts(post_count)
        if not duplicate:
            self.learner_repository.save(learner)
        badges = self.badge_evaluator_service.reevaluate(learner_id)
        logger.info(
            "community_posts_recorded",
            learner_id=learner_id.value,
            post_count=post_count,
            duplicate=duplicate,
        )
        return CommunityPostsResult(
            learner_id=learner_id.value,
            post_count=post_count,
            duplicate=duplicate,
            badges_awarded=badges,
        )
