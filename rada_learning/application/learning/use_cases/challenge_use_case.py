"""Use case for challenge participation."""

import structlog

from rada_learning.application.common.clock import Clock
from rada_learning.application.common.unit_of_work import UnitOfWork
from rada_learning.application.learning.protocols.badge_repository import BadgeRepositoryProtocol
from rada_learning.application.learning.protocols.challenge_repository import (
    ChallengeRepositoryProtocol,
    ParticipationRepositoryProtocol,
)
from rada_learning.application.learning.services.badge_evaluator_service import (
    BadgeRuleEvaluatorService,
)
from rada_learning.application.learning.services.learner_activity_service import (
    LearnerActivityService,
)
from rada_learning.application.learning.services.xp_ledger_service import XPLedgerService
from rada_learning.application.learning.use_cases.dtos import (
    ChallengeCompletionResult,
    ChallengeJoinResult,
)
from rada_learning.domain.common.exceptions import EntityNotFoundError
from rada_learning.domain.common.value_objects import ChallengeId, LearnerId
from rada_learning.domain.learning.entities.badge import Badge
from rada_learning.domain.learning.entities.challenge import (
    Challenge,
    ChallengeParticipation,
)
from rada_learning.domain.learning.entities.xp_transaction import XPSource
from rada_learning.domain.learning.exceptions import (
    CapacityExceededError,
    InvalidTransitionError,
)

logger = structlog.get_logger(__name__)


class ChallengeUseCase:
    """Joins and completes time-boxed, capacity-bounded challenges."""

    def __init__(
        self,
        uow: UnitOfWork,
        challenge_repository: ChallengeRepositoryProtocol,
        participation_repository: ParticipationRepositoryProtocol,
        badge_repository: BadgeRepositoryProtocol,
        xp_ledger_service: XPLedgerService,
        learner_activity_service: LearnerActivityService,
        badge_evaluator_service: BadgeRuleEvaluatorService,
        clock: Clock,
    ) -> None:
        self.uow = uow
        self.challenge_repository = challenge_repository
        self.participation_repository = participation_repository
        self.badge_repository = badge_repository
        self.xp_ledger_service = xp_ledger_service
        self.learner_activity_service = learner_activity_service
        self.badge_evaluator_service = badge_evaluator_service
        self.clock = clock

    def join(self, learner_id: int, challenge_id: int) -> ChallengeJoinResult:
        """
        Join an active challenge. Joining twice is a no-op.

        Raises:
            EntityNotFoundError: If the challenge does not exist
            ChallengeNotActiveError: Outside [start_at, end_at)
            CapacityExceededError: If every slot is taken
        """
        learner = LearnerId(learner_id)
        return self.uow.run(
            lambda: self._join(learner, ChallengeId(challenge_id)), learner_id=learner
        )

    def complete(self, learner_id: int, challenge_id: int) -> ChallengeCompletionResult:
        """
        Complete a joined challenge and collect its rewards.

        Raises:
            EntityNotFoundError: If the challenge does not exist
            InvalidTransitionError: If the learner never joined
            LateSubmissionError: After end_at
        """
        learner = LearnerId(learner_id)
        return self.uow.run(
            lambda: self._complete(learner, ChallengeId(challenge_id)), learner_id=learner
        )

    def _join(self, learner_id: LearnerId, challenge_id: ChallengeId) -> ChallengeJoinResult:
        now = self.clock()
        challenge = self._get_challenge(challenge_id)
        self.learner_activity_service.ensure_learner(learner_id, now)

        existing = self.participation_repository.find(learner_id, challenge_id)
        if existing is not None:
            return ChallengeJoinResult(
                challenge_id=challenge_id.value, joined_at=existing.joined_at, duplicate=True
            )

        challenge.ensure_joinable(now)
        if not self.challenge_repository.try_reserve_slot(challenge_id):
            logger.info(
                "challenge_full",
                learner_id=learner_id.value,
                challenge_id=challenge_id.value,
                max_participants=challenge.max_participants,
            )
            raise CapacityExceededError(challenge_id.value, challenge.max_participants)

        participation = self.participation_repository.add(
            ChallengeParticipation.create(learner_id, challenge_id, now)
        )
        logger.info(
            "challenge_joined", learner_id=learner_id.value, challenge_id=challenge_id.value
        )
        return ChallengeJoinResult(
            challenge_id=challenge_id.value, joined_at=participation.joined_at, duplicate=False
        )

    def _complete(
        self, learner_id: LearnerId, challenge_id: ChallengeId
    ) -> ChallengeCompletionResult:
        now = self.clock()
        challenge = self._get_challenge(challenge_id)
        self.learner_activity_service.ensure_learner(learner_id, now)

        participation = self.participation_repository.find(learner_id, challenge_id)
        if participation is None:
            raise InvalidTransitionError(
                "challenge", "not joined", "complete", challenge_id=challenge_id.value
            )

        if not participation.complete(challenge, now):
            assert participation.completed_at is not None
            return ChallengeCompletionResult(
                challenge_id=challenge_id.value,
                completed_at=participation.completed_at,
                duplicate=True,
            )
        self.participation_repository.save(participation)

        xp_awarded = 0
        if challenge.xp_reward > 0:
            xp_awarded = self.xp_ledger_service.award(
                learner_id,
                XPSource.CHALLENGE,
                challenge_id.value,
                challenge.xp_reward,
                f"Challenge: {challenge.title}",
            ).credited

        reward_badge = self._grant_reward_badge(learner_id, challenge)
        self.learner_activity_service.record_activity(learner_id, now)
        badges = self.badge_evaluator_service.reevaluate(learner_id)

        logger.info(
            "challenge_completed",
            learner_id=learner_id.value,
            challenge_id=challenge_id.value,
            xp_awarded=xp_awarded,
            reward_badge_id=reward_badge.id.value if reward_badge else None,
        )
        return ChallengeCompletionResult(
            challenge_id=challenge_id.value,
            completed_at=now,
            duplicate=False,
            xp_awarded=xp_awarded,
            reward_badge=reward_badge,
            badges_awarded=badges,
        )

    def _grant_reward_badge(self, learner_id: LearnerId, challenge: Challenge) -> Badge | None:
        if challenge.badge_reward_id is None:
            return None
        badge = self.badge_repository.find_by_id(challenge.badge_reward_id)
        if badge is None:
            logger.warning(
                "challenge_reward_badge_missing",
                challenge_id=challenge.id.value,
                badge_id=challenge.badge_reward_id.value,
            )
            return None
        return badge if self.badge_evaluator_service.grant(learner_id, badge) else None

    def _get_challenge(self, challenge_id: ChallengeId) -> Challenge:
        challenge = self.challenge_repository.find_by_id(challenge_id)
        if challenge is None:
            raise EntityNotFoundError("Challenge", challenge_id.value)
        return challenge
