"""Mappers for Challenge and ChallengeParticipation ORM ↔ Domain conversion."""

from rada_learning.domain.common.value_objects import (
    BadgeId,
    ChallengeId,
    LearnerId,
    ParticipationId,
)
from rada_learning.domain.learning.entities.challenge import (
    Challenge,
    ChallengeParticipation,
)
from rada_learning.models import Challenge as ChallengeORM
from rada_learning.models import ChallengeParticipation as ChallengeParticipationORM
from rada_learning.utils import ensure_utc, ensure_utc_optional


class ChallengeMapper:
    """Mapper for Challenge ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: ChallengeORM) -> Challenge:
        """Convert ORM model to domain entity."""
        return Challenge(
            id=ChallengeId(orm_model.id),
            title=orm_model.title,
            start_at=ensure_utc(orm_model.start_at),
            end_at=ensure_utc(orm_model.end_at),
            max_participants=orm_model.max_participants,
            xp_reward=orm_model.xp_reward,
            badge_reward_id=(
                BadgeId(orm_model.badge_reward_id) if orm_model.badge_reward_id else None
            ),
            participant_count=orm_model.participant_count,
        )

    def to_orm(self, domain_entity: Challenge) -> ChallengeORM:
        """
        Convert a new domain entity to ORM model.

        participant_count is only ever changed by the conditional UPDATE in
        the repository, so it is not mapped back.
        """
        return ChallengeORM(
            title=domain_entity.title,
            start_at=domain_entity.start_at,
            end_at=domain_entity.end_at,
            max_participants=domain_entity.max_participants,
            participant_count=0,
            xp_reward=domain_entity.xp_reward,
            badge_reward_id=(
                domain_entity.badge_reward_id.value if domain_entity.badge_reward_id else None
            ),
        )


class ParticipationMapper:
    """Mapper for ChallengeParticipation ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: ChallengeParticipationORM) -> ChallengeParticipation:
        return ChallengeParticipation(
            id=ParticipationId(orm_model.id),
            learner_id=LearnerId(orm_model.learner_id),
            challenge_id=ChallengeId(orm_model.challenge_id),
            joined_at=ensure_utc(orm_model.joined_at),
            completed_at=ensure_utc_optional(orm_model.completed_at),
        )

    def to_orm(
        self,
        domain_entity: ChallengeParticipation,
        orm_model: ChallengeParticipationORM | None = None,
    ) -> ChallengeParticipationORM:
        if orm_model:
            orm_model.completed_at = domain_entity.completed_at
            return orm_model

        return ChallengeParticipationORM(
            learner_id=domain_entity.learner_id.value,
            challenge_id=domain_entity.challenge_id.value,
            joined_at=domain_entity.joined_at,
            completed_at=domain_entity.completed_at,
        )
