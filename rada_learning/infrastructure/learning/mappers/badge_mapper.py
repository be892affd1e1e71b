"""Mappers for Badge and BadgeAward ORM ↔ Domain conversion."""

from rada_learning.domain.common.value_objects import BadgeAwardId, BadgeId, LearnerId
from rada_learning.domain.learning.entities.badge import Badge, BadgeAward, UnlockCondition
from rada_learning.models import Badge as BadgeORM
from rada_learning.models import BadgeAward as BadgeAwardORM
from rada_learning.utils import ensure_utc


class BadgeMapper:
    """Mapper for Badge ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: BadgeORM) -> Badge:
        """Convert ORM model to domain entity."""
        return Badge(
            id=BadgeId(orm_model.id),
            name=orm_model.name,
            conditions=[
                UnlockCondition.parse(
                    condition["stat_type"], condition["operator"], int(condition["threshold"])
                )
                for condition in orm_model.conditions
            ],
            description=orm_model.description,
            xp_reward=orm_model.xp_reward,
            version=orm_model.version,
        )

    def to_orm(self, domain_entity: Badge, orm_model: BadgeORM | None = None) -> BadgeORM:
        """Convert domain entity to ORM model."""
        conditions = [condition.to_primitive() for condition in domain_entity.conditions]
        if orm_model:
            orm_model.name = domain_entity.name
            orm_model.description = domain_entity.description
            orm_model.conditions = conditions
            orm_model.xp_reward = domain_entity.xp_reward
            orm_model.version = domain_entity.version
            return orm_model

        return BadgeORM(
            name=domain_entity.name,
            description=domain_entity.description,
            conditions=conditions,
            xp_reward=domain_entity.xp_reward,
            version=domain_entity.version,
        )


class BadgeAwardMapper:
    """Mapper for BadgeAward ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: BadgeAwardORM) -> BadgeAward:
        return BadgeAward(
            id=BadgeAwardId(orm_model.id),
            learner_id=LearnerId(orm_model.learner_id),
            badge_id=BadgeId(orm_model.badge_id),
            awarded_at=ensure_utc(orm_model.awarded_at),
        )

    def to_orm(self, domain_entity: BadgeAward) -> BadgeAwardORM:
        return BadgeAwardORM(
            learner_id=domain_entity.learner_id.value,
            badge_id=domain_entity.badge_id.value,
            awarded_at=domain_entity.awarded_at,
        )
