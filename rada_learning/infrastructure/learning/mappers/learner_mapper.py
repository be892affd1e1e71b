"""Mapper for Learner ORM ↔ Domain conversion."""

from rada_learning.domain.common.value_objects import LearnerId
from rada_learning.domain.learning.entities.learner import Learner
from rada_learning.models import Learner as LearnerORM
from rada_learning.utils import ensure_utc_optional


class LearnerMapper:
    """Mapper for Learner ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: LearnerORM) -> Learner:
        """Convert ORM model to domain entity."""
        return Learner(
            id=LearnerId(orm_model.id),
            current_streak=orm_model.current_streak,
            longest_streak=orm_model.longest_streak,
            last_activity_date=orm_model.last_activity_date,
            community_posts=orm_model.community_posts,
            created_at=ensure_utc_optional(orm_model.created_at),
        )

    def to_orm(self, domain_entity: Learner, orm_model: LearnerORM | None = None) -> LearnerORM:
        """Convert domain entity to ORM model."""
        if orm_model:
            orm_model.current_streak = domain_entity.current_streak
            orm_model.longest_streak = domain_entity.longest_streak
            orm_model.last_activity_date = domain_entity.last_activity_date
            orm_model.community_posts = domain_entity.community_posts
            return orm_model

        orm_model = LearnerORM(
            id=domain_entity.id.value,
            current_streak=domain_entity.current_streak,
            longest_streak=domain_entity.longest_streak,
            last_activity_date=domain_entity.last_activity_date,
            community_posts=domain_entity.community_posts,
        )
        if domain_entity.created_at is not None:
            orm_model.created_at = domain_entity.created_at
        return orm_model
