"""Repositories for badge definitions and awards."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from rada_learning.domain.common.value_objects import BadgeId, LearnerId
from rada_learning.domain.learning.entities.badge import Badge, BadgeAward
from rada_learning.infrastructure.learning.mappers.badge_mapper import (
    BadgeAwardMapper,
    BadgeMapper,
)
from rada_learning.models import Badge as BadgeORM
from rada_learning.models import BadgeAward as BadgeAwardORM


class BadgeRepository:
    """Repository for Badge definitions."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = BadgeMapper()

    def find_by_id(self, badge_id: BadgeId) -> Badge | None:
        orm_model = self.db.get(BadgeORM, badge_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_all(self) -> list[Badge]:
        orm_models = self.db.execute(select(BadgeORM).order_by(BadgeORM.id)).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    def save(self, badge: Badge) -> Badge:
        """Save a badge definition (create or update)."""
        if badge.id.is_transient:
            orm_model = self.mapper.to_orm(badge)
            self.db.add(orm_model)
        else:
            orm_model = self.db.get(BadgeORM, badge.id.value)
            if not orm_model:
                raise ValueError(f"Badge with id {badge.id.value} not found")
            self.mapper.to_orm(badge, orm_model)
        self.db.flush()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)


class BadgeAwardRepository:
    """Repository for BadgeAward rows. Awards are never revoked."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = BadgeAwardMapper()

    def find_by_learner(self, learner_id: LearnerId) -> list[BadgeAward]:
        stmt = (
            select(BadgeAwardORM)
            .where(BadgeAwardORM.learner_id == learner_id.value)
            .order_by(BadgeAwardORM.awarded_at, BadgeAwardORM.id)
        )
        orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    def exists(self, learner_id: LearnerId, badge_id: BadgeId) -> bool:
        stmt = select(BadgeAwardORM.id).where(
            BadgeAwardORM.learner_id == learner_id.value,
            BadgeAwardORM.badge_id == badge_id.value,
        )
        return self.db.execute(stmt).first() is not None

    def add(self, award: BadgeAward) -> BadgeAward:
        orm_model = self.mapper.to_orm(award)
        self.db.add(orm_model)
        self.db.flush()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)
