"""Repositories for challenges and learner participation."""

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from rada_learning.domain.common.value_objects import ChallengeId, LearnerId
from rada_learning.domain.learning.entities.challenge import (
    Challenge,
    ChallengeParticipation,
)
from rada_learning.infrastructure.learning.mappers.challenge_mapper import (
    ChallengeMapper,
    ParticipationMapper,
)
from rada_learning.models import Challenge as ChallengeORM
from rada_learning.models import ChallengeParticipation as ChallengeParticipationORM


class ChallengeRepository:
    """Repository for Challenge entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = ChallengeMapper()

    def find_by_id(self, challenge_id: ChallengeId) -> Challenge | None:
        orm_model = self.db.get(ChallengeORM, challenge_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def save(self, challenge: Challenge) -> Challenge:
        """Persist a new challenge. Definitions are not edited after creation."""
        if not challenge.id.is_transient:
            raise ValueError(f"Challenge {challenge.id.value} is already persisted")
        orm_model = self.mapper.to_orm(challenge)
        self.db.add(orm_model)
        self.db.flush()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def try_reserve_slot(self, challenge_id: ChallengeId) -> bool:
        """
        Atomically take one participant slot.

        A single conditional UPDATE is the check and the increment, so two
        sessions can never both take the last slot.

        Returns:
            True when a slot was taken, False when the challenge is full
        """
        stmt = (
            update(ChallengeORM)
            .where(
                ChallengeORM.id == challenge_id.value,
                (ChallengeORM.max_participants == 0)
                | (ChallengeORM.participant_count < ChallengeORM.max_participants),
            )
            .values(participant_count=ChallengeORM.participant_count + 1)
            .execution_options(synchronize_session="fetch")
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1


class ParticipationRepository:
    """Repository for ChallengeParticipation entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = ParticipationMapper()

    def find(
        self, learner_id: LearnerId, challenge_id: ChallengeId
    ) -> ChallengeParticipation | None:
        stmt = select(ChallengeParticipationORM).where(
            ChallengeParticipationORM.learner_id == learner_id.value,
            ChallengeParticipationORM.challenge_id == challenge_id.value,
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def add(self, participation: ChallengeParticipation) -> ChallengeParticipation:
        orm_model = self.mapper.to_orm(participation)
        self.db.add(orm_model)
        self.db.flush()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def save(self, participation: ChallengeParticipation) -> ChallengeParticipation:
        orm_model = self.db.get(ChallengeParticipationORM, participation.id.value)
        if not orm_model:
            raise ValueError(f"Participation with id {participation.id.value} not found")
        self.mapper.to_orm(participation, orm_model)
        self.db.flush()
        return self.mapper.to_domain(orm_model)
