"""Repository for QuizAttempt aggregates."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from rada_learning.domain.common.value_objects import LearnerId, QuizAttemptId
from rada_learning.domain.learning.entities.quiz_attempt import QuizAttempt
from rada_learning.infrastructure.learning.mappers.quiz_attempt_mapper import QuizAttemptMapper
from rada_learning.models import QuizAttempt as QuizAttemptORM


class QuizAttemptRepository:
    """Repository for QuizAttempt aggregates."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = QuizAttemptMapper()

    def find_by_id(self, attempt_id: QuizAttemptId) -> QuizAttempt | None:
        orm_model = self.db.get(QuizAttemptORM, attempt_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def learner_id_of(self, attempt_id: QuizAttemptId) -> LearnerId | None:
        # Column-only query, so no attempt enters the identity map before the learner lock
        stmt = select(QuizAttemptORM.learner_id).where(QuizAttemptORM.id == attempt_id.value)
        learner_id = self.db.execute(stmt).scalar_one_or_none()
        return LearnerId(learner_id) if learner_id is not None else None

    def save(self, attempt: QuizAttempt) -> QuizAttempt:
        """
        Save an attempt (create or update).

        A new attempt gets its database id assigned in place so that events
        already recorded on the instance keep pointing at it.
        """
        if attempt.id.is_transient:
            orm_model = self.mapper.to_orm(attempt)
            self.db.add(orm_model)
            self.db.flush()
            attempt.id = QuizAttemptId(orm_model.id)
            return attempt

        orm_model = self.db.get(QuizAttemptORM, attempt.id.value)
        if not orm_model:
            raise ValueError(f"Quiz attempt with id {attempt.id.value} not found")
        self.mapper.to_orm(attempt, orm_model)
        self.db.flush()
        return attempt
