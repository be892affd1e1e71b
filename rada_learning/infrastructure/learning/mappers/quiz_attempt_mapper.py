"""Mapper for QuizAttempt ORM ↔ Domain conversion."""

from rada_learning.domain.common.value_objects import LearnerId, QuizAttemptId, QuizId
from rada_learning.domain.learning.entities.quiz import RewardTierTable
from rada_learning.domain.learning.entities.quiz_attempt import QuizAttempt
from rada_learning.models import QuizAttempt as QuizAttemptORM
from rada_learning.utils import ensure_utc, ensure_utc_optional


class QuizAttemptMapper:
    """Mapper for QuizAttempt ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: QuizAttemptORM) -> QuizAttempt:
        """Convert ORM model to domain entity."""
        return QuizAttempt(
            id=QuizAttemptId(orm_model.id),
            learner_id=LearnerId(orm_model.learner_id),
            quiz_id=QuizId(orm_model.quiz_id),
            started_at=ensure_utc(orm_model.started_at),
            deadline=ensure_utc(orm_model.deadline),
            # JSON object keys come back as strings
            answers={int(key): int(value) for key, value in (orm_model.answers or {}).items()},
            submitted_at=ensure_utc_optional(orm_model.submitted_at),
            score_percent=orm_model.score_percent,
            passed=orm_model.passed,
            xp_awarded=orm_model.xp_awarded,
            locked=orm_model.locked,
            quiz_version=orm_model.quiz_version,
            reward_tiers=RewardTierTable.from_pairs(
                [(tier["min_score"], tier["xp"]) for tier in orm_model.reward_tiers or []]
            ),
        )

    def to_orm(
        self, domain_entity: QuizAttempt, orm_model: QuizAttemptORM | None = None
    ) -> QuizAttemptORM:
        """Convert domain entity to ORM model."""
        answers = {str(key): value for key, value in domain_entity.answers.items()}
        if orm_model:
            # A new dict object so the JSON column is flagged dirty
            orm_model.answers = answers
            orm_model.submitted_at = domain_entity.submitted_at
            orm_model.score_percent = domain_entity.score_percent
            orm_model.passed = domain_entity.passed
            orm_model.xp_awarded = domain_entity.xp_awarded
            orm_model.locked = domain_entity.locked
            return orm_model

        return QuizAttemptORM(
            learner_id=domain_entity.learner_id.value,
            quiz_id=domain_entity.quiz_id.value,
            started_at=domain_entity.started_at,
            deadline=domain_entity.deadline,
            answers=answers,
            submitted_at=domain_entity.submitted_at,
            score_percent=domain_entity.score_percent,
            passed=domain_entity.passed,
            xp_awarded=domain_entity.xp_awarded,
            locked=domain_entity.locked,
            quiz_version=domain_entity.quiz_version,
            reward_tiers=domain_entity.reward_tiers.to_primitive(),
        )
