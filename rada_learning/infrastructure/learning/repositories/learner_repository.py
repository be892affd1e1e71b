"""Repositories for learners and their aggregate statistics."""

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from rada_learning.domain.common.value_objects import LearnerId
from rada_learning.domain.learning.entities.learner import Learner, LearnerStats
from rada_learning.infrastructure.learning.mappers.learner_mapper import LearnerMapper
from rada_learning.models import ChallengeParticipation as ChallengeParticipationORM
from rada_learning.models import Learner as LearnerORM
from rada_learning.models import LessonProgress as LessonProgressORM
from rada_learning.models import ModuleCompletion as ModuleCompletionORM
from rada_learning.models import QuizAttempt as QuizAttemptORM
from rada_learning.models import XPTransaction as XPTransactionORM


class LearnerRepository:
    """Repository for Learner domain entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = LearnerMapper()

    def find_by_id(self, learner_id: LearnerId) -> Learner | None:
        orm_model = self.db.get(LearnerORM, learner_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def add(self, learner: Learner) -> Learner:
        """
        Insert a new learner row.

        Learner ids are issued upstream, so this is an insert with an
        explicit primary key rather than the id == 0 convention.
        """
        orm_model = self.mapper.to_orm(learner)
        self.db.add(orm_model)
        self.db.flush()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def save(self, learner: Learner) -> Learner:
        orm_model = self.db.get(LearnerORM, learner.id.value)
        if not orm_model:
            return self.add(learner)
        self.mapper.to_orm(learner, orm_model)
        self.db.flush()
        return self.mapper.to_domain(orm_model)


class LearnerStatsRepository:
    """Computes the stats snapshot badge conditions are evaluated against."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def snapshot(self, learner_id: LearnerId) -> LearnerStats:
        """
        Aggregate the learner's stats from the ledger and progress tables.

        Reads go through the current session, so rows flushed earlier in the
        same unit of work are counted.
        """
        learner = self.db.get(LearnerORM, learner_id.value)

        total_xp = self.db.execute(
            select(func.coalesce(func.sum(XPTransactionORM.amount), 0)).where(
                XPTransactionORM.learner_id == learner_id.value
            )
        ).scalar_one()
        lessons_completed = self.db.execute(
            select(func.count(LessonProgressORM.id)).where(
                LessonProgressORM.learner_id == learner_id.value,
                LessonProgressORM.status == "completed",
            )
        ).scalar_one()
        modules_completed = self.db.execute(
            select(func.count(ModuleCompletionORM.id)).where(
                ModuleCompletionORM.learner_id == learner_id.value
            )
        ).scalar_one()
        quizzes_passed = self.db.execute(
            select(func.count(distinct(QuizAttemptORM.quiz_id))).where(
                QuizAttemptORM.learner_id == learner_id.value,
                QuizAttemptORM.locked.is_(True),
                QuizAttemptORM.passed.is_(True),
            )
        ).scalar_one()
        challenges_completed = self.db.execute(
            select(func.count(ChallengeParticipationORM.id)).where(
                ChallengeParticipationORM.learner_id == learner_id.value,
                ChallengeParticipationORM.completed_at.is_not(None),
            )
        ).scalar_one()

        return LearnerStats(
            total_xp=int(total_xp),
            lessons_completed=lessons_completed,
            modules_completed=modules_completed,
            quizzes_passed=quizzes_passed,
            challenges_completed=challenges_completed,
            community_posts=learner.community_posts if learner else 0,
            current_streak=learner.current_streak if learner else 0,
        )
