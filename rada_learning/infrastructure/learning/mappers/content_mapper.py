"""Mappers for module and quiz content ORM ↔ Domain conversion."""

from rada_learning.domain.common.value_objects import LessonId, ModuleId, QuestionId, QuizId
from rada_learning.domain.learning.entities.module import LearningModule, Lesson
from rada_learning.domain.learning.entities.quiz import (
    Quiz,
    QuizQuestion,
    RewardTierTable,
)
from rada_learning.models import LearningModule as LearningModuleORM
from rada_learning.models import Lesson as LessonORM
from rada_learning.models import Quiz as QuizORM
from rada_learning.models import QuizQuestion as QuizQuestionORM


class ModuleMapper:
    """Mapper for LearningModule ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: LearningModuleORM) -> LearningModule:
        """Convert ORM model (with lessons loaded) to domain entity."""
        module_id = ModuleId(orm_model.id)
        return LearningModule(
            id=module_id,
            title=orm_model.title,
            xp_reward=orm_model.xp_reward,
            lessons=[
                Lesson(
                    id=LessonId(lesson.id),
                    module_id=module_id,
                    title=lesson.title,
                    order_index=lesson.order_index,
                    xp_reward=lesson.xp_reward,
                )
                for lesson in orm_model.lessons
            ],
        )

    def to_orm(self, domain_entity: LearningModule) -> LearningModuleORM:
        """Convert a new domain module to ORM models."""
        return LearningModuleORM(
            title=domain_entity.title,
            xp_reward=domain_entity.xp_reward,
            lessons=[
                LessonORM(
                    title=lesson.title,
                    order_index=lesson.order_index,
                    xp_reward=lesson.xp_reward,
                )
                for lesson in domain_entity.lessons
            ],
        )


class QuizMapper:
    """Mapper for Quiz ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: QuizORM) -> Quiz:
        """Convert ORM model (with questions loaded) to domain entity."""
        return Quiz(
            id=QuizId(orm_model.id),
            title=orm_model.title,
            time_limit_seconds=orm_model.time_limit_seconds,
            passing_score_percent=orm_model.passing_score_percent,
            questions=[
                QuizQuestion(
                    id=QuestionId(question.id),
                    prompt=question.prompt,
                    option_count=question.option_count,
                    correct_index=question.correct_index,
                    position=question.position,
                )
                for question in orm_model.questions
            ],
            reward_tiers=RewardTierTable.from_pairs(
                [(tier["min_score"], tier["xp"]) for tier in orm_model.reward_tiers]
            ),
            version=orm_model.version,
        )

    def to_orm(self, domain_entity: Quiz, orm_model: QuizORM | None = None) -> QuizORM:
        """
        Convert domain entity to ORM model.

        Questions are written on create only; updates touch the tier table
        and version.
        """
        if orm_model:
            orm_model.title = domain_entity.title
            orm_model.time_limit_seconds = domain_entity.time_limit_seconds
            orm_model.passing_score_percent = domain_entity.passing_score_percent
            orm_model.reward_tiers = domain_entity.reward_tiers.to_primitive()
            orm_model.version = domain_entity.version
            return orm_model

        return QuizORM(
            title=domain_entity.title,
            time_limit_seconds=domain_entity.time_limit_seconds,
            passing_score_percent=domain_entity.passing_score_percent,
            reward_tiers=domain_entity.reward_tiers.to_primitive(),
            version=domain_entity.version,
            questions=[
                QuizQuestionORM(
                    prompt=question.prompt,
                    option_count=question.option_count,
                    correct_index=question.correct_index,
                    position=question.position,
                )
                for question in domain_entity.questions
            ],
        )
