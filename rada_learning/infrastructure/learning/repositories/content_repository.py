"""Repositories for authored learning content: modules and quizzes."""

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from rada_learning.domain.common.value_objects import LessonId, ModuleId, QuizId
from rada_learning.domain.learning.entities.module import LearningModule
from rada_learning.domain.learning.entities.quiz import Quiz
from rada_learning.infrastructure.learning.mappers.content_mapper import ModuleMapper, QuizMapper
from rada_learning.models import LearningModule as LearningModuleORM
from rada_learning.models import Lesson as LessonORM
from rada_learning.models import Quiz as QuizORM


class ModuleRepository:
    """Repository for LearningModule domain entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = ModuleMapper()

    def find_by_id(self, module_id: ModuleId) -> LearningModule | None:
        stmt = (
            select(LearningModuleORM)
            .options(selectinload(LearningModuleORM.lessons))
            .where(LearningModuleORM.id == module_id.value)
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_by_lesson(self, lesson_id: LessonId) -> LearningModule | None:
        """Find the module that contains the given lesson."""
        stmt = (
            select(LearningModuleORM)
            .join(LessonORM, LessonORM.module_id == LearningModuleORM.id)
            .options(selectinload(LearningModuleORM.lessons))
            .where(LessonORM.id == lesson_id.value)
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_all(self) -> list[LearningModule]:
        stmt = (
            select(LearningModuleORM)
            .options(selectinload(LearningModuleORM.lessons))
            .order_by(LearningModuleORM.id)
        )
        orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    def save(self, module: LearningModule) -> LearningModule:
        """
        Persist a new module with its lessons.

        Modules are immutable once authored; only creation is supported.
        """
        if not module.id.is_transient:
            raise ValueError(f"Module {module.id.value} is already persisted")
        orm_model = self.mapper.to_orm(module)
        self.db.add(orm_model)
        self.db.flush()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)


class QuizRepository:
    """Repository for Quiz domain entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = QuizMapper()

    def find_by_id(self, quiz_id: QuizId) -> Quiz | None:
        stmt = (
            select(QuizORM)
            .options(selectinload(QuizORM.questions))
            .where(QuizORM.id == quiz_id.value)
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def save(self, quiz: Quiz) -> Quiz:
        """Save a quiz (create or update)."""
        if quiz.id.is_transient:
            orm_model = self.mapper.to_orm(quiz)
            self.db.add(orm_model)
        else:
            orm_model = self.db.get(QuizORM, quiz.id.value)
            if not orm_model:
                raise ValueError(f"Quiz with id {quiz.id.value} not found")
            self.mapper.to_orm(quiz, orm_model)
        self.db.flush()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)
