"""Mapper for ModuleProgress ORM ↔ Domain conversion."""

from rada_learning.domain.common.value_objects import LearnerId, LessonId, ModuleId
from rada_learning.domain.learning.entities.module_progress import (
    LessonProgress,
    LessonStatus,
    ModuleProgress,
)
from rada_learning.models import LessonProgress as LessonProgressORM
from rada_learning.models import ModuleCompletion as ModuleCompletionORM
from rada_learning.utils import ensure_utc, ensure_utc_optional


class ModuleProgressMapper:
    """Assembles the aggregate from lesson_progress rows and its module_completions row."""

    def to_domain(
        self,
        learner_id: int,
        module_id: int,
        lesson_rows: list[LessonProgressORM],
        completion: ModuleCompletionORM | None,
    ) -> ModuleProgress:
        return ModuleProgress.create_with_state(
            module_id=ModuleId(module_id),
            learner_id=LearnerId(learner_id),
            lessons=[self.lesson_to_domain(row) for row in lesson_rows],
            completed_at=ensure_utc(completion.completed_at) if completion else None,
        )

    def lesson_to_domain(self, orm_model: LessonProgressORM) -> LessonProgress:
        return LessonProgress(
            id=LessonId(orm_model.lesson_id),
            status=LessonStatus(orm_model.status),
            unlocked_at=ensure_utc_optional(orm_model.unlocked_at),
            completed_at=ensure_utc_optional(orm_model.completed_at),
        )

    def lesson_to_orm(
        self,
        progress: ModuleProgress,
        lesson: LessonProgress,
        orm_model: LessonProgressORM | None = None,
    ) -> LessonProgressORM:
        if orm_model:
            orm_model.status = lesson.status.value
            orm_model.unlocked_at = lesson.unlocked_at
            orm_model.completed_at = lesson.completed_at
            return orm_model

        return LessonProgressORM(
            learner_id=progress.learner_id.value,
            module_id=progress.module_id.value,
            lesson_id=lesson.lesson_id.value,
            status=lesson.status.value,
            unlocked_at=lesson.unlocked_at,
            completed_at=lesson.completed_at,
        )
